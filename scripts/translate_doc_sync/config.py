"""
Config Module
Builds the repository configuration from CLI arguments and environment variables
"""

import json
import os

from .console import thread_safe_print
from .language_config import validate_language_code

DEFAULT_MODEL = "gpt-4.1"
DEFAULT_SOURCE_LANGUAGE = "en"
DEFAULT_DOCS_FOLDER = "lectures/"
MAX_LINES_PER_BATCH = 200
BATCH_SIZE = 5


def _first(*values):
    for value in values:
        if value:
            return value
    return None


def load_repo_config(args):
    """Merge CLI arguments with environment fallbacks into one repo_config dict"""
    target_language = _first(args.target_language, os.getenv('TARGET_LANGUAGE'))
    if not target_language:
        raise ValueError("Target language is required (--target-language or TARGET_LANGUAGE)")
    validate_language_code(target_language)

    target_local_path = args.target_local_path
    if not target_local_path or not os.path.isdir(target_local_path):
        raise ValueError(f"Target local path does not exist: {target_local_path}")

    docs_folder = _first(args.docs_folder, os.getenv('DOCS_FOLDER'), DEFAULT_DOCS_FOLDER)
    if not docs_folder.endswith('/'):
        docs_folder = f"{docs_folder}/"

    return {
        'source_language': _first(args.source_language, os.getenv('SOURCE_LANGUAGE'), DEFAULT_SOURCE_LANGUAGE),
        'target_language': target_language.lower(),
        'target_local_path': target_local_path,
        'docs_folder': docs_folder,
        'model': _first(args.model, os.getenv('TRANSLATION_MODEL'), DEFAULT_MODEL),
        'glossary_path': _first(args.glossary, os.getenv('GLOSSARY_PATH')),
    }


def load_credentials():
    """Read API credentials from the environment"""
    github_token = os.getenv('GITHUB_TOKEN')
    openai_api_key = os.getenv('OPENAI_API_KEY')

    missing = [name for name, value in (('GITHUB_TOKEN', github_token), ('OPENAI_API_KEY', openai_api_key)) if not value]
    if missing:
        raise ValueError(f"Missing required environment variables: {', '.join(missing)}")

    return {
        'github_token': github_token,
        'openai_api_key': openai_api_key,
        'openai_base_url': os.getenv('OPENAI_BASE_URL'),
    }


def load_glossary(glossary_path):
    """Load a JSON glossary, None when missing or unreadable"""
    if not glossary_path:
        return None

    try:
        with open(glossary_path, 'r', encoding='utf-8') as f:
            glossary = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        thread_safe_print(f"⚠️  Could not load glossary from {glossary_path}: {e}")
        return None

    if not isinstance(glossary, dict) or not isinstance(glossary.get('terms'), list):
        thread_safe_print(f"⚠️  Glossary {glossary_path} has no 'terms' list, ignoring it")
        return None

    thread_safe_print(f"✅ Loaded glossary from {glossary_path} with {len(glossary['terms'])} terms")
    return glossary
