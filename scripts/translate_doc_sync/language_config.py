"""
Language Config Module
Language-specific rules appended to translation prompts (typography, punctuation, style)

To add a new language, add an entry to LANGUAGE_CONFIGS keyed by its lowercase code.
"""

LANGUAGE_CONFIGS = {
    'zh-cn': {
        'code': 'zh-cn',
        'name': 'Chinese (Simplified)',
        'additional_rules': [
            'Use proper full-width Chinese punctuation marks (，：。！？) not ASCII punctuation (,.!?) in prose text',
        ],
    },
    'fa': {
        'code': 'fa',
        'name': 'Persian',
        'additional_rules': [
            'Use Persian punctuation marks (،؛؟) in prose text',
            'Keep code, math and URLs left-to-right exactly as in the source',
        ],
    },
}


def get_language_config(language_code):
    """Get language-specific configuration, with no rules for unconfigured languages"""
    normalized = (language_code or '').lower()
    if normalized in LANGUAGE_CONFIGS:
        return LANGUAGE_CONFIGS[normalized]
    return {
        'code': language_code,
        'name': language_code,
        'additional_rules': [],
    }


def format_additional_rules(language_code, start_number=None):
    """Format additional rules for a prompt, optionally as a numbered continuation"""
    rules = get_language_config(language_code)['additional_rules']
    if start_number is None:
        return '\n'.join(rules)
    return '\n'.join(f"{start_number + i}. {rule}" for i, rule in enumerate(rules))


def get_supported_languages():
    return list(LANGUAGE_CONFIGS.keys())


def is_language_supported(language_code):
    return (language_code or '').lower() in LANGUAGE_CONFIGS


def validate_language_code(language_code):
    """Raise a descriptive error if the target language is not configured"""
    if not is_language_supported(language_code):
        supported = ', '.join(get_supported_languages())
        raise ValueError(
            f"Unsupported target language: '{language_code}'. "
            f"Supported languages: {supported}. "
            "To add a new language, update LANGUAGE_CONFIGS in language_config.py"
        )
