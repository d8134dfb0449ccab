#!/usr/bin/env python3
"""
Main Entry Point
Syncs the translated copy of a documentation repository with the markdown
changes of one source pull request.

Usage:
    translate-doc-sync --pr-url https://github.com/<owner>/<repo>/pull/<n> \\
        --target-local-path ../lecture-python.zh-cn --target-language zh-cn
"""

import argparse
import sys
import time
from concurrent.futures import ThreadPoolExecutor, as_completed

from github import Auth, Github

from .ai_client import AIClient
from .config import BATCH_SIZE, MAX_LINES_PER_BATCH, load_credentials, load_glossary, load_repo_config
from .console import thread_safe_print
from .file_adder import process_added_file
from .file_deleter import process_deleted_file, process_renamed_file
from .file_updater import update_local_file
from .pr_analyzer import get_changed_markdown_files, get_pull_request, get_source_versions
from .translator import SectionTranslator


def process_single_file(file_change, repository, pr, translator, repo_config):
    """Process one changed markdown file, returning (success, message)"""
    filename = file_change['filename']
    status = file_change['status']
    target_local_path = repo_config['target_local_path']

    if status == 'removed':
        return process_deleted_file(filename, target_local_path)

    if status == 'renamed' and file_change.get('previous_filename'):
        success, message = process_renamed_file(file_change['previous_filename'], filename, target_local_path)
        if not success:
            return success, message

    source_before, source_after = get_source_versions(repository, pr, file_change)

    if status == 'added' or not source_before:
        return process_added_file(filename, source_after, translator, target_local_path, MAX_LINES_PER_BATCH)

    return update_local_file(filename, source_before, source_after, translator, target_local_path)


def process_files_in_batches(file_changes, repository, pr, translator, repo_config, batch_size=BATCH_SIZE):
    """Process files in parallel batches"""
    total_files = len(file_changes)
    if total_files == 0:
        return []

    thread_safe_print(f"\n🔄 Processing {total_files} files in batches of {batch_size}")

    results = []
    for i in range(0, total_files, batch_size):
        batch = file_changes[i:i + batch_size]
        batch_num = (i // batch_size) + 1
        total_batches = (total_files + batch_size - 1) // batch_size

        thread_safe_print(f"\n📦 Batch {batch_num}/{total_batches}: Processing {len(batch)} files")

        with ThreadPoolExecutor(max_workers=len(batch), thread_name_prefix=f"Batch{batch_num}") as executor:
            future_to_file = {
                executor.submit(process_single_file, file_change, repository, pr, translator, repo_config):
                    file_change['filename']
                for file_change in batch
            }

            for future in as_completed(future_to_file):
                file_path = future_to_file[future]
                try:
                    success, message = future.result()
                except Exception as e:
                    success, message = False, f"Exception in thread: {e}"
                results.append((file_path, success, message))

        # Brief pause between batches to avoid overwhelming the APIs
        if i + batch_size < total_files:
            thread_safe_print("   ⏸️  Waiting 2 seconds before next batch...")
            time.sleep(2)

    return results


def print_summary(results):
    succeeded = [r for r in results if r[1]]
    failed = [r for r in results if not r[1]]

    thread_safe_print(f"\n{'=' * 60}")
    thread_safe_print(f"📊 Summary: {len(succeeded)} succeeded, {len(failed)} failed")
    for file_path, _, message in succeeded:
        thread_safe_print(f"   ✅ {file_path}: {message}")
    for file_path, _, message in failed:
        thread_safe_print(f"   ❌ {file_path}: {message}")


def build_parser():
    parser = argparse.ArgumentParser(description="Sync translated documentation with a source pull request")
    parser.add_argument('--pr-url', required=True, help="Source pull request URL")
    parser.add_argument('--target-local-path', required=True, help="Local checkout of the target repository")
    parser.add_argument('--target-language', help="Target language code (env: TARGET_LANGUAGE)")
    parser.add_argument('--source-language', help="Source language code (env: SOURCE_LANGUAGE, default: en)")
    parser.add_argument('--docs-folder', help="Docs folder inside the repositories (env: DOCS_FOLDER)")
    parser.add_argument('--model', help="Translation model (env: TRANSLATION_MODEL)")
    parser.add_argument('--glossary', help="Path to a JSON glossary (env: GLOSSARY_PATH)")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        repo_config = load_repo_config(args)
        credentials = load_credentials()
    except ValueError as e:
        thread_safe_print(f"❌ {e}")
        return 1

    thread_safe_print(f"🚀 Syncing {args.pr_url}")
    thread_safe_print(f"   🌐 {repo_config['source_language']} → {repo_config['target_language']} "
                      f"with {repo_config['model']}")

    github_client = Github(auth=Auth.Token(credentials['github_token']))
    ai_client = AIClient(credentials['openai_api_key'], repo_config['model'], credentials['openai_base_url'])
    translator = SectionTranslator(
        ai_client,
        repo_config['source_language'],
        repo_config['target_language'],
        glossary=load_glossary(repo_config['glossary_path']),
    )

    repository, pr = get_pull_request(args.pr_url, github_client)
    file_changes = get_changed_markdown_files(pr, repo_config['docs_folder'])
    if not file_changes:
        thread_safe_print("ℹ️  No markdown changes to sync")
        return 0

    results = process_files_in_batches(file_changes, repository, pr, translator, repo_config)
    print_summary(results)

    return 0 if all(success for _, success, _ in results) else 1


if __name__ == "__main__":
    sys.exit(main())
