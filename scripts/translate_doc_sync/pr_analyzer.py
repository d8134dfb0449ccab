#!/usr/bin/env python3
"""
PR Analyzer Module
Handles PR lookup, changed-file listing and before/after content getting
"""

from github import GithubException

from .console import thread_safe_print


def parse_pr_url(pr_url):
    """Parse PR URL to get repo info"""
    parts = pr_url.rstrip('/').split('/')
    if len(parts) < 4 or parts[-2] != 'pull':
        raise ValueError(f"Invalid PR URL: {pr_url}. Expected https://github.com/<owner>/<repo>/pull/<number>")
    return parts[-4], parts[-3], int(parts[-1])  # owner, repo, pr_number


def get_pull_request(pr_url, github_client):
    """Get repository and pull request objects for a PR URL"""
    owner, repo, pr_number = parse_pr_url(pr_url)
    repository = github_client.get_repo(f"{owner}/{repo}")
    pr = repository.get_pull(pr_number)
    return repository, pr


def get_changed_markdown_files(pr, docs_folder=""):
    """List markdown files changed by the PR inside the docs folder"""
    changed_files = []

    for file in pr.get_files():
        if not file.filename.endswith('.md'):
            continue
        if docs_folder and not file.filename.startswith(docs_folder):
            continue

        changed_files.append({
            'filename': file.filename,
            'status': file.status,
            'previous_filename': getattr(file, 'previous_filename', None),
        })

    thread_safe_print(f"📄 Found {len(changed_files)} markdown files in '{docs_folder or '/'}'")
    return changed_files


def get_file_content(repository, file_path, ref):
    """Get file content at a ref, empty text when the file does not exist there"""
    try:
        return repository.get_contents(file_path, ref=ref).decoded_content.decode('utf-8')
    except GithubException as e:
        if e.status == 404:
            return ""
        thread_safe_print(f"   ❌ Error getting {file_path}@{ref[:7]}: {e}")
        raise


def get_source_versions(repository, pr, file_change):
    """Get (before, after) content of a changed source file"""
    filename = file_change['filename']
    before_path = file_change.get('previous_filename') or filename

    if file_change['status'] == 'added':
        before = ""
    else:
        before = get_file_content(repository, before_path, pr.base.sha)

    if file_change['status'] == 'removed':
        after = ""
    else:
        after = get_file_content(repository, filename, pr.head.sha)

    return before, after
