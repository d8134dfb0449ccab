"""
File Deleter Module
Handles removed and renamed source files in the target checkout
"""

import os

from .console import thread_safe_print


def process_deleted_file(file_path, target_local_path):
    """Remove the translated counterpart of a deleted source file"""
    thread_safe_print(f"\n🗑️  Processing deleted file: {file_path}")
    target_file_path = os.path.join(target_local_path, file_path)

    if not os.path.exists(target_file_path):
        thread_safe_print(f"   ⚠️  Target file not found: {target_file_path}")
        return True, "Target file already absent"

    os.remove(target_file_path)
    thread_safe_print(f"   ✅ Deleted file: {target_file_path}")
    return True, "Deleted file"


def process_renamed_file(previous_path, file_path, target_local_path):
    """Move the translated counterpart of a renamed source file"""
    thread_safe_print(f"\n🚚 Processing renamed file: {previous_path} → {file_path}")
    old_target = os.path.join(target_local_path, previous_path)
    new_target = os.path.join(target_local_path, file_path)

    if not os.path.exists(old_target):
        thread_safe_print(f"   ⚠️  Target file not found: {old_target}")
        return False, f"Target file not found: {previous_path}"
    if os.path.exists(new_target):
        thread_safe_print(f"   ⚠️  Target file already exists: {new_target}")
        return False, f"Target file already exists: {file_path}"

    new_dir = os.path.dirname(new_target)
    if new_dir:
        os.makedirs(new_dir, exist_ok=True)
    os.replace(old_target, new_target)
    thread_safe_print(f"   ✅ Moved file: {old_target} → {new_target}")
    return True, "Moved file"
