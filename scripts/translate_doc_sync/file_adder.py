"""
File Adder Module
Handles translation of newly added files and seeding their heading map
"""

import os

from .console import thread_safe_print
from .document_parser import parse_document, parse_document_components, parse_sections
from .heading_map import inject_heading_map
from .heading_reconciler import update_heading_map


def create_section_batches(file_content, max_lines_per_batch=200):
    """Create batches of file content for translation, respecting section boundaries"""
    parsed = parse_document(file_content)
    lines = parsed.lines

    # Heading lines found by the block parser, so '#' comments inside code are ignored
    heading_starts = [block.start_line - 1 for block in parsed.blocks if block.kind == 'heading']

    # If no sections found, just batch by line count
    if not heading_starts:
        boundaries = list(range(0, len(lines), max_lines_per_batch)) or [0]
    else:
        boundaries = [0]
        candidate = None
        for section_start in [start for start in heading_starts if start > 0] + [len(lines)]:
            # Close the current batch at the previous section boundary once it grows too large
            if section_start - boundaries[-1] > max_lines_per_batch and candidate:
                boundaries.append(candidate)
            candidate = section_start

    boundaries.append(len(lines))
    batches = ['\n'.join(lines[start:end]) for start, end in zip(boundaries, boundaries[1:])]

    # Clean up any empty batches
    return [batch for batch in batches if batch.strip()]


def translate_new_document(file_content, translator, max_lines_per_batch=200):
    """Translate a new document batch by batch; None when any batch fails"""
    title = parse_document_components(file_content).title_text
    batches = create_section_batches(file_content, max_lines_per_batch)
    thread_safe_print(f"   📦 Created {len(batches)} batches for translation")

    translated_batches = []
    for i, batch in enumerate(batches):
        thread_safe_print(f"   🔄 Processing batch {i + 1}/{len(batches)}")
        result = translator.translate_section(batch, context={'title': title})
        if not result.success:
            thread_safe_print(f"   ❌ Batch {i + 1} failed: {result.error}")
            return None
        translated_batches.append(result.translated_section)

    translated_content = '\n\n'.join(translated_batches) + '\n'

    heading_map = update_heading_map({}, parse_sections(file_content), parse_sections(translated_content))
    return inject_heading_map(translated_content, heading_map)


def process_added_file(file_path, file_content, translator, target_local_path, max_lines_per_batch=200):
    """Translate a newly added source file and create it in the target checkout"""
    thread_safe_print(f"\n📝 Processing new file: {file_path}")

    target_file_path = os.path.join(target_local_path, file_path)
    if os.path.exists(target_file_path):
        thread_safe_print(f"   ⚠️  Target file already exists: {target_file_path}")
        return False, f"Target file already exists: {file_path}"

    translated_content = translate_new_document(file_content, translator, max_lines_per_batch)
    if translated_content is None:
        return False, f"Translation failed for new file: {file_path}"

    target_dir = os.path.dirname(target_file_path)
    if target_dir and not os.path.exists(target_dir):
        os.makedirs(target_dir, exist_ok=True)
        thread_safe_print(f"   📁 Created directory: {target_dir}")

    with open(target_file_path, 'w', encoding='utf-8') as f:
        f.write(translated_content)

    thread_safe_print(f"   ✅ Created translated file: {target_file_path}")
    return True, "Created translated file"
