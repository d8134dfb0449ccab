"""
File Updater Module
Handles section-level updates of an existing translated document

For every changed source section the target section is located through the
heading map and only that section is retranslated, inserted or removed. When a
changed section cannot be located the whole document is retranslated instead.
Afterwards the heading map is reconciled with the new section trees and written
back into the target front matter.
"""

import os

from .console import thread_safe_print
from .diff_detector import (
    CHANGE_ADDED,
    CHANGE_DELETED,
    CHANGE_MODIFIED,
    PREAMBLE_HEADING,
    identify_changed_sections,
)
from .document_parser import (
    build_sections,
    clean_heading,
    extract_preamble,
    iter_sections,
    parse_document,
    parse_document_components,
    section_direct_text,
)
from .heading_map import extract_heading_map, inject_heading_map
from .heading_reconciler import update_heading_map
from .section_matcher import find_section_by_heading, locate_target_section


def _preamble_end_line(parsed):
    """Last line before the first heading (0 when the document opens with a heading)"""
    for block in parsed.blocks:
        if block.kind == 'heading':
            return block.start_line - 1
    return len(parsed.lines)


def _section_key(section):
    return clean_heading(section.heading)


def find_insertion_line(flat_sections, index, added_keys, heading_map, target_sections, default_line):
    """
    Find the target line after which the new source section at flat_sections[index] goes.

    The nearest earlier section at the same or a shallower level is the anchor:
    a sibling anchors after its whole extent, a parent after its direct content.
    New sections share the anchor of the new section they follow.
    """
    level = flat_sections[index].level
    for j in range(index - 1, -1, -1):
        previous = flat_sections[j]
        if previous.level > level:
            continue
        if _section_key(previous) in added_keys:
            return find_insertion_line(flat_sections, j, added_keys, heading_map, target_sections, default_line)

        target_section = locate_target_section(previous.heading, heading_map, target_sections)
        if target_section is None:
            return None
        if previous.level == level:
            return target_section.end_line
        return target_section.direct_end_line

    return default_line


def apply_edits(lines, edits):
    """Apply (index, is_replace, seq, start, end, new_lines) edits from the bottom up"""
    updated = list(lines)
    for index, is_replace, seq, start, end, new_lines in sorted(edits, reverse=True):
        if is_replace:
            updated[start:end] = new_lines
        else:
            updated[index:index] = new_lines
    return updated


def reconcile_target(source_content, target_content, heading_map):
    """Update the heading map for the current pairing and write it into the target"""
    source_sections = build_sections(parse_document(source_content).blocks)
    target_sections = build_sections(parse_document(target_content).blocks)
    updated_map = update_heading_map(heading_map, source_sections, target_sections)
    return inject_heading_map(target_content, updated_map)


def sync_document(source_before, source_after, target_content, translator):
    """
    Bring a translated document up to date with a source change.

    Returns a dict with the new 'content' and lists of 'updated', 'inserted',
    'deleted', 'failed' and 'unresolved' headings, plus 'full_translation'.
    """
    result = {
        'content': target_content,
        'updated': [],
        'inserted': [],
        'deleted': [],
        'failed': [],
        'unresolved': [],
        'full_translation': False,
    }

    changes = identify_changed_sections(source_before, source_after, target_content, target_content)
    if not changes:
        thread_safe_print("   ℹ️  No section changes detected")
        return result

    thread_safe_print(f"   📝 Detected {len(changes)} section changes")

    heading_map = extract_heading_map(target_content)
    before_doc = parse_document(source_before)
    after_doc = parse_document(source_after)
    target_doc = parse_document(target_content)
    before_sections = build_sections(before_doc.blocks)
    after_sections = build_sections(after_doc.blocks)
    target_sections = build_sections(target_doc.blocks)
    title = parse_document_components(source_after).title_text

    flat_after = list(iter_sections(after_sections))
    added_keys = {clean_heading(c.heading) for c in changes if c.change_type == CHANGE_ADDED}
    preamble_end = _preamble_end_line(target_doc)

    edits = []
    for seq, change in enumerate(changes):
        if change.heading == PREAMBLE_HEADING:
            old_preamble = extract_preamble(source_before)
            new_preamble = extract_preamble(source_after)
            if old_preamble == new_preamble:
                # Target-only preamble edit: keep the manual change
                continue

            if not new_preamble:
                edits.append((-1, True, seq, 0, preamble_end, []))
                result['deleted'].append(change.heading)
                continue

            current = '\n'.join(target_doc.lines[:preamble_end]).strip()
            translation = translator.translate_section(
                new_preamble,
                target_text=current if current else None,
                context={'old_source': old_preamble, 'title': title},
            )
            if not translation.success:
                result['failed'].append(change.heading)
                continue
            new_lines = translation.translated_section.split('\n') + ['']
            # Applied last so inserts at the top of the body keep their line numbers
            edits.append((-1, True, seq, 0, preamble_end, new_lines))
            result['updated'].append(change.heading)
            continue

        if change.change_type == CHANGE_MODIFIED:
            old_section = find_section_by_heading(before_sections, change.heading)
            new_section = find_section_by_heading(after_sections, change.heading)
            if old_section is None or new_section is None:
                # Target-only edit: the translation was corrected by hand
                continue

            old_text = section_direct_text(old_section, before_doc.lines)
            new_text = section_direct_text(new_section, after_doc.lines)
            if old_text.strip() == new_text.strip():
                # Only nested subsections changed; they are handled on their own
                continue

            target_section = locate_target_section(change.heading, heading_map, target_sections)
            if target_section is None:
                thread_safe_print(f"      ⚠️  No target section mapped for: {change.heading}")
                result['unresolved'].append(change.heading)
                continue

            translation = translator.translate_section(
                new_text,
                target_text=section_direct_text(target_section, target_doc.lines),
                context={'old_source': old_text, 'title': title},
            )
            if not translation.success:
                result['failed'].append(change.heading)
                continue

            start = target_section.start_line - 1
            edits.append((start, True, seq, start, target_section.direct_end_line,
                          translation.translated_section.split('\n')))
            result['updated'].append(change.heading)

        elif change.change_type == CHANGE_ADDED:
            new_section = find_section_by_heading(after_sections, change.heading)
            if new_section is None:
                continue

            index = next(i for i, section in enumerate(flat_after) if section is new_section)
            anchor = find_insertion_line(flat_after, index, added_keys, heading_map, target_sections, preamble_end)
            if anchor is None:
                thread_safe_print(f"      ⚠️  No insertion point found for: {change.heading}")
                result['unresolved'].append(change.heading)
                continue

            translation = translator.translate_section(
                section_direct_text(new_section, after_doc.lines),
                context={'title': title},
            )
            if not translation.success:
                result['failed'].append(change.heading)
                continue

            edits.append((anchor, False, seq, anchor, anchor, [''] + translation.translated_section.split('\n')))
            result['inserted'].append(change.heading)

        elif change.change_type == CHANGE_DELETED:
            target_section = locate_target_section(change.heading, heading_map, target_sections)
            if target_section is None:
                thread_safe_print(f"      ⚠️  Deleted section not found in target, skipping: {change.heading}")
                continue

            start = target_section.start_line - 1
            end = target_section.direct_end_line
            # Drop the blank lines that separated the section from the next one
            while end < len(target_doc.lines) and not target_doc.lines[end].strip():
                end += 1
            edits.append((start, True, seq, start, end, []))
            result['deleted'].append(change.heading)

    if result['unresolved']:
        thread_safe_print(f"   🔄 {len(result['unresolved'])} sections could not be located, translating the whole document")
        translation = translator.translate_document(source_after)
        if not translation.success:
            result['failed'].append('(full document)')
            return result
        new_content = translation.translated_section + '\n'
        result['full_translation'] = True
    else:
        new_content = '\n'.join(apply_edits(target_doc.lines, edits))

    result['content'] = reconcile_target(source_after, new_content, heading_map)
    return result


def update_local_file(file_path, source_before, source_after, translator, target_local_path):
    """Sync one modified source file into the local target checkout"""
    local_path = os.path.join(target_local_path, file_path)

    if not os.path.exists(local_path):
        thread_safe_print(f"   ⚠️  Target file not found: {local_path}")
        return False, f"Target file not found: {file_path}"

    with open(local_path, 'r', encoding='utf-8') as f:
        target_content = f.read()

    thread_safe_print(f"\n📝 Updating {file_path}")
    result = sync_document(source_before, source_after, target_content, translator)

    if result['failed']:
        return False, f"Translation failed for: {', '.join(result['failed'])}"

    if result['content'] == target_content:
        return True, "No changes needed"

    with open(local_path, 'w', encoding='utf-8') as f:
        f.write(result['content'])

    if result['full_translation']:
        message = "Retranslated whole document"
    else:
        message = (f"{len(result['updated'])} updated, {len(result['inserted'])} inserted, "
                   f"{len(result['deleted'])} deleted sections")
    thread_safe_print(f"   ✅ {file_path}: {message}")
    return True, message
