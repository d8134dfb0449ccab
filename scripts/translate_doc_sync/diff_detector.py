"""
Diff Detector Module
Handles section-level change detection between two versions of a source document
and its target counterpart.

Headings are matched across versions by exact cleaned text. A renamed heading
is therefore reported as one deleted plus one added section, never as modified.
When the same heading text occurs several times in a document, the n-th
occurrence in one version is matched with the n-th occurrence in the other.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Optional

from .document_parser import clean_heading, extract_preamble, parse_document

PREAMBLE_HEADING = '(preamble/frontmatter)'

CHANGE_ADDED = 'added'
CHANGE_DELETED = 'deleted'
CHANGE_MODIFIED = 'modified'


@dataclass
class ChangedSection:
    heading: str
    change_type: str
    level: int
    source_content: Optional[str] = None
    target_content: Optional[str] = None


@dataclass(frozen=True)
class HeadingEntry:
    heading: str
    level: int
    key: tuple
    body: str


def extract_heading_entries(content):
    """Build the ordered list of headings with the body each one owns"""
    parsed = parse_document(content)
    headings = [block for block in parsed.blocks if block.kind == 'heading']
    total_lines = len(parsed.lines)

    entries = []
    occurrences = Counter()

    for index, block in enumerate(headings):
        # Body runs until the next heading of equal or shallower level; a
        # level-1 title only owns its intro, up to the first subheading
        end_line = total_lines
        for following in headings[index + 1:]:
            if block.heading_level == 1 or following.heading_level <= block.heading_level:
                end_line = following.start_line - 1
                break

        body = '\n'.join(parsed.lines[block.end_line:end_line]).strip()
        text = clean_heading(block.text)
        entries.append(HeadingEntry(
            heading=block.text.strip(),
            level=block.heading_level,
            key=(text, occurrences[text]),
            body=body,
        ))
        occurrences[text] += 1

    return entries


def identify_changed_sections(source_before, source_after, target_before, target_after):
    """Identify changed sections by comparing before and after content of both documents"""
    source_before = (source_before or '').replace('\r\n', '\n')
    source_after = (source_after or '').replace('\r\n', '\n')
    target_before = (target_before or '').replace('\r\n', '\n')
    target_after = (target_after or '').replace('\r\n', '\n')

    changed_sections = []

    # Check preamble changes (front matter plus anything before the first heading)
    source_preamble_after = extract_preamble(source_after)
    target_preamble_after = extract_preamble(target_after)
    if (extract_preamble(source_before) != source_preamble_after or
            extract_preamble(target_before) != target_preamble_after):
        changed_sections.append(ChangedSection(
            heading=PREAMBLE_HEADING,
            change_type=CHANGE_MODIFIED,
            level=0,
            source_content=source_preamble_after,
            target_content=target_preamble_after,
        ))

    before_entries = extract_heading_entries(source_before)
    after_entries = extract_heading_entries(source_after)
    before_by_key = {entry.key: entry for entry in before_entries}
    after_keys = {entry.key for entry in after_entries}
    flagged = set()

    # Check for added and modified sections
    for entry in after_entries:
        old_entry = before_by_key.get(entry.key)
        if old_entry is None:
            changed_sections.append(ChangedSection(entry.heading, CHANGE_ADDED, entry.level, source_content=entry.body))
            flagged.add(entry.key)
        elif old_entry.body != entry.body:
            changed_sections.append(ChangedSection(entry.heading, CHANGE_MODIFIED, entry.level, source_content=entry.body))
            flagged.add(entry.key)

    # Check for deleted sections
    for entry in before_entries:
        if entry.key not in after_keys:
            changed_sections.append(ChangedSection(entry.heading, CHANGE_DELETED, entry.level))
            flagged.add(entry.key)

    # Target-only edits (e.g. a manual correction of the translation)
    target_before_by_key = {entry.key: entry for entry in extract_heading_entries(target_before)}
    for entry in extract_heading_entries(target_after):
        old_entry = target_before_by_key.get(entry.key)
        if old_entry is None or old_entry.body == entry.body or entry.key in flagged:
            continue
        changed_sections.append(ChangedSection(entry.heading, CHANGE_MODIFIED, entry.level, target_content=entry.body))
        flagged.add(entry.key)

    return changed_sections
