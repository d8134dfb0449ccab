"""
Heading Reconciler Module
Brings the heading map up to date with the current source and target section trees
"""

from .document_parser import clean_heading


def _mark_present(sections, present):
    """Record every heading of a section tree as present in the source"""
    for section in sections:
        present.append(clean_heading(section.heading))
        _mark_present(section.subsections, present)


def _reconcile_sections(source_sections, target_sections, heading_map, present):
    """Pair source and target sections by position and record translations"""
    for i, source_section in enumerate(source_sections):
        source_heading = clean_heading(source_section.heading)
        present.append(source_heading)

        if i >= len(target_sections):
            # No target counterpart yet: keep tracking, skip the mapping
            _mark_present(source_section.subsections, present)
            continue

        target_section = target_sections[i]
        heading_map[source_heading] = clean_heading(target_section.heading)

        if source_section.subsections and target_section.subsections:
            _reconcile_sections(source_section.subsections, target_section.subsections, heading_map, present)
        elif source_section.subsections:
            # Source has subsections but target doesn't (not translated yet)
            _mark_present(source_section.subsections, present)


def update_heading_map(existing_map, source_sections, target_sections):
    """
    Update heading map with the current section pairing.

    - i-th source section pairs with the i-th target section at every level
    - paired headings always overwrite the stored translation
    - headings no longer in the source are pruned
    - the result is ordered by source document order
    """
    heading_map = dict(existing_map or {})
    present = []

    _reconcile_sections(source_sections or [], target_sections or [], heading_map, present)

    updated = {}
    for source_heading in present:
        if source_heading in heading_map and source_heading not in updated:
            updated[source_heading] = heading_map[source_heading]

    return updated
