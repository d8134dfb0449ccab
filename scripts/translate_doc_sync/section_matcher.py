"""
Section Matcher Module
Handles locating the target-language section that corresponds to a source heading
"""

from .document_parser import clean_heading


def lookup_target_heading(source_heading, heading_map):
    """Return the translated heading text for a source heading, or None when unmapped"""
    if not heading_map:
        return None
    return heading_map.get(clean_heading(source_heading))


def find_section_by_heading(sections, heading_text):
    """Find a section by cleaned heading text (searches recursively through subsections)"""
    wanted = clean_heading(heading_text)
    if not wanted:
        return None

    for section in sections:
        if clean_heading(section.heading) == wanted:
            return section
        found = find_section_by_heading(section.subsections, wanted)
        if found:
            return found
    return None


def locate_target_section(source_heading, heading_map, target_sections):
    """Find the target section for a source heading through the heading map"""
    target_heading = lookup_target_heading(source_heading, heading_map)
    if target_heading is None:
        return None
    return find_section_by_heading(target_sections, target_heading)
