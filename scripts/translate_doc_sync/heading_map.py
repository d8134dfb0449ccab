"""
Heading Map Module
Handles reading, serializing and injecting the heading-map table kept in the
front matter of every translated document.

The heading map pairs each cleaned source heading ("Introduction") with the
cleaned target heading ("简介"), for example:

    ---
    title: 经济模型
    heading-map:
      Introduction: 简介
      Key Concepts: 关键概念
    ---

Keys are heading texts without the markdown prefix, so the same map serves
every heading level.
"""

import yaml

from .console import thread_safe_print
from .document_parser import FRONTMATTER_PATTERN

HEADING_MAP_KEY = 'heading-map'


def _dump_yaml(data):
    """Dump YAML keeping key order, unicode text and long lines intact"""
    return yaml.safe_dump(
        data,
        allow_unicode=True,
        default_flow_style=False,
        sort_keys=False,
        width=float('inf'),
    )


def extract_heading_map(content):
    """Extract heading map from target document front matter"""
    heading_map = {}

    match = FRONTMATTER_PATTERN.match((content or '').replace('\r\n', '\n'))
    if not match:
        return heading_map

    try:
        frontmatter = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        thread_safe_print(f"   ⚠️  Failed to parse heading-map from front matter: {e}")
        return heading_map

    if not isinstance(frontmatter, dict):
        return heading_map

    heading_map_data = frontmatter.get(HEADING_MAP_KEY)
    if not isinstance(heading_map_data, dict):
        return heading_map

    for key, value in heading_map_data.items():
        # Non-string entries are skipped, never fatal
        if isinstance(key, str) and isinstance(value, str):
            heading_map[key] = value

    return heading_map


def serialize_heading_map(heading_map):
    """Serialize heading map to a YAML fragment, empty text for an empty map"""
    if not heading_map:
        return ""
    return _dump_yaml({HEADING_MAP_KEY: dict(heading_map)})


def inject_heading_map(content, heading_map):
    """
    Inject or update heading-map in front matter, preserving every other field.

    An empty map removes the heading-map key (and the whole header when nothing
    else is left). A header that cannot be parsed leaves the document unchanged.
    """
    original = content or ''
    normalized = original.replace('\r\n', '\n')
    match = FRONTMATTER_PATTERN.match(normalized)

    if not match:
        # No front matter exists
        if not heading_map:
            return original
        return f"---\n{serialize_heading_map(heading_map)}---\n\n{normalized}"

    body = normalized[match.end():]

    try:
        frontmatter = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        thread_safe_print(f"   ❌ Failed to update front matter with heading-map, document left unchanged: {e}")
        return original

    if frontmatter is None:
        frontmatter = {}
    if not isinstance(frontmatter, dict):
        thread_safe_print("   ❌ Front matter is not a key-value table, document left unchanged")
        return original

    if heading_map:
        frontmatter[HEADING_MAP_KEY] = dict(heading_map)
    elif HEADING_MAP_KEY in frontmatter:
        del frontmatter[HEADING_MAP_KEY]
    else:
        return original

    if not frontmatter:
        # Header held nothing but the heading map
        return body.lstrip('\n')

    return f"---\n{_dump_yaml(frontmatter)}---\n{body}"
