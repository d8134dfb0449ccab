"""
Document Parser Module
Handles block parsing, heading ids, front matter splitting and section tree building
for Markdown/MyST documents
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml

# Front matter must start on the very first line of the file
FRONTMATTER_PATTERN = re.compile(r'\A---[ \t]*\n(.*?)^---[ \t]*$\n?', re.DOTALL | re.MULTILINE)

HEADING_PATTERN = re.compile(r'^ {0,3}(#{1,6})\s+(.+)$')
FENCE_PATTERN = re.compile(r'^ {0,3}(`{3,}|~{3,})\s*(.*)$')
COLON_FENCE_PATTERN = re.compile(r'^ {0,3}(:{3,})\s*(\{.*)$')
MATH_FENCE_PATTERN = re.compile(r'^ {0,3}\$\$')
THEMATIC_BREAK_PATTERN = re.compile(r'^ {0,3}([-*_])(\s*\1){2,}\s*$')
LIST_ITEM_PATTERN = re.compile(r'^\s*([-*+]|\d{1,9}[.)])(\s+|$)')
BLOCKQUOTE_PATTERN = re.compile(r'^ {0,3}>')
TABLE_ROW_PATTERN = re.compile(r'^ {0,3}\|')
# HTML blocks and MyST targets like (my-label)=
RAW_MARKUP_PATTERN = re.compile(r'^ {0,3}(<[A-Za-z!/?]|\([\w:-]+\)=\s*$)')

BLOCK_KINDS = (
    'heading', 'paragraph', 'code', 'list', 'blockquote', 'table',
    'thematic-break', 'raw-markup', 'math', 'directive',
)


@dataclass(frozen=True)
class Block:
    kind: str
    text: str
    start_line: int
    end_line: int
    heading_level: Optional[int] = None
    heading_id: Optional[str] = None
    parent_heading_id: Optional[str] = None


@dataclass
class Section:
    """A heading, the blocks it directly owns, and its nested subsections."""
    heading: str
    level: int
    body_blocks: List[Block] = field(default_factory=list)
    subsections: List['Section'] = field(default_factory=list)
    heading_block: Optional[Block] = None

    @property
    def start_line(self):
        return self.heading_block.start_line if self.heading_block else 0

    @property
    def direct_end_line(self):
        """Last line of the heading's own content, excluding subsections"""
        if self.body_blocks:
            return self.body_blocks[-1].end_line
        return self.heading_block.end_line if self.heading_block else 0

    @property
    def end_line(self):
        if self.subsections:
            return self.subsections[-1].end_line
        return self.direct_end_line


@dataclass
class ParsedDocument:
    blocks: List[Block]
    metadata: Dict[str, Any]
    frontmatter: str = ""
    lines: List[str] = field(default_factory=list)


@dataclass
class DocumentComponents:
    config: str
    title: str
    title_text: str
    intro: str
    sections: List[Section]


def generate_heading_id(text):
    """Generate an anchor slug from heading text"""
    slug = re.sub(r'^\s*#+\s*', '', text or '')
    slug = slug.lower()
    slug = re.sub(r'[^\w\s-]', '', slug)
    slug = re.sub(r'\s+', '-', slug.strip())
    slug = re.sub(r'-+', '-', slug)
    return slug.strip('-')


def clean_heading(heading):
    """Strip the markdown heading prefix (# ## ### etc.) and surrounding whitespace"""
    if not heading:
        return ""
    return re.sub(r'^#+', '', heading.strip()).strip()


def split_frontmatter(content):
    """Split content into (frontmatter, body); frontmatter keeps its --- markers"""
    content = (content or '').replace('\r\n', '\n')
    match = FRONTMATTER_PATTERN.match(content)
    if not match:
        return "", content
    return content[:match.end()], content[match.end():]


def load_frontmatter(frontmatter):
    """Parse a front matter block into a dict, empty on any problem"""
    match = FRONTMATTER_PATTERN.match(frontmatter or '')
    if not match:
        return {}
    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError:
        return {}
    return data if isinstance(data, dict) else {}


def _starts_block(line):
    """Check if a line opens a block that interrupts a paragraph"""
    return bool(
        HEADING_PATTERN.match(line) or
        FENCE_PATTERN.match(line) or
        COLON_FENCE_PATTERN.match(line) or
        MATH_FENCE_PATTERN.match(line) or
        THEMATIC_BREAK_PATTERN.match(line) or
        BLOCKQUOTE_PATTERN.match(line) or
        LIST_ITEM_PATTERN.match(line)
    )


def _find_closing_line(lines, start, pattern):
    for i in range(start, len(lines)):
        if pattern.match(lines[i]):
            return i
    return None


def _scan_block(lines, i):
    """Scan one block starting at non-blank line i. Returns (kind, end_index, heading_match)"""
    line = lines[i]
    n = len(lines)

    fence = FENCE_PATTERN.match(line)
    if fence:
        marker = fence.group(1)
        info = fence.group(2).strip()
        closing = re.compile(r'^ {0,3}' + re.escape(marker[0]) + '{' + str(len(marker)) + r',}\s*$')
        end = _find_closing_line(lines, i + 1, closing)
        if end is None:
            # Unclosed fence swallows the rest of the document
            return 'raw-markup', n - 1, None
        if info.startswith('{math}'):
            return 'math', end, None
        if info.startswith('{'):
            return 'directive', end, None
        return 'code', end, None

    colon_fence = COLON_FENCE_PATTERN.match(line)
    if colon_fence:
        closing = re.compile(r'^ {0,3}:{' + str(len(colon_fence.group(1))) + r',}\s*$')
        end = _find_closing_line(lines, i + 1, closing)
        if end is None:
            return 'raw-markup', n - 1, None
        return 'directive', end, None

    if MATH_FENCE_PATTERN.match(line):
        stripped = line.strip()
        if len(stripped) > 4 and stripped.endswith('$$'):
            return 'math', i, None
        for j in range(i + 1, n):
            if lines[j].strip().endswith('$$'):
                return 'math', j, None
        return 'raw-markup', n - 1, None

    heading = HEADING_PATTERN.match(line)
    if heading:
        return 'heading', i, heading

    if THEMATIC_BREAK_PATTERN.match(line):
        return 'thematic-break', i, None

    if BLOCKQUOTE_PATTERN.match(line):
        end = i
        while end + 1 < n and lines[end + 1].strip() and BLOCKQUOTE_PATTERN.match(lines[end + 1]):
            end += 1
        return 'blockquote', end, None

    if TABLE_ROW_PATTERN.match(line):
        end = i
        while end + 1 < n and TABLE_ROW_PATTERN.match(lines[end + 1]):
            end += 1
        return 'table', end, None

    if LIST_ITEM_PATTERN.match(line):
        end = i
        j = i + 1
        while j < n:
            current = lines[j]
            if not current.strip():
                # Blank lines only continue the list when indented or list content follows
                k = j + 1
                while k < n and not lines[k].strip():
                    k += 1
                if k < n and (lines[k].startswith((' ', '\t')) or LIST_ITEM_PATTERN.match(lines[k])):
                    j = k
                    continue
                break
            if not current.startswith((' ', '\t')) and not LIST_ITEM_PATTERN.match(current) and _starts_block(current):
                break
            end = j
            j += 1
        return 'list', end, None

    if RAW_MARKUP_PATTERN.match(line):
        end = i
        while end + 1 < n and lines[end + 1].strip():
            end += 1
        return 'raw-markup', end, None

    end = i
    while end + 1 < n and lines[end + 1].strip() and not _starts_block(lines[end + 1]):
        end += 1
    return 'paragraph', end, None


def tokenize_blocks(lines, line_offset=0):
    """Split lines into blocks; line numbers are shifted by line_offset"""
    blocks = []
    current_parent_id = None
    i = 0

    while i < len(lines):
        if not lines[i].strip():
            i += 1
            continue

        kind, end, heading = _scan_block(lines, i)
        text = '\n'.join(lines[i:end + 1])
        start_line = i + 1 + line_offset
        end_line = end + 1 + line_offset

        if kind == 'heading':
            level = len(heading.group(1))
            heading_id = generate_heading_id(heading.group(2))
            if level <= 2:
                # Level 1/2 headings open a new grouping context; deeper ones stay inside it
                blocks.append(Block(kind, text, start_line, end_line, level, heading_id, None))
                current_parent_id = heading_id
            else:
                blocks.append(Block(kind, text, start_line, end_line, level, heading_id, current_parent_id))
        else:
            blocks.append(Block(kind, text, start_line, end_line, parent_heading_id=current_parent_id))

        i = end + 1

    return blocks


def parse_document(content):
    """Parse document text into blocks plus front matter metadata"""
    frontmatter, body = split_frontmatter(content)
    line_offset = frontmatter.count('\n')
    lines = ((content or '').replace('\r\n', '\n')).split('\n') if content else []

    blocks = tokenize_blocks(body.split('\n') if body else [], line_offset)
    return ParsedDocument(
        blocks=blocks,
        metadata=load_frontmatter(frontmatter),
        frontmatter=frontmatter,
        lines=lines,
    )


def reconstruct(blocks):
    """Join block texts with a blank line between blocks"""
    return '\n\n'.join(block.text for block in blocks)


def build_sections(blocks):
    """Nest heading blocks into a section tree; blocks before the first heading are skipped"""
    sections = []
    stack = []

    for block in blocks:
        if block.kind == 'heading':
            section = Section(heading=block.text.strip(), level=block.heading_level, heading_block=block)

            # Remove items from stack that are at same or deeper level
            while stack and stack[-1].level >= section.level:
                stack.pop()

            if stack:
                stack[-1].subsections.append(section)
            else:
                sections.append(section)
            stack.append(section)
        elif stack:
            stack[-1].body_blocks.append(block)

    return sections


def parse_sections(content):
    """Parse document text straight into its section tree"""
    return build_sections(parse_document(content).blocks)


def iter_sections(sections):
    """Yield every section of a tree in document order"""
    for section in sections:
        yield section
        yield from iter_sections(section.subsections)


def section_text(section, lines):
    """Text owned by a section, including its subsections"""
    return '\n'.join(lines[section.start_line - 1:section.end_line])


def section_direct_text(section, lines):
    """Heading plus direct content of a section, excluding subsections"""
    return '\n'.join(lines[section.start_line - 1:section.direct_end_line])


def extract_preamble(content):
    """Extract everything before the first heading, front matter included"""
    parsed = parse_document(content)
    for block in parsed.blocks:
        if block.kind == 'heading':
            return '\n'.join(parsed.lines[:block.start_line - 1]).strip()
    return '\n'.join(parsed.lines).strip()


def parse_document_components(content):
    """Break a document into CONFIG + TITLE + INTRO + SECTIONS"""
    parsed = parse_document(content)
    blocks = parsed.blocks

    title = ""
    title_text = ""
    body_start = 0
    if blocks and blocks[0].kind == 'heading' and blocks[0].heading_level == 1:
        title = blocks[0].text.strip()
        title_text = clean_heading(title)
        body_start = 1

    # INTRO runs until the first ## (or deeper) heading
    section_start = len(blocks)
    for index in range(body_start, len(blocks)):
        if blocks[index].kind == 'heading':
            section_start = index
            break

    intro = reconstruct(blocks[body_start:section_start]).strip()

    return DocumentComponents(
        config=parsed.frontmatter.rstrip('\n'),
        title=title,
        title_text=title_text,
        intro=intro,
        sections=build_sections(blocks[section_start:]),
    )
