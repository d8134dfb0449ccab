#!/usr/bin/env python3
"""
Tests for block parsing and section trees (translate_doc_sync/document_parser.py)

Run: python -m pytest tests/test_document_parser.py -q
"""

from translate_doc_sync.document_parser import (
    build_sections,
    clean_heading,
    extract_preamble,
    generate_heading_id,
    iter_sections,
    parse_document,
    parse_document_components,
    parse_sections,
    reconstruct,
    section_direct_text,
    section_text,
    split_frontmatter,
)


# ---------------------------------------------------------------------------
# Test data helpers
# ---------------------------------------------------------------------------

LECTURE = """\
# Title

Intro text.

## Section A

Para.

```python
# not a heading
```

### Sub

- item
- item2

## Section B
"""

NESTED = """\
## A

Para a.

### A1

Para a1.

## B

Para b."""


def kinds(content):
    return [block.kind for block in parse_document(content).blocks]


# ---------------------------------------------------------------------------
# Block parsing
# ---------------------------------------------------------------------------

class TestBlockParsing:
    def test_block_kinds_in_order(self):
        assert kinds(LECTURE) == [
            'heading', 'paragraph', 'heading', 'paragraph', 'code',
            'heading', 'list', 'heading',
        ]

    def test_hash_inside_code_is_not_a_heading(self):
        headings = [b.text for b in parse_document(LECTURE).blocks if b.kind == 'heading']
        assert headings == ['# Title', '## Section A', '### Sub', '## Section B']

    def test_heading_levels_and_ids(self):
        headings = [b for b in parse_document(LECTURE).blocks if b.kind == 'heading']
        assert [(b.heading_level, b.heading_id) for b in headings] == [
            (1, 'title'), (2, 'section-a'), (3, 'sub'), (2, 'section-b'),
        ]

    def test_myst_constructs(self):
        content = "```{note}\nText\n```\n\n```{math}\nx\n```\n\n$$\nx = 1\n$$\n\n:::{tip}\nhi\n:::\n\n(my-label)="
        assert kinds(content) == ['directive', 'math', 'math', 'directive', 'raw-markup']

    def test_single_line_display_math(self):
        assert kinds("$$ a + b $$") == ['math']

    def test_unclosed_fence_degrades_to_raw_markup(self):
        blocks = parse_document("## A\n\n```python\ncode\n## Not heading").blocks
        assert [b.kind for b in blocks] == ['heading', 'raw-markup']
        assert blocks[1].end_line == 5

    def test_table_blockquote_and_break(self):
        content = "| a | b |\n|---|---|\n| 1 | 2 |\n\n> quoted\n> more\n\n---\n\nText"
        assert kinds(content) == ['table', 'blockquote', 'thematic-break', 'paragraph']

    def test_html_block(self):
        assert kinds("<div>\ncontent\n</div>") == ['raw-markup']

    def test_line_numbers_skip_front_matter(self):
        parsed = parse_document("---\ntitle: X\n---\n\n# Head\n")
        assert parsed.metadata == {'title': 'X'}
        assert parsed.blocks[0].start_line == 5
        assert parsed.lines[4] == '# Head'

    def test_empty_document(self):
        parsed = parse_document("")
        assert parsed.blocks == []
        assert parsed.lines == []

    def test_reconstruct_joins_with_blank_lines(self):
        blocks = parse_document("# A\nText one\n\nText two").blocks
        assert reconstruct(blocks) == "# A\n\nText one\n\nText two"


class TestParentHeadingIds:
    def test_level3_points_to_preceding_level2(self):
        blocks = parse_document("## Intro\n\n### Details\n\nText.").blocks
        assert blocks[1].heading_level == 3
        assert blocks[1].parent_heading_id == 'intro'
        assert blocks[1].heading_id == 'details'

    def test_level2_heading_has_no_parent(self):
        blocks = parse_document("# Title\n\n## Intro").blocks
        assert blocks[1].parent_heading_id is None

    def test_body_blocks_follow_current_grouping(self):
        blocks = parse_document("# Title\n\nIntro text.\n\n## A\n\n### A1\n\nDeep text.").blocks
        assert blocks[1].parent_heading_id == 'title'
        # Deeper headings do not reset the grouping context
        assert blocks[4].parent_heading_id == 'a'


# ---------------------------------------------------------------------------
# Front matter and headings
# ---------------------------------------------------------------------------

class TestFrontMatter:
    def test_split(self):
        frontmatter, body = split_frontmatter("---\ntitle: X\n---\n\nBody\n")
        assert frontmatter == "---\ntitle: X\n---\n"
        assert body == "\nBody\n"

    def test_no_front_matter(self):
        assert split_frontmatter("# Title\n") == ("", "# Title\n")

    def test_front_matter_must_start_the_file(self):
        frontmatter, _ = split_frontmatter("\n---\ntitle: X\n---\n")
        assert frontmatter == ""

    def test_malformed_yaml_gives_empty_metadata(self):
        parsed = parse_document("---\ntitle: [unclosed\n---\n\n# A\n")
        assert parsed.metadata == {}
        assert [b.kind for b in parsed.blocks] == ['heading']


class TestHeadingHelpers:
    def test_clean_heading(self):
        assert clean_heading("### Foo  ") == "Foo"
        assert clean_heading("Plain") == "Plain"
        assert clean_heading(None) == ""

    def test_generate_heading_id(self):
        assert generate_heading_id("## Hello, World!") == "hello-world"
        assert generate_heading_id("Multi   space -- dash") == "multi-space-dash"


# ---------------------------------------------------------------------------
# Section trees
# ---------------------------------------------------------------------------

class TestSectionTree:
    def test_nesting(self):
        sections = parse_sections(LECTURE)
        assert [s.heading for s in sections] == ['# Title']
        title = sections[0]
        assert [s.heading for s in title.subsections] == ['## Section A', '## Section B']
        assert [s.heading for s in title.subsections[0].subsections] == ['### Sub']

    def test_preamble_blocks_belong_to_no_section(self):
        sections = parse_sections("Intro.\n\n## A\n\nx")
        assert len(sections) == 1
        assert [b.text for b in sections[0].body_blocks] == ['x']

    def test_skipped_levels_nest_under_nearest_shallower(self):
        sections = parse_sections("## A\n\n#### Deep\n\n### Mid")
        assert [s.heading for s in sections[0].subsections] == ['#### Deep', '### Mid']

    def test_line_ranges(self):
        parsed = parse_document(NESTED)
        section_a = build_sections(parsed.blocks)[0]
        assert section_a.start_line == 1
        assert section_a.direct_end_line == 3
        assert section_a.end_line == 7
        assert section_direct_text(section_a, parsed.lines) == "## A\n\nPara a."
        assert section_text(section_a, parsed.lines) == "## A\n\nPara a.\n\n### A1\n\nPara a1."

    def test_iter_sections_in_document_order(self):
        headings = [s.heading for s in iter_sections(parse_sections(NESTED))]
        assert headings == ['## A', '### A1', '## B']


class TestDocumentComponents:
    def test_preamble_includes_front_matter(self):
        content = "---\ntitle: X\n---\n\nIntro.\n\n## A\n"
        assert extract_preamble(content) == "---\ntitle: X\n---\n\nIntro."

    def test_preamble_of_headingless_document(self):
        assert extract_preamble("Just text.\n") == "Just text."

    def test_components(self):
        content = "---\ntitle: X\n---\n\n# Title\n\nIntro para.\n\n## A\n\nBody."
        components = parse_document_components(content)
        assert components.config == "---\ntitle: X\n---"
        assert components.title == "# Title"
        assert components.title_text == "Title"
        assert components.intro == "Intro para."
        assert [s.heading for s in components.sections] == ['## A']

    def test_components_without_title(self):
        components = parse_document_components("## A\n\nBody.")
        assert components.title == ""
        assert components.intro == ""
        assert len(components.sections) == 1
