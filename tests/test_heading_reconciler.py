#!/usr/bin/env python3
"""
Tests for heading-map reconciliation (translate_doc_sync/heading_reconciler.py)

Run: python -m pytest tests/test_heading_reconciler.py -q
"""

from translate_doc_sync.document_parser import parse_sections
from translate_doc_sync.heading_reconciler import update_heading_map


SOURCE = "# Title\n\n## Intro\n\n### Detail\n\n## Summary\n"
TARGET = "# 标题\n\n## 简介\n\n### 细节\n\n## 总结\n"


class TestPositionalPairing:
    def test_maps_every_level(self):
        result = update_heading_map({}, parse_sections(SOURCE), parse_sections(TARGET))
        assert result == {'Title': '标题', 'Intro': '简介', 'Detail': '细节', 'Summary': '总结'}
        assert list(result) == ['Title', 'Intro', 'Detail', 'Summary']

    def test_pairing_ignores_heading_text(self):
        source = parse_sections("## Alpha\n\n## Beta\n")
        target = parse_sections("## 乙\n\n## 甲\n")
        assert update_heading_map({}, source, target) == {'Alpha': '乙', 'Beta': '甲'}

    def test_latest_pairing_overwrites(self):
        existing = {'Intro': '旧简介'}
        result = update_heading_map(existing, parse_sections(SOURCE), parse_sections(TARGET))
        assert result['Intro'] == '简介'
        # The caller's map is not mutated
        assert existing == {'Intro': '旧简介'}

    def test_idempotent(self):
        source, target = parse_sections(SOURCE), parse_sections(TARGET)
        once = update_heading_map({'Stale': '旧'}, source, target)
        assert update_heading_map(once, source, target) == once


class TestPruning:
    def test_removed_heading_is_pruned(self):
        existing = {'Title': '标题', 'Removed': '删除'}
        result = update_heading_map(existing, parse_sections(SOURCE), parse_sections(TARGET))
        assert 'Removed' not in result

    def test_heading_removed_between_calls(self):
        first = update_heading_map({}, parse_sections(SOURCE), parse_sections(TARGET))
        source = parse_sections("# Title\n\n## Intro\n\n### Detail\n")
        target = parse_sections("# 标题\n\n## 简介\n\n### 细节\n")
        second = update_heading_map(first, source, target)
        assert 'Summary' not in second
        assert list(second) == ['Title', 'Intro', 'Detail']

    def test_empty_source_prunes_everything(self):
        assert update_heading_map({'A': '甲'}, [], parse_sections(TARGET)) == {}

    def test_missing_inputs(self):
        assert update_heading_map(None, None, None) == {}


class TestLengthMismatch:
    def test_untranslated_subsections_stay_tracked(self):
        target = parse_sections("# 标题\n\n## 简介\n\n## 总结\n")
        result = update_heading_map({'Detail': '细节'}, parse_sections(SOURCE), target)
        assert result == {'Title': '标题', 'Intro': '简介', 'Detail': '细节', 'Summary': '总结'}
        assert list(result) == ['Title', 'Intro', 'Detail', 'Summary']

    def test_untranslated_subsection_gets_no_new_mapping(self):
        target = parse_sections("# 标题\n\n## 简介\n\n## 总结\n")
        result = update_heading_map({}, parse_sections(SOURCE), target)
        assert 'Detail' not in result

    def test_extra_source_sections_are_kept_but_not_mapped(self):
        source = parse_sections("## A\n\n## B\n\n## C\n\n### C1\n")
        target = parse_sections("## 甲\n\n## 乙\n")
        assert update_heading_map({'C': '丙', 'C1': '丙一'}, source, target) == {
            'A': '甲', 'B': '乙', 'C': '丙', 'C1': '丙一',
        }
        assert update_heading_map({}, source, target) == {'A': '甲', 'B': '乙'}

    def test_extra_target_sections_are_ignored(self):
        source = parse_sections("## A\n")
        target = parse_sections("## 甲\n\n## 乙\n")
        assert update_heading_map({}, source, target) == {'A': '甲'}
