#!/usr/bin/env python3
"""
Tests for language-specific prompt rules (translate_doc_sync/language_config.py)

Run: python -m pytest tests/test_language_config.py -q
"""

import pytest

from translate_doc_sync.language_config import (
    format_additional_rules,
    get_language_config,
    get_supported_languages,
    is_language_supported,
    validate_language_code,
)


def test_supported_languages():
    assert get_supported_languages() == ['zh-cn', 'fa']


def test_lookup_is_case_insensitive():
    assert is_language_supported('ZH-CN')
    assert get_language_config('ZH-CN')['name'] == 'Chinese (Simplified)'


def test_unknown_language_has_no_rules():
    config = get_language_config('de')
    assert config['additional_rules'] == []
    assert format_additional_rules('de') == ""
    assert format_additional_rules('de', start_number=4) == ""


def test_numbered_rules():
    assert format_additional_rules('fa', start_number=6) == (
        "6. Use Persian punctuation marks (،؛؟) in prose text\n"
        "7. Keep code, math and URLs left-to-right exactly as in the source"
    )


def test_unnumbered_rules():
    assert format_additional_rules('zh-cn').startswith("Use proper full-width")


def test_validate_rejects_unsupported_language():
    with pytest.raises(ValueError, match="Unsupported target language: 'xx'"):
        validate_language_code('xx')


def test_validate_accepts_supported_language():
    validate_language_code('fa')
