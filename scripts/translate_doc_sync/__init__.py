#!/usr/bin/env python3
"""
Translate Doc Sync - section-level translation sync for MyST Markdown docs

Keeps a translated documentation repository in step with its source repository
by retranslating only the sections a pull request touched.

Modules:
- document_parser: Block parsing, front matter, section trees
- diff_detector: Section-level change detection
- heading_map: Heading-map front matter read/write
- heading_reconciler: Heading-map updates from positional section pairing
- section_matcher: Target section lookup through the heading map
- translator / ai_client / language_config: AI translation
- pr_analyzer: PR file listing and content getting
- file_adder / file_deleter / file_updater: File processing
- main: Main orchestration function
"""
