"""
Translator Module
Handles section and whole-document translation through the AI client

Two section modes:
1. UPDATE: the model sees the old source, the new source and the current translation
2. NEW: the model sees the new source only
"""

from dataclasses import dataclass
from typing import Optional

from .ai_client import check_document_size, print_token_estimation
from .console import thread_safe_print
from .language_config import format_additional_rules

MARKDOWN_RULES = """MARKDOWN SYNTAX: Ensure proper markdown syntax in your output:
   - Headings MUST have a space after # (e.g., "## Title" not "##Title")
   - Code blocks must have matching ``` delimiters
   - Math blocks must have matching $$ delimiters"""


@dataclass
class TranslationResult:
    success: bool
    translated_section: Optional[str] = None
    error: Optional[str] = None


def strip_code_fence(response):
    """Remove a markdown code block wrapped around the whole response"""
    cleaned = (response or '').strip()
    if cleaned.startswith('```'):
        first_newline = cleaned.find('\n')
        cleaned = cleaned[first_newline + 1:] if first_newline != -1 else ''
        if cleaned.rstrip().endswith('```'):
            cleaned = cleaned.rstrip()[:-3]
    return cleaned.strip()


class SectionTranslator:

    def __init__(self, ai_client, source_language, target_language, glossary=None, temperature=0.1):
        self.ai_client = ai_client
        self.source_language = source_language
        self.target_language = target_language
        self.glossary = glossary
        self.temperature = temperature

    def format_glossary(self):
        """Format glossary terms for the target language as prompt lines"""
        if not self.glossary:
            return ""

        lines = []
        for term in self.glossary.get('terms', []):
            source_term = term.get('en')
            target_term = term.get(self.target_language.lower())
            if not source_term or not target_term:
                continue
            line = f"- {source_term} → {target_term}"
            if term.get('context'):
                line += f" ({term['context']})"
            lines.append(line)

        if not lines:
            return ""
        return "GLOSSARY (use these translations consistently):\n" + "\n".join(lines)

    def _rules(self, base_rules):
        rules = list(base_rules)
        extra = format_additional_rules(self.target_language, start_number=len(rules) + 1)
        numbered = "\n".join(f"{i}. {rule}" for i, rule in enumerate(rules, 1))
        return f"{numbered}\n{extra}" if extra else numbered

    def build_update_prompt(self, old_source, new_source, current_translation, title=""):
        src, tgt = self.source_language, self.target_language
        rules = self._rules([
            f"Compare the OLD and NEW {src} versions to understand what changed",
            f"Update the CURRENT {tgt} translation to reflect these changes only",
            f"Keep the existing {tgt} wording wherever the {src} text did not change",
            "Preserve all MyST Markdown formatting, code blocks, math equations, and directives",
            "DO NOT translate code, math, URLs, or technical identifiers",
            MARKDOWN_RULES,
            f"Return ONLY the updated {tgt} section, no explanations",
        ])
        document = f" titled \"{title}\"" if title else ""

        return f"""You are updating the translation of one section of a technical document{document} from {src} to {tgt}.

{rules}

{self.format_glossary()}

[OLD {src} VERSION]
{old_source}
[/OLD {src} VERSION]

[NEW {src} VERSION]
{new_source}
[/NEW {src} VERSION]

[CURRENT {tgt} TRANSLATION]
{current_translation}
[/CURRENT {tgt} TRANSLATION]"""

    def build_new_prompt(self, source_text, title=""):
        src, tgt = self.source_language, self.target_language
        rules = self._rules([
            "Preserve all MyST Markdown formatting, code blocks, math equations, and directives",
            "DO NOT translate code, math, URLs, or technical identifiers",
            "Translate headings, keeping the same heading level",
            MARKDOWN_RULES,
            f"Return ONLY the {tgt} section, no explanations",
        ])
        document = f" titled \"{title}\"" if title else ""

        return f"""You are translating a new section of a technical document{document} from {src} to {tgt}.

{rules}

{self.format_glossary()}

[{src} SECTION]
{source_text}
[/{src} SECTION]"""

    def _complete(self, prompt, label):
        print_token_estimation(prompt, label)
        try:
            response = self.ai_client.chat_completion(
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
            )
        except Exception as e:
            thread_safe_print(f"   ❌ {label} failed: {e}")
            return TranslationResult(success=False, error=str(e))

        translated = strip_code_fence(response)
        if not translated:
            thread_safe_print(f"   ❌ {label} returned an empty response")
            return TranslationResult(success=False, error="Empty response from AI")
        return TranslationResult(success=True, translated_section=translated)

    def translate_section(self, source_text, target_text=None, context=None):
        """Translate one section; update mode when the current target text is known"""
        context = context or {}
        title = context.get('title', '')
        old_source = context.get('old_source')

        if target_text is not None and old_source is not None:
            prompt = self.build_update_prompt(old_source, source_text, target_text, title)
            label = f"Section update ({self.source_language} → {self.target_language})"
        else:
            prompt = self.build_new_prompt(source_text, title)
            label = f"Section translation ({self.source_language} → {self.target_language})"

        thread_safe_print(f"   🤖 {label}: {source_text.splitlines()[0] if source_text else ''}")
        return self._complete(prompt, label)

    def translate_document(self, content):
        """Translate a whole document in one call"""
        size_error = check_document_size(len(content), self.target_language.lower())
        if size_error:
            thread_safe_print(f"   ❌ {size_error}")
            return TranslationResult(success=False, error=size_error)

        src, tgt = self.source_language, self.target_language
        rules = self._rules([
            "Preserve all MyST Markdown formatting, front matter keys, code blocks, math equations, and directives",
            "DO NOT translate code, math, URLs, or technical identifiers",
            "Maintain the exact structure: every heading keeps its level and position",
            MARKDOWN_RULES,
            f"Return ONLY the translated {tgt} document, no explanations",
        ])
        prompt = f"""You are a professional technical writer. Please translate the following {src} document to {tgt}.

{rules}

{self.format_glossary()}

[{src} DOCUMENT]
{content}
[/{src} DOCUMENT]"""

        return self._complete(prompt, f"Document translation ({src} → {tgt})")
