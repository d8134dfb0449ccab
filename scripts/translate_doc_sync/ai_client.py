"""
AI Client Module
Handles chat completion calls to an OpenAI-compatible API and token estimation
"""

import math

import tiktoken
from openai import OpenAI

from .console import thread_safe_print

API_MAX_TOKENS = 32768

# Translation expands text; CJK output is more compact, RTL output more verbose
CJK_LANGUAGES = ('zh', 'zh-cn', 'zh-tw', 'ja', 'ko')
RTL_LANGUAGES = ('ar', 'fa', 'he')


class AIClient:
    """Thin wrapper so the sync modules only depend on chat_completion()"""

    def __init__(self, api_key, model, base_url=None):
        self.model = model
        self.client = OpenAI(api_key=api_key, base_url=base_url) if base_url else OpenAI(api_key=api_key)

    def chat_completion(self, messages, temperature=0.1, max_tokens=None):
        params = {
            'model': self.model,
            'messages': messages,
            'temperature': temperature,
        }
        if max_tokens:
            params['max_tokens'] = max_tokens

        response = self.client.chat.completions.create(**params)
        return response.choices[0].message.content


def count_tokens(text):
    """Count tokens with tiktoken, falling back to a 4 chars/token approximation"""
    try:
        # The encoding file is downloaded on first use and may be unavailable offline
        enc = tiktoken.get_encoding("cl100k_base")
        return len(enc.encode(text)), True
    except Exception:
        return len(text) // 4, False


def print_token_estimation(prompt, label):
    """Print character and token counts for a prompt"""
    tokens, exact = count_tokens(prompt)
    thread_safe_print(f"   💰 {label}")
    thread_safe_print(f"      📝 Input: {len(prompt):,} characters")
    if exact:
        thread_safe_print(f"      🔢 Actual tokens: {tokens:,} (using tiktoken cl100k_base)")
    else:
        thread_safe_print(f"      🔢 Estimated tokens: ~{tokens:,} (fallback: 4 chars/token approximation)")
    return tokens


def estimate_output_tokens(source_length, target_language):
    """Conservative estimate of output tokens needed to translate source_length characters"""
    base_tokens = math.ceil(source_length / 4)

    expansion_factor = 1.5
    if target_language in RTL_LANGUAGES:
        expansion_factor = 1.8
    if target_language in CJK_LANGUAGES:
        expansion_factor = 1.3

    # Buffer for prompt and formatting
    return math.ceil(base_tokens * expansion_factor) + 2000


def check_document_size(source_length, target_language):
    """Return None if a document can be translated in one call, otherwise an error message"""
    estimated = estimate_output_tokens(source_length, target_language)
    if estimated > API_MAX_TOKENS:
        return (f"Document too large: estimated {estimated} tokens exceeds API maximum of {API_MAX_TOKENS} tokens. "
                "This document needs section-by-section translation rather than bulk translation.")

    thread_safe_print(f"   📏 Pre-flight check: source={source_length} chars, estimated output={estimated} tokens")
    return None
