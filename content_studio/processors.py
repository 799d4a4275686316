"""
Content truncation and request shaping.

Two families live here: character-budget helpers that keep text readable when
it has to be cut (paragraphs, sentences, then words), and token-budget helpers
used before a prompt goes to the chat API.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Dict, List, Optional, Tuple

from .platforms import get_constraints
from .tokens import estimate_token_count

logger = logging.getLogger(__name__)

# Context windows used when fitting prompts; unknown models get the default row.
CONTEXT_WINDOWS: Dict[str, int] = {
    "gpt-3.5-turbo": 4096,
    "gpt-3.5-turbo-16k": 16384,
    "gpt-4": 8192,
    "gpt-4-32k": 32768,
    "gpt-4-turbo": 128000,
    "gpt-4o": 128000,
    "gpt-4o-mini": 128000,
}
DEFAULT_CONTEXT_MODEL = "gpt-4"

_PARAGRAPH_SPLIT_RE = re.compile(r"\n\n+")
_TRAILING_HASHTAGS_RE = re.compile(r"(#\w+\s*)+\Z")
_TITLE_LINE_RE = re.compile(r"^(#+\s+.*?|\*\*.*?\*\*)$", re.MULTILINE)
_LINE_HASHTAGS_RE = re.compile(r"(#\w+[ \t]*)+$", re.MULTILINE)
_SENTENCE_RE = re.compile(r"[^.!?]+[.!?]+")


def _last_index(text: str, sub: str, position: int) -> int:
    """Last index of `sub` starting at or before `position`, -1 if absent."""
    return text.rfind(sub, 0, max(position, 0) + len(sub))


def truncate_content(content: str, max_tokens: int = 4000) -> str:
    """Cut `content` down to roughly `max_tokens`, keeping its structure where possible."""
    if not content:
        return ""

    estimated = estimate_token_count(content)
    if estimated <= max_tokens:
        return content

    target_length = math.floor(max_tokens * 3.5)

    if estimated < max_tokens * 1.2:
        return content[:target_length] + "..."

    paragraphs = _PARAGRAPH_SPLIT_RE.split(content)

    # The first paragraph starts with the title line; a single oversized one is hard cut
    if len(paragraphs[0]) > target_length:
        return content[:target_length] + "..."
    result = paragraphs[0] + "\n\n"

    hashtag_match = _TRAILING_HASHTAGS_RE.search(content)
    hashtags = hashtag_match.group(0) if hashtag_match else ""

    current_length = len(result)
    i = 1
    while i < len(paragraphs) and current_length + len(paragraphs[i]) + 4 < target_length:
        if paragraphs[i] != hashtags:
            result += paragraphs[i] + "\n\n"
            current_length += len(paragraphs[i]) + 4
        i += 1

    if hashtags and current_length + len(hashtags) < target_length:
        result += hashtags

    if i < len(paragraphs):
        result += "..."

    logger.debug("Truncated content from ~%d tokens to %d characters", estimated, len(result))
    return result


def find_breakpoint(text: str, target_length: int) -> int:
    """Index at which `text` can be cut near `target_length` without splitting mid-thought."""
    if len(text) <= target_length:
        return len(text)

    paragraph_break = _last_index(text, "\n\n", target_length)
    if paragraph_break > target_length * 0.8:
        return paragraph_break

    line_break = _last_index(text, "\n", target_length)
    if line_break > target_length * 0.8:
        return line_break

    sentence_end = max(_last_index(text, mark, target_length) for mark in (". ", "! ", "? "))
    if sentence_end > target_length * 0.7:
        return min(sentence_end + 1, target_length)

    punctuation = max(_last_index(text, mark, target_length) for mark in (", ", "; ", ": "))
    if punctuation > target_length * 0.8:
        return min(punctuation + 1, target_length)

    space = _last_index(text, " ", target_length)
    if space > 0:
        return space

    return target_length


def truncate_for_platform(content: str, platform: Optional[str]) -> str:
    max_characters = get_constraints(platform).max_characters
    if len(content) <= max_characters:
        return content

    breakpoint_index = find_breakpoint(content, max_characters - 3)
    logger.info("Truncating %d characters to fit %s (%d max)", len(content), platform, max_characters)
    return content[:breakpoint_index] + "..."


def format_content_for_platform(content: str, platform: Optional[str]) -> str:
    if len(content) > get_constraints(platform).max_characters:
        return truncate_for_platform(content, platform)
    return content


def condense_for_image(content: Optional[str], max_length: int = 500) -> str:
    """
    Shrink post content to a short description suitable for an image prompt.

    A markdown title (or bold line) and trailing hashtags are kept; the rest of
    the budget goes to the first paragraphs, or to whole sentences of the
    first paragraph when it does not fit on its own.
    """
    if not content:
        return ""
    if len(content) <= max_length:
        return content

    logger.info("Condensing content from %d to ~%d characters", len(content), max_length)

    title_match = _TITLE_LINE_RE.search(content)
    title = title_match.group(0) if title_match else ""
    hashtag_match = _LINE_HASHTAGS_RE.search(content)
    hashtags = hashtag_match.group(0) if hashtag_match else ""

    main_budget = max_length - (len(title) + len(hashtags) + 20)

    body = content
    if title:
        body = body.replace(title, "", 1)
    if hashtags:
        body = body.replace(hashtags, "", 1)
    paragraphs = _PARAGRAPH_SPLIT_RE.split(body.strip())
    first_paragraph = paragraphs[0] if paragraphs else ""

    main_content = ""
    if first_paragraph and len(first_paragraph) <= main_budget:
        main_content = first_paragraph
        remaining = main_budget - len(first_paragraph)
        i = 1
        while i < len(paragraphs) and remaining > 50:
            next_paragraph = paragraphs[i]
            if len(next_paragraph) > remaining - 4:
                break
            main_content += "\n\n" + next_paragraph
            remaining -= len(next_paragraph) + 4
            i += 1
    else:
        for sentence in _SENTENCE_RE.findall(first_paragraph):
            if len(main_content + sentence) <= main_budget:
                main_content += sentence
                continue
            # A partial sentence only when little of the budget is used
            if len(main_content) < main_budget / 2:
                remaining_chars = main_budget - len(main_content) - 3
                if remaining_chars > 30:
                    main_content += sentence[:remaining_chars] + "..."
            break

    result = ""
    if title:
        result += title + "\n\n"
    if main_content:
        result += main_content + "\n\n"
    if hashtags:
        result += hashtags
    return result.strip()


def _context_window(model: Optional[str]) -> int:
    return CONTEXT_WINDOWS.get(model or DEFAULT_CONTEXT_MODEL, CONTEXT_WINDOWS[DEFAULT_CONTEXT_MODEL])


def fit_to_token_limits(
    system_prompt: str, user_prompt: str, model: Optional[str] = DEFAULT_CONTEXT_MODEL
) -> Tuple[str, str]:
    """Trim prompts so their combined estimate stays within 75% of the model context."""
    max_input_tokens = math.floor(_context_window(model) * 0.75)
    system_tokens = estimate_token_count(system_prompt)
    user_tokens = estimate_token_count(user_prompt)
    total = system_tokens + user_tokens

    if total <= max_input_tokens:
        return system_prompt, user_prompt

    over_limit = total - max_input_tokens
    logger.warning("Prompt is %d tokens over the %d token budget for %s", over_limit, max_input_tokens, model)

    # The system prompt is kept intact when the user prompt can absorb the overage
    if user_tokens > over_limit * 1.2:
        return system_prompt, truncate_content(user_prompt, max(1, user_tokens - over_limit - 50))

    system_reduction = math.floor(over_limit * 0.3)
    user_reduction = over_limit - system_reduction
    return (
        truncate_content(system_prompt, max(1, system_tokens - system_reduction - 20)),
        truncate_content(user_prompt, max(1, user_tokens - user_reduction - 30)),
    )


def build_chat_request(
    system_prompt: str,
    user_prompt: str,
    model: Optional[str] = None,
    temperature: float = 0.7,
    top_p: float = 1,
    frequency_penalty: float = 0,
    presence_penalty: float = 0,
) -> Dict[str, Any]:
    """Chat-completions payload with `max_tokens` sized from the remaining context."""
    model = model or DEFAULT_CONTEXT_MODEL
    prompt_tokens = estimate_token_count(system_prompt) + estimate_token_count(user_prompt)
    max_response_tokens = math.floor((_context_window(model) - prompt_tokens) * 0.8)

    messages: List[Dict[str, str]] = [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt},
    ]
    return {
        "model": model,
        "messages": messages,
        "temperature": temperature,
        "max_tokens": max(100, max_response_tokens),
        "top_p": top_p,
        "frequency_penalty": frequency_penalty,
        "presence_penalty": presence_penalty,
    }
