from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from .processors import condense_for_image

logger = logging.getLogger(__name__)

MAX_IMAGE_PROMPT_LENGTH = 1000


def _field(labels: str) -> "re.Pattern[str]":
    return re.compile(rf"^[ \t]*(?:{labels})[ \t]*:[ \t]*([^\n]+)", re.IGNORECASE | re.MULTILINE)


_SUBJECT_RE = _field(r"Subject(?:\s*/?\s*Main Focus)?")
_STYLE_RE = _field(r"Style")
_MOOD_RE = _field(r"Mood|Atmosphere")
_COLOR_RE = _field(r"Color Scheme|Colors|Palette")
_COMPOSITION_RE = _field(r"Composition|Layout")
_DETAILS_RE = _field(r"Details|Additional Elements|Background")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]\s")
_SENTENCE_RE = re.compile(r"[^.!?]+[.!?]+")
_MULTI_NEWLINE_RE = re.compile(r"\n{2,}")


@dataclass
class ImagePromptData:
    subject: str = ""
    style: str = ""
    mood: str = ""
    details: str = ""
    color_scheme: Optional[str] = None
    composition: Optional[str] = None
    full_prompt: str = ""

    @property
    def is_structured(self) -> bool:
        return bool(self.subject or self.style or self.mood)


def _extract(pattern: "re.Pattern[str]", content: str) -> Optional[str]:
    match = pattern.search(content)
    return match.group(1).strip() if match else None


def build_full_prompt(data: ImagePromptData) -> str:
    """Join the structured fields into one descriptive sentence."""
    parts = []
    if data.subject:
        parts.append(data.subject)
    if data.style:
        parts.append(f"in {data.style} style")
    if data.mood:
        parts.append(f"with {data.mood} mood")
    if data.color_scheme:
        parts.append(f"using {data.color_scheme} colors")
    if data.composition:
        parts.append(data.composition)

    prompt = ", ".join(parts)
    if data.details:
        prompt = f"{prompt}. {data.details}" if prompt else data.details
    return prompt


def parse_image_prompt(content: str) -> ImagePromptData:
    result = ImagePromptData(
        subject=_extract(_SUBJECT_RE, content) or "",
        style=_extract(_STYLE_RE, content) or "",
        mood=_extract(_MOOD_RE, content) or "",
        color_scheme=_extract(_COLOR_RE, content),
        composition=_extract(_COMPOSITION_RE, content),
        full_prompt=content,
    )

    details = _extract(_DETAILS_RE, content)
    if details:
        result.details = details
    else:
        remaining = content
        for pattern in (_SUBJECT_RE, _STYLE_RE, _MOOD_RE, _COLOR_RE, _COMPOSITION_RE):
            remaining = pattern.sub("", remaining, count=1)
        remaining = _MULTI_NEWLINE_RE.sub("\n", remaining.strip())
        result.details = remaining

    if not result.is_structured:
        first_sentence = _SENTENCE_SPLIT_RE.split(content)[0]
        if first_sentence and len(first_sentence) < 100:
            result.subject = first_sentence
    else:
        result.full_prompt = build_full_prompt(result)
    return result


def truncate_field(text: Optional[str], max_length: int) -> str:
    if not text:
        return ""
    if len(text) <= max_length:
        return text

    cut = max_length - 3
    sentence_break = max(text.rfind(mark, 0, cut + 2) for mark in (". ", "! ", "? "))
    if sentence_break > max_length * 0.5:
        return text[: sentence_break + 1]

    word_break = text.rfind(" ", 0, cut + 1)
    if word_break > 0:
        return text[:word_break] + "..."
    return text[:cut] + "..."


def truncate_image_prompt(prompt: str, max_length: int = MAX_IMAGE_PROMPT_LENGTH) -> str:
    """
    Shorten an image prompt to `max_length` characters.

    Labelled prompts are rebuilt field by field, each field getting a fixed
    budget and the details taking what is left. Free text keeps whole
    sentences.
    """
    if not prompt or len(prompt) <= max_length:
        return prompt

    if "Subject:" in prompt or "Style:" in prompt:
        parsed = parse_image_prompt(prompt)
        subject = truncate_field(parsed.subject, 100)
        style = truncate_field(parsed.style, 50)
        mood = truncate_field(parsed.mood, 50)
        color_scheme = truncate_field(parsed.color_scheme, 30)
        composition = truncate_field(parsed.composition, 70)

        lines = []
        if subject:
            lines.append(f"Subject: {subject}\n")
        if style:
            lines.append(f"Style: {style}\n")
        if mood:
            lines.append(f"Mood: {mood}\n")
        if color_scheme:
            lines.append(f"Color Scheme: {color_scheme}\n")
        if composition:
            lines.append(f"Composition: {composition}\n")
        head = "".join(lines)

        # labels count against the budget too
        details = truncate_field(parsed.details, max_length - len(head) - len("Details: "))
        if details:
            return f"{head}Details: {details}"
        return head

    result = ""
    for sentence in _SENTENCE_RE.findall(prompt):
        if len(result + sentence) <= max_length:
            result += sentence
            continue
        remaining = max_length - len(result)
        if remaining > 30:
            result += sentence[: remaining - 3] + "..."
        break

    if not result:
        result = prompt[: max_length - 3] + "..."
    return result


def build_image_request_prompt(
    content: str,
    style: Optional[str] = None,
    image_format: Optional[str] = None,
    platform: Optional[str] = None,
) -> str:
    """Image prompt for post content; the content is condensed to leave room for the hints."""
    condensed = condense_for_image(content, 500)
    prompt = f"Create an image that visually represents the following social media content: {condensed}\n"
    if style:
        prompt += f"\nStyle: {style}"
    prompt += "\n"
    if image_format:
        prompt += f"\nFormat: Optimize for {image_format}"
    prompt += "\n"
    if platform:
        prompt += f"\nPlatform: Optimize for {platform}"

    logger.info("Final image prompt length: %d characters", len(prompt))
    return prompt
