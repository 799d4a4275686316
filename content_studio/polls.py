from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional

from .platforms import get_poll_option_limit

_TITLE_RE = re.compile(r"^#\s*(.*?)(?:\n|$)")
_CAPS_TITLE_RE = re.compile(r"^([A-Z][A-Z\s!?:]+)(?:\n|$)")
_QUESTION_SECTION_RE = re.compile(r"##\s*(?:Poll\s*)?Question\s*\n+(.*?)(?:\n+##|$)", re.DOTALL)
_QUESTION_LABEL_RE = re.compile(r"(?:POLL QUESTION|Question):\s*(.*?)(?:\n+|$)", re.DOTALL)
_OPTIONS_SECTION_RE = re.compile(r"##\s*Options\s*\n+([\s\S]*?)(?:\n+##|$)")
_OPTIONS_LABEL_RE = re.compile(r"(?:OPTIONS|Poll Options):\s*\n+([\s\S]*?)(?:\n+##|$)")
_LIST_ITEM_RE = re.compile(r"[-*]\s*(.*?)(?:\n|$)")
_OPTION_PREFIX_RE = re.compile(r"^[-*]\s*(?:Option [A-D]:)?\s*")
_STRATEGY_SECTION_RE = re.compile(r"##\s*(?:Engagement\s*Strategy|Why This Poll Works)\s*\n+([\s\S]*?)(?:\n+##|$)")
_NUMBERING_RE = re.compile(r"^[0-9]+\.\s*")

MAX_OPTIONS = 4


@dataclass
class PollData:
    title: str = ""
    question: str = ""
    options: List[str] = field(default_factory=list)
    engagement_strategy: Optional[str] = None


def _list_options(block: str) -> List[str]:
    items = [match.group(0) for match in _LIST_ITEM_RE.finditer(block)]
    return [option for option in (_OPTION_PREFIX_RE.sub("", item).strip() for item in items) if option]


def parse_poll_content(content: str) -> PollData:
    """Extract title, question, options and engagement strategy from a markdown poll."""
    result = PollData()

    title_match = _TITLE_RE.match(content) or _CAPS_TITLE_RE.match(content)
    if title_match and title_match.group(1):
        result.title = title_match.group(1).strip()

    question_match = _QUESTION_SECTION_RE.search(content) or _QUESTION_LABEL_RE.search(content)
    if question_match and question_match.group(1):
        result.question = question_match.group(1).strip()
    elif not result.title and "?" in content:
        first_question = next((line for line in content.split("\n") if "?" in line), None)
        if first_question:
            result.question = first_question.strip()

    options_match = _OPTIONS_SECTION_RE.search(content) or _OPTIONS_LABEL_RE.search(content)
    if options_match and options_match.group(1):
        result.options = _list_options(options_match.group(1))

    if not result.options:
        result.options = _list_options(content)

    strategy_match = _STRATEGY_SECTION_RE.search(content)
    if strategy_match and strategy_match.group(1):
        result.engagement_strategy = strategy_match.group(1).strip()

    # Unstructured output: guess from the lines themselves
    if not result.title and not result.question and not result.options:
        lines = [line for line in content.split("\n") if line.strip()]
        if lines:
            if "?" in lines[0]:
                result.question = lines[0].strip()
            else:
                result.title = lines[0].strip()

        if result.title and not result.question:
            question_line = next((line for line in lines if "?" in line), None)
            if question_line:
                result.question = question_line.strip()

        result.options = [
            line for line in lines if line not in (result.title, result.question) and len(line) < 100
        ][:MAX_OPTIONS]

    if len(result.options) < 2 and result.question:
        result.options = ["Yes", "No"]

    result.options = result.options[:MAX_OPTIONS]
    return result


def parse_numbered_poll(content: str) -> PollData:
    """Numbered format: question on the first line, then three options."""
    lines = [line for line in content.split("\n") if line.strip()]
    question = _NUMBERING_RE.sub("", lines[0]).strip() if lines else ""
    options = [_NUMBERING_RE.sub("", line).strip() for line in lines[1:4]]
    return PollData(question=question, options=options)


def format_poll_options(options: List[str], platform: Optional[str]) -> List[str]:
    limit = get_poll_option_limit(platform)
    formatted = []
    for option in options:
        if len(option) <= limit:
            formatted.append(option)
            continue
        breakpoint_index = option.rfind(" ", 0, limit - 3 + 1)
        if breakpoint_index > 0:
            formatted.append(option[:breakpoint_index] + "...")
        else:
            formatted.append(option[: limit - 3] + "...")
    return formatted
