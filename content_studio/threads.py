from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List

_POST_MARKER_RE = re.compile(r"POST \d+/\d+:")
_LEADING_FRACTION_RE = re.compile(r"^\d+/\d+\s")
_FRACTION_MARKER_RE = re.compile(r"\d+/\d+\s")
_GENERIC_SPLIT_RE = re.compile(r"\n\s*\n|\n---\n")
_SENTENCE_RE = re.compile(r"[^.!?]+[.!?]+")


@dataclass
class ThreadPost:
    content: str
    character_count: int
    index: int


@dataclass
class ParsedThread:
    posts: List[ThreadPost] = field(default_factory=list)
    total_character_count: int = 0
    average_character_count: float = 0.0

    def __len__(self) -> int:
        return len(self.posts)


def _clean(chunks: List[str]) -> List[str]:
    return [chunk.strip() for chunk in chunks if chunk.strip()]


def parse_thread_content(content: str) -> List[str]:
    """Split generated text into posts, trying `POST n/m:` then `n/m` then blank lines."""
    if not content:
        return []

    if "POST 1/" in content:
        return _clean(_POST_MARKER_RE.split(content))

    if _LEADING_FRACTION_RE.match(content):
        return _clean(_FRACTION_MARKER_RE.split(content))

    return _clean(_GENERIC_SPLIT_RE.split(content))


def split_dash_separated(content: str) -> List[str]:
    if not content:
        return []
    return _clean(content.split("---"))


def parse_labelled_thread(content: str) -> List[str]:
    """Parse `Tweet 1: ...` / `Post 2: ...` style output; unlabelled lines continue the current post."""
    posts: List[str] = []
    current = ""
    for line in content.split("\n"):
        if not line.strip():
            continue
        if line.startswith("Tweet") or line.startswith("Post"):
            if current:
                posts.append(current.strip())
            current = ":".join(line.split(":")[1:]).strip()
        else:
            current += " " + line.strip()

    if current:
        posts.append(current.strip())
    return posts or [content]


def validate_and_trim_thread_posts(posts: List[str], min_chars: int = 20, max_chars: int = 280) -> List[str]:
    """
    Drop posts shorter than `min_chars` and shorten those over `max_chars`.

    Long posts keep as many whole sentences as fit; when not even the first
    sentence fits the post is hard-cut and ends with an ellipsis.
    """
    result: List[str] = []
    for post in posts:
        if len(post) < min_chars:
            continue
        if len(post) <= max_chars:
            result.append(post)
            continue

        trimmed = ""
        for sentence in _SENTENCE_RE.findall(post):
            if len(trimmed + sentence) > max_chars:
                break
            trimmed += sentence

        if not trimmed:
            trimmed = post[: max_chars - 3] + "..."
        result.append(trimmed)
    return result


def to_parsed_thread(posts: List[str]) -> ParsedThread:
    thread_posts = [ThreadPost(content=post, character_count=len(post), index=i) for i, post in enumerate(posts, 1)]
    total = sum(post.character_count for post in thread_posts)
    average = total / len(thread_posts) if thread_posts else 0.0
    return ParsedThread(posts=thread_posts, total_character_count=total, average_character_count=average)


def build_thread(content: str, max_chars: int = 280, min_chars: int = 20) -> ParsedThread:
    """
    Parse and validate a generated thread.

    The `---` format is tried first, then labelled posts, then the generic
    parser; the first one that yields more than one post wins.
    """
    posts = split_dash_separated(content)
    if len(posts) < 2:
        labelled = parse_labelled_thread(content)
        posts = labelled if len(labelled) > 1 else parse_thread_content(content)
    return to_parsed_thread(validate_and_trim_thread_posts(posts, min_chars=min_chars, max_chars=max_chars))
