from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass
from typing import Dict, List, Optional

from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlatformLimits:
    character_limit: int
    recommended_limit: Optional[int] = None


@dataclass(frozen=True)
class PlatformConstraints:
    max_characters: int
    max_media: int
    max_hashtags: int
    recommended_hashtags: int
    supports_formatting: bool
    supports_threads: bool
    supports_poll: bool

    def to_dict(self) -> Dict[str, object]:
        return {to_camel(key): value for key, value in asdict(self).items()}


# Content-format keys (short/thread/post/newsletter) live next to the real
# platforms because the UI treats both as "where the text goes".
PLATFORM_CHARACTER_LIMITS: Dict[str, PlatformLimits] = {
    "twitter": PlatformLimits(280, 240),
    "instagram": PlatformLimits(2200, 1500),
    "linkedin": PlatformLimits(2200, 1500),
    "facebook": PlatformLimits(2200, 1500),
    "tiktok": PlatformLimits(150, 120),
    "discord": PlatformLimits(2000, 1500),
    "short": PlatformLimits(140, 120),
    "thread": PlatformLimits(280, 240),
    "post": PlatformLimits(500, 400),
    "newsletter": PlatformLimits(2200, 1800),
}

PLATFORM_CONSTRAINTS: Dict[str, PlatformConstraints] = {
    "twitter": PlatformConstraints(280, 4, 5, 2, False, True, True),
    "x": PlatformConstraints(280, 4, 5, 2, False, True, True),
    "linkedin": PlatformConstraints(3000, 20, 10, 3, True, False, True),
    "facebook": PlatformConstraints(63206, 10, 30, 2, True, False, True),
    "instagram": PlatformConstraints(2200, 10, 30, 10, False, False, True),
    "medium": PlatformConstraints(100000, 100, 5, 3, True, False, False),
    "substack": PlatformConstraints(500000, 100, 0, 0, True, False, False),
}

DEFAULT_CONSTRAINTS = PlatformConstraints(1000, 4, 5, 3, True, False, False)

POLL_OPTION_CHARACTER_LIMITS: Dict[str, int] = {
    "twitter": 25,
    "x": 25,
    "linkedin": 30,
    "facebook": 40,
    "instagram": 20,
    "default": 50,
}

_WHITESPACE_RE = re.compile(r"\s+")


def _normalize(platform: Optional[str]) -> str:
    return (platform or "").strip().lower()


def is_platform(platform: Optional[str]) -> bool:
    return _normalize(platform) in PLATFORM_CHARACTER_LIMITS


def sanitize_platform(platform: Optional[str]) -> Optional[str]:
    normalized = _normalize(platform)
    return normalized if normalized in PLATFORM_CHARACTER_LIMITS else None


def get_character_limit(platform: Optional[str]) -> int:
    normalized = _normalize(platform)
    if normalized not in PLATFORM_CHARACTER_LIMITS:
        logger.warning("Invalid platform %r, defaulting to Twitter limit", platform)
        return PLATFORM_CHARACTER_LIMITS["twitter"].character_limit
    return PLATFORM_CHARACTER_LIMITS[normalized].character_limit


def get_recommended_limit(platform: Optional[str]) -> int:
    normalized = _normalize(platform)
    if normalized not in PLATFORM_CHARACTER_LIMITS:
        logger.warning("Invalid platform %r, defaulting to Twitter recommended limit", platform)
        return PLATFORM_CHARACTER_LIMITS["twitter"].recommended_limit or 240
    limits = PLATFORM_CHARACTER_LIMITS[normalized]
    return limits.recommended_limit or limits.character_limit


def get_constraints(platform: Optional[str]) -> PlatformConstraints:
    return PLATFORM_CONSTRAINTS.get(_normalize(platform), DEFAULT_CONSTRAINTS)


def exceeds_character_limit(content: str, platform: Optional[str]) -> bool:
    return len(content) > get_constraints(platform).max_characters


def supports_feature(feature: str, platform: Optional[str]) -> bool:
    constraints = get_constraints(platform)
    feature = feature.lower()
    if feature == "threads":
        return constraints.supports_threads
    if feature == "poll":
        return constraints.supports_poll
    if feature == "formatting":
        return constraints.supports_formatting
    return False


def get_poll_option_limit(platform: Optional[str]) -> int:
    return POLL_OPTION_CHARACTER_LIMITS.get(_normalize(platform), POLL_OPTION_CHARACTER_LIMITS["default"])


def format_hashtags(hashtags: List[str], platform: Optional[str]) -> str:
    if not hashtags:
        return ""

    constraints = get_constraints(platform)
    limited = hashtags[: constraints.max_hashtags]
    rendered = " ".join(f"#{_WHITESPACE_RE.sub('', tag)}" for tag in limited)

    # LinkedIn renders hashtags best as a trailing block
    if _normalize(platform) == "linkedin":
        return "\n\n" + rendered
    return rendered


def describe_platform(platform: str) -> Dict[str, object]:
    normalized = _normalize(platform)
    limits = PLATFORM_CHARACTER_LIMITS.get(normalized)
    return {
        "platform": normalized,
        "known": normalized in PLATFORM_CHARACTER_LIMITS or normalized in PLATFORM_CONSTRAINTS,
        "characterLimit": get_character_limit(normalized) if limits else get_constraints(normalized).max_characters,
        "recommendedLimit": get_recommended_limit(normalized) if limits else None,
        "pollOptionLimit": get_poll_option_limit(normalized),
        "constraints": get_constraints(normalized).to_dict(),
    }
