"""Tests for platform limits, constraints and hashtag formatting."""

from content_studio.platforms import (
    describe_platform,
    exceeds_character_limit,
    format_hashtags,
    get_character_limit,
    get_constraints,
    get_poll_option_limit,
    get_recommended_limit,
    is_platform,
    sanitize_platform,
    supports_feature,
)
from content_studio.styles import get_emoji_guidance, get_tone_descriptors, map_style_to_tone


class TestCharacterLimits:
    def test_known_platform_is_case_insensitive(self):
        assert get_character_limit("Twitter") == 280
        assert get_character_limit("tiktok") == 150

    def test_unknown_platform_falls_back_to_twitter(self):
        assert get_character_limit("myspace") == 280
        assert get_character_limit(None) == 280

    def test_recommended_limit(self):
        assert get_recommended_limit("newsletter") == 1800
        assert get_recommended_limit("unknown") == 240

    def test_sanitize_platform(self):
        assert sanitize_platform(" LinkedIn ") == "linkedin"
        assert sanitize_platform("myspace") is None
        assert is_platform("discord")
        assert not is_platform("")


class TestConstraints:
    def test_exceeds_character_limit(self):
        assert exceeds_character_limit("x" * 281, "twitter")
        assert not exceeds_character_limit("x" * 280, "twitter")

    def test_unknown_platform_gets_default_constraints(self):
        assert get_constraints("myspace").max_characters == 1000

    def test_supports_feature(self):
        assert supports_feature("threads", "twitter")
        assert not supports_feature("threads", "linkedin")
        assert not supports_feature("poll", "medium")
        assert supports_feature("Formatting", "linkedin")
        assert not supports_feature("video", "twitter")

    def test_poll_option_limit(self):
        assert get_poll_option_limit("X") == 25
        assert get_poll_option_limit("instagram") == 20
        assert get_poll_option_limit("unknown") == 50

    def test_describe_platform(self):
        info = describe_platform("Twitter")
        assert info["platform"] == "twitter"
        assert info["known"] is True
        assert info["characterLimit"] == 280
        assert info["constraints"]["supportsThreads"] is True

    def test_describe_constraint_only_platform(self):
        info = describe_platform("medium")
        assert info["characterLimit"] == 100000
        assert info["recommendedLimit"] is None


class TestFormatHashtags:
    def test_strips_whitespace_inside_tags(self):
        assert format_hashtags(["ai tools", "python"], "twitter") == "#aitools #python"

    def test_linkedin_puts_tags_in_trailing_block(self):
        assert format_hashtags(["ai", "ml"], "linkedin") == "\n\n#ai #ml"

    def test_caps_number_of_tags(self):
        tags = ["a", "b", "c", "d", "e", "f", "g"]
        assert format_hashtags(tags, "twitter").count("#") == 5

    def test_empty(self):
        assert format_hashtags([], "twitter") == ""


class TestStyles:
    def test_map_style_to_tone(self):
        assert map_style_to_tone("Motivational") == "inspirational"
        assert map_style_to_tone("funny") == "humorous"
        assert map_style_to_tone(None) == "professional"
        assert map_style_to_tone("baroque") == "professional"

    def test_descriptors_and_emoji_guidance_defaults(self):
        assert "witty" in get_tone_descriptors("humorous")
        assert get_tone_descriptors("unknown") == get_tone_descriptors("professional")
        assert get_emoji_guidance("unknown") == "Use emojis sparingly and appropriately"
