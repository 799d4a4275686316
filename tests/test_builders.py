"""Tests for template filling and the per-content-type prompt builders."""

import math
from datetime import date

import pytest

from content_studio import prompts
from content_studio.builders import (
    BasePromptBuilder,
    ImagePromptBuilder,
    NewsletterPromptBuilder,
    PollPromptBuilder,
    PromptParams,
    SocialPromptBuilder,
    ThreadPromptBuilder,
    get_prompt_builder,
    normalize_aspect_ratio,
)


class TestFillTemplate:
    def test_substitutes_and_drops_unknown_placeholders(self):
        assert prompts.fill_template("Hi {{name}}, {{missing}}!", {"name": "Ada"}) == "Hi Ada, !"

    def test_renders_booleans_and_numbers(self):
        assert prompts.fill_template("{{flag}} {{n}}", {"flag": True, "n": 3}) == "true 3"

    def test_repeated_placeholder(self):
        assert prompts.fill_template("{{x}}/{{x}}", {"x": 5}) == "5/5"


class TestBasePromptBuilder:
    def test_build_without_template_raises(self):
        with pytest.raises(ValueError):
            BasePromptBuilder().build(PromptParams(topic="AI"))

    def test_defaults(self):
        builder = BasePromptBuilder().set_template("About {{topic}} for {{targetAudience}}{{additionalGuidelines}}")
        result = builder.build(PromptParams(topic="AI"))
        assert result.prompt == "About AI for General audience"
        assert result.model == "gpt-4o-mini"
        assert result.temperature == 0.7
        assert result.system_prompt == prompts.BASE_SYSTEM_PROMPT

    def test_guidelines_line(self):
        builder = BasePromptBuilder().set_template("{{topic}}\n{{additionalGuidelines}}")
        result = builder.build(PromptParams(topic="AI", additional_guidelines="Be brief"))
        assert result.prompt.endswith("- Additional Guidelines: Be brief")

    def test_explicit_zero_temperature_is_kept(self):
        builder = BasePromptBuilder().set_template("{{topic}}")
        assert builder.build(PromptParams(topic="AI", temperature=0.0)).temperature == 0.0


class TestSocialPromptBuilder:
    def test_x_maps_to_twitter_limits(self):
        result = SocialPromptBuilder().build(PromptParams(topic="Rust", platform="X"))
        assert "- Platform: X" in result.prompt
        assert "- Character limit: 280" in result.prompt
        assert prompts.SOCIAL_PLATFORM_GUIDANCE["twitter"] in result.prompt
        assert result.system_prompt == prompts.SOCIAL_SYSTEM_PROMPT

    def test_threads_maps_to_instagram(self):
        result = SocialPromptBuilder().build(PromptParams(topic="Rust", platform="threads"))
        assert "- Character limit: 2200" in result.prompt

    def test_unknown_platform_uses_twitter_config(self):
        result = SocialPromptBuilder().build(PromptParams(topic="Rust", platform="myspace"))
        assert "- Character limit: 280" in result.prompt

    def test_fluent_setters_override_params(self):
        builder = SocialPromptBuilder().set_tone("funny").set_target_audience("Developers")
        result = builder.build(PromptParams(topic="Rust", tone="professional"))
        assert "- Tone: humorous" in result.prompt
        assert "- Target Audience: Developers" in result.prompt

    def test_estimated_tokens(self):
        result = SocialPromptBuilder().build(PromptParams(topic="Rust"))
        assert result.estimated_tokens > 0


class TestThreadPromptBuilder:
    def test_defaults(self):
        result = ThreadPromptBuilder().build(PromptParams(topic="AI agents"))
        assert "Generate a compelling Twitter thread about AI agents." in result.prompt
        assert "- Thread Length: 5 posts" in result.prompt
        assert 'Start each post with "POST [number]/5:"' in result.prompt
        assert "(max 500 characters)" in result.prompt
        assert result.system_prompt == prompts.THREAD_SYSTEM_PROMPT

    def test_platform_specific_limit(self):
        result = ThreadPromptBuilder().build(PromptParams(topic="AI", platform="linkedin", thread_count=3))
        assert "(max 1300 characters)" in result.prompt
        assert "1/3, 2/3" in result.prompt

    def test_estimate_is_character_based(self):
        result = ThreadPromptBuilder().build(PromptParams(topic="AI"))
        assert result.estimated_tokens == math.ceil((len(result.system_prompt) + len(result.prompt)) / 4)


class TestPollPromptBuilder:
    def test_defaults(self):
        result = PollPromptBuilder().build(PromptParams(topic="Remote work"))
        assert result.temperature == 0.8
        assert "Provide 4 distinct" in result.prompt
        assert "social media poll for social media." in result.prompt
        assert prompts.POLL_PLATFORM_GUIDANCE["default"] in result.prompt

    def test_style_maps_to_tone(self):
        result = PollPromptBuilder().build(PromptParams(topic="Remote work", writing_style="Motivational"))
        assert "- Tone: inspirational" in result.prompt


class TestNewsletterPromptBuilder:
    def test_dated_topic_gets_edition_intro(self):
        builder = NewsletterPromptBuilder(today=date(2024, 3, 5))
        result = builder.build(PromptParams(topic="Latest AI news"))
        assert "(Welcome to the March 5, 2024 edition, )" in result.prompt

    def test_undated_topic(self):
        builder = NewsletterPromptBuilder(today=date(2024, 3, 5))
        result = builder.build(PromptParams(topic="Gardening"))
        assert "(Welcome to )" in result.prompt

    def test_newsletter_type_can_trigger_date(self):
        builder = NewsletterPromptBuilder(today=date(2024, 3, 5))
        result = builder.build(PromptParams(topic="Gardening", newsletter_type="weekly-digest"))
        assert "March 5, 2024" in result.prompt

    def test_length_config(self):
        result = NewsletterPromptBuilder().build(PromptParams(topic="AI", length="long"))
        assert "- Length: long (2000-3000 words)" in result.prompt
        assert "- Create 6-8 sections" in result.prompt

    def test_unknown_length_uses_medium_config(self):
        result = NewsletterPromptBuilder().build(PromptParams(topic="AI", length="epic"))
        assert "- Length: epic (1200-2000 words)" in result.prompt


class TestImagePromptBuilder:
    def test_style_and_mood_lookup(self):
        params = PromptParams(topic="Ocean", style="vintage", mood="gloomy", aspect_ratio="landscape")
        result = ImagePromptBuilder().build(params)
        assert prompts.IMAGE_STYLE_OPTIONS["vintage"] in result.prompt
        assert "- Mood/Atmosphere: gloomy" in result.prompt
        assert "- Aspect Ratio: 16:9" in result.prompt
        assert result.model == "dall-e-3"

    def test_visual_elements(self):
        result = ImagePromptBuilder().build(PromptParams(topic="Ocean", visual_elements=["sun", "sea"]))
        assert "- Key Visual Elements: sun, sea" in result.prompt
        assert prompts.IMAGE_MOOD_OPTIONS.get("neutral") is None
        assert "- Mood/Atmosphere: neutral" in result.prompt

    def test_normalize_aspect_ratio(self):
        assert normalize_aspect_ratio("Square") == "1:1"
        assert normalize_aspect_ratio("4:3") == "4:3"
        assert normalize_aspect_ratio(None) == "1:1"


class TestFactory:
    def test_known_and_unknown_types(self):
        assert isinstance(get_prompt_builder("POLL"), PollPromptBuilder)
        assert isinstance(get_prompt_builder("newsletter"), NewsletterPromptBuilder)
        assert isinstance(get_prompt_builder("blog"), SocialPromptBuilder)

    def test_builders_are_fresh(self):
        assert get_prompt_builder("social") is not get_prompt_builder("social")


class TestRoutePrompts:
    def test_thread_request_prompt(self):
        prompt = prompts.thread_request_prompt("Rust", audience="Developers")
        assert "Generate a Twitter thread (4-6 tweets)" in prompt
        assert "Topic: Rust" in prompt
        assert "Target Audience: Developers" in prompt

    def test_standard_post_defaults(self):
        prompt = prompts.standard_post_request_prompt("linkedin", "Rust")
        assert "Post Type: linkedin" in prompt
        assert "Target Audience: General audience" in prompt
        assert "Style: Informative" in prompt

    def test_newsletter_guidelines_are_optional(self):
        args = dict(
            topic="AI",
            length="short",
            writing_style="Informative",
            target_audience="Founders",
            newsletter_type="tech-trends",
            tone="casual",
        )
        assert "Additional Guidelines" not in prompts.newsletter_request_prompt(**args)
        assert "Additional Guidelines: No jargon" in prompts.newsletter_request_prompt(
            additional_guidelines="No jargon", **args
        )
