"""
Prompt builders.

Each builder fills one of the templates in `prompts` from a `PromptParams`
and returns a `PromptResponse` ready to be sent (or previewed).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

from . import prompts
from .newsletters import format_edition_date, should_include_date
from .styles import map_style_to_tone
from .tokens import estimate_token_count

DEFAULT_CHAT_MODEL = "gpt-4o-mini"
DEFAULT_IMAGE_MODEL = "dall-e-3"
DEFAULT_TEMPERATURE = 0.7

_SOCIAL_PLATFORM_ALIASES: Dict[str, str] = {
    "twitter": "twitter",
    "x": "twitter",
    "linkedin": "linkedin",
    "facebook": "facebook",
    "instagram": "instagram",
    "threads": "instagram",
}

_ASPECT_RATIO_ALIASES: Dict[str, str] = {
    "square": "1:1",
    "landscape": "16:9",
    "portrait": "9:16",
}


@dataclass
class PromptParams:
    topic: str = ""
    target_audience: Optional[str] = None
    tone: Optional[str] = None
    writing_style: Optional[str] = None
    additional_guidelines: Optional[str] = None
    model: Optional[str] = None
    temperature: Optional[float] = None
    platform: Optional[str] = None
    # thread
    thread_count: Optional[int] = None
    thread_style: Optional[str] = None
    # poll
    option_count: Optional[int] = None
    # newsletter
    newsletter_type: Optional[str] = None
    length: Optional[str] = None
    # image
    style: Optional[str] = None
    mood: Optional[str] = None
    visual_elements: List[str] = field(default_factory=list)
    aspect_ratio: Optional[str] = None


@dataclass
class PromptResponse:
    prompt: str
    system_prompt: str
    estimated_tokens: int
    model: str
    temperature: Optional[float] = None


def normalize_aspect_ratio(value: Optional[str]) -> str:
    """Map UI names (square/landscape/portrait) to ratios; ratios pass through."""
    if not value:
        return "1:1"
    return _ASPECT_RATIO_ALIASES.get(value.strip().lower(), value)


def _char_estimate(system_prompt: str, prompt: str) -> int:
    return math.ceil((len(system_prompt) + len(prompt)) / 4)


class BasePromptBuilder:
    def __init__(self, content_type: str = "base") -> None:
        self.system_prompt = prompts.SYSTEM_PROMPTS.get(content_type, prompts.BASE_SYSTEM_PROMPT)
        self.template = ""
        self.default_model = DEFAULT_CHAT_MODEL
        self.default_temperature = DEFAULT_TEMPERATURE

    def set_template(self, template: str) -> "BasePromptBuilder":
        self.template = template
        return self

    def set_system_prompt(self, system_prompt: str) -> "BasePromptBuilder":
        self.system_prompt = system_prompt
        return self

    def set_default_model(self, model: str) -> "BasePromptBuilder":
        self.default_model = model
        return self

    def set_default_temperature(self, temperature: float) -> "BasePromptBuilder":
        self.default_temperature = temperature
        return self

    def process_base_params(self, params: PromptParams) -> Dict[str, str]:
        guidelines = params.additional_guidelines
        return {
            "topic": params.topic or "",
            "targetAudience": params.target_audience or "General audience",
            "tone": params.tone or "professional",
            "writingStyle": params.writing_style or "Standard",
            "additionalGuidelines": f"- Additional Guidelines: {guidelines}" if guidelines else "",
        }

    def _require_template(self) -> None:
        if not self.template:
            raise ValueError("Template not set. Call set_template() before building a prompt.")

    def _model(self, params: PromptParams) -> str:
        return params.model or self.default_model

    def _temperature(self, params: PromptParams) -> float:
        return params.temperature if params.temperature is not None else self.default_temperature

    def build(self, params: PromptParams) -> PromptResponse:
        self._require_template()
        prompt = prompts.fill_template(self.template, self.process_base_params(params))
        return PromptResponse(
            prompt=prompt,
            system_prompt=self.system_prompt,
            estimated_tokens=estimate_token_count(self.system_prompt + prompt),
            model=self._model(params),
            temperature=self._temperature(params),
        )


class SocialPromptBuilder(BasePromptBuilder):
    """Single social post; values set through the fluent setters win over params."""

    def __init__(self) -> None:
        super().__init__("social")
        self.set_template(prompts.SOCIAL_BASE_TEMPLATE)
        self.params: Dict[str, str] = {}

    def _set(self, key: str, value: str) -> "SocialPromptBuilder":
        self.params[key] = value
        return self

    def set_topic(self, topic: str) -> "SocialPromptBuilder":
        return self._set("topic", topic)

    def set_target_audience(self, audience: str) -> "SocialPromptBuilder":
        return self._set("targetAudience", audience)

    def set_writing_style(self, style: str) -> "SocialPromptBuilder":
        return self._set("writingStyle", style)

    def set_tone(self, tone: str) -> "SocialPromptBuilder":
        return self._set("tone", map_style_to_tone(tone))

    def set_platform(self, platform: str) -> "SocialPromptBuilder":
        return self._set("platform", platform)

    def set_additional_guidelines(self, guidelines: str) -> "SocialPromptBuilder":
        return self._set("additionalGuidelines", guidelines)

    def set_user_input(self, user_input: str) -> "SocialPromptBuilder":
        return self._set("userInput", user_input)

    def build(self, params: PromptParams) -> PromptResponse:
        self._require_template()
        platform = params.platform or self.params.get("platform") or "twitter"
        platform_key = _SOCIAL_PLATFORM_ALIASES.get(platform.lower(), "twitter")

        variables: Dict[str, object] = dict(self.process_base_params(params))
        variables.update(self.params)
        variables.update(
            {
                "platform": platform,
                "platformGuidance": prompts.SOCIAL_PLATFORM_GUIDANCE.get(platform_key, ""),
                "characterLimit": prompts.SOCIAL_CHARACTER_LIMITS.get(platform_key, ""),
            }
        )
        prompt = prompts.fill_template(self.template, variables)
        return PromptResponse(
            prompt=prompt,
            system_prompt=self.system_prompt,
            estimated_tokens=estimate_token_count(prompt) + estimate_token_count(self.system_prompt),
            model=self._model(params),
            temperature=self._temperature(params),
        )


class ThreadPromptBuilder(BasePromptBuilder):
    def __init__(self) -> None:
        super().__init__("thread")
        self.set_template(prompts.THREAD_BASE_TEMPLATE)

    def build(self, params: PromptParams) -> PromptResponse:
        self._require_template()
        platform = (params.platform or "default").lower()

        variables: Dict[str, object] = dict(self.process_base_params(params))
        variables.update(
            {
                "platform": params.platform or "Twitter",
                "platformGuidance": prompts.THREAD_PLATFORM_GUIDANCE.get(
                    platform, prompts.THREAD_PLATFORM_GUIDANCE["default"]
                ),
                "characterLimit": prompts.THREAD_CHARACTER_LIMITS.get(
                    platform, prompts.THREAD_CHARACTER_LIMITS["default"]
                ),
                "threadCount": params.thread_count or 5,
                "threadStyle": params.thread_style or "educational",
                "tone": map_style_to_tone(params.tone or params.writing_style),
            }
        )
        prompt = prompts.fill_template(self.template, variables)
        return PromptResponse(
            prompt=prompt,
            system_prompt=self.system_prompt,
            estimated_tokens=_char_estimate(self.system_prompt, prompt),
            model=self._model(params),
            temperature=self._temperature(params),
        )


class PollPromptBuilder(BasePromptBuilder):
    def __init__(self) -> None:
        super().__init__("poll")
        self.set_template(prompts.POLL_BASE_TEMPLATE)
        self.set_default_temperature(0.8)

    def build(self, params: PromptParams) -> PromptResponse:
        self._require_template()
        platform = (params.platform or "default").lower()

        variables: Dict[str, object] = dict(self.process_base_params(params))
        variables.update(
            {
                "platform": params.platform or "social media",
                "platformGuidance": prompts.POLL_PLATFORM_GUIDANCE.get(
                    platform, prompts.POLL_PLATFORM_GUIDANCE["default"]
                ),
                "optionCount": params.option_count or 4,
                "tone": map_style_to_tone(params.tone or params.writing_style),
            }
        )
        prompt = prompts.fill_template(self.template, variables)
        return PromptResponse(
            prompt=prompt,
            system_prompt=self.system_prompt,
            estimated_tokens=_char_estimate(self.system_prompt, prompt),
            model=self._model(params),
            temperature=self._temperature(params),
        )


class NewsletterPromptBuilder(BasePromptBuilder):
    def __init__(self, today: Optional[date] = None) -> None:
        super().__init__("newsletter")
        self.set_template(prompts.NEWSLETTER_BASE_TEMPLATE)
        self.today = today

    def build(self, params: PromptParams) -> PromptResponse:
        self._require_template()

        if should_include_date(params.topic, params.newsletter_type):
            date_intro = f"Welcome to the {format_edition_date(self.today or date.today())} edition, "
        else:
            date_intro = "Welcome to "

        length = params.length or "medium"
        length_config = prompts.NEWSLETTER_LENGTH_CONFIGS.get(length, prompts.NEWSLETTER_LENGTH_CONFIGS["medium"])

        variables: Dict[str, object] = dict(self.process_base_params(params))
        variables.update(
            {
                "newsletterType": params.newsletter_type or "General Newsletter",
                "length": length,
                "wordCount": length_config["wordCount"],
                "sections": length_config["sections"],
                "dateIntro": date_intro,
                "tone": map_style_to_tone(params.tone or params.writing_style),
            }
        )
        prompt = prompts.fill_template(self.template, variables)
        return PromptResponse(
            prompt=prompt,
            system_prompt=self.system_prompt,
            estimated_tokens=_char_estimate(self.system_prompt, prompt),
            model=self._model(params),
            temperature=self._temperature(params),
        )


class ImagePromptBuilder(BasePromptBuilder):
    def __init__(self) -> None:
        super().__init__("image")
        self.set_template(prompts.IMAGE_BASE_TEMPLATE)
        self.set_default_model(DEFAULT_IMAGE_MODEL)

    def build(self, params: PromptParams) -> PromptResponse:
        self._require_template()
        style = params.style or "realistic"
        mood = params.mood or "neutral"
        visual_elements = (
            f"- Key Visual Elements: {', '.join(params.visual_elements)}" if params.visual_elements else ""
        )

        variables: Dict[str, object] = dict(self.process_base_params(params))
        variables.update(
            {
                "style": prompts.IMAGE_STYLE_OPTIONS.get(style, style),
                "mood": prompts.IMAGE_MOOD_OPTIONS.get(mood, mood),
                "aspectRatio": normalize_aspect_ratio(params.aspect_ratio),
                "visualElements": visual_elements,
            }
        )
        prompt = prompts.fill_template(self.template, variables)
        return PromptResponse(
            prompt=prompt,
            system_prompt=self.system_prompt,
            estimated_tokens=_char_estimate(self.system_prompt, prompt),
            model=self._model(params),
            temperature=self._temperature(params),
        )


_BUILDERS = {
    "social": SocialPromptBuilder,
    "thread": ThreadPromptBuilder,
    "poll": PollPromptBuilder,
    "newsletter": NewsletterPromptBuilder,
    "image": ImagePromptBuilder,
}


def get_prompt_builder(content_type: str) -> BasePromptBuilder:
    """Return a fresh builder for `content_type`; unknown types get the social builder."""
    builder_cls = _BUILDERS.get((content_type or "").lower(), SocialPromptBuilder)
    return builder_cls()
