"""
Token estimation, pricing and the model registry.

Counts are heuristics (roughly four characters per token for English text);
nothing here calls a tokenizer.
"""

from __future__ import annotations

import math
import re
from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional

from pydantic.alias_generators import to_camel

from .schemas import TokenUsage

_CODE_BLOCK_RE = re.compile(r"```\w*\n[\s\S]*?\n```")

# Pricing per 1000 tokens.
MODEL_PRICING: Dict[str, Dict[str, float]] = {
    "gpt-3.5-turbo": {"input": 0.0015, "output": 0.002},
    "gpt-4": {"input": 0.03, "output": 0.06},
    "gpt-4-turbo": {"input": 0.01, "output": 0.03},
    "gpt-4o": {"input": 0.01, "output": 0.02},
    "claude-3-opus": {"input": 0.015, "output": 0.075},
    "claude-3-sonnet": {"input": 0.003, "output": 0.015},
    "claude-3-haiku": {"input": 0.00025, "output": 0.00125},
}

DEFAULT_PRICING_MODEL = "gpt-3.5-turbo"

VALID_CHAT_MODELS = ("gpt-3.5-turbo", "gpt-4", "gpt-4-turbo", "gpt-4o")


def estimate_token_count(text: Optional[str]) -> int:
    if not text or not text.strip():
        return 0
    # Code tends to use more tokens per character
    divisor = 3.5 if _CODE_BLOCK_RE.search(text) else 4
    return math.ceil(len(text) / divisor)


def _pricing_for(model: Optional[str]) -> Dict[str, float]:
    return MODEL_PRICING.get(model or DEFAULT_PRICING_MODEL, MODEL_PRICING[DEFAULT_PRICING_MODEL])


def estimate_token_cost(usage: TokenUsage, model: Optional[str] = DEFAULT_PRICING_MODEL) -> float:
    pricing = _pricing_for(model)
    input_cost = (usage.prompt_tokens / 1000) * pricing["input"]
    output_cost = (usage.completion_tokens / 1000) * pricing["output"]
    return input_cost + output_cost


def calculate_prompt_cost(
    system_prompt: str,
    user_prompt: str,
    expected_response_tokens: int = 500,
    model: Optional[str] = DEFAULT_PRICING_MODEL,
) -> float:
    """Rough cost of a call: every token is priced at the output rate."""
    pricing = _pricing_for(model)
    total = estimate_token_count(system_prompt) + estimate_token_count(user_prompt) + expected_response_tokens
    return (total / 1000) * pricing["output"]


def get_openai_model(preference: Optional[str] = None) -> str:
    if preference and preference in VALID_CHAT_MODELS:
        return preference
    return "gpt-4-turbo"


def usage_from_api(usage: Optional[Mapping[str, Any]], model: Optional[str] = None) -> TokenUsage:
    """Build a TokenUsage from the `usage` block of a chat completion."""
    usage = usage or {}
    prompt_tokens = int(usage.get("prompt_tokens") or 0)
    completion_tokens = int(usage.get("completion_tokens") or 0)
    total_tokens = int(usage.get("total_tokens") or prompt_tokens + completion_tokens)
    result = TokenUsage(
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        total_tokens=total_tokens,
    )
    result.estimated_cost = estimate_token_cost(result, model)
    return result


# ---------------------------------------------------------------------------
# Model registry
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ModelConfig:
    name: str
    display_name: str
    provider: str
    max_tokens: int
    cost_per_input_token: float
    cost_per_output_token: float
    supports_streaming: bool
    supports_images: bool
    default_for_content_type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {to_camel(key): value for key, value in asdict(self).items()}


OPENAI_MODELS: Dict[str, ModelConfig] = {
    "gpt-4o-mini": ModelConfig(
        "gpt-4o-mini", "GPT-4o Mini", "openai", 128000, 0.000005, 0.000015, True, True, "shortForm"
    ),
    "gpt-3.5-turbo": ModelConfig(
        "gpt-3.5-turbo", "GPT-3.5 Turbo", "openai", 4096, 0.0000015, 0.000002, True, False
    ),
    "gpt-3.5-turbo-16k": ModelConfig(
        "gpt-3.5-turbo-16k", "GPT-3.5 Turbo (16K)", "openai", 16384, 0.000003, 0.000004, True, False
    ),
    "gpt-4": ModelConfig("gpt-4", "GPT-4", "openai", 8192, 0.00003, 0.00006, True, False),
    "gpt-4-turbo": ModelConfig(
        "gpt-4-turbo", "GPT-4 Turbo", "openai", 128000, 0.00001, 0.00003, True, True
    ),
    "gpt-4-vision": ModelConfig(
        "gpt-4-vision", "GPT-4 Vision", "openai", 128000, 0.00001, 0.00003, True, True
    ),
}

ANTHROPIC_MODELS: Dict[str, ModelConfig] = {
    "claude-2": ModelConfig("claude-2", "Claude 2", "anthropic", 100000, 0.00001102, 0.00003268, True, False),
    "claude-instant-1": ModelConfig(
        "claude-instant-1", "Claude Instant", "anthropic", 100000, 0.00000163, 0.00000551, True, False
    ),
}

IMAGE_MODELS: Dict[str, ModelConfig] = {
    "dall-e-2": ModelConfig("dall-e-2", "DALL-E 2", "openai", 0, 0, 0, False, True),
    "dall-e-3": ModelConfig("dall-e-3", "DALL-E 3", "openai", 0, 0, 0, False, True, "image"),
    "stable-diffusion": ModelConfig("stable-diffusion", "Stable Diffusion", "other", 0, 0, 0, False, True),
}

MODEL_REGISTRY: Dict[str, ModelConfig] = {**OPENAI_MODELS, **ANTHROPIC_MODELS, **IMAGE_MODELS}


def get_model_config(name: str) -> Optional[ModelConfig]:
    return MODEL_REGISTRY.get(name)


def get_default_model_for_content_type(content_type: str) -> ModelConfig:
    for config in MODEL_REGISTRY.values():
        if config.default_for_content_type == content_type:
            return config
    return OPENAI_MODELS["gpt-4o-mini"]


def get_models_by_provider(provider: str) -> Dict[str, ModelConfig]:
    return {name: config for name, config in MODEL_REGISTRY.items() if config.provider == provider}


def get_models_by_feature(feature: str) -> Dict[str, ModelConfig]:
    return {name: config for name, config in MODEL_REGISTRY.items() if getattr(config, feature, None) is True}
