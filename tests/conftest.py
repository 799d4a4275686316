"""Shared fixtures: settings without env leakage and a scripted LLM client."""

from typing import Any, Dict, List, Optional

import pytest

from content_studio.config import Settings
from content_studio.generation import ContentService
from content_studio.image_store import ImageStore
from content_studio.openai_client import ChatResult
from content_studio.tokens import usage_from_api


def make_settings(**overrides: Any) -> Settings:
    """Settings that ignore .env; the key is set explicitly unless overridden."""
    values: Dict[str, Any] = {"openai_api_key": "sk-test"}
    values.update(overrides)
    return Settings(_env_file=None).model_copy(update=values)


class FakeLLMClient:
    """Stands in for OpenAIClient; replies are consumed in order, the last one repeats."""

    def __init__(
        self,
        replies: Optional[List[str]] = None,
        stream_chunks: Optional[List[str]] = None,
        stream_error: Optional[Exception] = None,
        image_url: str = "https://images.example.com/generated.png",
        healthy: bool = True,
    ) -> None:
        self.replies = list(replies or ["Generated content"])
        self.stream_chunks = list(stream_chunks or [])
        self.stream_error = stream_error
        self.image_url = image_url
        self.healthy = healthy
        self.calls: List[Dict[str, Any]] = []
        self.image_calls: List[Dict[str, Any]] = []

    async def chat_completion(self, messages, **kwargs) -> ChatResult:
        self.calls.append({"messages": messages, **kwargs})
        content = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        model = kwargs.get("model") or "gpt-4o-mini"
        usage = usage_from_api({"prompt_tokens": 120, "completion_tokens": 80}, model)
        return ChatResult(content=content, usage=usage, model=model)

    async def stream_chat_completion(self, messages, **kwargs):
        self.calls.append({"messages": messages, **kwargs})
        for chunk in self.stream_chunks:
            yield chunk
        if self.stream_error is not None:
            raise self.stream_error

    async def generate_image(self, prompt: str, **kwargs) -> str:
        self.image_calls.append({"prompt": prompt, **kwargs})
        return self.image_url

    async def health_check(self) -> bool:
        return self.healthy


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def fake_client() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture
def store() -> ImageStore:
    return ImageStore(capacity=8)


@pytest.fixture
def service(fake_client, settings, store) -> ContentService:
    return ContentService(client=fake_client, settings=settings, store=store)
