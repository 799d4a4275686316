import json
import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, List, Optional

import httpx
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential

from .config import Settings, get_settings
from .schemas import TokenUsage
from .tokens import usage_from_api

logger = logging.getLogger(__name__)


class LLMError(RuntimeError):
    """Raised when the upstream LLM API fails or cannot be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class LLMConfigurationError(LLMError):
    """No API key (or an unusable configuration)."""


class LLMResponseError(LLMError):
    """The upstream answered, but not with something we can use."""


@dataclass
class ChatResult:
    content: str
    usage: TokenUsage
    model: str


def _is_transient(exc: BaseException) -> bool:
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        code = exc.response.status_code
        return code == 429 or code >= 500
    return False


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return f"HTTP {response.status_code}"


class OpenAIClient:
    """
    Thin async client for the OpenAI REST API.

    Non-streaming calls retry transport errors, 429 and 5xx with exponential
    backoff; everything else surfaces immediately as `LLMError`.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        wait: Any = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._transport = transport
        self._wait = wait if wait is not None else wait_exponential(multiplier=1, min=1, max=10)

    def _client(self) -> httpx.AsyncClient:
        if not self.settings.has_api_key:
            raise LLMConfigurationError("OpenAI API key is not configured")
        return httpx.AsyncClient(
            base_url=self.settings.openai_base_url.rstrip("/"),
            headers={"Authorization": f"Bearer {self.settings.openai_api_key}"},
            timeout=self.settings.request_timeout,
            transport=self._transport,
        )

    async def _post_json(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            async with self._client() as client:
                async for attempt in AsyncRetrying(
                    stop=stop_after_attempt(max(1, self.settings.max_retries)),
                    wait=self._wait,
                    retry=retry_if_exception(_is_transient),
                    reraise=True,
                ):
                    with attempt:
                        if attempt.retry_state.attempt_number > 1:
                            logger.warning("Retrying %s (attempt %d)", path, attempt.retry_state.attempt_number)
                        response = await client.post(path, json=payload)
                        response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            message = _error_message(exc.response)
            logger.error("OpenAI %s failed status=%s: %s", path, exc.response.status_code, message)
            raise LLMError(message, status_code=exc.response.status_code) from exc
        except httpx.TransportError as exc:
            logger.error("OpenAI %s unreachable: %s", path, exc)
            raise LLMError(f"Could not reach the OpenAI API: {exc}") from exc

        try:
            return response.json()
        except ValueError as exc:
            raise LLMResponseError("OpenAI returned a non-JSON response") from exc

    @staticmethod
    def _chat_payload(
        messages: List[Dict[str, str]],
        model: str,
        temperature: Optional[float],
        max_tokens: Optional[int],
        presence_penalty: Optional[float],
        frequency_penalty: Optional[float],
        stream: bool = False,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"model": model, "messages": messages}
        if temperature is not None:
            payload["temperature"] = temperature
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens
        if presence_penalty is not None:
            payload["presence_penalty"] = presence_penalty
        if frequency_penalty is not None:
            payload["frequency_penalty"] = frequency_penalty
        if stream:
            payload["stream"] = True
        return payload

    async def chat_completion(
        self,
        messages: List[Dict[str, str]],
        *,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        presence_penalty: Optional[float] = None,
        frequency_penalty: Optional[float] = None,
    ) -> ChatResult:
        model = model or self.settings.chat_model
        payload = self._chat_payload(messages, model, temperature, max_tokens, presence_penalty, frequency_penalty)
        logger.info("Chat completion model=%s messages=%d", model, len(messages))

        data = await self._post_json("/chat/completions", payload)
        choices = data.get("choices") or []
        message = choices[0].get("message") if choices else None
        if not message or message.get("content") is None:
            raise LLMResponseError("OpenAI returned no completion choices")

        return ChatResult(
            content=str(message["content"]).strip(),
            usage=usage_from_api(data.get("usage"), model),
            model=str(data.get("model") or model),
        )

    async def stream_chat_completion(
        self,
        messages: List[Dict[str, str]],
        *,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> AsyncIterator[str]:
        """Yield content deltas from a streamed chat completion."""
        model = model or self.settings.chat_model
        payload = self._chat_payload(messages, model, temperature, max_tokens, None, None, stream=True)
        logger.info("Streaming chat completion model=%s", model)

        try:
            async with self._client() as client:
                async with client.stream("POST", "/chat/completions", json=payload) as response:
                    if response.status_code >= 400:
                        await response.aread()
                        raise LLMError(_error_message(response), status_code=response.status_code)

                    async for line in response.aiter_lines():
                        line = line.strip()
                        # blank lines separate events; ':' lines are keep-alives
                        if not line or line.startswith(":") or not line.startswith("data:"):
                            continue
                        data = line[len("data:"):].strip()
                        if data == "[DONE]":
                            return
                        try:
                            chunk = json.loads(data)
                        except ValueError:
                            logger.warning("Skipping malformed stream chunk: %.80s", data)
                            continue
                        choices = chunk.get("choices") or []
                        delta = (choices[0].get("delta") or {}).get("content") if choices else None
                        if delta:
                            yield delta
        except httpx.TransportError as exc:
            logger.error("OpenAI stream interrupted: %s", exc)
            raise LLMError(f"Could not reach the OpenAI API: {exc}") from exc

    async def generate_image(
        self,
        prompt: str,
        *,
        model: Optional[str] = None,
        size: Optional[str] = None,
        quality: Optional[str] = None,
    ) -> str:
        payload = {
            "model": model or self.settings.image_model,
            "prompt": prompt,
            "n": 1,
            "size": size or self.settings.image_size,
            "quality": quality or self.settings.image_quality,
            "response_format": "url",
        }
        logger.info("Image generation model=%s prompt_chars=%d", payload["model"], len(prompt))

        data = await self._post_json("/images/generations", payload)
        images = data.get("data") or []
        url = images[0].get("url") if images else None
        if not url:
            logger.error("Invalid response from image generation service: %s", data)
            raise LLMResponseError("Invalid response from image generation service")
        return str(url)

    async def health_check(self) -> bool:
        try:
            async with self._client() as client:
                response = await client.get("/models")
        except LLMConfigurationError:
            return False
        except httpx.HTTPError as exc:
            logger.warning("OpenAI health check failed: %s", exc)
            return False
        return response.status_code == 200
