"""
Content generation service.

`ContentService` turns validated API requests into prompts, calls the LLM
client and shapes the parsed result into response models. Routes depend on
`get_content_service()`; tests construct the service with a fake client.
"""

import json
import logging
from functools import lru_cache
from typing import Any, AsyncIterator, Dict, List, Optional

from . import prompts
from .builders import PromptParams, get_prompt_builder
from .config import Settings, get_settings
from .image_store import ImageStore, image_store
from .images import MAX_IMAGE_PROMPT_LENGTH, build_image_request_prompt, truncate_image_prompt
from .newsletters import ParsedNewsletter, parse_any_newsletter
from .openai_client import ChatResult, LLMConfigurationError, OpenAIClient
from .platforms import get_character_limit
from .polls import parse_numbered_poll, parse_poll_content
from .processors import fit_to_token_limits
from .schemas import (
    GenerateImageRequest,
    GenerateImageResponse,
    GenerateNewsletterRequest,
    GenerateNewsletterResponse,
    GeneratePollRequest,
    GeneratePollResponse,
    GeneratePostRequest,
    GeneratePostResponse,
    NewsletterSectionOut,
    PromptPreviewRequest,
    PromptPreviewResponse,
    ThreadPostOut,
    TokenEstimateRequest,
    TokenEstimateResponse,
)
from .threads import ParsedThread, build_thread
from .tokens import DEFAULT_PRICING_MODEL, calculate_prompt_cost, estimate_token_count

logger = logging.getLogger(__name__)

POLL_OPTION_COUNT = 3

NEWSLETTER_TEMPERATURE = 0.8
NEWSLETTER_MAX_TOKENS = 4000
NEWSLETTER_PRESENCE_PENALTY = 0.2
NEWSLETTER_FREQUENCY_PENALTY = 0.3


class ContentGenerationError(RuntimeError):
    """The model answered, but nothing usable could be made of it."""


def _sse(payload: Dict[str, Any], event: Optional[str] = None) -> str:
    frame = f"event: {event}\n" if event else ""
    return f"{frame}data: {json.dumps(payload)}\n\n"


class ContentService:
    def __init__(
        self,
        client: Optional[OpenAIClient] = None,
        settings: Optional[Settings] = None,
        store: Optional[ImageStore] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.client = client or OpenAIClient(self.settings)
        self.store = store if store is not None else image_store

    def ensure_configured(self) -> None:
        if not self.settings.has_api_key:
            raise LLMConfigurationError("OpenAI API key is not configured")

    async def _chat(self, system_prompt: str, user_prompt: str, model: Optional[str] = None, **options: Any) -> ChatResult:
        self.ensure_configured()
        model = model or self.settings.chat_model
        system_prompt, user_prompt = fit_to_token_limits(system_prompt, user_prompt, model)
        logger.debug("User prompt for %s:\n%s", model, user_prompt)
        return await self.client.chat_completion(
            [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            model=model,
            **options,
        )

    # -- posts ---------------------------------------------------------------

    def _post_prompt(self, request: GeneratePostRequest) -> str:
        if request.is_thread:
            return prompts.thread_request_prompt(request.topic or "", request.audience, request.style, request.guidelines)
        return prompts.standard_post_request_prompt(
            request.post_type or "", request.topic or "", request.audience, request.style, request.guidelines
        )

    async def generate_post(self, request: GeneratePostRequest) -> GeneratePostResponse:
        logger.info("Generating post type=%s topic=%r", request.post_type, request.topic)
        if request.is_thread:
            return await self.generate_thread(request)

        result = await self._chat(prompts.SOCIAL_SYSTEM_PROMPT, self._post_prompt(request), request.model)
        return GeneratePostResponse(content=result.content)

    async def generate_thread(self, request: GeneratePostRequest) -> GeneratePostResponse:
        """
        Generate a thread, regenerating while fewer than two posts survive validation.

        Raises ContentGenerationError once `thread_max_attempts` is exhausted.
        """
        max_chars = get_character_limit(request.platform or "twitter")
        attempts = max(1, self.settings.thread_max_attempts)
        thread: Optional[ParsedThread] = None

        for attempt in range(1, attempts + 1):
            result = await self._chat(prompts.SOCIAL_SYSTEM_PROMPT, self._post_prompt(request), request.model)
            thread = build_thread(result.content, max_chars=max_chars)
            if len(thread) >= 2:
                logger.info("Thread generated with %d posts on attempt %d", len(thread), attempt)
                break
            logger.warning("Thread attempt %d/%d produced %d usable posts", attempt, attempts, len(thread))
        else:
            raise ContentGenerationError(f"Could not generate a valid thread after {attempts} attempts")

        posts = [
            ThreadPostOut(content=post.content, character_count=post.character_count, index=post.index)
            for post in thread.posts
        ]
        return GeneratePostResponse(content=posts, is_thread=True)

    async def stream_post(self, request: GeneratePostRequest) -> AsyncIterator[str]:
        """
        Yield server-sent event frames for a streamed post.

        Each delta is sent as `data: {"content": ...}`; the stream ends with
        `data: [DONE]`, or with a single `event: error` frame when the upstream
        fails part way.
        """
        model = request.model or self.settings.chat_model
        system_prompt, user_prompt = fit_to_token_limits(prompts.SOCIAL_SYSTEM_PROMPT, self._post_prompt(request), model)
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]
        delivered = 0
        try:
            async for delta in self.client.stream_chat_completion(messages, model=model):
                delivered += len(delta)
                yield _sse({"content": delta})
        except Exception as exc:  # response headers are already sent
            logger.error("Stream failed after %d characters: %s", delivered, exc)
            yield _sse({"error": str(exc) or "Stream interrupted"}, event="error")
            return

        logger.info("Stream finished after %d characters", delivered)
        yield "data: [DONE]\n\n"

    # -- polls ---------------------------------------------------------------

    async def generate_poll(self, request: GeneratePollRequest) -> GeneratePollResponse:
        logger.info("Generating poll topic=%r", request.topic)
        prompt = prompts.poll_request_prompt(request.topic or "", request.audience, request.style, request.guidelines)
        result = await self._chat(prompts.POLL_ROUTE_SYSTEM_PROMPT, prompt)

        if result.content.lstrip().startswith("#"):
            # The model answered in markdown instead of the numbered format
            poll = parse_poll_content(result.content)
        else:
            poll = parse_numbered_poll(result.content)
        if not poll.question:
            raise ContentGenerationError("The poll response did not contain a question")

        return GeneratePollResponse(
            content=result.content,
            question=poll.question,
            options=poll.options[:POLL_OPTION_COUNT],
        )

    # -- newsletters ---------------------------------------------------------

    @staticmethod
    def _newsletter_sections(parsed: ParsedNewsletter) -> List[NewsletterSectionOut]:
        sections = [NewsletterSectionOut(title=s.title, content=s.content) for s in parsed.sections]
        if parsed.call_to_action:
            sections.append(NewsletterSectionOut(title="Call to Action", content=parsed.call_to_action))
        return sections

    async def generate_newsletter(self, request: GenerateNewsletterRequest) -> GenerateNewsletterResponse:
        logger.info("Generating newsletter topic=%r type=%s length=%s", request.topic, request.type.value, request.length.value)
        prompt = prompts.newsletter_request_prompt(
            topic=request.topic,
            length=request.length.value,
            writing_style=request.writing_style,
            target_audience=request.target_audience,
            newsletter_type=request.type.value,
            tone=request.tone.value,
            additional_guidelines=request.additional_guidelines,
        )
        result = await self._chat(
            prompts.NEWSLETTER_SYSTEM_PROMPT,
            prompt,
            request.model,
            temperature=NEWSLETTER_TEMPERATURE,
            max_tokens=NEWSLETTER_MAX_TOKENS,
            presence_penalty=NEWSLETTER_PRESENCE_PENALTY,
            frequency_penalty=NEWSLETTER_FREQUENCY_PENALTY,
        )

        parsed = parse_any_newsletter(result.content)
        metadata = {
            "topic": request.topic,
            "length": request.length.value,
            "writingStyle": request.writing_style,
            "targetAudience": request.target_audience,
            "type": request.type.value,
            "tone": request.tone.value,
            "title": parsed.title,
            "model": result.model,
        }
        return GenerateNewsletterResponse(
            content=result.content,
            metadata=metadata,
            usage=result.usage,
            sections=self._newsletter_sections(parsed),
        )

    # -- images --------------------------------------------------------------

    def image_prompt(self, request: GenerateImageRequest) -> str:
        if request.prompt and request.prompt.strip():
            prompt = request.prompt.strip()
        else:
            prompt = build_image_request_prompt(
                request.content or "", request.style, request.format, request.platform
            )
        return truncate_image_prompt(prompt, MAX_IMAGE_PROMPT_LENGTH)

    async def generate_image(self, request: GenerateImageRequest) -> GenerateImageResponse:
        self.ensure_configured()
        prompt = self.image_prompt(request)
        url = await self.client.generate_image(prompt, size=request.size, quality=request.quality)
        image_id = self.store.register(url)
        return GenerateImageResponse(image_url=url, proxy_url=f"/api/images/{image_id}", prompt=prompt)

    # -- previews and estimates ---------------------------------------------

    def preview_prompt(self, request: PromptPreviewRequest) -> PromptPreviewResponse:
        builder = get_prompt_builder(request.content_type.value)
        params = PromptParams(
            topic=request.topic,
            target_audience=request.audience,
            tone=request.tone,
            writing_style=request.writing_style,
            additional_guidelines=request.guidelines,
            model=request.model,
            temperature=request.temperature,
            platform=request.platform,
            thread_count=request.thread_count,
            thread_style=request.thread_style,
            option_count=request.option_count,
            newsletter_type=request.newsletter_type,
            length=request.length.value if request.length else None,
            style=request.style,
            mood=request.mood,
            visual_elements=list(request.visual_elements),
            aspect_ratio=request.aspect_ratio,
        )
        built = builder.build(params)
        return PromptPreviewResponse(
            prompt=built.prompt,
            system_prompt=built.system_prompt,
            estimated_tokens=built.estimated_tokens,
            estimated_cost=calculate_prompt_cost(built.system_prompt, built.prompt, model=built.model),
            model=built.model,
            temperature=built.temperature,
        )

    def estimate_tokens(self, request: TokenEstimateRequest) -> TokenEstimateResponse:
        model = request.model or DEFAULT_PRICING_MODEL
        return TokenEstimateResponse(
            tokens=estimate_token_count(request.text),
            model=model,
            estimated_cost=calculate_prompt_cost("", request.text, request.expected_response_tokens, model),
        )


@lru_cache
def get_content_service() -> ContentService:
    return ContentService()
