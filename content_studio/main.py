import logging
from typing import Any, Dict

import httpx
from fastapi import Depends, FastAPI, HTTPException, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, StreamingResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_settings
from .generation import ContentGenerationError, ContentService, get_content_service
from .image_store import ImageNotFoundError
from .newsletters import parse_any_newsletter, render_newsletter_html
from .openai_client import LLMConfigurationError, LLMError
from .platforms import describe_platform
from .schemas import (
    GenerateImageRequest,
    GenerateImageResponse,
    GenerateNewsletterRequest,
    GenerateNewsletterResponse,
    GeneratePollRequest,
    GeneratePollResponse,
    GeneratePostRequest,
    GeneratePostResponse,
    NewsletterHtmlRequest,
    PromptPreviewRequest,
    PromptPreviewResponse,
    TokenEstimateRequest,
    TokenEstimateResponse,
)
from .tokens import MODEL_REGISTRY

_settings = get_settings()

logging.basicConfig(
    level=getattr(logging, _settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("content_studio")

app = FastAPI(title="Content Studio", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    # pydantic prefixes custom validator messages
    message = message.removeprefix("Value error, ")
    logger.info("Rejected %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "error": message, "details": _jsonable_errors(errors)},
    )


def _jsonable_errors(errors: Any) -> Any:
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in errors
    ]


def _generation_failed(exc: Exception, what: str) -> HTTPException:
    logger.error("%s failed: %s", what, exc)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=str(exc) or f"Failed to {what.lower()}",
    )


@app.post("/api/generatePost", response_model=GeneratePostResponse, response_model_exclude_none=True)
async def generate_post(
    payload: GeneratePostRequest,
    service: ContentService = Depends(get_content_service),
) -> GeneratePostResponse:
    if not (payload.post_type and payload.post_type.strip()) or not (payload.topic and payload.topic.strip()):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Post type and topic are required",
        )
    try:
        return await service.generate_post(payload)
    except (LLMError, ContentGenerationError) as exc:
        raise _generation_failed(exc, "Generate post") from exc


@app.post("/api/generatePost/stream")
async def generate_post_stream(
    payload: GeneratePostRequest,
    service: ContentService = Depends(get_content_service),
) -> StreamingResponse:
    if not (payload.post_type and payload.post_type.strip()) or not (payload.topic and payload.topic.strip()):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Post type and topic are required",
        )
    try:
        service.ensure_configured()
    except LLMConfigurationError as exc:
        raise _generation_failed(exc, "Stream post") from exc

    return StreamingResponse(
        service.stream_post(payload),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@app.post("/api/generateImage", response_model=GenerateImageResponse, response_model_exclude_none=True)
async def generate_image(
    payload: GenerateImageRequest,
    service: ContentService = Depends(get_content_service),
) -> GenerateImageResponse:
    if not (payload.prompt and payload.prompt.strip()) and not (payload.content and payload.content.strip()):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Prompt is required")
    try:
        return await service.generate_image(payload)
    except LLMError as exc:
        raise _generation_failed(exc, "Generate image") from exc


@app.get("/api/images/{image_id}")
async def proxy_image(image_id: str, service: ContentService = Depends(get_content_service)) -> Response:
    try:
        body, content_type = await service.store.fetch(image_id)
    except ImageNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found") from exc
    except httpx.HTTPError as exc:
        logger.warning("Image proxy fetch failed for %s: %s", image_id, exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to fetch image",
        ) from exc

    return Response(content=body, media_type=content_type, headers={"Cache-Control": "public, max-age=3600"})


@app.post("/api/generate-poll", response_model=GeneratePollResponse)
async def generate_poll(
    payload: GeneratePollRequest,
    service: ContentService = Depends(get_content_service),
) -> GeneratePollResponse:
    if not (payload.topic and payload.topic.strip()):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Poll topic is required")
    try:
        return await service.generate_poll(payload)
    except (LLMError, ContentGenerationError) as exc:
        raise _generation_failed(exc, "Generate poll") from exc


@app.post("/api/generate-newsletter", response_model=GenerateNewsletterResponse)
async def generate_newsletter(
    payload: GenerateNewsletterRequest,
    service: ContentService = Depends(get_content_service),
) -> GenerateNewsletterResponse:
    try:
        return await service.generate_newsletter(payload)
    except LLMError as exc:
        raise _generation_failed(exc, "Generate newsletter") from exc


@app.post("/api/newsletter/html", response_class=HTMLResponse)
async def newsletter_html(payload: NewsletterHtmlRequest) -> HTMLResponse:
    if not payload.content.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Content is required")
    parsed = parse_any_newsletter(payload.content)
    return HTMLResponse(render_newsletter_html(parsed))


@app.post("/api/prompts/preview", response_model=PromptPreviewResponse)
async def preview_prompt(
    payload: PromptPreviewRequest,
    service: ContentService = Depends(get_content_service),
) -> PromptPreviewResponse:
    if not payload.topic.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Topic is required")
    return service.preview_prompt(payload)


@app.post("/api/tokens/estimate", response_model=TokenEstimateResponse)
async def estimate_tokens(
    payload: TokenEstimateRequest,
    service: ContentService = Depends(get_content_service),
) -> TokenEstimateResponse:
    return service.estimate_tokens(payload)


@app.get("/api/platforms/{platform}")
async def platform_info(platform: str) -> Dict[str, Any]:
    return describe_platform(platform)


@app.get("/api/models")
async def list_models() -> Dict[str, Any]:
    return {"models": [config.to_dict() for config in MODEL_REGISTRY.values()]}


@app.get("/health")
async def health(service: ContentService = Depends(get_content_service)) -> Dict[str, str]:
    if not service.settings.has_api_key:
        return {"status": "degraded", "openai": "missing"}
    reachable = await service.client.health_check()
    return {"status": "ok" if reachable else "degraded", "openai": "configured" if reachable else "unreachable"}
