from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ApiModel(BaseModel):
    """Request/response base: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(populate_by_name=True)


class PostType(str, Enum):
    THREAD = "thread"


class ContentType(str, Enum):
    SOCIAL = "social"
    THREAD = "thread"
    POLL = "poll"
    NEWSLETTER = "newsletter"
    IMAGE = "image"


class NewsletterType(str, Enum):
    TECH_TRENDS = "tech-trends"
    INDUSTRY_INSIGHTS = "industry-insights"
    PRODUCT_UPDATES = "product-updates"
    COMPANY_NEWS = "company-news"
    EDUCATIONAL = "educational"
    CASE_STUDIES = "case-studies"
    TUTORIALS = "tutorials"
    MARKET_ANALYSIS = "market-analysis"
    GLOBAL_TRENDS = "global-trends"
    FINANCIAL_UPDATES = "financial-updates"


class NewsletterTone(str, Enum):
    PROFESSIONAL = "professional"
    CASUAL = "casual"
    INSPIRATIONAL = "inspirational"
    TECHNICAL = "technical"


class ContentLength(str, Enum):
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


class TokenUsage(ApiModel):
    prompt_tokens: int = Field(default=0, alias="promptTokens")
    completion_tokens: int = Field(default=0, alias="completionTokens")
    total_tokens: int = Field(default=0, alias="totalTokens")
    estimated_cost: float = Field(default=0.0, alias="estimatedCost")


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class GeneratePostRequest(ApiModel):
    post_type: Optional[str] = Field(default=None, alias="postType")
    topic: Optional[str] = None
    audience: Optional[str] = None
    style: Optional[str] = None
    guidelines: Optional[str] = None
    platform: Optional[str] = None
    model: Optional[str] = None

    @property
    def is_thread(self) -> bool:
        return (self.post_type or "").strip().lower() == PostType.THREAD.value


class GenerateImageRequest(ApiModel):
    prompt: Optional[str] = None
    content: Optional[str] = None
    style: Optional[str] = None
    format: Optional[str] = None
    platform: Optional[str] = None
    size: Optional[str] = None
    quality: Optional[str] = None


class GeneratePollRequest(ApiModel):
    topic: Optional[str] = None
    audience: Optional[str] = None
    style: Optional[str] = None
    guidelines: Optional[str] = None


class GenerateNewsletterRequest(ApiModel):
    topic: str = Field(..., min_length=1, max_length=200)
    length: ContentLength = ContentLength.MEDIUM
    writing_style: str = Field(default="Informative", alias="writingStyle")
    target_audience: str = Field(default="General audience", alias="targetAudience")
    type: NewsletterType = NewsletterType.INDUSTRY_INSIGHTS
    tone: NewsletterTone = NewsletterTone.PROFESSIONAL
    additional_guidelines: Optional[str] = Field(default=None, alias="additionalGuidelines")
    model: Optional[str] = None

    @field_validator("topic")
    @classmethod
    def topic_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Topic is required")
        return value.strip()


class NewsletterHtmlRequest(ApiModel):
    content: str


class PromptPreviewRequest(ApiModel):
    content_type: ContentType = Field(default=ContentType.SOCIAL, alias="contentType")
    topic: str
    audience: Optional[str] = None
    tone: Optional[str] = None
    writing_style: Optional[str] = Field(default=None, alias="writingStyle")
    guidelines: Optional[str] = None
    platform: Optional[str] = None
    model: Optional[str] = None
    temperature: Optional[float] = None
    # thread / poll
    thread_count: Optional[int] = Field(default=None, alias="threadCount")
    thread_style: Optional[str] = Field(default=None, alias="threadStyle")
    option_count: Optional[int] = Field(default=None, alias="optionCount")
    # newsletter
    newsletter_type: Optional[str] = Field(default=None, alias="newsletterType")
    length: Optional[ContentLength] = None
    # image
    style: Optional[str] = None
    mood: Optional[str] = None
    visual_elements: List[str] = Field(default_factory=list, alias="visualElements")
    aspect_ratio: Optional[str] = Field(default=None, alias="aspectRatio")


class TokenEstimateRequest(ApiModel):
    text: str = ""
    model: Optional[str] = None
    expected_response_tokens: int = Field(default=500, alias="expectedResponseTokens")


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class ThreadPostOut(ApiModel):
    content: str
    character_count: int = Field(alias="characterCount")
    index: Optional[int] = None


class GeneratePostResponse(ApiModel):
    success: bool = True
    content: Union[List[ThreadPostOut], str]
    is_thread: Optional[bool] = Field(default=None, alias="isThread")


class GenerateImageResponse(ApiModel):
    success: bool = True
    image_url: str = Field(alias="imageUrl")
    proxy_url: Optional[str] = Field(default=None, alias="proxyUrl")
    prompt: Optional[str] = None


class GeneratePollResponse(ApiModel):
    success: bool = True
    content: str
    question: str
    options: List[str] = Field(default_factory=list)


class NewsletterSectionOut(ApiModel):
    title: str
    content: str


class GenerateNewsletterResponse(ApiModel):
    success: bool = True
    content: str
    metadata: Dict[str, Any] = Field(default_factory=dict)
    usage: Optional[TokenUsage] = None
    sections: List[NewsletterSectionOut] = Field(default_factory=list)


class PromptPreviewResponse(ApiModel):
    prompt: str
    system_prompt: str = Field(alias="systemPrompt")
    estimated_tokens: int = Field(alias="estimatedTokens")
    estimated_cost: float = Field(alias="estimatedCost")
    model: str
    temperature: Optional[float] = None


class TokenEstimateResponse(ApiModel):
    tokens: int
    model: str
    estimated_cost: float = Field(alias="estimatedCost")
