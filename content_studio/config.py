from functools import lru_cache
from typing import List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Central configuration for the service.

    Values are read from environment variables prefixed with CS_, e.g.:
      CS_OPENAI_API_KEY, CS_CHAT_MODEL, CS_IMAGE_MODEL, CS_CORS_ORIGINS
    The API key is also picked up from a plain OPENAI_API_KEY.
    """

    openai_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("CS_OPENAI_API_KEY", "OPENAI_API_KEY"),
        description="OpenAI API key; generation endpoints fail with 500 when missing",
    )
    openai_base_url: str = Field(
        default="https://api.openai.com/v1",
        description="Base URL of the OpenAI-compatible REST API",
    )

    chat_model: str = Field(default="gpt-4o-mini", description="Model used for text generation")
    image_model: str = Field(default="dall-e-3", description="Model used for image generation")
    image_size: str = Field(default="1024x1024")
    image_quality: str = Field(default="standard")

    request_timeout: float = Field(default=60.0, description="Upstream request timeout in seconds")
    max_retries: int = Field(default=3, description="Attempts for transient upstream failures")
    thread_max_attempts: int = Field(
        default=3,
        description="How many times a thread is regenerated when it does not parse into posts",
    )

    cors_origins: List[str] = Field(
        default_factory=lambda: [
            "http://localhost:5173",
            "http://localhost:5174",
            "http://localhost:3000",
        ]
    )
    log_level: str = Field(default="INFO")

    class Config:
        env_prefix = "CS_"
        env_file = ".env"
        extra = "ignore"

    @property
    def has_api_key(self) -> bool:
        return bool(self.openai_api_key and self.openai_api_key.strip())


@lru_cache
def get_settings() -> Settings:
    return Settings()
