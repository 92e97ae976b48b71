from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    environment: Literal["development", "staging", "production"] = Field(
        default="development"
    )
    database_url: str = Field(default="sqlite:///./tomorrow_architect.db")
    storage_key: str = Field(default="tomorrow_architect_plans_v1")

    # Day boundaries are computed in a fixed reference timezone (UTC+8)
    reference_offset_minutes: int = Field(default=8 * 60)
    night_owl_cutoff_hour: int = Field(default=4, ge=0, le=23)

    ai_provider: Literal["openai", "gemini"] = Field(default="gemini")
    openai_api_key: str | None = Field(default=None)
    gemini_api_key: str | None = Field(default=None)
    openai_model: str = Field(default="gpt-4o-mini")
    gemini_model: str = Field(default="gemini-1.5-flash")
    advisor_timeout_seconds: float = Field(default=30.0, gt=0)

    cors_origins: list[str] = Field(
        default=[
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ]
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache
def get_settings() -> Settings:
    return Settings()
