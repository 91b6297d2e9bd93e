from pydantic_settings import BaseSettings
from pydantic import AliasChoices, Field, field_validator
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # ── AI Provider ───────────────────────────────────────────────────────────
    AI_PROVIDER: str = "gemini"

    @field_validator("AI_PROVIDER")
    @classmethod
    def validate_ai_provider(cls, v: str) -> str:
        allowed = {"gemini", "groq"}
        if v.lower() not in allowed:
            raise ValueError(f"AI_PROVIDER must be one of {allowed}, got '{v}'")
        return v.lower()

    # Google (Gemini)
    GEMINI_API_KEY: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    )
    GEMINI_MODEL: str = "gemini-2.0-flash"

    # Groq (Llama 3)
    GROQ_API_KEY: Optional[str] = None
    GROQ_MODEL: str = "llama-3.3-70b-versatile"

    # ── Pipeline ──────────────────────────────────────────────────────────────
    CHUNK_SIZE: int = Field(default=1000, gt=0)  # chars per chunk
    MAX_CONCURRENT_LLM_CALLS: int = Field(default=5, ge=1)
    PIPELINE_TIMEOUT_SECONDS: int = 300
    PAGE_FETCH_TIMEOUT_SECONDS: int = 30

    # ── Core ──────────────────────────────────────────────────────────────────
    CORS_ORIGINS: List[str] = ["*"]
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "populate_by_name": True,
    }

    @property
    def active_api_key(self) -> Optional[str]:
        """Credential of the selected provider, or None when unset."""
        key = self.GROQ_API_KEY if self.AI_PROVIDER == "groq" else self.GEMINI_API_KEY
        return key or None


settings = Settings()
