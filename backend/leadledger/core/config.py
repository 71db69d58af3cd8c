from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Ignore unknown env vars so a shared .env can carry settings for other services.
    model_config = SettingsConfigDict(env_file=(".env", "../.env"), case_sensitive=True, extra="ignore")

    PROJECT_NAME: str = "LeadLedger"
    ENVIRONMENT: str = "development"
    API_V1_STR: str = "/api/v1"

    DATABASE_URL: str = "sqlite:///./leadledger.db"

    # Drafts are keyed as f"{DRAFT_KEY_PREFIX}{broker}_{YYYY-MM-DD}".
    DRAFT_KEY_PREFIX: str = "draft_entry_"

    LOG_LEVEL: str = "INFO"

    BACKEND_CORS_ORIGINS: list[str] = Field(default_factory=lambda: ["*"])
    ENABLE_API_DOCS: bool = False

    REPORT_TITLE: str = "Broker Monthly Report"

    @model_validator(mode="after")
    def _prod_guards(self):
        if self.ENVIRONMENT.lower() == "production":
            if self.ENABLE_API_DOCS:
                raise ValueError("ENABLE_API_DOCS must be false in production")
            if any(o == "*" for o in self.BACKEND_CORS_ORIGINS):
                raise ValueError('BACKEND_CORS_ORIGINS must not contain "*" in production')
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
