from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    # Application settings
    app_name: str = "Tenant CMS"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"

    # Database settings
    database_url: str = "sqlite+aiosqlite:///./tenantcms.db"

    # Security settings. The secret is optional at import time so that
    # tooling can load the settings; token decoding and the tenancy
    # backfill refuse to run without it.
    secret_key: str | None = None
    access_token_expire_minutes: int = 30

    # Multi-tenancy rollout. While expand mode is on, callers without a role
    # or without website memberships keep their pre-tenancy access to
    # content. Turn it off once the backfill has completed (contract phase).
    tenancy_expand_mode: bool = True
    primary_domain: str | None = None

    # Logging settings
    log_level: str = "INFO"
    log_json: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
