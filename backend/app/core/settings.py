# app/core/settings.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import List, Optional

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    api_title: str = Field(default="Contact API", alias="API_TITLE")
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=5000, alias="PORT")
    log_level: str = Field(default="info", alias="LOG_LEVEL")

    # Comma-separated list is accepted
    frontend_origin: str = Field(default="http://localhost:5173", alias="FRONTEND_ORIGIN")

    # Where owner notifications go
    owner_email: Optional[str] = Field(default=None, alias="OWNER_EMAIL")

    # SMTP relay; missing values show up as send failures, not startup errors
    smtp_host: Optional[str] = Field(default=None, alias="SMTP_HOST")
    smtp_port: Optional[int] = Field(default=None, alias="SMTP_PORT")
    smtp_user: Optional[str] = Field(default=None, alias="SMTP_USER")
    smtp_pass: Optional[str] = Field(default=None, alias="SMTP_PASS")
    smtp_secure: bool = Field(default=False, alias="SMTP_SECURE")
    smtp_validate_certs: bool = Field(default=True, alias="SMTP_VALIDATE_CERTS")
    smtp_timeout: float = Field(default=30.0, alias="SMTP_TIMEOUT")
    smtp_verify_on_startup: bool = Field(default=True, alias="SMTP_VERIFY_ON_STARTUP")

    from_name: Optional[str] = Field(default=None, alias="FROM_NAME")
    from_email: Optional[str] = Field(default=None, alias="FROM_EMAIL")

    rate_limit_max: int = Field(default=20, alias="RATE_LIMIT_MAX")
    rate_limit_window_seconds: int = Field(default=15 * 60, alias="RATE_LIMIT_WINDOW_SECONDS")
    max_body_bytes: int = Field(default=10 * 1024, alias="MAX_BODY_BYTES")

    # If set, rate-limit counters are shared through Redis instead of process memory
    redis_url: Optional[str] = Field(default=None, alias="REDIS_URL")

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.frontend_origin.split(",") if o.strip()]

settings = Settings()
