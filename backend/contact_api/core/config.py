from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from typing import List


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Search .env in CWD first, then parent dir.
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # --- Server ---
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # --- Observability ---
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"  # development | production

    # --- CORS (comma-separated strings parsed into lists) ---
    CORS_ORIGINS: str = "http://localhost:3000"
    PRODUCTION_CORS_ORIGINS: str = (
        "https://derekbateman.com,https://www.derekbateman.com"
    )

    # --- Dispatch ---
    DISPATCH_MODE: str = "mail"  # mail | search
    DISPATCH_TIMEOUT_SECONDS: float = 10.0

    # --- Contact rate limiting ---
    CONTACT_RATE_LIMIT_WINDOW_SECONDS: float = 60.0

    # --- Mail ---
    EMAIL_USER: str = ""
    EMAIL_APP_PASSWORD: str = ""
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 465
    CONTACT_RECIPIENT: str = "derekbateman81@gmail.com"
    CONTACT_FORM_NAME: str = "Derek Bateman Contact Form"
    SITE_NAME: str = "derekbateman.com"

    # --- Search / index service ---
    SEARCH_URL: str = "http://localhost:9200"
    SEARCH_INDEX: str = "contact-submissions"
    SEARCH_FIELD: str = "message"
    SEARCH_RATE_LIMIT: str = "30/minute"

    @field_validator("LOG_LEVEL")
    @classmethod
    def log_level_must_be_valid(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"LOG_LEVEL must be one of {valid}")
        return v.upper()

    @field_validator("DISPATCH_MODE")
    @classmethod
    def dispatch_mode_must_be_known(cls, v: str) -> str:
        valid = {"mail", "search"}
        if v.lower() not in valid:
            raise ValueError(f"DISPATCH_MODE must be one of {valid}")
        return v.lower()

    @field_validator("DISPATCH_TIMEOUT_SECONDS", "CONTACT_RATE_LIMIT_WINDOW_SECONDS")
    @classmethod
    def must_be_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be greater than zero")
        return v

    @field_validator("EMAIL_APP_PASSWORD")
    @classmethod
    def strip_password_quotes(cls, v: str) -> str:
        """App passwords pasted from a provider console often arrive quoted."""
        return v.replace('"', "")

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() in {"production", "prod"}

    def get_cors_origins(self) -> List[str]:
        """Parse the origin list for the current deployment mode."""
        raw = self.PRODUCTION_CORS_ORIGINS if self.is_production else self.CORS_ORIGINS
        return [origin.strip() for origin in raw.split(",") if origin.strip()]


settings = Settings()
