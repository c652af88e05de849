"""Application configuration via environment variables."""

from __future__ import annotations

import logging

from pydantic_settings import BaseSettings

log = logging.getLogger("meetbook.config")


class Settings(BaseSettings):
    # API key expected in the x-api-key header
    api_secret_key: str = ""

    # Calendar defaults
    timezone: str = "America/Los_Angeles"
    google_calendar_id: str = "primary"
    booking_calendar_id: str = "primary"
    booking_title: str = "Consultation call"
    booking_duration_minutes: int = 30
    booking_recheck_margin_minutes: int = 10

    # Google OAuth (personal accounts, refresh token never expires once issued)
    google_oauth_client_id: str = ""
    google_oauth_client_secret: str = ""
    google_oauth_refresh_token: str = ""

    # Google service account (Workspace only)
    google_service_account_email: str = ""
    google_private_key: str = ""
    google_service_account_json: str = ""

    # Bland AI outbound calls
    bland_api_key: str = ""
    bland_api_url: str = "https://api.bland.ai/v1/calls"
    bland_voice: str = "mason"
    bland_task: str = "Schedule consultation with Facebook lead"

    # Server
    host: str = "127.0.0.1"
    port: int = 8080
    debug: bool = False
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def private_key(self) -> str:
        """Service-account key with ``\\n`` escapes from .env expanded."""
        return self.google_private_key.replace("\\n", "\n")

    @property
    def has_oauth_credentials(self) -> bool:
        return bool(
            self.google_oauth_client_id
            and self.google_oauth_client_secret
            and self.google_oauth_refresh_token
        )

    @property
    def has_service_account(self) -> bool:
        return bool(
            (self.google_service_account_email and self.google_private_key)
            or self.google_service_account_json
        )

    def validate_startup(self) -> list[str]:
        """Validate configuration at startup. Returns warnings, raises on errors."""
        warnings: list[str] = []

        if self.booking_duration_minutes <= 0:
            raise ValueError("BOOKING_DURATION_MINUTES must be positive.")

        if not self.api_secret_key:
            if self.debug:
                warnings.append("API_SECRET_KEY not set. API is open (DEBUG=true).")
            else:
                warnings.append(
                    "API_SECRET_KEY not set. All scheduling endpoints are locked. "
                    "Set API_SECRET_KEY in .env to enable access."
                )

        if not (self.has_oauth_credentials or self.has_service_account):
            warnings.append(
                "No Google credentials configured. Set GOOGLE_OAUTH_* or "
                "GOOGLE_SERVICE_ACCOUNT_* in .env; calendar calls will fail."
            )

        if not self.bland_api_key:
            warnings.append("BLAND_API_KEY not set. Lead webhook relay is disabled.")

        return warnings


settings = Settings()
