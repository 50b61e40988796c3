# routebatch/core/config.py
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from routebatch.core.errors import ConfigError
from routebatch.models.credentials import (
    Credentials,
    NormalCredentials,
    PremiumCredentials,
)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables (.env file).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "Directions Batch API"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Requests per chunk; chunks start at most once per RATE_INTERVAL_S
    RATE_LIMIT: int = 50
    RATE_INTERVAL_S: float = 1.0
    REQUEST_TIMEOUT_S: float = 5.0

    # Either API_KEY or CLIENT_ID + PRIVATE_KEY (+ optional CHANNEL)
    API_KEY: Optional[str] = None
    CLIENT_ID: Optional[str] = None
    PRIVATE_KEY: Optional[str] = None
    CHANNEL: Optional[str] = None

    def credentials(self) -> Credentials:
        """
        Build the run's credentials from the configured values.
        """
        premium = self.CLIENT_ID or self.PRIVATE_KEY
        if self.API_KEY and premium:
            raise ConfigError("API_KEY cannot be combined with CLIENT_ID/PRIVATE_KEY")
        if self.API_KEY:
            if self.CHANNEL:
                raise ConfigError("CHANNEL is only valid with premium credentials")
            return NormalCredentials(api_key=self.API_KEY)
        if self.CLIENT_ID and self.PRIVATE_KEY:
            return PremiumCredentials(
                client_id=self.CLIENT_ID,
                private_key=self.PRIVATE_KEY,
                channel=self.CHANNEL or None,
            )
        if premium:
            raise ConfigError("CLIENT_ID and PRIVATE_KEY must be supplied together")
        raise ConfigError("no credentials configured (set API_KEY or CLIENT_ID/PRIVATE_KEY)")


settings = Settings()
