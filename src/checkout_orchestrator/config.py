"""Configuration management for the Checkout Orchestrator."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TransactionServiceSettings(BaseSettings):
    """HTTP transaction service client settings."""

    base_url: str = Field(
        default="http://localhost:8080",
        description="Base URL used to resolve relative order links",
    )
    timeout_seconds: float = Field(default=30.0, description="Request timeout")
    payment_media_type: str = Field(
        default="application/vnd.ni-payment.v2+json",
        description="Media type sent with card and wallet-pay submissions",
    )
    token_cookie_name: str = Field(
        default="payment-token",
        description="Cookie carrying the authorization token",
    )


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    debug: bool = Field(default=False, description="Debug mode")
    environment: str = Field(default="development", description="Environment name")
    log_level: str = Field(default="INFO", description="Logging level")

    # Transaction Service
    transaction_service: TransactionServiceSettings = Field(
        default_factory=TransactionServiceSettings
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )


# Global settings instance
settings = Settings()
