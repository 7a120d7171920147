"""Configuration management for hostdesk using Pydantic."""

import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # OpenAI Configuration
    openai_api_key: str | None = Field(None, description="OpenAI API key")

    # Chat Assistant Configuration
    chat_model: str = Field(default="gpt-4o", description="Model for the chat assistant")
    chat_max_tokens: int = Field(default=1024, description="Max tokens per model reply")
    chat_temperature: float = Field(
        default=0.7, description="Temperature for assistant responses"
    )
    chat_max_tool_rounds: int = Field(
        default=5,
        ge=1,
        description="Maximum number of tool round trips per chat message",
    )

    # Storage Configuration
    database_path: str = Field(
        default="hostdesk.db", description="SQLite database file"
    )

    # Server Configuration
    server_host: str = Field(default="0.0.0.0", description="Server host")
    server_port: int = Field(default=8080, description="Server port")
    server_url: str = Field(
        default="http://localhost:8080",
        description="Server URL for CLI to connect to API",
    )
    app_url: str = Field(
        default="http://localhost:3000",
        description="Public app URL used for checkout redirects",
    )

    # Twilio Configuration (SMS confirmations)
    twilio_account_sid: str | None = Field(None, description="Twilio account SID")
    twilio_auth_token: str | None = Field(None, description="Twilio auth token")
    twilio_phone_number: str | None = Field(None, description="Twilio phone number")

    # Stripe Configuration (order checkout)
    stripe_secret_key: str | None = Field(None, description="Stripe secret key")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")

    def has_twilio_config(self) -> bool:
        """Check if Twilio is properly configured."""
        return bool(
            self.twilio_account_sid
            and self.twilio_auth_token
            and self.twilio_phone_number
        )

    def model_post_init(self, __context) -> None:
        """Validate configuration after initialization."""
        if not self.openai_api_key:
            logger.warning("OPENAI_API_KEY not set - chat assistant disabled")

        if not self.has_twilio_config():
            logger.warning("Twilio not fully configured - SMS confirmations disabled")

        if not self.stripe_secret_key:
            logger.warning("STRIPE_SECRET_KEY not set - order checkout disabled")


# Global config instance
config: Config | None = None


def get_config() -> Config:
    """Get or create the global configuration instance."""
    global config
    if config is None:
        config = Config()
    return config


def setup_logging(cfg: Config | None = None) -> None:
    """Configure logging for the application."""
    if cfg is None:
        cfg = get_config()

    log_level = getattr(logging, cfg.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Reduce noise from external libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("twilio").setLevel(logging.WARNING)
    logging.getLogger("stripe").setLevel(logging.WARNING)
