from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Environment mode: dev or prod
    ENV: Literal["dev", "prod"] = "dev"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    ALERT_WEBHOOK_URL: str | None = None

    # Storage (ledger + snapshot JSON files)
    DATA_DIR: str = "data"

    # Crawling
    CRAWLING_TIMEOUT_SECONDS: float = 10.0
    REQUEST_DELAY_SECONDS: float = 1.0  # pause between sources to avoid remote rate limits
    MAX_DESCRIPTION_LENGTH: int = 200
    USER_AGENT: str = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
    SOURCES_FILE: Path | None = None
    KEYWORDS: list[str] | None = None

    # Delivery ledger
    MAX_STORED_ITEMS: int = 1000

    # Notification channels (a channel is active when its URL is set)
    DISCORD_WEBHOOK_URL: str | None = None
    SLACK_WEBHOOK_URL: str | None = None
    KAKAO_WEBHOOK_URL: str | None = None
    CONSOLE_CHANNEL_ENABLED: bool | None = None  # None = auto based on ENV
    CHANNEL_TIMEOUT_SECONDS: float = 10.0
    MAX_MESSAGE_ITEMS: int = 10
    MESSAGE_DESCRIPTION_LENGTH: int = 100

    # Scheduler
    SCHEDULER_ENABLED: bool = True
    SCHEDULE_TIMES: list[str] = ["09:00"]
    SCHEDULE_TIMEZONE: str = "Asia/Seoul"
    INITIAL_RUN_DELAY_SECONDS: float = 5.0  # negative disables the initial run
    STOP_TIMEOUT_SECONDS: float = 30.0

    # Docs Configuration
    DOCS_ENABLED: bool | None = None  # Override docs setting (None = auto based on ENV)

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",  # ignore unrelated keys in local .env
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENV == "prod"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENV == "dev"

    @property
    def debug_enabled(self) -> bool:
        """Debug mode is only enabled in development."""
        return self.is_development

    @property
    def effective_log_level(self) -> str:
        """Return appropriate log level based on environment."""
        if self.is_production:
            # In production, minimum INFO level (ignore DEBUG)
            return self.LOG_LEVEL if self.LOG_LEVEL.upper() != "DEBUG" else "INFO"
        return self.LOG_LEVEL

    @property
    def docs_enabled(self) -> bool:
        """Swagger/ReDoc docs enabled based on environment or override."""
        if self.DOCS_ENABLED is not None:
            return self.DOCS_ENABLED
        return self.is_development

    @property
    def console_channel_enabled(self) -> bool:
        """Console delivery prints messages to the log; on by default in development only."""
        if self.CONSOLE_CHANNEL_ENABLED is not None:
            return self.CONSOLE_CHANNEL_ENABLED
        return self.is_development

    @property
    def data_path(self) -> Path:
        return Path(self.DATA_DIR)


settings = Settings()
