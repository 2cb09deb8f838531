"""Configuration settings for the scheduler."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Define base directory
BASE_DIR = Path(__file__).parent.parent.parent

# Load environment variables from .env file
env_file = ".env.test" if os.getenv("ENV") == "test" else ".env"
load_dotenv(env_file)


# Scheduling defaults
REVIEW_OFFSETS = [1, 2, 4, 7, 15]  # days after learning when a unit is due again
DEFAULT_WORDS_PER_DAY = 20


def parse_offsets(raw: Optional[str]) -> list[int]:
    """Parse a comma separated list of review offsets."""
    if not raw:
        return list(REVIEW_OFFSETS)
    return [int(part) for part in raw.split(",") if part.strip()]


@dataclass
class DatabaseSettings:
    """Database configuration settings."""
    url: str = os.getenv("DATABASE_URL", "sqlite:///vocabplan.db")
    echo: bool = os.getenv("DATABASE_ECHO", "false").lower() == "true"


@dataclass
class LoggingSettings:
    """Logging configuration settings."""
    level: str = os.getenv("LOG_LEVEL", "INFO")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    dir: Optional[str] = os.getenv("LOG_DIR", None)
    rotation: str = os.getenv("LOG_ROTATION", "midnight")
    interval: int = int(os.getenv("LOG_INTERVAL", "1"))
    backup_count: int = int(os.getenv("LOG_BACKUP_COUNT", "7"))


@dataclass
class ScheduleSettings:
    """Learning schedule settings."""
    review_offsets: list[int] = field(
        default_factory=lambda: parse_offsets(os.getenv("REVIEW_OFFSETS"))
    )
    default_words_per_day: int = field(
        default_factory=lambda: int(os.getenv("DEFAULT_WORDS_PER_DAY", str(DEFAULT_WORDS_PER_DAY)))
    )
    minimum_display_days: int = int(os.getenv("MINIMUM_DISPLAY_DAYS", "0"))
    # Reaching review round k+1 counts round k as done
    infer_lower_rounds: bool = os.getenv("INFER_LOWER_REVIEW_ROUNDS", "true").lower() == "true"


@dataclass
class MonitoringSettings:
    """Prometheus metrics settings."""
    enabled: bool = os.getenv("METRICS_ENABLED", "false").lower() == "true"
    port: int = int(os.getenv("METRICS_PORT", "9090"))


def get_database_settings() -> DatabaseSettings:
    """Get database settings."""
    return DatabaseSettings()


def get_logging_settings() -> LoggingSettings:
    """Get logging settings."""
    return LoggingSettings()


def get_schedule_settings() -> ScheduleSettings:
    """Get schedule settings."""
    return ScheduleSettings()


def get_monitoring_settings() -> MonitoringSettings:
    """Get monitoring settings."""
    return MonitoringSettings()


@dataclass
class Settings:
    """Main settings class that combines all configuration settings."""
    database: DatabaseSettings = field(default_factory=get_database_settings)
    logging: LoggingSettings = field(default_factory=get_logging_settings)
    schedule: ScheduleSettings = field(default_factory=get_schedule_settings)
    monitoring: MonitoringSettings = field(default_factory=get_monitoring_settings)

    def validate(self) -> None:
        """Validate settings and raise ValueError if invalid."""
        offsets = self.schedule.review_offsets
        if not offsets:
            raise ValueError("REVIEW_OFFSETS must not be empty")

        if any(offset <= 0 for offset in offsets):
            raise ValueError("REVIEW_OFFSETS must be positive")

        if any(a >= b for a, b in zip(offsets, offsets[1:])):
            raise ValueError("REVIEW_OFFSETS must be strictly ascending")

        if self.schedule.default_words_per_day < 1:
            raise ValueError("DEFAULT_WORDS_PER_DAY must be positive")

        if self.schedule.minimum_display_days < 0:
            raise ValueError("MINIMUM_DISPLAY_DAYS cannot be negative")


# Create global settings instance
settings = Settings()
settings.validate()
