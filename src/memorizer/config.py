"""Configuration settings for the vocabulary memorizer."""
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


# Define data directories from environment variables
DATA_DIR = Path(os.getenv("DATA_DIR", "./data"))
EXPORT_DIR = Path(os.getenv("EXPORT_DIR", str(DATA_DIR / "exports")))

# SRS settings
SRS_INITIAL_EASE_FACTOR = 2.5
SRS_MIN_EASE_FACTOR = 1.3
SRS_EASE_PENALTY_ON_WRONG = 0.2
SRS_INTERVAL_AFTER_FIRST = 1  # days after the 1st correct answer
SRS_INTERVAL_AFTER_SECOND = 6  # days after the 2nd correct answer
WORDS_PER_REVIEW_SESSION = 20  # max words in one learning session
SRS_MASTERED_REPETITIONS = 5
SRS_MASTERED_INTERVAL_DAYS = 60  # approx 2 months
SRS_MAX_INTERVAL_DAYS = 36500  # approx 100 years

# Gamification settings
GAMIFICATION_DAILY_GOAL = 5  # words to get right to complete the daily goal


def ensure_directories() -> None:
    """Ensure all required directories exist."""
    directories = [
        DATA_DIR,
        EXPORT_DIR,
    ]

    for directory in directories:
        directory.mkdir(parents=True, exist_ok=True)


@dataclass
class PathSettings:
    """Path configuration settings."""
    base_dir: Path = BASE_DIR
    data_dir: Path = DATA_DIR
    export_dir: Path = EXPORT_DIR


@dataclass
class DatabaseSettings:
    """Database configuration settings."""
    url: str = os.getenv("DATABASE_URL", "sqlite:///memorizer.db")
    echo: bool = os.getenv("DATABASE_ECHO", "false").lower() == "true"


@dataclass
class LoggingSettings:
    """Logging configuration settings."""
    level: str = os.getenv("LOG_LEVEL", "WARNING")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    dir: Optional[str] = os.getenv("LOG_DIR", None)
    rotation: str = os.getenv("LOG_ROTATION", "midnight")
    interval: int = int(os.getenv("LOG_INTERVAL", "1"))
    backup_count: int = int(os.getenv("LOG_BACKUP_COUNT", "7"))


@dataclass
class SRSSettings:
    """Spaced repetition scheduling settings."""
    initial_ease_factor: float = float(os.getenv("SRS_INITIAL_EASE_FACTOR", str(SRS_INITIAL_EASE_FACTOR)))
    min_ease_factor: float = float(os.getenv("SRS_MIN_EASE_FACTOR", str(SRS_MIN_EASE_FACTOR)))
    ease_penalty: float = float(os.getenv("SRS_EASE_PENALTY_ON_WRONG", str(SRS_EASE_PENALTY_ON_WRONG)))
    interval_after_first: int = int(os.getenv("SRS_INTERVAL_AFTER_FIRST", str(SRS_INTERVAL_AFTER_FIRST)))
    interval_after_second: int = int(os.getenv("SRS_INTERVAL_AFTER_SECOND", str(SRS_INTERVAL_AFTER_SECOND)))
    words_per_session: int = int(os.getenv("WORDS_PER_REVIEW_SESSION", str(WORDS_PER_REVIEW_SESSION)))
    mastered_repetitions: int = int(os.getenv("SRS_MASTERED_REPETITIONS", str(SRS_MASTERED_REPETITIONS)))
    mastered_interval_days: int = int(os.getenv("SRS_MASTERED_INTERVAL_DAYS", str(SRS_MASTERED_INTERVAL_DAYS)))
    max_interval_days: int = int(os.getenv("SRS_MAX_INTERVAL_DAYS", str(SRS_MAX_INTERVAL_DAYS)))


@dataclass
class GamificationSettings:
    """Daily goal and streak settings."""
    daily_goal: int = int(os.getenv("GAMIFICATION_DAILY_GOAL", str(GAMIFICATION_DAILY_GOAL)))


@dataclass
class MonitoringSettings:
    """Metrics exporter settings."""
    metrics_port: int = int(os.getenv("METRICS_PORT", "0"))  # 0 disables the exporter


def get_path_settings() -> PathSettings:
    """Get path settings."""
    return PathSettings()


def get_database_settings() -> DatabaseSettings:
    """Get database settings."""
    return DatabaseSettings()


def get_logging_settings() -> LoggingSettings:
    """Get logging settings."""
    return LoggingSettings()


def get_srs_settings() -> SRSSettings:
    """Get SRS settings."""
    return SRSSettings()


def get_gamification_settings() -> GamificationSettings:
    """Get gamification settings."""
    return GamificationSettings()


def get_monitoring_settings() -> MonitoringSettings:
    """Get monitoring settings."""
    return MonitoringSettings()


@dataclass
class Settings:
    """Main settings class that combines all configuration settings."""
    paths: PathSettings = field(default_factory=get_path_settings)
    database: DatabaseSettings = field(default_factory=get_database_settings)
    logging: LoggingSettings = field(default_factory=get_logging_settings)
    srs: SRSSettings = field(default_factory=get_srs_settings)
    gamification: GamificationSettings = field(default_factory=get_gamification_settings)
    monitoring: MonitoringSettings = field(default_factory=get_monitoring_settings)

    def validate(self) -> None:
        """Validate settings and raise ValueError if invalid."""
        if self.srs.min_ease_factor <= 0:
            raise ValueError("SRS_MIN_EASE_FACTOR must be positive")

        if self.srs.initial_ease_factor < self.srs.min_ease_factor:
            raise ValueError("SRS_INITIAL_EASE_FACTOR cannot be lower than SRS_MIN_EASE_FACTOR")

        if self.srs.ease_penalty <= 0:
            raise ValueError("SRS_EASE_PENALTY_ON_WRONG must be positive")

        if self.srs.interval_after_first < 1 or self.srs.interval_after_second < 1:
            raise ValueError("SRS_INTERVAL_AFTER_FIRST and SRS_INTERVAL_AFTER_SECOND must be at least 1 day")

        if self.srs.max_interval_days < max(self.srs.interval_after_first, self.srs.interval_after_second):
            raise ValueError("SRS_MAX_INTERVAL_DAYS cannot be shorter than the fixed intervals")

        if self.srs.words_per_session < 1:
            raise ValueError("WORDS_PER_REVIEW_SESSION must be positive")

        if self.gamification.daily_goal < 1:
            raise ValueError("GAMIFICATION_DAILY_GOAL must be positive")

        if self.monitoring.metrics_port < 0:
            raise ValueError("METRICS_PORT cannot be negative")


# Create global settings instance
settings = Settings()
settings.validate()
