"""Configuration management"""
import os
from pathlib import Path
from dotenv import load_dotenv

from progression.exceptions import ConfigurationError

load_dotenv()

# Storage
DATA_PATH: Path = Path(os.getenv("PROGRESSION_DATA_PATH", "./data"))
# Namespaced key of the single progression blob
STORAGE_KEY: str = os.getenv("PROGRESSION_STORAGE_KEY", "@gamification_data")

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# Progression rules
DAILY_CHALLENGE_COUNT: int = int(os.getenv("DAILY_CHALLENGE_COUNT", "3"))
STREAK_BONUS_THRESHOLD: int = int(os.getenv("STREAK_BONUS_THRESHOLD", "7"))
STREAK_BONUS_MULTIPLIER: float = float(os.getenv("STREAK_BONUS_MULTIPLIER", "1.5"))


def storage_filename(key: str = STORAGE_KEY) -> str:
    """File name used for a storage key ('@gamification_data' -> 'gamification_data.json')"""
    return f"{key.lstrip('@')}.json"


# Validation
def validate_config() -> None:
    """Validate configuration values; raises ConfigurationError naming the bad key"""
    if not STORAGE_KEY.lstrip("@"):
        raise ConfigurationError("PROGRESSION_STORAGE_KEY must not be empty", config_key="PROGRESSION_STORAGE_KEY")
    if DAILY_CHALLENGE_COUNT < 1:
        raise ConfigurationError("DAILY_CHALLENGE_COUNT must be at least 1", config_key="DAILY_CHALLENGE_COUNT")
    if STREAK_BONUS_THRESHOLD < 1:
        raise ConfigurationError("STREAK_BONUS_THRESHOLD must be at least 1", config_key="STREAK_BONUS_THRESHOLD")
    if STREAK_BONUS_MULTIPLIER < 1:
        raise ConfigurationError("STREAK_BONUS_MULTIPLIER must be at least 1.0", config_key="STREAK_BONUS_MULTIPLIER")
    if LOG_LEVEL.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        raise ConfigurationError(f"LOG_LEVEL is invalid: {LOG_LEVEL}", config_key="LOG_LEVEL")
