"""
Campaign Engine settings.

Values come from environment variables, optionally loaded from a .env file.
"""
import os
import logging
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

load_dotenv()

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

_TRUTHY = ('1', 'true', 'yes', 'on')


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


def _env_int(name: str, default: Optional[int] = None) -> Optional[int]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        logging.getLogger(__name__).warning(f"Ignoring non-integer {name}={value!r}")
        return default


@dataclass
class Settings:
    strict_dice: bool = False       # Raise on malformed dice instead of falling back to 1d6
    rng_seed: Optional[int] = None  # Seed for the shared dice RNG
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Read settings from the environment."""
    return Settings(
        strict_dice=_env_bool('CAMPAIGN_ENGINE_STRICT_DICE'),
        rng_seed=_env_int('CAMPAIGN_ENGINE_RNG_SEED'),
        log_level=os.getenv('CAMPAIGN_ENGINE_LOG_LEVEL', 'INFO').upper(),
    )


settings = load_settings()


def configure_logging(level: Optional[str] = None):
    """Configure root logging for scripts and hosts embedding the engine."""
    logging.basicConfig(
        level=getattr(logging, (level or settings.log_level).upper(), logging.INFO),
        format=LOG_FORMAT
    )
