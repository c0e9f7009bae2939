import logging
import os
from dataclasses import dataclass

from lightmeter.kernel.validation import validate_int


@dataclass(frozen=True)
class MeterConfig:
    """
    Host-facing settings for the meter engine.
    """

    log_level: int = logging.WARNING
    # Recommended minimum spacing between metering calls.
    # The engine itself is agnostic to call frequency.
    analysis_interval_ms: int = 100


def _level_from_env(raw: str | None, default: int) -> int:
    if not raw:
        return default
    level = logging.getLevelName(raw.strip().upper())
    if isinstance(level, int):
        return level
    return validate_int(raw, default)


def load_meter_config() -> MeterConfig:
    """
    Builds the config from LIGHTMETER_* environment variables.
    """
    defaults = MeterConfig()
    interval = validate_int(
        os.getenv("LIGHTMETER_ANALYSIS_INTERVAL_MS"), defaults.analysis_interval_ms
    )
    return MeterConfig(
        log_level=_level_from_env(os.getenv("LIGHTMETER_LOG_LEVEL"), defaults.log_level),
        analysis_interval_ms=max(0, interval),
    )


METER_CONFIG = load_meter_config()
