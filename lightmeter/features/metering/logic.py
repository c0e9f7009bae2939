import math
from typing import Optional

from lightmeter.features.exposure.constants import (
    EV_BASE_OFFSET,
    ISO_VALUES,
    DEFAULT_ISO_INDEX,
    MAX_EV,
    MIN_EV,
    REFERENCE_GRAY,
)
from lightmeter.features.metering.models import MeteringResult
from lightmeter.kernel.system.config import METER_CONFIG
from lightmeter.kernel.system.logging import get_logger
from lightmeter.kernel.validation import validate_float

logger = get_logger("metering")


def calculate_ev(luminance: float, iso: int) -> float:
    """
    Converts a sampled scene luminance into an Exposure Value.

    EV = log2(luminance / REFERENCE_GRAY) + EV_BASE_OFFSET + log2(ISO / 100)

    A black (or missing) sample reports EV 0 instead of failing the reading.
    """
    lum = validate_float(luminance, 0.0)
    if lum <= 0:
        return 0.0

    sensitivity = validate_float(iso, 0.0)
    if sensitivity <= 0:
        logger.debug(f"Unusable ISO {iso!r}, metering at ISO {ISO_VALUES[DEFAULT_ISO_INDEX]}")
        sensitivity = float(ISO_VALUES[DEFAULT_ISO_INDEX])

    luminance_ratio = lum / REFERENCE_GRAY
    iso_factor = math.log2(sensitivity / 100.0)

    return math.log2(luminance_ratio) + EV_BASE_OFFSET + iso_factor


def is_ev_in_range(ev: float) -> bool:
    return MIN_EV <= ev <= MAX_EV


def clamp_ev(ev: float) -> float:
    """Pins an EV to the measurable range of the meter."""
    return float(min(max(ev, MIN_EV), MAX_EV))


def create_metering_result(
    luminance: float, iso: int, timestamp: Optional[int] = None
) -> MeteringResult:
    """
    Wraps a luminance sample and its EV into a MeteringResult.
    """
    lum = validate_float(luminance, 0.0)
    ev = calculate_ev(lum, iso)
    if timestamp is None:
        return MeteringResult(average_luminance=lum, calculated_ev=ev)
    return MeteringResult(
        average_luminance=lum, calculated_ev=ev, timestamp=timestamp
    )


def is_analysis_due(
    last_timestamp: int, now: int, interval_ms: Optional[int] = None
) -> bool:
    """
    Rate-limit check for callers feeding frames to the meter.
    """
    if interval_ms is None:
        interval_ms = METER_CONFIG.analysis_interval_ms
    return now - last_timestamp >= interval_ms
