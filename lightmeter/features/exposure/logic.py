import math
from enum import Enum
from typing import Optional

import numpy as np
import numpy.typing as npt

from lightmeter.features.exposure.constants import EV_BASE_OFFSET, STOP_TABLES
from lightmeter.features.exposure.models import ExposureSettings, ExposureValue
from lightmeter.features.exposure.types import ExposureType
from lightmeter.kernel.system.logging import get_logger

logger = get_logger("exposure")


class LockState(Enum):
    """
    The eight lock combinations of the (ISO, aperture, shutter) triple.
    """

    ALL = "all"
    ISO = "iso"
    APERTURE = "aperture"
    SHUTTER = "shutter"
    ISO_APERTURE = "iso+aperture"
    ISO_SHUTTER = "iso+shutter"
    APERTURE_SHUTTER = "aperture+shutter"
    NONE = "none"

    @classmethod
    def from_settings(cls, settings: ExposureSettings) -> "LockState":
        key = (
            settings.iso.is_locked,
            settings.aperture.is_locked,
            settings.shutter_speed.is_locked,
        )
        return _LOCK_STATES[key]


_LOCK_STATES = {
    (True, True, True): LockState.ALL,
    (True, False, False): LockState.ISO,
    (False, True, False): LockState.APERTURE,
    (False, False, True): LockState.SHUTTER,
    (True, True, False): LockState.ISO_APERTURE,
    (True, False, True): LockState.ISO_SHUTTER,
    (False, True, True): LockState.APERTURE_SHUTTER,
    (False, False, False): LockState.NONE,
}


# --- Stop contributions ---
# EV = aperture_stops - shutter_stops + iso_stops + EV_BASE_OFFSET


def iso_stops(iso: float) -> float:
    return math.log2(iso / 100.0)


def aperture_stops(f_number: float) -> float:
    return 2.0 * math.log2(f_number)


def shutter_stops(seconds: float) -> float:
    return -math.log2(seconds)


def settings_ev(settings: ExposureSettings) -> float:
    """
    EV implied by the triple currently held in `settings`, lock flags ignored.
    """
    return (
        aperture_stops(settings.aperture.value)
        - shutter_stops(settings.shutter_speed.value)
        + iso_stops(settings.iso.value)
        + EV_BASE_OFFSET
    )


# --- Nearest stop search ---

# Keeps 2^stops finite so runaway targets pin to a table end
_MAX_SEARCH_STOPS = 1000.0


def _argmin_or_default(distances: npt.NDArray[np.float64], default_index: int) -> int:
    """
    First index of the smallest finite distance, or the default stop if there is none.
    """
    if distances.size == 0:
        return default_index
    finite = np.isfinite(distances)
    if not finite.any():
        return default_index
    # argmin returns the first occurrence on ties
    return int(np.argmin(np.where(finite, distances, np.inf)))


def find_closest_iso_index(stops: float) -> int:
    """
    ISO = 100 * 2^stops, matched on linear distance.
    """
    table = STOP_TABLES[ExposureType.ISO]
    with np.errstate(over="ignore", invalid="ignore"):
        target_iso = 100.0 * np.exp2(np.clip(stops, -_MAX_SEARCH_STOPS, _MAX_SEARCH_STOPS))
        distances = np.abs(table.as_array() - target_iso)
    index = _argmin_or_default(distances, table.default_index)
    logger.debug(f"ISO target {target_iso:.1f} -> index {index}")
    return index


def find_closest_aperture_index(stops: float) -> int:
    """
    f-number = 2^(stops / 2), matched on linear distance.
    """
    table = STOP_TABLES[ExposureType.APERTURE]
    with np.errstate(over="ignore", invalid="ignore"):
        target_aperture = np.exp2(np.clip(stops, -_MAX_SEARCH_STOPS, _MAX_SEARCH_STOPS) / 2.0)
        distances = np.abs(table.as_array() - target_aperture)
    index = _argmin_or_default(distances, table.default_index)
    logger.debug(f"Aperture target f/{target_aperture:.2f} -> index {index}")
    return index


def find_closest_shutter_index(stops: float) -> int:
    """
    seconds = 2^(-stops), matched on log2 distance, i.e. directly in stop space.

    Shutter speeds span several decades, so linear distance would always
    favour the long end of the table.
    """
    table = STOP_TABLES[ExposureType.SHUTTER_SPEED]
    with np.errstate(invalid="ignore"):
        target = np.clip(stops, -_MAX_SEARCH_STOPS, _MAX_SEARCH_STOPS)
        distances = np.abs(-np.log2(table.as_array()) - target)
    index = _argmin_or_default(distances, table.default_index)
    logger.debug(f"Shutter target {stops:.2f} stops -> index {index}")
    return index


# --- Balancing ---


def _solve_shutter(settings: ExposureSettings, target_ev: float) -> ExposureSettings:
    required = (
        aperture_stops(settings.aperture.value)
        - iso_stops(settings.iso.value)
        - (target_ev - EV_BASE_OFFSET)
    )
    index = find_closest_shutter_index(required)
    return settings.update_value(
        ExposureType.SHUTTER_SPEED, ExposureValue.shutter_speed(index)
    )


def _solve_aperture(settings: ExposureSettings, target_ev: float) -> ExposureSettings:
    required = (
        (target_ev - EV_BASE_OFFSET)
        + iso_stops(settings.iso.value)
        + shutter_stops(settings.shutter_speed.value)
    )
    index = find_closest_aperture_index(required)
    return settings.update_value(ExposureType.APERTURE, ExposureValue.aperture(index))


def _solve_iso(settings: ExposureSettings, target_ev: float) -> ExposureSettings:
    required = (
        (target_ev - EV_BASE_OFFSET)
        - aperture_stops(settings.aperture.value)
        + shutter_stops(settings.shutter_speed.value)
    )
    index = find_closest_iso_index(required)
    return settings.update_value(ExposureType.ISO, ExposureValue.iso(index))


def calculate_optimal_exposure(
    settings: ExposureSettings, measured_ev: float
) -> ExposureSettings:
    """
    Derives the unlocked parameters so the triple matches `measured_ev`.

    Locked parameters keep their exact stop. Shutter speed absorbs the
    difference whenever it is free; aperture only when shutter is locked;
    ISO only when it is the sole unlocked parameter.
    """
    result = settings.with_measured_ev(measured_ev)
    lock_state = LockState.from_settings(settings)

    if lock_state is LockState.ALL:
        pass
    elif lock_state is LockState.ISO:
        # Aperture stays where it is even though it is free
        result = _solve_shutter(result, measured_ev)
    elif lock_state is LockState.APERTURE:
        result = _solve_shutter(result, measured_ev)
    elif lock_state is LockState.SHUTTER:
        result = _solve_aperture(result, measured_ev)
    elif lock_state is LockState.ISO_APERTURE:
        result = _solve_shutter(result, measured_ev)
    elif lock_state is LockState.ISO_SHUTTER:
        result = _solve_aperture(result, measured_ev)
    elif lock_state is LockState.APERTURE_SHUTTER:
        result = _solve_iso(result, measured_ev)
    else:
        result = _solve_shutter(result, measured_ev)

    compensation = calculate_exposure_compensation(result, measured_ev)
    logger.debug(
        f"Balanced EV {measured_ev:.2f} ({lock_state.value} locked): "
        f"ISO {result.iso.display_value}, {result.aperture.display_value}, "
        f"{result.shutter_speed.display_value}, comp {compensation:+.2f}"
    )
    return result.with_exposure_compensation(compensation)


def calculate_exposure_compensation(
    settings: ExposureSettings, measured_ev: float
) -> float:
    """
    Stops between the exposure given by `settings` and `measured_ev`.
    Positive means overexposed, negative underexposed.
    """
    return settings_ev(settings) - measured_ev


def get_next_stop_value(current: ExposureValue, direction: int) -> Optional[ExposureValue]:
    """
    One stop up (+1) or down (-1) from `current`, keeping its lock flag.
    Returns None once the end of the table is reached.
    """
    new_index = current.stop_index + direction
    if not STOP_TABLES[current.type].contains(new_index):
        return None
    return ExposureValue.for_type(current.type, new_index, current.is_locked)
