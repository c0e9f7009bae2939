"""
Recompute protocol for a parameter the user stepped by hand.

The touched parameter is treated as locked for exactly one balancing pass
against the last measured EV, then gets its real lock flag back. The two
other parameters keep whatever the balancer gave them.
"""

from typing import Any

from lightmeter.features.exposure.logic import (
    calculate_optimal_exposure,
    get_next_stop_value,
)
from lightmeter.features.exposure.models import ExposureSettings, ExposureValue
from lightmeter.features.exposure.types import ExposureType
from lightmeter.kernel.system.logging import get_logger

logger = get_logger("exposure.override")


def recalculate_with_override(
    settings: ExposureSettings, exposure_type: ExposureType, new_value: ExposureValue
) -> ExposureSettings:
    """
    Places `new_value` in its slot and rebalances around it using settings.measured_ev.
    The lock flag of `new_value` is what the slot carries afterwards.
    """
    updated = settings.update_value(exposure_type, new_value)
    pinned = updated.update_value(exposure_type, new_value.with_lock(True))

    recalculated = calculate_optimal_exposure(pinned, updated.measured_ev)

    restored = recalculated.get_value(exposure_type).with_lock(new_value.is_locked)
    return recalculated.update_value(exposure_type, restored)


def apply_manual_step(
    settings: ExposureSettings, exposure_type: ExposureType, direction: int
) -> ExposureSettings:
    """
    Steps one parameter by a full stop and rebalances the rest.
    At either end of the table the settings come back unchanged.
    """
    current = settings.get_value(exposure_type)
    new_value = get_next_stop_value(current, direction)
    if new_value is None:
        logger.debug(f"{exposure_type} already at the end of its table ({current.display_value})")
        return settings
    return recalculate_with_override(settings, exposure_type, new_value)


def apply_manual_value(
    settings: ExposureSettings, exposure_type: ExposureType, index: Any
) -> ExposureSettings:
    """
    Jumps one parameter straight to the stop at `index` (clamped) and rebalances the rest.
    """
    current = settings.get_value(exposure_type)
    new_value = ExposureValue.for_type(exposure_type, index, current.is_locked)
    return recalculate_with_override(settings, exposure_type, new_value)
