from dataclasses import dataclass, field, replace
from typing import Any, FrozenSet

from lightmeter.features.exposure.constants import STOP_TABLES
from lightmeter.features.exposure.types import ExposureType
from lightmeter.kernel.system.logging import get_logger
from lightmeter.kernel.validation import clamp_index, validate_int

logger = get_logger("exposure.models")


@dataclass(frozen=True)
class ExposureValue:
    """
    A single exposure parameter pinned to a full-stop table entry.

    value, display_value and stop_index are always derived from the table
    for `type`; build instances through the factories below.
    """

    type: ExposureType
    value: float
    display_value: str
    stop_index: int
    is_locked: bool = False

    @classmethod
    def for_type(cls, exposure_type: ExposureType, index: Any, is_locked: bool = False) -> "ExposureValue":
        """
        Builds the value at `index` of the table for `exposure_type`.
        Out-of-range indices are clamped, unusable ones fall back to the default stop.
        """
        table = STOP_TABLES[exposure_type]
        requested = validate_int(index, table.default_index)
        safe_index = clamp_index(requested, len(table.values))
        if safe_index != requested:
            logger.debug(f"{exposure_type} index {requested} clamped to {safe_index}")
        return cls(
            type=exposure_type,
            value=table.values[safe_index],
            display_value=table.display[safe_index],
            stop_index=safe_index,
            is_locked=bool(is_locked),
        )

    @classmethod
    def iso(cls, index: Any, is_locked: bool = False) -> "ExposureValue":
        return cls.for_type(ExposureType.ISO, index, is_locked)

    @classmethod
    def aperture(cls, index: Any, is_locked: bool = False) -> "ExposureValue":
        return cls.for_type(ExposureType.APERTURE, index, is_locked)

    @classmethod
    def shutter_speed(cls, index: Any, is_locked: bool = False) -> "ExposureValue":
        return cls.for_type(ExposureType.SHUTTER_SPEED, index, is_locked)

    @classmethod
    def default_for(cls, exposure_type: ExposureType) -> "ExposureValue":
        return cls.for_type(exposure_type, STOP_TABLES[exposure_type].default_index)

    @classmethod
    def default_iso(cls) -> "ExposureValue":
        """ISO 100"""
        return cls.default_for(ExposureType.ISO)

    @classmethod
    def default_aperture(cls) -> "ExposureValue":
        """f/5.6"""
        return cls.default_for(ExposureType.APERTURE)

    @classmethod
    def default_shutter_speed(cls) -> "ExposureValue":
        """1/125"""
        return cls.default_for(ExposureType.SHUTTER_SPEED)

    def toggle_lock(self) -> "ExposureValue":
        return replace(self, is_locked=not self.is_locked)

    def with_lock(self, is_locked: bool) -> "ExposureValue":
        return replace(self, is_locked=bool(is_locked))

    def with_index(self, new_index: int) -> "ExposureValue":
        """
        Moves to another stop. A value the user picked is pinned, so the result is locked.
        """
        return ExposureValue.for_type(self.type, new_index, is_locked=True)

    def max_index(self) -> int:
        return STOP_TABLES[self.type].last_index


_SLOTS = {
    ExposureType.ISO: "iso",
    ExposureType.APERTURE: "aperture",
    ExposureType.SHUTTER_SPEED: "shutter_speed",
}


@dataclass(frozen=True)
class ExposureSettings:
    """
    Point-in-time snapshot of the metered exposure triple.
    """

    iso: ExposureValue = field(default_factory=ExposureValue.default_iso)
    aperture: ExposureValue = field(default_factory=ExposureValue.default_aperture)
    shutter_speed: ExposureValue = field(default_factory=ExposureValue.default_shutter_speed)
    measured_ev: float = 0.0
    # Stops between the EV implied by the triple and measured_ev (+ over, - under)
    exposure_compensation: float = 0.0

    def __post_init__(self) -> None:
        for exposure_type, slot in _SLOTS.items():
            held = getattr(self, slot)
            if held.type != exposure_type:
                raise ValueError(f"Slot '{slot}' expects {exposure_type}, got {held.type}")

    @classmethod
    def default(cls) -> "ExposureSettings":
        """All parameters unlocked at their default stops."""
        return cls()

    @property
    def all_locked(self) -> bool:
        return self.iso.is_locked and self.aperture.is_locked and self.shutter_speed.is_locked

    @property
    def locked_count(self) -> int:
        return sum(1 for v in (self.iso, self.aperture, self.shutter_speed) if v.is_locked)

    @property
    def locked_types(self) -> FrozenSet[ExposureType]:
        return frozenset(t for t in ExposureType if self.get_value(t).is_locked)

    def get_value(self, exposure_type: ExposureType) -> ExposureValue:
        return getattr(self, _SLOTS[exposure_type])

    def update_value(self, exposure_type: ExposureType, value: ExposureValue) -> "ExposureSettings":
        return replace(self, **{_SLOTS[exposure_type]: value})

    def toggle_lock(self, exposure_type: ExposureType) -> "ExposureSettings":
        return self.update_value(exposure_type, self.get_value(exposure_type).toggle_lock())

    def with_measured_ev(self, ev: float) -> "ExposureSettings":
        return replace(self, measured_ev=float(ev))

    def with_exposure_compensation(self, compensation: float) -> "ExposureSettings":
        return replace(self, exposure_compensation=float(compensation))
