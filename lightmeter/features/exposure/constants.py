from dataclasses import dataclass
from typing import Dict, Tuple

import numpy as np
import numpy.typing as npt

from lightmeter.features.exposure.types import ExposureType

# Full-stop ISO sensitivities
ISO_VALUES: Tuple[int, ...] = (50, 100, 200, 400, 800, 1600, 3200, 6400)
ISO_DISPLAY: Tuple[str, ...] = tuple(str(v) for v in ISO_VALUES)

# Full-stop f-numbers (sqrt(2) steps, marked values)
APERTURE_VALUES: Tuple[float, ...] = (
    1.0, 1.4, 2.0, 2.8, 4.0, 5.6, 8.0, 11.0, 16.0, 22.0, 32.0,
)
APERTURE_DISPLAY: Tuple[str, ...] = (
    "f/1", "f/1.4", "f/2", "f/2.8", "f/4", "f/5.6",
    "f/8", "f/11", "f/16", "f/22", "f/32",
)

# Full-stop shutter speeds in seconds
SHUTTER_SPEED_VALUES: Tuple[float, ...] = (
    1.0 / 8000, 1.0 / 4000, 1.0 / 2000, 1.0 / 1000,
    1.0 / 500, 1.0 / 250, 1.0 / 125, 1.0 / 60,
    1.0 / 30, 1.0 / 15, 1.0 / 8, 1.0 / 4,
    1.0 / 2, 1.0, 2.0, 4.0,
)
SHUTTER_SPEED_DISPLAY: Tuple[str, ...] = (
    "1/8000", "1/4000", "1/2000", "1/1000",
    "1/500", "1/250", "1/125", "1/60",
    "1/30", "1/15", "1/8", "1/4",
    "1/2", '1"', '2"', '4"',
)

DEFAULT_ISO_INDEX = 1  # ISO 100
DEFAULT_APERTURE_INDEX = 5  # f/5.6
DEFAULT_SHUTTER_SPEED_INDEX = 6  # 1/125

# Y-plane value of an 18% gray card
REFERENCE_GRAY = 118.0
# Anchors the scale to standard daylight exposure
EV_BASE_OFFSET = 13.0
# Measurable EV range
MIN_EV = -6.0
MAX_EV = 17.0


@dataclass(frozen=True)
class StopTable:
    """
    One quantization table: numeric stops paired index-for-index with labels.
    """

    values: Tuple[float, ...]
    display: Tuple[str, ...]
    default_index: int

    @property
    def last_index(self) -> int:
        return len(self.values) - 1

    def as_array(self) -> npt.NDArray[np.float64]:
        return np.asarray(self.values, dtype=np.float64)

    def contains(self, index: int) -> bool:
        return 0 <= index <= self.last_index


STOP_TABLES: Dict[ExposureType, StopTable] = {
    ExposureType.ISO: StopTable(
        values=tuple(float(v) for v in ISO_VALUES),
        display=ISO_DISPLAY,
        default_index=DEFAULT_ISO_INDEX,
    ),
    ExposureType.APERTURE: StopTable(
        values=APERTURE_VALUES,
        display=APERTURE_DISPLAY,
        default_index=DEFAULT_APERTURE_INDEX,
    ),
    ExposureType.SHUTTER_SPEED: StopTable(
        values=SHUTTER_SPEED_VALUES,
        display=SHUTTER_SPEED_DISPLAY,
        default_index=DEFAULT_SHUTTER_SPEED_INDEX,
    ),
}
