import time
from dataclasses import dataclass, field

from lightmeter.features.exposure.constants import MAX_EV, MIN_EV


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class MeteringResult:
    """
    One scene reading handed to the balancer.
    """

    average_luminance: float  # Y plane mean, 0-255
    calculated_ev: float
    timestamp: int = field(default_factory=_now_ms)  # milliseconds

    @property
    def in_range(self) -> bool:
        return MIN_EV <= self.calculated_ev <= MAX_EV
