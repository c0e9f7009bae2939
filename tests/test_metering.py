import math

import pytest

from lightmeter.features.exposure.constants import EV_BASE_OFFSET, MAX_EV, MIN_EV, REFERENCE_GRAY
from lightmeter.features.metering.logic import (
    calculate_ev,
    clamp_ev,
    create_metering_result,
    is_analysis_due,
    is_ev_in_range,
)
from lightmeter.features.metering.models import MeteringResult


def test_reference_gray_at_iso_100():
    assert calculate_ev(REFERENCE_GRAY, 100) == pytest.approx(EV_BASE_OFFSET, abs=0.01)


@pytest.mark.parametrize("luminance", [1.0, 37.5, 118.0, 200.0, 255.0])
@pytest.mark.parametrize("iso", [50, 100, 400, 3200])
def test_doubling_iso_adds_one_ev(luminance, iso):
    delta = calculate_ev(luminance, iso * 2) - calculate_ev(luminance, iso)
    assert delta == pytest.approx(1.0, abs=0.01)


def test_brighter_scene_raises_ev():
    ev1 = calculate_ev(50.0, 100)
    ev2 = calculate_ev(100.0, 100)
    ev3 = calculate_ev(200.0, 100)
    assert ev1 < ev2 < ev3


def test_formula():
    expected = math.log2(59.0 / 118.0) + 13.0 + math.log2(400 / 100)
    assert calculate_ev(59.0, 400) == pytest.approx(expected)


@pytest.mark.parametrize("luminance", [0.0, -1.0, -255.0, None, float("nan")])
def test_dark_sample_reports_zero(luminance):
    assert calculate_ev(luminance, 100) == 0.0


def test_unusable_iso_meters_at_iso_100():
    assert calculate_ev(118.0, 0) == pytest.approx(calculate_ev(118.0, 100))
    assert calculate_ev(118.0, -200) == pytest.approx(calculate_ev(118.0, 100))


def test_ev_range_helpers():
    assert is_ev_in_range(0.0)
    assert is_ev_in_range(MIN_EV) and is_ev_in_range(MAX_EV)
    assert not is_ev_in_range(MAX_EV + 0.1)
    assert clamp_ev(25.0) == MAX_EV
    assert clamp_ev(-10.0) == MIN_EV
    assert clamp_ev(4.2) == 4.2


class TestMeteringResult:
    def test_create_from_sample(self):
        result = create_metering_result(118.0, 100, timestamp=1234)
        assert result.average_luminance == 118.0
        assert result.calculated_ev == pytest.approx(13.0)
        assert result.timestamp == 1234
        assert result.in_range

    def test_timestamp_defaults_to_now(self):
        result = create_metering_result(60.0, 200)
        assert result.timestamp > 0

    def test_out_of_range(self):
        assert not MeteringResult(average_luminance=255.0, calculated_ev=18.5, timestamp=0).in_range


def test_is_analysis_due():
    assert not is_analysis_due(1000, 1050, interval_ms=100)
    assert is_analysis_due(1000, 1100, interval_ms=100)
    # Falls back to the configured interval (100 ms by default)
    assert is_analysis_due(0, 10_000)
