import pytest

from lightmeter.features.exposure.logic import calculate_optimal_exposure
from lightmeter.features.exposure.models import ExposureSettings, ExposureValue
from lightmeter.features.exposure.override import (
    apply_manual_step,
    apply_manual_value,
    recalculate_with_override,
)
from lightmeter.features.exposure.types import ExposureType


@pytest.fixture
def metered():
    # Nothing locked, balanced for EV 13: ISO 100, f/5.6, 1/30
    return calculate_optimal_exposure(ExposureSettings.default(), 13.0)


def test_fixture_baseline(metered):
    assert metered.shutter_speed.display_value == "1/30"
    assert metered.measured_ev == 13.0


def test_aperture_step_rebalances_shutter(metered):
    result = apply_manual_step(metered, ExposureType.APERTURE, 1)

    assert result.aperture.display_value == "f/8"
    assert not result.aperture.is_locked
    assert result.shutter_speed.display_value == "1/60"
    assert result.iso == metered.iso
    assert result.measured_ev == 13.0


def test_iso_step_rebalances_shutter(metered):
    result = apply_manual_step(metered, ExposureType.ISO, 1)

    assert result.iso.value == 200
    assert not result.iso.is_locked
    assert result.aperture == metered.aperture
    assert result.shutter_speed.display_value == "1/15"


def test_shutter_step_rebalances_aperture(metered):
    result = apply_manual_step(metered, ExposureType.SHUTTER_SPEED, -1)

    assert result.shutter_speed.display_value == "1/60"
    assert not result.shutter_speed.is_locked
    assert result.aperture.display_value == "f/8"
    assert result.iso == metered.iso


def test_locked_parameter_stays_locked(metered):
    settings = metered.toggle_lock(ExposureType.ISO)
    result = apply_manual_step(settings, ExposureType.ISO, 1)

    assert result.iso.value == 200
    assert result.iso.is_locked


def test_other_locks_are_honoured(metered):
    settings = metered.toggle_lock(ExposureType.ISO).toggle_lock(ExposureType.APERTURE)
    result = apply_manual_step(settings, ExposureType.SHUTTER_SPEED, 1)

    # Everything is pinned for the recompute, so only the stepped value moves
    assert result.iso == settings.iso
    assert result.aperture == settings.aperture
    assert result.shutter_speed.stop_index == settings.shutter_speed.stop_index + 1
    assert not result.shutter_speed.is_locked


def test_compensation_reflects_manual_choice(metered):
    settings = metered.toggle_lock(ExposureType.ISO).toggle_lock(ExposureType.APERTURE)
    result = apply_manual_step(settings, ExposureType.SHUTTER_SPEED, 1)

    # One stop longer than the balanced 1/30 reads as one stop over
    assert result.exposure_compensation == pytest.approx(
        metered.exposure_compensation + 1.0, abs=0.01
    )


def test_boundary_step_returns_settings_unchanged(metered):
    settings = metered.update_value(ExposureType.ISO, ExposureValue.iso(7))
    assert apply_manual_step(settings, ExposureType.ISO, 1) is settings

    settings = metered.update_value(ExposureType.APERTURE, ExposureValue.aperture(0))
    assert apply_manual_step(settings, ExposureType.APERTURE, -1) is settings


def test_manual_value_is_clamped(metered):
    result = apply_manual_value(metered, ExposureType.SHUTTER_SPEED, 99)

    assert result.shutter_speed.stop_index == 15
    assert not result.shutter_speed.is_locked


def test_override_uses_new_value_lock_flag(metered):
    result = recalculate_with_override(
        metered, ExposureType.APERTURE, ExposureValue.aperture(6, is_locked=True)
    )
    assert result.aperture.is_locked
    assert result.aperture.display_value == "f/8"
