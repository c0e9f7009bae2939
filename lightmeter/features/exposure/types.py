from enum import StrEnum


class ExposureType(StrEnum):
    ISO = "ISO"
    APERTURE = "APERTURE"
    SHUTTER_SPEED = "SHUTTER_SPEED"
