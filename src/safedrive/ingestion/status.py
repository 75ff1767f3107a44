"""Overall status evaluation."""

from __future__ import annotations

from safedrive._constants import CAR_STATIONARY, EYES_CLOSED, GRIP_LOOSE
from safedrive.ingestion.normalize import lower_or_empty
from safedrive.models.readings import OverallStatus


def evaluate_status(
    grip: str | None,
    eyes: str | None,
    bpm: float | None,
    spo2: float | None,
    car_status: str | None,
) -> OverallStatus:
    """Map the just-received readings to a coarse safety status.

    A stationary vehicle is always ``NORMAL``. Otherwise a loose grip or
    closed eyes yields ``ALERT``. Heart rate and SpO2 are accepted but do
    not count towards the status; they only raise notifications.
    """
    if lower_or_empty(car_status) == CAR_STATIONARY:
        return OverallStatus.NORMAL

    abnormal = 0
    if lower_or_empty(grip) == GRIP_LOOSE:
        abnormal += 1
    if lower_or_empty(eyes) == EYES_CLOSED:
        abnormal += 1

    if abnormal >= 1:
        return OverallStatus.ALERT
    return OverallStatus.NORMAL
