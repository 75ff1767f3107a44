"""Notification synthesis from a single reading update."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from safedrive._constants import (
    BPM_HIGH,
    BPM_LOW,
    CAR_ALERT,
    CAR_STATIONARY,
    EYES_CLOSED,
    GRIP_LOOSE,
    ISSUE_ABNORMAL_BPM,
    ISSUE_EYES_CLOSED,
    ISSUE_LOOSE_GRIP,
    ISSUE_LOW_SPO2,
    ISSUE_UNSAFE_DRIVING,
    SPO2_LOW,
    SYNTHESIS_STEP,
)
from safedrive.ingestion.normalize import format_number, lower_or_empty
from safedrive.models.notification import NotificationRecord
from safedrive.models.readings import ReadingUpdate

_logger = logging.getLogger(__name__)


def _loose_grip(update: ReadingUpdate, car: str) -> str | None:
    if lower_or_empty(update.grip_status) == GRIP_LOOSE:
        return ISSUE_LOOSE_GRIP
    return None


def _eyes_closed(update: ReadingUpdate, car: str) -> str | None:
    if lower_or_empty(update.eyes_status) == EYES_CLOSED:
        return ISSUE_EYES_CLOSED
    return None


def _abnormal_bpm(update: ReadingUpdate, car: str) -> str | None:
    # A zero reading means "no contact" and is never flagged.
    bpm = update.bpm
    if bpm and (bpm < BPM_LOW or bpm > BPM_HIGH):
        return ISSUE_ABNORMAL_BPM.format(value=format_number(bpm))
    return None


def _low_spo2(update: ReadingUpdate, car: str) -> str | None:
    spo2 = update.spo2
    if spo2 and spo2 < SPO2_LOW:
        return ISSUE_LOW_SPO2.format(value=format_number(spo2))
    return None


def _unsafe_driving(update: ReadingUpdate, car: str) -> str | None:
    if car == CAR_ALERT:
        return ISSUE_UNSAFE_DRIVING
    return None


# Order is significant: a rule's position is its timestamp offset.
_RULES: tuple[Callable[[ReadingUpdate, str], str | None], ...] = (
    _loose_grip,
    _eyes_closed,
    _abnormal_bpm,
    _low_spo2,
    _unsafe_driving,
)


def synthesize(
    update: ReadingUpdate,
    car_status: str | None,
    base_instant: datetime,
) -> list[NotificationRecord]:
    """Derive the notification records triggered by *update*.

    Nothing is produced while the vehicle is stationary. Otherwise each
    rule yields at most one single-issue record stamped
    ``base_instant + k`` milliseconds, ``k`` being the rule's position, so
    simultaneous issues keep a stable order once sorted by time.
    """
    car = lower_or_empty(car_status)
    if car == CAR_STATIONARY:
        _logger.debug("Vehicle stationary; notifications suppressed")
        return []

    records: list[NotificationRecord] = []
    for position, rule in enumerate(_RULES):
        issue = rule(update, car)
        if issue is None:
            continue
        _logger.debug("Synthesized notification: %s", issue)
        records.append(
            NotificationRecord(
                timestamp=base_instant + position * SYNTHESIS_STEP,
                issues=[issue],
            )
        )
    return records
