from __future__ import annotations

import pytest

from safedrive.ingestion.status import evaluate_status
from safedrive.models.readings import OverallStatus


@pytest.mark.parametrize("car", ["stationary", "STATIONARY", "Stationary"])
def test_stationary_is_always_normal(car: str) -> None:
    assert evaluate_status("loose", "closed", 200, 70, car) == OverallStatus.NORMAL


def test_loose_grip_alone_alerts() -> None:
    assert evaluate_status("loose", "open", 70, 98, "moving") == OverallStatus.ALERT


def test_closed_eyes_alerts_case_insensitive() -> None:
    assert evaluate_status("tight", "CLOSED", 150, 85, "alert") == OverallStatus.ALERT


def test_heart_rate_and_oxygen_do_not_count() -> None:
    assert evaluate_status("tight", "open", 150, 80, "moving") == OverallStatus.NORMAL


def test_absent_inputs_are_normal() -> None:
    assert evaluate_status(None, None, None, None, None) == OverallStatus.NORMAL
