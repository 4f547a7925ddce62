from __future__ import annotations

from dataclasses import dataclass

import pytest

from survey_tracker.core.exceptions import NotFoundError
from survey_tracker.domain.enums import RiskLevel
from survey_tracker.domain.ordering import next_order_index, reorder
from survey_tracker.domain.risk import tech_risk_level


@dataclass
class _Item:
    id: int
    order_index: int


def test_reorder_assigns_contiguous_indices_and_reports_changes():
    items = [_Item(10, 0), _Item(11, 1), _Item(12, 2), _Item(13, 3)]
    result = reorder(items, moved_id=13, target_index=1)
    assert result.ordered_ids == [10, 13, 11, 12]
    assert result.changed == {13: 1, 11: 2, 12: 3}


def test_reorder_repairs_gaps_and_clamps_target():
    items = [_Item(1, 0), _Item(2, 5), _Item(3, 9)]
    result = reorder(items, moved_id=1, target_index=99)
    assert result.ordered_ids == [2, 3, 1]
    assert result.changed == {2: 0, 3: 1, 1: 2}


def test_reorder_unknown_id_is_not_found():
    with pytest.raises(NotFoundError):
        reorder([_Item(1, 0)], moved_id=2, target_index=0)


def test_next_order_index():
    assert next_order_index([]) == 0
    assert next_order_index([_Item(1, 0), _Item(2, 4)]) == 5


@pytest.mark.parametrize(
    "severity,damage,expected",
    [
        ("high", "high", RiskLevel.CRITICAL),
        ("high", "medium", RiskLevel.HIGH),
        ("high", "low", RiskLevel.MEDIUM),
        ("medium", "high", RiskLevel.HIGH),
        ("medium", "medium", RiskLevel.MEDIUM),
        ("medium", "low", RiskLevel.LOW),
        ("low", "high", RiskLevel.MEDIUM),
        ("low", "medium", RiskLevel.LOW),
        ("low", "low", RiskLevel.LOW),
    ],
)
def test_risk_matrix(severity, damage, expected):
    assert tech_risk_level(severity, damage) is expected


def test_unmapped_risk_inputs_count_as_medium():
    assert tech_risk_level("critical", "high") is RiskLevel.HIGH
    assert tech_risk_level("bogus", "low") is RiskLevel.LOW
    assert tech_risk_level(RiskLevel.HIGH, RiskLevel.HIGH) is RiskLevel.CRITICAL
