"""Technical risk level derived from finding severity and damage potential."""

from __future__ import annotations

from survey_tracker.domain.enums import RiskLevel, enum_value

# Critical inputs are not part of the 3x3 matrix and score as medium.
_SCALE = {RiskLevel.LOW.value: 1, RiskLevel.MEDIUM.value: 2, RiskLevel.HIGH.value: 3}

_MATRIX: dict[tuple[int, int], RiskLevel] = {
    (3, 3): RiskLevel.CRITICAL,
    (3, 2): RiskLevel.HIGH,
    (3, 1): RiskLevel.MEDIUM,
    (2, 3): RiskLevel.HIGH,
    (2, 2): RiskLevel.MEDIUM,
    (2, 1): RiskLevel.LOW,
    (1, 3): RiskLevel.MEDIUM,
    (1, 2): RiskLevel.LOW,
    (1, 1): RiskLevel.LOW,
}


def tech_risk_level(severity: object, damage_potential: object) -> RiskLevel:
    severity_level = _SCALE.get(enum_value(severity), 2)
    damage_level = _SCALE.get(enum_value(damage_potential), 2)
    return _MATRIX[(severity_level, damage_level)]
