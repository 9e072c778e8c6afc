"""
Predictive line-break risk.

This is a fixed weighted-sum heuristic over threshold crossings, not a
trained or learned model:

    +0.3  voltage outside 220..240 V
    +0.4  current above 12 A
    +0.3  vibration above 0.5 g

capped at 0.95. The score is bucketed into a maintenance plan whose wording
lives in MAINTENANCE_PLANS so it can be replaced without touching the logic.
"""
from dataclasses import dataclass
from typing import Dict, Tuple

from linesense.shared.models import MaintenancePriority, Reading, RiskAssessment

MAX_PROBABILITY = 0.95

VOLTAGE_WEIGHT = 0.3
CURRENT_WEIGHT = 0.4
VIBRATION_WEIGHT = 0.3

HIGH_PRIORITY_ABOVE = 0.7
MEDIUM_PRIORITY_ABOVE = 0.4


@dataclass(frozen=True)
class MaintenancePlan:
    label: str
    time_to_failure: str
    actions: Tuple[str, ...]


MAINTENANCE_PLANS: Dict[MaintenancePriority, MaintenancePlan] = {
    MaintenancePriority.HIGH: MaintenancePlan(
        label="High Priority",
        time_to_failure="7-14 days",
        actions=(
            "Immediate inspection required",
            "Prepare maintenance team",
            "Consider load reduction",
        ),
    ),
    MaintenancePriority.MEDIUM: MaintenancePlan(
        label="Medium Priority",
        time_to_failure="14-30 days",
        actions=(
            "Schedule inspection within 2 weeks",
            "Monitor closely",
            "Check connections",
        ),
    ),
    MaintenancePriority.LOW: MaintenancePlan(
        label="Low Priority",
        time_to_failure="45+ days",
        actions=(
            "Continue regular monitoring",
            "Schedule routine inspection next month",
        ),
    ),
}


def line_break_probability(reading: Reading) -> float:
    probability = 0.0
    if reading.voltage < 220.0 or reading.voltage > 240.0:
        probability += VOLTAGE_WEIGHT
    if reading.current > 12.0:
        probability += CURRENT_WEIGHT
    if reading.vibration > 0.5:
        probability += VIBRATION_WEIGHT
    return min(probability, MAX_PROBABILITY)


def priority_for(probability: float) -> MaintenancePriority:
    if probability > HIGH_PRIORITY_ABOVE:
        return MaintenancePriority.HIGH
    if probability > MEDIUM_PRIORITY_ABOVE:
        return MaintenancePriority.MEDIUM
    return MaintenancePriority.LOW


def assess_risk(
    reading: Reading,
    plans: Dict[MaintenancePriority, MaintenancePlan] = MAINTENANCE_PLANS,
) -> RiskAssessment:
    """Score a reading and attach the matching maintenance plan."""
    probability = line_break_probability(reading)
    priority = priority_for(probability)
    plan = plans[priority]
    return RiskAssessment(
        line_break_probability=probability,
        maintenance_priority=priority,
        priority_label=plan.label,
        estimated_time_to_failure=plan.time_to_failure,
        recommended_actions=plan.actions,
    )
