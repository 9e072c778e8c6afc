"""
tests/test_risk.py
──────────────────
Tests for the weighted-sum line-break risk heuristic.
"""
import pytest

from linesense.analysis.risk import (
    MAINTENANCE_PLANS,
    MAX_PROBABILITY,
    assess_risk,
    line_break_probability,
    priority_for,
)
from linesense.shared.models import MaintenancePriority


class TestLineBreakProbability:
    def test_healthy_reading_scores_zero(self, normal_reading):
        assert line_break_probability(normal_reading) == 0.0

    def test_current_only(self, line_break_reading):
        assert line_break_probability(line_break_reading) == pytest.approx(0.4)

    def test_voltage_only(self, make_reading):
        assert line_break_probability(make_reading(voltage=241.0)) == pytest.approx(0.3)

    def test_voltage_and_vibration(self, make_reading):
        assert line_break_probability(make_reading(voltage=205.0, vibration=0.6)) == pytest.approx(0.6)

    def test_everything_out_of_band_is_capped(self, make_reading):
        p = line_break_probability(make_reading(voltage=250.0, current=20.0, vibration=1.0))
        assert p == MAX_PROBABILITY == 0.95

    def test_boundaries_are_exclusive(self, make_reading):
        assert line_break_probability(make_reading(voltage=220.0, current=12.0, vibration=0.5)) == 0.0

    def test_monotonic_in_each_metric(self, make_reading):
        currents = [10.0, 12.0, 12.5, 15.0, 18.0, 25.0]
        scores = [line_break_probability(make_reading(current=c, vibration=0.7)) for c in currents]
        assert scores == sorted(scores)

        vibrations = [0.1, 0.5, 0.51, 0.9, 2.0]
        scores = [line_break_probability(make_reading(vibration=v, current=13.0)) for v in vibrations]
        assert scores == sorted(scores)

        deviations = [0.0, 5.0, 10.0, 10.5, 30.0]
        scores = [line_break_probability(make_reading(voltage=230.0 + d)) for d in deviations]
        assert scores == sorted(scores)

    def test_never_exceeds_cap(self, rng, make_reading):
        for _ in range(200):
            reading = make_reading(
                voltage=rng.uniform(150.0, 300.0),
                current=rng.uniform(0.0, 40.0),
                vibration=rng.uniform(0.0, 3.0),
            )
            assert 0.0 <= line_break_probability(reading) <= 0.95


class TestPriority:
    def test_buckets(self):
        assert priority_for(0.0) == MaintenancePriority.LOW
        assert priority_for(0.4) == MaintenancePriority.LOW
        assert priority_for(0.6) == MaintenancePriority.MEDIUM
        assert priority_for(0.7) == MaintenancePriority.MEDIUM
        assert priority_for(0.71) == MaintenancePriority.HIGH
        assert priority_for(0.95) == MaintenancePriority.HIGH


class TestAssessRisk:
    def test_low_priority_plan(self, normal_reading):
        risk = assess_risk(normal_reading)
        assert risk.maintenance_priority == MaintenancePriority.LOW
        assert risk.priority_label == "Low Priority"
        assert risk.estimated_time_to_failure == "45+ days"
        assert risk.recommended_actions == (
            "Continue regular monitoring",
            "Schedule routine inspection next month",
        )

    def test_medium_priority_plan(self, make_reading):
        risk = assess_risk(make_reading(voltage=205.0, vibration=0.6))
        assert risk.maintenance_priority == MaintenancePriority.MEDIUM
        assert risk.estimated_time_to_failure == "14-30 days"
        assert risk.recommended_actions == (
            "Schedule inspection within 2 weeks",
            "Monitor closely",
            "Check connections",
        )

    def test_high_priority_plan(self, make_reading):
        risk = assess_risk(make_reading(voltage=250.0, current=20.0, vibration=1.0))
        assert risk.maintenance_priority == MaintenancePriority.HIGH
        assert risk.line_break_probability == 0.95
        assert risk.estimated_time_to_failure == "7-14 days"
        assert risk.recommended_actions == (
            "Immediate inspection required",
            "Prepare maintenance team",
            "Consider load reduction",
        )

    def test_line_break_scenario_is_low_priority(self, line_break_reading):
        risk = assess_risk(line_break_reading)
        assert risk.line_break_probability == pytest.approx(0.4)
        assert risk.maintenance_priority == MaintenancePriority.LOW

    def test_every_priority_has_a_plan(self):
        assert set(MAINTENANCE_PLANS) == set(MaintenancePriority)

    def test_to_dict(self, line_break_reading):
        data = assess_risk(line_break_reading).to_dict()
        assert data["maintenance_priority"] == "low"
        assert isinstance(data["recommended_actions"], list)
