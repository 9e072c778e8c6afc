"""
tests/test_alert_log.py
───────────────────────
Tests for the bounded alert history and its crossing rules.
"""
import threading

import pytest

from linesense.alerts.alert_log import DEFAULT_CAPACITY, AlertLog, AlertRule
from linesense.shared.exceptions import ConfigurationError
from linesense.shared.models import Severity


class TestRules:
    def test_healthy_reading_raises_nothing(self, normal_reading):
        assert AlertLog().evaluate(normal_reading) == []

    def test_line_break_above_16a(self, line_break_reading):
        alerts = AlertLog().evaluate(line_break_reading)
        assert len(alerts) == 1
        alert = alerts[0]
        assert alert.title == "Line Break Fault"
        assert alert.severity == Severity.CRITICAL
        assert alert.location == "Pole 3 - Kozhikode"
        assert alert.message == "Current reading: 17.0A exceeds maximum safe level - Line break detected"
        assert alert.id.startswith("C")

    def test_any_current_above_16a_is_a_line_break(self, rng, make_reading):
        log = AlertLog()
        for _ in range(100):
            reading = make_reading(
                voltage=rng.uniform(180.0, 280.0),
                current=rng.uniform(16.01, 40.0),
                vibration=rng.uniform(0.0, 2.0),
            )
            titles = {(a.title, a.severity) for a in log.ingest(reading)}
            assert ("Line Break Fault", Severity.CRITICAL) in titles

    def test_current_between_12_and_16_is_a_warning(self, make_reading):
        alerts = AlertLog().evaluate(make_reading(current=15.5))
        assert [a.title for a in alerts] == ["High Current Warning"]
        assert alerts[0].severity == Severity.WARNING
        assert alerts[0].location == "Pole 2 - Thiruvananthapuram"
        assert alerts[0].message == "Current reading: 15.5A is elevated"

    def test_critical_voltage_suppresses_voltage_warning(self, make_reading):
        alerts = AlertLog().evaluate(make_reading(voltage=250.0))
        assert [a.title for a in alerts] == ["Critical Voltage Fault"]
        assert alerts[0].message == "Voltage reading: 250.0V is outside safe range (210-245V)"
        assert alerts[0].location == "Pole 1 - Kochi"

    def test_voltage_warning(self, make_reading):
        alerts = AlertLog().evaluate(make_reading(voltage=215.0))
        assert [a.title for a in alerts] == ["Voltage Warning"]
        assert alerts[0].message == "Voltage reading: 215.0V approaching limits"

    def test_structural_fault(self, make_reading):
        alerts = AlertLog().evaluate(make_reading(vibration=0.95))
        assert [a.title for a in alerts] == ["Structural Fault Alert"]
        assert alerts[0].message == "High vibration detected: 0.95g - Check for structural issues"
        assert alerts[0].id.startswith("VIB")

    def test_every_group_fires_in_rule_order(self, make_reading):
        alerts = AlertLog().evaluate(make_reading(voltage=200.0, current=20.0, vibration=1.0))
        assert [a.title for a in alerts] == [
            "Critical Voltage Fault",
            "Line Break Fault",
            "Structural Fault Alert",
        ]

    def test_alert_timestamp_is_reading_timestamp(self, line_break_reading, now):
        assert AlertLog().evaluate(line_break_reading)[0].timestamp == now

    def test_boundaries_do_not_fire(self, make_reading):
        reading = make_reading(voltage=240.0, current=12.0, vibration=0.8)
        assert AlertLog().evaluate(reading) == []


class TestIds:
    def test_ids_are_unique_across_ticks(self, make_reading):
        log = AlertLog(capacity=100)
        for _ in range(20):
            log.ingest(make_reading(voltage=200.0, current=20.0, vibration=1.0))
        ids = [a.id for a in log.snapshot()]
        assert len(ids) == 60
        assert len(set(ids)) == 60

    def test_prefix_and_sequence(self, make_reading):
        log = AlertLog()
        first = log.ingest(make_reading(voltage=200.0, current=20.0))
        assert [a.id for a in first] == ["V1", "C2"]


class TestCapacity:
    def test_default_capacity(self):
        assert AlertLog().capacity == DEFAULT_CAPACITY == 8

    def test_newest_first_and_bounded(self, make_reading):
        log = AlertLog()
        for _ in range(12):
            log.ingest(make_reading(current=17.0))
        snapshot = log.snapshot()
        assert len(snapshot) == 8
        assert len(log) == 8
        assert [a.id for a in snapshot] == [f"C{n}" for n in range(12, 4, -1)]

    def test_oldest_evicted_when_batch_overflows(self, make_reading):
        log = AlertLog(capacity=2)
        log.ingest(make_reading(current=17.0))
        new = log.ingest(make_reading(voltage=200.0, current=20.0, vibration=1.0))
        assert len(new) == 3
        assert log.snapshot() == new[:2]

    def test_capacity_must_be_positive(self):
        with pytest.raises(ConfigurationError):
            AlertLog(capacity=0)

    def test_snapshot_is_not_affected_by_later_ingest(self, line_break_reading):
        log = AlertLog()
        log.ingest(line_break_reading)
        before = log.snapshot()
        log.ingest(line_break_reading)
        assert len(before) == 1
        assert len(log.snapshot()) == 2

    def test_clear(self, line_break_reading):
        log = AlertLog()
        log.ingest(line_break_reading)
        log.clear()
        assert log.snapshot() == ()

    def test_concurrent_ingest_keeps_ids_unique(self, line_break_reading):
        log = AlertLog(capacity=1000)

        def worker():
            for _ in range(50):
                log.ingest(line_break_reading)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        ids = [a.id for a in log.snapshot()]
        assert len(ids) == 200
        assert len(set(ids)) == 200


class TestCustomRules:
    def test_custom_rule_table(self, make_reading):
        rule = AlertRule(
            prefix="X",
            title="Any Current",
            severity=Severity.WARNING,
            location="Pole 9",
            condition=lambda r: r.current > 0,
            message=lambda r: f"{r.current:.0f}A",
        )
        log = AlertLog(rules=[[rule]])
        assert [a.id for a in log.ingest(make_reading())] == ["X1"]
