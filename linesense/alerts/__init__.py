"""Alert history."""

from .alert_log import DEFAULT_CAPACITY, DEFAULT_RULES, AlertLog, AlertRule

__all__ = ["DEFAULT_CAPACITY", "DEFAULT_RULES", "AlertLog", "AlertRule"]
