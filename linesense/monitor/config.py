"""Configuration for the grid monitor service."""

import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

from linesense.alerts.alert_log import DEFAULT_CAPACITY
from linesense.collector.readers.feed import DEFAULT_TIMEOUT
from linesense.shared.config import get_log_level, load_yaml_config, resolve_config_path
from linesense.shared.exceptions import ConfigurationError
from linesense.shared.mqtt import MQTTConfig
from linesense.topology.policy import (
    DEFAULT_FAULT_NODE_IDS,
    DEFAULT_WARNING_NODE_IDS,
    LocalityPolicy,
)

# The dashboard refreshed every 30 seconds; one period serves every consumer
DEFAULT_POLL_INTERVAL = 30.0


@dataclass
class FeedConfig:
    """Remote reading feed. No URL means synthetic readings only."""
    url: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_dict(cls, data: dict) -> "FeedConfig":
        return cls(
            url=data.get("url") or None,
            timeout=float(data.get("timeout", DEFAULT_TIMEOUT)),
        )


@dataclass
class MonitorConfig:
    """Configuration for the polling pipeline."""

    poll_interval: float = DEFAULT_POLL_INTERVAL  # seconds
    alert_capacity: int = DEFAULT_CAPACITY

    # Locality policy
    fault_node_ids: List[int] = field(default_factory=lambda: sorted(DEFAULT_FAULT_NODE_IDS))
    warning_node_ids: List[int] = field(default_factory=lambda: sorted(DEFAULT_WARNING_NODE_IDS))
    topology_path: Optional[str] = None  # None = bundled Kerala network

    # Reading sources
    feed: FeedConfig = field(default_factory=FeedConfig)
    random_seed: Optional[int] = None

    # MQTT publication of each tick
    mqtt_enabled: bool = False
    mqtt: MQTTConfig = field(default_factory=MQTTConfig)
    mqtt_topic: str = "grid/linesense"

    # Logging
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict) -> "MonitorConfig":
        """Create config from dictionary."""
        seed = data.get("random_seed")
        try:
            return cls(
                poll_interval=float(data.get("poll_interval", DEFAULT_POLL_INTERVAL)),
                alert_capacity=int(data.get("alert_capacity", DEFAULT_CAPACITY)),
                fault_node_ids=[int(i) for i in data.get("fault_node_ids", sorted(DEFAULT_FAULT_NODE_IDS))],
                warning_node_ids=[int(i) for i in data.get("warning_node_ids", sorted(DEFAULT_WARNING_NODE_IDS))],
                topology_path=data.get("topology_path"),
                feed=FeedConfig.from_dict(data.get("feed") or {}),
                random_seed=int(seed) if seed is not None else None,
                mqtt_enabled=bool(data.get("mqtt_enabled", False)),
                mqtt=MQTTConfig.from_dict(data.get("mqtt") or {}),
                mqtt_topic=data.get("mqtt_topic", "grid/linesense"),
                log_level=get_log_level(data),
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid monitor configuration: {e}") from e

    def apply_env(self) -> "MonitorConfig":
        """Apply environment variable overrides in place."""
        try:
            if feed_url := os.environ.get("LINESENSE_FEED_URL"):
                self.feed.url = feed_url
            if interval := os.environ.get("LINESENSE_POLL_INTERVAL"):
                self.poll_interval = float(interval)
            if seed := os.environ.get("LINESENSE_SEED"):
                self.random_seed = int(seed)
            if capacity := os.environ.get("LINESENSE_ALERT_CAPACITY"):
                self.alert_capacity = int(capacity)
        except ValueError as e:
            raise ConfigurationError(f"Invalid environment override: {e}") from e
        if mqtt_broker := os.environ.get("MQTT_BROKER"):
            self.mqtt.broker = mqtt_broker
            self.mqtt_enabled = True
        if log_level := os.environ.get("LOG_LEVEL"):
            self.log_level = log_level.upper()
        return self

    def validate(self) -> "MonitorConfig":
        """Raise ConfigurationError for settings the service cannot run with."""
        if self.poll_interval <= 0:
            raise ConfigurationError(f"poll_interval must be positive, got {self.poll_interval}")
        if self.alert_capacity < 1:
            raise ConfigurationError(f"alert_capacity must be at least 1, got {self.alert_capacity}")
        if self.feed.timeout <= 0:
            raise ConfigurationError(f"feed timeout must be positive, got {self.feed.timeout}")
        return self

    def locality_policy(self) -> LocalityPolicy:
        return LocalityPolicy.from_ids(self.fault_node_ids, self.warning_node_ids)


def load_config(config_path: Optional[str] = None) -> MonitorConfig:
    """Load configuration from YAML file and environment.

    Args:
        config_path: Path to YAML config file. If not provided,
                    looks for LINESENSE_CONFIG env var, then the repo's
                    config/linesense.yaml, then falls back to defaults.

    Returns:
        Validated MonitorConfig instance.

    Raises:
        ConfigurationError: If a setting is invalid.
    """
    load_dotenv()

    path = resolve_config_path(config_path)
    if path.exists():
        config = MonitorConfig.from_dict(load_yaml_config(path, load_env=False))
    else:
        config = MonitorConfig()

    return config.apply_env().validate()
