"""MQTT configuration and payload helpers."""

import json
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class MQTTConfig:
    """MQTT broker configuration."""
    broker: str = "localhost"
    port: int = 1883
    client_id: str = "linesense-monitor"
    keepalive: int = 60
    qos: int = 1

    @classmethod
    def from_dict(cls, data: dict) -> "MQTTConfig":
        """Create config from dictionary."""
        return cls(
            broker=data.get("broker", "localhost"),
            port=int(data.get("port", 1883)),
            client_id=data.get("client_id", "linesense-monitor"),
            keepalive=int(data.get("keepalive", 60)),
            qos=int(data.get("qos", 1)),
        )


def create_payload(
    body: Dict[str, Any],
    source: str,
    timestamp: Optional[float] = None,
) -> str:
    """Wrap a message body in the standard envelope.

    Args:
        body: JSON-serialisable message content.
        source: Identifier of the publishing service.
        timestamp: Unix timestamp (defaults to current time).

    Returns:
        JSON string payload.
    """
    return json.dumps({
        "data": body,
        "ts": timestamp or time.time(),
        "source": source,
    })
