"""Publishes completed ticks to MQTT for dashboards."""

import logging
from typing import TYPE_CHECKING, List, Optional, Tuple

import paho.mqtt.client as mqtt
from paho.mqtt.enums import CallbackAPIVersion

from linesense.analysis.classifier import line_status, load_percentage
from linesense.shared.mqtt import MQTTConfig, create_payload

if TYPE_CHECKING:
    from .service import GridState

logger = logging.getLogger(__name__)

SOURCE_ID = "linesense-monitor"


def build_messages(state: "GridState", base_topic: str) -> List[Tuple[str, str]]:
    """Topic/payload pairs describing one completed tick.

    ``{base}/state`` carries the reading, classification and risk,
    ``{base}/alerts`` one message per alert raised this tick and
    ``{base}/topology`` the poles and wires that are not clear.
    """
    if state.reading is None:
        return []

    reading = state.reading
    messages = [(
        f"{base_topic}/state",
        create_payload({
            "tick": state.tick,
            "source": state.source,
            "reading": reading.to_dict(),
            "classification": state.classification.to_dict(),
            "line_status": line_status(reading).label,
            "load_pct": round(load_percentage(reading), 1),
            "risk": state.risk.to_dict(),
        }, SOURCE_ID),
    )]

    for alert in state.new_alerts:
        messages.append((f"{base_topic}/alerts", create_payload(alert.to_dict(), SOURCE_ID)))

    topology = state.topology
    messages.append((
        f"{base_topic}/topology",
        create_payload({
            "status": topology.worst().node_label,
            "nodes": [node.to_dict() for node in topology.affected_nodes()],
            "edges": [edge.to_dict() for edge in topology.affected_edges()],
        }, SOURCE_ID),
    ))
    return messages


class StatePublisher:
    """MQTT client that pushes each tick's state to the broker."""

    def __init__(self, config: MQTTConfig, base_topic: str):
        self.config = config
        self.base_topic = base_topic
        self.client: Optional[mqtt.Client] = None
        self._connected = False

    @property
    def is_connected(self) -> bool:
        return self._connected

    def connect(self) -> bool:
        """Connect to the broker and start the network loop."""
        try:
            self.client = mqtt.Client(
                callback_api_version=CallbackAPIVersion.VERSION2,
                client_id=self.config.client_id,
            )

            def on_connect(client, userdata, flags, reason_code, properties):
                if reason_code == 0:
                    logger.info(f"Connected to MQTT broker at {self.config.broker}:{self.config.port}")
                    self._connected = True
                else:
                    logger.error(f"Failed to connect to MQTT: {reason_code}")

            def on_disconnect(client, userdata, disconnect_flags, reason_code, properties):
                self._connected = False
                if reason_code != 0:
                    logger.warning(f"MQTT disconnected: {reason_code}")

            self.client.on_connect = on_connect
            self.client.on_disconnect = on_disconnect

            self.client.connect(self.config.broker, self.config.port, keepalive=self.config.keepalive)
            self.client.loop_start()
            return True
        except Exception as e:
            logger.error(f"Failed to initialize MQTT: {e}")
            self.client = None
            return False

    def publish(self, state: "GridState") -> None:
        if not self._connected or not self.client:
            logger.debug("MQTT not connected, skipping publish")
            return

        for topic, payload in build_messages(state, self.base_topic):
            result = self.client.publish(topic, payload, qos=self.config.qos)
            if result.rc == mqtt.MQTT_ERR_SUCCESS:
                logger.debug(f"Published to {topic}")
            else:
                logger.warning(f"Failed to publish to {topic}: rc={result.rc}")

    def disconnect(self) -> None:
        if self.client:
            self.client.loop_stop()
            self.client.disconnect()
            self.client = None
            self._connected = False
