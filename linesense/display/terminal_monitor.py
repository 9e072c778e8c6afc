"""
Terminal Monitor for the grid state.
Full-screen console view built with Rich, redrawn after every tick.
"""

import logging
from datetime import datetime
from typing import Optional, TextIO

from rich.align import Align
from rich.console import Console
from rich.layout import Layout
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from linesense.analysis.classifier import line_status, load_percentage
from linesense.monitor.service import GridState
from linesense.shared.models import Severity

logger = logging.getLogger(__name__)

SEVERITY_STYLES = {
    Severity.NORMAL: "green",
    Severity.WARNING: "yellow",
    Severity.CRITICAL: "bold red",
}


class TerminalMonitor:
    """Terminal-based display of the latest GridState using Rich"""

    def __init__(self, console: Optional[Console] = None, file: Optional[TextIO] = None):
        if console is None:
            console = Console(file=file, force_terminal=file is None)
        self.console = console

    def update_display(self, state: GridState) -> None:
        """Redraw the screen for a completed tick"""
        try:
            layout = self._create_layout(state)
            self.console.clear()
            self.console.print(layout)
        except Exception as e:
            logger.error(f"Display update failed: {e}")

    def _create_layout(self, state: GridState) -> Layout:
        layout = Layout()
        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
        )
        layout["body"].split_row(
            Layout(name="left"),
            Layout(name="right"),
        )
        layout["left"].split_column(
            Layout(name="readings", size=9),
            Layout(name="risk"),
        )
        layout["right"].split_column(
            Layout(name="alerts"),
            Layout(name="topology", size=10),
        )

        layout["header"].update(self._create_header(state))
        layout["readings"].update(self._create_readings_panel(state))
        layout["risk"].update(self._create_risk_panel(state))
        layout["alerts"].update(self._create_alerts_panel(state))
        layout["topology"].update(self._create_topology_panel(state))
        return layout

    def _create_header(self, state: GridState) -> Panel:
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        header_text = Text()
        header_text.append("POWER LINE MONITOR", style="bold cyan")
        header_text.append(f" - {timestamp} - tick {state.tick} ({state.source})", style="white")
        if state.classification is not None:
            combined = state.classification.combined
            header_text.append(f" - {combined.label.upper()}", style=SEVERITY_STYLES[combined])
        return Panel(Align.center(header_text), style="cyan")

    def _create_readings_panel(self, state: GridState) -> Panel:
        if state.reading is None:
            return Panel(Text("Waiting for first reading...", style="dim"), title="READINGS", style="cyan")

        reading = state.reading
        c = state.classification
        table = Table(show_header=True, header_style="bold cyan", box=None)
        table.add_column("Metric", style="white", width=10)
        table.add_column("Value", style="white", width=10)
        table.add_column("Status", width=10)

        for name, value, severity in (
            ("Voltage", f"{reading.voltage:.1f} V", c.voltage),
            ("Current", f"{reading.current:.1f} A", c.current),
            ("Vibration", f"{reading.vibration:.2f} g", c.vibration),
        ):
            table.add_row(name, value, Text(severity.label.upper(), style=SEVERITY_STYLES[severity]))

        line = line_status(reading)
        table.add_row("Line", f"{load_percentage(reading):.0f}% load", Text(line.label.upper(), style=SEVERITY_STYLES[line]))
        return Panel(table, title="READINGS", style="cyan")

    def _create_risk_panel(self, state: GridState) -> Panel:
        risk = state.risk
        if risk is None:
            return Panel(Text("-", style="dim"), title="PREDICTION", style="cyan")

        content = Text()
        content.append(f"Line break probability: {risk.line_break_probability * 100:.1f}%\n", style="bold white")
        content.append(f"Maintenance: {risk.priority_label}\n", style="white")
        content.append(f"Time to failure: {risk.estimated_time_to_failure}\n\n", style="white")
        for action in risk.recommended_actions:
            content.append(f"• {action}\n", style="green")
        return Panel(content, title="PREDICTION", style="cyan")

    def _create_alerts_panel(self, state: GridState) -> Panel:
        if not state.alerts:
            return Panel(Text("No alerts at this time", style="green"), title="ALERTS", style="cyan")

        content = Text()
        for alert in state.alerts:
            style = SEVERITY_STYLES[alert.severity]
            content.append(f"{alert.timestamp.strftime('%H:%M:%S')} ", style="dim")
            content.append(f"{alert.title}", style=style)
            content.append(f" [{alert.id}] {alert.location}\n", style="white")
        return Panel(content, title="ALERTS", style="cyan")

    def _create_topology_panel(self, state: GridState) -> Panel:
        topology = state.topology
        affected = topology.affected_nodes()
        content = Text()
        content.append(
            f"{len(topology.nodes)} poles, {len(topology.edges)} wires - ",
            style="white",
        )
        content.append(topology.worst().node_label.upper(), style=SEVERITY_STYLES[topology.worst()])
        content.append("\n")
        for node in affected:
            content.append(f"  #{node.id} {node.name}: {node.status.node_label}\n", style=SEVERITY_STYLES[node.status])
        affected_edges = topology.affected_edges()
        if affected_edges:
            content.append(f"  {len(affected_edges)} wire(s) affected\n", style="white")
        return Panel(content, title="TOPOLOGY", style="cyan")

    def cleanup(self) -> None:
        """Restore the terminal after the last redraw"""
        self.console.show_cursor(True)
