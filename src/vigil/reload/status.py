"""Data collection for the status endpoints."""

from __future__ import annotations

import html
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from vigil.reload.runtime import VigilRuntime


def get_status_data(runtime: VigilRuntime) -> dict[str, Any]:
    """Collect the runtime state shown on the status page."""
    config = runtime.config
    last_event = runtime.last_event

    return {
        "active": True,
        "environment": config.environment,
        "hot_reload": config.template_hot_reload,
        "refresh_interval": config.refresh_interval,
        "cooldown_period": config.cooldown_period,
        "last_check": runtime.watermark.load(),
        "last_change": last_event.to_dict() if last_event else None,
        "connections": runtime.connections.get_connection_count(),
        "watch_roots": [str(root.path) for root in runtime.detector.roots],
    }


def render_status_page(data: dict[str, Any]) -> str:
    """Render status data as a small HTML page."""
    last_change = data["last_change"]
    change_line = (
        f"{html.escape(last_change['category'])}: {html.escape(last_change['path'])}"
        if last_change
        else "none yet"
    )
    roots = "".join(f"<li>{html.escape(root)}</li>" for root in data["watch_roots"])

    return f"""<!DOCTYPE html>
<html>
<head>
    <title>Vigil Status</title>
</head>
<body>
    <h1>Vigil Development Tools</h1>
    <p>Status: {"Active" if data["active"] else "Inactive"}</p>
    <p>Environment: {html.escape(data["environment"])}</p>
    <p>Hot Reload: {"Enabled" if data["hot_reload"] else "Disabled"}</p>
    <p>Last check: {data["last_check"]}</p>
    <p>Last change: {change_line}</p>
    <p>Open connections: {data["connections"]}</p>
    <p>Watching:</p>
    <ul>{roots}</ul>
</body>
</html>
"""
