"""JSON formatting utilities for client status."""

from typing import Any

from ntrip.client import NtripClient

__all__ = ["format_status"]


def format_status(client: NtripClient) -> dict[str, Any]:
    """Summarise the NTRIP connection for the status endpoint."""
    config = client.config
    return {
        "host": config.host,
        "port": config.port,
        "mountpoint": config.mountpoint,
        "state": client.state.value,
        "ready": client.is_ready,
        "position": list(client.position),
    }
