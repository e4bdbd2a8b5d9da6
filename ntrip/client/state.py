"""Connection lifecycle states and the transitions allowed between them.

    IDLE ──run()──> CONNECTING ──"ICY 200 OK"──> READY
                        ^  │                       │
           reconnect    │  └────── fault ──┐       │ fault
                        │                  v       v
                        └─────────────── ERRORING <┘

    close() moves any state to CLOSED, which is terminal.
"""

from enum import Enum

from ntrip.errors import InvalidStateTransitionError


class ConnectionState(Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    READY = "ready"
    ERRORING = "erroring"
    CLOSED = "closed"


_ALLOWED_TRANSITIONS: dict[ConnectionState, frozenset[ConnectionState]] = {
    ConnectionState.IDLE: frozenset(
        {ConnectionState.CONNECTING, ConnectionState.ERRORING, ConnectionState.CLOSED}
    ),
    ConnectionState.CONNECTING: frozenset(
        {ConnectionState.READY, ConnectionState.ERRORING, ConnectionState.CLOSED}
    ),
    ConnectionState.READY: frozenset(
        {ConnectionState.ERRORING, ConnectionState.CLOSED}
    ),
    ConnectionState.ERRORING: frozenset(
        {ConnectionState.CONNECTING, ConnectionState.CLOSED}
    ),
    ConnectionState.CLOSED: frozenset(),
}


def transition(current: ConnectionState, target: ConnectionState) -> ConnectionState:
    """Return ``target`` if the lifecycle allows moving there from ``current``.

    Raises:
        InvalidStateTransitionError: For any other move, including every
            move out of ``CLOSED``.
    """
    if target not in _ALLOWED_TRANSITIONS[current]:
        raise InvalidStateTransitionError(
            f"Cannot move from {current.name} to {target.name}"
        )
    return target
