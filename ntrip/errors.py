"""Exception types raised or reported by the NTRIP client.

Transport and decoder faults are never raised out of event-loop callbacks;
they are delivered to ``ClientEvent.ERROR`` listeners as instances of these
classes (or the underlying ``OSError``).
"""


class NtripError(Exception):
    """Base class for all NTRIP client errors."""


class CasterTimeoutError(NtripError):
    """No data arrived from the caster within the socket timeout."""


class CasterDisconnectedError(NtripError):
    """The caster ended or closed the connection."""


class StreamDecodeError(NtripError):
    """The stream decoder rejected the inbound correction data."""


class InvalidStateTransitionError(NtripError):
    """A connection state change that the lifecycle does not allow."""


class SourceTableError(NtripError):
    """The caster did not answer a source-table request with a table."""
