from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..errors import VaultError

log = logging.getLogger(__name__)

# Basic bounds (generous; the point is that we *validate*).
MAX_EVENT_NAME_BYTES = 64
MAX_TOPICS = 4
MAX_KEY_LEN = 64
MAX_BYTES_LEN = 4096
MAX_INT_BITS = 256

# Data keys must be identifier-like: letters/underscore, then letters/digits/underscore.
_KEY_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Topics published by the share token and the vault.
TOPIC_TRANSFER = b"transfer"
TOPIC_APPROVE = b"approve"
TOPIC_MINT = b"mint"
TOPIC_BURN = b"burn"
TOPIC_DEPOSIT = b"deposit"
TOPIC_WITHDRAW = b"withdraw"


@dataclass(frozen=True)
class Event:
    """
    A published event.

        contract: emitting contract address
        name:     topic symbol, e.g. b"deposit"
        topics:   indexed addresses, e.g. (caller, receiver)
        data:     payload, e.g. {"assets": 100, "shares": 100}
    """

    contract: bytes
    name: bytes
    topics: Tuple[bytes, ...] = ()
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly view: bytes become 0x-hex."""
        return {
            "contract": "0x" + self.contract.hex(),
            "name": self.name.decode("ascii", errors="replace"),
            "topics": ["0x" + t.hex() for t in self.topics],
            "data": {
                k: ("0x" + bytes(v).hex() if isinstance(v, (bytes, bytearray)) else v)
                for k, v in self.data.items()
            },
        }


class EventError(VaultError):
    def __init__(self, message: str, *, where: str, **extra: Any):
        data: Dict[str, Any] = {"where": where}
        data.update(extra)
        super().__init__(message=message, code="EVENT_INVALID", data=data)


def _check_name(name: Any) -> bytes:
    if not isinstance(name, (bytes, bytearray)):
        raise EventError("event name must be bytes", where="name_type")
    b = bytes(name)
    if len(b) == 0:
        raise EventError("event name must be non-empty", where="name_empty")
    if len(b) > MAX_EVENT_NAME_BYTES:
        raise EventError("event name too long", where="name_length", len=len(b))
    return b


def _check_topics(topics: Sequence[Any]) -> Tuple[bytes, ...]:
    if len(topics) > MAX_TOPICS:
        raise EventError("too many topics", where="topics_count", count=len(topics))
    out: List[bytes] = []
    for t in topics:
        if not isinstance(t, (bytes, bytearray)):
            raise EventError("event topic must be bytes", where="topic_type")
        out.append(bytes(t))
    return tuple(out)


def _check_value(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        b = bytes(value)
        if len(b) > MAX_BYTES_LEN:
            raise EventError("event bytes arg too long", where="value_bytes_length", len=len(b))
        return b
    if isinstance(value, bool):
        # bool is a subclass of int, so check it before int.
        return value
    if isinstance(value, int):
        if value.bit_length() > MAX_INT_BITS:
            raise EventError("event int arg out of range", where="value_int_bits")
        return int(value)
    raise EventError("unsupported event arg type", where="value_type", py_type=type(value).__name__)


def _check_data(data: Mapping[Any, Any]) -> Dict[str, Any]:
    if not isinstance(data, Mapping):
        raise EventError("event data must be a mapping", where="data_type")
    out: Dict[str, Any] = {}
    for k, v in data.items():
        if not isinstance(k, str) or not k or len(k) > MAX_KEY_LEN or not _KEY_RE.match(k):
            raise EventError("event data key is invalid", where="key_grammar", key=str(k))
        out[k] = _check_value(v)
    return out


class EventSink:
    """
    Append-only event log for one environment.

    `publish` is fire-and-forget: a malformed event, or one over the per-call
    cap, is logged at WARNING and dropped; the calling operation goes on.
    `mark()`/`rollback()` let the transaction scope discard events from a
    failed call.
    """

    def __init__(self, *, max_events_per_tx: int = 1024) -> None:
        self._events: List[Event] = []
        self._window_start = 0
        self.max_events_per_tx = max_events_per_tx

    # --- transaction support -------------------------------------------------

    def mark(self) -> int:
        return len(self._events)

    def rollback(self, mark: int) -> None:
        del self._events[mark:]

    def start_window(self) -> None:
        """Begin a new per-transaction counting window for the event cap."""
        self._window_start = len(self._events)

    # --- publish -------------------------------------------------------------

    def publish(
        self,
        contract: bytes,
        name: bytes,
        topics: Sequence[bytes] = (),
        data: Optional[Mapping[str, Any]] = None,
    ) -> None:
        try:
            ev = Event(
                contract=bytes(contract),
                name=_check_name(name),
                topics=_check_topics(topics),
                data=_check_data(data or {}),
            )
        except EventError as e:
            log.warning("dropping malformed event %r: %s", name, e)
            return
        if len(self._events) - self._window_start >= self.max_events_per_tx:
            log.warning("dropping event %r: per-transaction cap %d reached", name, self.max_events_per_tx)
            return
        self._events.append(ev)

    # --- views ---------------------------------------------------------------

    def events(
        self, *, contract: Optional[bytes] = None, name: Optional[bytes] = None
    ) -> List[Event]:
        """Snapshot of published events, optionally filtered."""
        return [
            e
            for e in self._events
            if (contract is None or e.contract == contract) and (name is None or e.name == name)
        ]

    def clear(self) -> None:
        self._events.clear()
        self._window_start = 0

    def __len__(self) -> int:
        return len(self._events)


__all__ = [
    "Event",
    "EventError",
    "EventSink",
    "TOPIC_TRANSFER",
    "TOPIC_APPROVE",
    "TOPIC_MINT",
    "TOPIC_BURN",
    "TOPIC_DEPOSIT",
    "TOPIC_WITHDRAW",
    "MAX_EVENT_NAME_BYTES",
    "MAX_TOPICS",
    "MAX_KEY_LEN",
    "MAX_BYTES_LEN",
    "MAX_INT_BITS",
]
