"""Recent-events feed for HTTP polling.

Board changes (including those applied from peers), spreadsheet sync results
and peer send failures are flattened into small dicts and kept in a capped
in-memory buffer. /api/events serves them; a client passes the last id it saw
as `since` and may narrow the feed to one board.

Ids are per-process cursors, not persisted.
"""
from __future__ import annotations
from typing import List, Dict, Any, Optional
from threading import Lock
from datetime import datetime, timezone

from .Event_Bus import (
    EventBus, GLOBAL_EVENT_BUS, BOARD_CHANGED, SYNC_COMPLETED, SYNC_FAILED, PEER_FAILED
)

MAX_EVENTS = 300
FEED_EVENTS = (BOARD_CHANGED, SYNC_COMPLETED, SYNC_FAILED, PEER_FAILED)
_COPIED_FIELDS = ('board_id', 'operation', 'card_id', 'created', 'updated', 'deleted', 'peer_id')

_lock = Lock()
_feed: List[Dict[str, Any]] = []
_cursor = 0
_buses: List[EventBus] = []


def _summarize(event_name: str, payload: Any) -> Dict[str, Any]:
    summary: Dict[str, Any] = {'type': event_name}
    if not isinstance(payload, dict):
        return summary
    if event_name == BOARD_CHANGED:
        after = payload.get('after')
        summary['board_id'] = payload.get('board_id')
        summary['deleted'] = after is None
        if after is not None:
            summary['name'] = after.name
            summary['cards'] = len(after.cards)
            summary['checked'] = sum(1 for c in after.cards if c.checked)
        return summary
    summary.update({k: payload[k] for k in _COPIED_FIELDS if k in payload})
    return summary


def _record(event_name: str, payload: Any):  # EventBus subscriber
    global _cursor
    entry = _summarize(event_name, payload)
    entry['ts'] = datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')
    with _lock:
        _cursor += 1
        entry['id'] = _cursor
        _feed.append(entry)
        overflow = len(_feed) - MAX_EVENTS
        if overflow > 0:
            del _feed[:overflow]


def start(bus: Optional[EventBus] = None):
    """Subscribe the recorder to `bus` (default: the global one). Safe to call twice."""
    bus = bus if bus is not None else GLOBAL_EVENT_BUS
    with _lock:
        if any(b is bus for b in _buses):
            return
        _buses.append(bus)
    for name in FEED_EVENTS:
        bus.subscribe(name, _record)


def get_events(since: Optional[int] = None, board_id: Optional[str] = None) -> Dict[str, Any]:
    """Events newer than `since` (all buffered ones when None), optionally for one board.

    `next_cursor` is the newest id in the buffer whether or not the board filter
    kept it, so polling with it never replays filtered-out events.
    """
    with _lock:
        data = [e for e in _feed if since is None or e['id'] > since]
        next_cursor = _feed[-1]['id'] if _feed else (since or 0)
    if board_id is not None:
        data = [e for e in data if e.get('board_id') == board_id]
    return {'events': data, 'next_cursor': next_cursor}


__all__ = ['start', 'get_events', 'MAX_EVENTS', 'FEED_EVENTS']
