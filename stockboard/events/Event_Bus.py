"""Simple Event Bus / Observer implementation for board changes.

Event names:
  board.changed  -> payload {"board_id": str, "before": Board|None, "after": Board|None, "state": StoreState}
  store.changed  -> payload {"state": StoreState}
  sync.completed -> payload {"board_id": str, "created": int, "updated": int, "deleted": int}
  sync.failed    -> payload {"board_id": str, "operation": str, "card_id": str}
  peer.failed    -> payload {"peer_id": str, "type": str}

Subscribers are callables taking (event_name, payload). They run on the
publishing thread, after the store has committed.
"""
from __future__ import annotations
import logging
from collections import defaultdict
from threading import Lock
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

Subscriber = Callable[[str, Any], None]

# --- Event name constants (used across modules) ---
BOARD_CHANGED = "board.changed"
STORE_CHANGED = "store.changed"
SYNC_COMPLETED = "sync.completed"
SYNC_FAILED = "sync.failed"
PEER_FAILED = "peer.failed"


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[Subscriber]] = defaultdict(list)
		self._lock = Lock()

	def subscribe(self, event_name: str, callback: Subscriber):
		with self._lock:
			if callback not in self._subscribers[event_name]:
				self._subscribers[event_name].append(callback)

	def unsubscribe(self, event_name: str, callback: Subscriber):
		with self._lock:
			if callback in self._subscribers.get(event_name, ()):
				self._subscribers[event_name].remove(callback)

	def subscribers(self, event_name: str) -> List[Subscriber]:
		with self._lock:
			return list(self._subscribers.get(event_name, ()))

	def publish(self, event_name: str, payload: Any):
		for cb in self.subscribers(event_name):
			try:
				cb(event_name, payload)
			except Exception:  # a failing observer must not undo a committed mutation
				logger.exception("[EventBus] Error delivering %s to %s", event_name, cb)


# Shared instance for the running app; tests build their own
GLOBAL_EVENT_BUS = EventBus()


__all__ = [
	'EventBus', 'GLOBAL_EVENT_BUS', 'Subscriber',
	'BOARD_CHANGED', 'STORE_CHANGED', 'SYNC_COMPLETED', 'SYNC_FAILED', 'PEER_FAILED'
]
