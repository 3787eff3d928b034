"""Event helper utilities.

Helpers for publishing board, sync and peer events. Each takes an optional
bus and falls back to the global one.

Quick import:
    from stockboard.events.event_helpers import (
        publish_board_changed, publish_store_changed,
        publish_sync_completed, publish_sync_failed, publish_peer_failed
    )
"""
from __future__ import annotations
from typing import Any, Optional
from .Event_Bus import (
    EventBus, GLOBAL_EVENT_BUS,
    BOARD_CHANGED, STORE_CHANGED, SYNC_COMPLETED, SYNC_FAILED, PEER_FAILED
)

__all__ = [
    'publish_board_changed', 'publish_store_changed',
    'publish_sync_completed', 'publish_sync_failed', 'publish_peer_failed',
    'BOARD_CHANGED', 'STORE_CHANGED', 'SYNC_COMPLETED', 'SYNC_FAILED', 'PEER_FAILED'
]


def _bus(bus: Optional[EventBus]) -> EventBus:
    return bus if bus is not None else GLOBAL_EVENT_BUS


def publish_board_changed(board_id: str, before: Any, after: Any, state: Any, bus: Optional[EventBus] = None):
    """Publish a board.changed event (after is None when the board was deleted)."""
    _bus(bus).publish(BOARD_CHANGED, {
        'board_id': board_id,
        'before': before,
        'after': after,
        'state': state
    })


def publish_store_changed(state: Any, bus: Optional[EventBus] = None):
    """Publish a store.changed event for selection/view-mode/UI flag changes."""
    _bus(bus).publish(STORE_CHANGED, {'state': state})


def publish_sync_completed(board_id: str, created: int, updated: int, deleted: int, bus: Optional[EventBus] = None):
    _bus(bus).publish(SYNC_COMPLETED, {
        'board_id': board_id,
        'created': created,
        'updated': updated,
        'deleted': deleted
    })


def publish_sync_failed(board_id: str, operation: str, card_id: str, bus: Optional[EventBus] = None):
    _bus(bus).publish(SYNC_FAILED, {
        'board_id': board_id,
        'operation': operation,
        'card_id': card_id
    })


def publish_peer_failed(peer_id: str, message_type: str, bus: Optional[EventBus] = None):
    _bus(bus).publish(PEER_FAILED, {'peer_id': peer_id, 'type': message_type})
