"""Push active-board card changes to the spreadsheet.

Subscribes to board.changed, diffs the card lists before and after the
mutation and issues create/update/delete calls. The in-memory store stays
the source of truth: failed calls are logged and published as sync.failed,
nothing is rolled back.
"""
from __future__ import annotations
import logging
from concurrent.futures import Executor
from typing import Dict, Iterable, List, Optional, Tuple

from stockboard.domain.Card import Card
from stockboard.events.Event_Bus import EventBus, GLOBAL_EVENT_BUS, BOARD_CHANGED
from stockboard.events.event_helpers import publish_sync_completed, publish_sync_failed
from stockboard.infra.Sheets_Repository import SheetsRepository

logger = logging.getLogger(__name__)

__all__ = ["SheetsSync", "diff_cards"]


def diff_cards(before: Iterable[Card], after: Iterable[Card]) -> Tuple[List[Card], List[Card], List[str]]:
    """(created, updated, deleted_ids) between two card collections."""
    old: Dict[str, Card] = {c.id: c for c in before}
    new: Dict[str, Card] = {c.id: c for c in after}
    created = [c for cid, c in new.items() if cid not in old]
    updated = [c for cid, c in new.items() if cid in old and old[cid] != c]
    deleted = [cid for cid in old if cid not in new]
    return created, updated, deleted


class SheetsSync:
    def __init__(self, repository: SheetsRepository, bus: Optional[EventBus] = None,
                 executor: Optional[Executor] = None):
        self.repository = repository
        self.bus = bus if bus is not None else GLOBAL_EVENT_BUS
        self.executor = executor

    def start(self):
        self.bus.subscribe(BOARD_CHANGED, self.handle_event)
        return self

    def stop(self):
        self.bus.unsubscribe(BOARD_CHANGED, self.handle_event)

    def handle_event(self, event_name: str, payload) -> None:
        if not isinstance(payload, dict):
            return
        state = payload.get("state")
        board_id = payload.get("board_id")
        after = payload.get("after")
        if after is None or state is None or state.current_board_id != board_id:
            return
        before = payload.get("before")
        before_cards = before.cards if before is not None else ()
        if self.executor is not None:
            self.executor.submit(self.sync, board_id, before_cards, after.cards)
        else:
            self.sync(board_id, before_cards, after.cards)

    def sync(self, board_id: str, before: Iterable[Card], after: Iterable[Card]) -> bool:
        """Apply the diff; True when every call succeeded."""
        created, updated, deleted = diff_cards(before, after)
        ok = True
        for card in created:
            if not self.repository.create(card):
                ok = False
                publish_sync_failed(board_id, "create", card.id, bus=self.bus)
        for card in updated:
            if not self.repository.update(card):
                ok = False
                publish_sync_failed(board_id, "update", card.id, bus=self.bus)
        for card_id in deleted:
            if not self.repository.delete(card_id):
                ok = False
                publish_sync_failed(board_id, "delete", card_id, bus=self.bus)
        if ok:
            publish_sync_completed(board_id, len(created), len(updated), len(deleted), bus=self.bus)
        else:
            logger.warning("Spreadsheet sync for board %s finished with failures", board_id)
        return ok
