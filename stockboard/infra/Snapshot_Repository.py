"""Local persisted state: versioned JSON snapshot of the board store.

File layout:
    {"version": 2, "state": {"boards": [...], "currentBoardId": ..., "viewMode": ..., ...}}

Version history:
  1  the first layout; the active board was stored as a full copy under
     "currentBoard"
  2  the active board is stored as "currentBoardId"

Older snapshots are migrated step by step on load. A snapshot from a newer
version than this code knows is not touched; load() returns an empty state.
"""
import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Callable, Dict, Optional

from stockboard.infra.paths import SNAPSHOT_FILE
from stockboard.logic.store.state import StoreState
from stockboard.utilities.constants import SNAPSHOT_VERSION

logger = logging.getLogger(__name__)


def _migrate_v1_to_v2(state: dict) -> dict:
    migrated = {k: v for k, v in state.items() if k != "currentBoard"}
    current = state.get("currentBoard")
    migrated["currentBoardId"] = current.get("id") if isinstance(current, dict) else None
    return migrated


# from_version -> step producing from_version + 1
MIGRATIONS: Dict[int, Callable[[dict], dict]] = {
    1: _migrate_v1_to_v2,
}


def migrate(state: dict, version: int) -> Optional[dict]:
    """Bring a raw state dict from `version` up to SNAPSHOT_VERSION (None if impossible)."""
    if version > SNAPSHOT_VERSION:
        return None
    while version < SNAPSHOT_VERSION:
        step = MIGRATIONS.get(version)
        if step is None:
            return None
        state = step(state)
        version += 1
    return state


class SnapshotRepository:
    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else SNAPSHOT_FILE

    def load(self) -> StoreState:
        """Read the snapshot; missing or unreadable files give an empty state."""
        if not self.path.exists():
            return StoreState()
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                envelope = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to read snapshot %s: %s", self.path, e)
            return StoreState()
        if not isinstance(envelope, dict) or not isinstance(envelope.get("state"), dict):
            logger.warning("Snapshot %s has no state; starting empty", self.path)
            return StoreState()
        try:
            version = int(envelope.get("version", 1))
        except (TypeError, ValueError):
            version = 1
        state = migrate(envelope["state"], version)
        if state is None:
            logger.warning("Snapshot %s has unsupported version %s; starting empty", self.path, version)
            return StoreState()
        if version != SNAPSHOT_VERSION:
            logger.info("Migrated snapshot %s from version %s to %s", self.path, version, SNAPSHOT_VERSION)
        return StoreState.from_dict(state)

    def save(self, state: StoreState) -> bool:
        """Write the snapshot atomically. Returns False (and logs) on failure."""
        envelope = {"version": SNAPSHOT_VERSION, "state": state.to_dict()}
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix=".snapshot_", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(envelope, tmp, indent=2, ensure_ascii=False)
            shutil.move(tmp_path, str(self.path))
            return True
        except OSError as e:
            logger.error("Failed to save snapshot %s: %s", self.path, e)
            return False
        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)

    def handle_event(self, event_name: str, payload) -> None:
        """EventBus subscriber: persist the state carried by the event."""
        state = payload.get("state") if isinstance(payload, dict) else None
        if isinstance(state, StoreState):
            self.save(state)
