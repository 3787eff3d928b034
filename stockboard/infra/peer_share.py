"""Peer-to-peer board sharing over an external data channel.

The transport is not implemented here. A connection is any object with:
    peer             remote peer id
    send(message)    deliver a dict to the remote side
    close()          drop the channel

Wire messages:
    {"type": "REQUEST_BOARD"}
    {"type": "BOARD_UPDATE", "payload": <board dict>}

On connect we ask the remote side for its board. A REQUEST_BOARD is answered
with the active board; a BOARD_UPDATE replaces the board with the same id as
a whole (last writer wins). Once started, local changes to the active board
are pushed to every connected peer; boards that just arrived from a peer are
not echoed back.
"""
from __future__ import annotations
import logging
from threading import Lock
from typing import Any, Dict, Optional, Set

from pydantic import ValidationError

from stockboard.domain.Board import Board
from stockboard.events.Event_Bus import BOARD_CHANGED
from stockboard.events.event_helpers import publish_peer_failed
from stockboard.logic.store.board_store import BoardStore
from stockboard.utilities.constants import REQUEST_BOARD, BOARD_UPDATE
from stockboard.utilities.validators import PeerMessage

logger = logging.getLogger(__name__)

__all__ = ["PeerShare"]


class PeerShare:
    def __init__(self, store: BoardStore, local_peer_id: str):
        self.store = store
        self.local_peer_id = local_peer_id
        self.connections: Dict[str, Any] = {}
        # id() of boards being applied from a peer; their board.changed is not echoed
        self._inbound: Set[int] = set()
        self._lock = Lock()

    def _peers(self) -> Dict[str, Any]:
        with self._lock:
            return dict(self.connections)

    def _is_inbound(self, board: Board) -> bool:
        with self._lock:
            return id(board) in self._inbound

    def start(self):
        self.store.bus.subscribe(BOARD_CHANGED, self.handle_event)
        return self

    def stop(self):
        self.store.bus.unsubscribe(BOARD_CHANGED, self.handle_event)

    def handle_event(self, event_name: str, payload) -> None:
        """EventBus subscriber: broadcast local changes to the active board."""
        if not isinstance(payload, dict) or not self._peers():
            return
        after = payload.get("after")
        state = payload.get("state")
        if after is None or state is None or self._is_inbound(after):
            return
        if state.current_board_id != after.id:
            return
        self.broadcast_board_update(after)

    def connect(self, conn) -> bool:
        """Register a connection and ask the remote side for its board."""
        with self._lock:
            self.connections[conn.peer] = conn
        logger.info("Peer connected: %s", conn.peer)
        return self._send(conn, {"type": REQUEST_BOARD})

    def disconnect(self, peer_id: str) -> None:
        with self._lock:
            conn = self.connections.pop(peer_id, None)
        if conn is None:
            return
        try:
            conn.close()
        except Exception as e:
            logger.warning("Error closing connection to %s: %s", peer_id, e)
        logger.info("Peer disconnected: %s", peer_id)

    def close_all(self) -> None:
        for peer_id in self._peers():
            self.disconnect(peer_id)

    def send(self, peer_id: str, message: Dict[str, Any]) -> bool:
        conn = self._peers().get(peer_id)
        if conn is None:
            logger.warning("No connection to peer %s", peer_id)
            return False
        return self._send(conn, message)

    def _send(self, conn, message: Dict[str, Any]) -> bool:
        try:
            conn.send(message)
            return True
        except Exception as e:
            logger.error("Failed to send %s to %s: %s", message.get("type"), conn.peer, e)
            publish_peer_failed(conn.peer, message.get("type", ""), bus=self.store.bus)
            return False

    def handle_message(self, peer_id: str, data: Any) -> Optional[str]:
        """Process one inbound message. Returns the handled type, None if dropped."""
        try:
            message = PeerMessage.model_validate(data)
        except ValidationError as e:
            logger.warning("Dropping malformed message from %s: %s", peer_id, e.errors())
            return None

        if message.type == REQUEST_BOARD:
            board = self.store.current_board
            if board is not None:
                self.send(peer_id, {"type": BOARD_UPDATE, "payload": board.to_dict()})
            return REQUEST_BOARD

        board = Board.from_dict(message.payload.model_dump())
        with self._lock:
            self._inbound.add(id(board))
        try:
            self.store.replace_board(board)
        finally:
            with self._lock:
                self._inbound.discard(id(board))
        logger.info("Board %s replaced from peer %s", board.id, peer_id)
        return BOARD_UPDATE

    def broadcast_board_update(self, board: Optional[Board] = None) -> Dict[str, bool]:
        """Send the board (default: the active one) to every connected peer."""
        board = board if board is not None else self.store.current_board
        if board is None:
            return {}
        message = {"type": BOARD_UPDATE, "payload": board.to_dict()}
        return {peer_id: self._send(conn, message) for peer_id, conn in self._peers().items()}
