import threading
import unittest
from stockboard.domain.Board import Board
from stockboard.domain.Card import Card
from stockboard.events.Event_Bus import EventBus, BOARD_CHANGED, PEER_FAILED
from stockboard.infra.peer_share import PeerShare
from stockboard.logic.store.board_store import BoardStore
from stockboard.logic.store.state import StoreState


class FakeConnection:
    def __init__(self, peer, broken=False):
        self.peer = peer
        self.broken = broken
        self.sent = []
        self.closed = False

    def send(self, message):
        if self.broken:
            raise ConnectionError("channel closed")
        self.sent.append(message)

    def close(self):
        self.closed = True


class TestPeerShare(unittest.TestCase):

    def setUp(self):
        self.board = Board("b1", "Groceries", [Card("c1", "Milk", "dairy", "Lidl", order=1)])
        self.bus = EventBus()
        self.store = BoardStore(StoreState([self.board], current_board_id="b1"), bus=self.bus)
        self.peers = PeerShare(self.store, "me")

    def test_connect_requests_board(self):
        conn = FakeConnection("p1")
        self.assertTrue(self.peers.connect(conn))
        self.assertEqual(conn.sent, [{"type": "REQUEST_BOARD"}])

    def test_request_answered_with_active_board(self):
        conn = FakeConnection("p1")
        self.peers.connect(conn)
        handled = self.peers.handle_message("p1", {"type": "REQUEST_BOARD"})
        self.assertEqual(handled, "REQUEST_BOARD")
        reply = conn.sent[-1]
        self.assertEqual(reply["type"], "BOARD_UPDATE")
        self.assertEqual(reply["payload"]["id"], "b1")
        self.assertEqual(reply["payload"]["cards"][0]["name"], "Milk")

    def test_board_update_replaces_whole_board(self):
        payload = {"id": "b1", "name": "Shared", "cards": [
            {"id": "c9", "name": "Tea", "category": "drinks", "store": "Aldi", "checked": True, "order": 3}
        ], "sharedWith": ["me"], "createdBy": "p1"}
        handled = self.peers.handle_message("p1", {"type": "BOARD_UPDATE", "payload": payload})
        self.assertEqual(handled, "BOARD_UPDATE")
        board = self.store.current_board
        self.assertEqual(board.name, "Shared")
        self.assertEqual(board.card_ids(), {"c9"})
        self.assertEqual(board.created_by, "p1")

    def test_malformed_messages_dropped(self):
        before = self.store.state
        for bad in ({"type": "HELLO"}, {"type": "BOARD_UPDATE"}, "junk",
                    {"type": "BOARD_UPDATE", "payload": {"id": "b1", "cards": [{"id": "x"}, {"id": "x"}]}}):
            self.assertIsNone(self.peers.handle_message("p1", bad))
        self.assertIs(self.store.state, before)

    def test_broadcast_reports_per_peer(self):
        failures = []
        self.bus.subscribe(PEER_FAILED, lambda n, p: failures.append(p))
        good, bad = FakeConnection("p1"), FakeConnection("p2", broken=True)
        self.peers.connections = {"p1": good, "p2": bad}
        result = self.peers.broadcast_board_update()
        self.assertEqual(result, {"p1": True, "p2": False})
        self.assertEqual(good.sent[-1]["payload"]["id"], "b1")
        self.assertEqual(failures, [{"peer_id": "p2", "type": "BOARD_UPDATE"}])

    def test_send_to_unknown_peer(self):
        self.assertFalse(self.peers.send("nobody", {"type": "REQUEST_BOARD"}))

    def test_close_all(self):
        conn = FakeConnection("p1")
        self.peers.connect(conn)
        self.peers.close_all()
        self.assertTrue(conn.closed)
        self.assertEqual(self.peers.connections, {})


class TestPeerBroadcast(unittest.TestCase):

    def setUp(self):
        board = Board("b1", "Groceries", [Card("c1", "Milk", "dairy", "Lidl", order=1)])
        self.store = BoardStore(StoreState([board, Board("b2", "Hardware")], current_board_id="b1"), bus=EventBus())
        self.peers = PeerShare(self.store, "me").start()
        self.conn = FakeConnection("p1")
        self.peers.connections["p1"] = self.conn

    def test_local_change_to_active_board_is_pushed(self):
        self.store.toggle_card("b1", "c1")
        message = self.conn.sent[-1]
        self.assertEqual(message["type"], "BOARD_UPDATE")
        self.assertTrue(message["payload"]["cards"][0]["checked"])

    def test_other_board_changes_stay_local(self):
        self.store.add_card("b2", "Nails", "tools", "DIY")
        self.assertEqual(self.conn.sent, [])

    def test_inbound_update_is_not_echoed(self):
        payload = {"id": "b1", "name": "Remote", "cards": []}
        self.peers.handle_message("p1", {"type": "BOARD_UPDATE", "payload": payload})
        self.assertEqual(self.store.current_board.name, "Remote")
        self.assertEqual(self.conn.sent, [])

    def test_stop(self):
        self.peers.stop()
        self.store.toggle_card("b1", "c1")
        self.assertEqual(self.conn.sent, [])

    def test_overlapping_inbound_updates_are_not_echoed(self):
        bus = EventBus()
        store = BoardStore(StoreState([Board("b1", "Groceries")], current_board_id="b1"), bus=bus)
        second = threading.Thread(target=lambda: peers.handle_message(
            "p2", {"type": "BOARD_UPDATE", "payload": {"id": "b1", "name": "From p2"}}))

        def start_second_update(event_name, payload):
            if second.ident is None:
                second.start()
                second.join(timeout=0.2)

        bus.subscribe(BOARD_CHANGED, start_second_update)
        peers = PeerShare(store, "me").start()
        conn = FakeConnection("p1")
        peers.connections["p1"] = conn
        peers.handle_message("p1", {"type": "BOARD_UPDATE", "payload": {"id": "b1", "name": "From p1"}})
        second.join(timeout=2)
        self.assertFalse(second.is_alive())
        self.assertEqual(store.current_board.name, "From p2")
        self.assertEqual(conn.sent, [])
