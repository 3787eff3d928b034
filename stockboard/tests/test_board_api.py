import unittest
from fastapi.testclient import TestClient

from stockboard.api.api_run import create_app
from stockboard.events.Event_Bus import EventBus
from stockboard.logic.store.board_store import BoardStore


class TestBoardApi(unittest.TestCase):

    def setUp(self):
        self.store = BoardStore(bus=EventBus())
        self.client = TestClient(create_app(store=self.store))
        resp = self.client.post("/api/boards", json={"name": "Groceries"})
        self.assertEqual(resp.status_code, 201)
        self.board_id = resp.json()["id"]
        self.client.post(f"/api/boards/{self.board_id}/select")

    def _add(self, name, category, store):
        resp = self.client.post(f"/api/boards/{self.board_id}/cards",
                                json={"name": name, "category": category, "store": store})
        self.assertEqual(resp.status_code, 201)
        return resp.json()

    def test_state_contains_current_board_and_groups(self):
        self._add("Milk", "dairy", "Lidl")
        data = self.client.get("/api/state").json()
        self.assertEqual(data["currentBoardId"], self.board_id)
        self.assertEqual(data["currentBoard"]["name"], "Groceries")
        self.assertEqual(data["groups"][0]["key"], "dairy")

    def test_add_card_validation(self):
        resp = self.client.post(f"/api/boards/{self.board_id}/cards",
                                json={"name": "  ", "category": "dairy", "store": "Lidl"})
        self.assertEqual(resp.status_code, 422)

    def test_unknown_board_is_404(self):
        self.assertEqual(self.client.get("/api/boards/missing").status_code, 404)
        resp = self.client.post("/api/boards/missing/cards",
                                json={"name": "Milk", "category": "dairy", "store": "Lidl"})
        self.assertEqual(resp.status_code, 404)

    def test_toggle_and_stale_card(self):
        card = self._add("Milk", "dairy", "Lidl")
        resp = self.client.post(f"/api/boards/{self.board_id}/cards/{card['id']}/toggle")
        self.assertTrue(resp.json()["cards"][0]["checked"])
        stale = self.client.post(f"/api/boards/{self.board_id}/cards/ghost/toggle")
        self.assertEqual(stale.status_code, 200)
        self.assertEqual(stale.json(), resp.json())

    def test_edit_card_partial(self):
        card = self._add("Milk", "dairy", "Lidl")
        resp = self.client.put(f"/api/boards/{self.board_id}/cards/{card['id']}", json={"store": "Aldi"})
        edited = resp.json()["cards"][0]
        self.assertEqual(edited["store"], "Aldi")
        self.assertEqual(edited["name"], "Milk")

    def test_view_mode_and_groups_endpoint(self):
        self._add("Milk", "dairy", "Lidl")
        self._add("Apple", "fruit", "Lidl")
        self.client.put("/api/view-mode", json={"mode": "store"})
        data = self.client.get(f"/api/boards/{self.board_id}/groups").json()
        self.assertEqual(data["viewMode"], "store")
        self.assertEqual([g["key"] for g in data["groups"]], ["Lidl"])
        self.assertEqual(data["groups"][0]["total"], 2)
        override = self.client.get(f"/api/boards/{self.board_id}/groups", params={"mode": "category"}).json()
        self.assertEqual(len(override["groups"]), 2)
        self.assertEqual(self.client.put("/api/view-mode", json={"mode": "aisle"}).status_code, 422)

    def test_groups_endpoint_rejects_unknown_mode(self):
        resp = self.client.get(f"/api/boards/{self.board_id}/groups", params={"mode": "aisle"})
        self.assertEqual(resp.status_code, 422)

    def test_reorder_cards_across_groups(self):
        milk = self._add("Milk", "dairy", "Lidl")
        apple = self._add("Apple", "fruit", "Aldi")
        resp = self.client.post(f"/api/boards/{self.board_id}/reorder/cards", json={
            "source_group": "dairy", "destination_group": "fruit", "card_ids": [milk["id"], apple["id"]],
        })
        cards = {c["id"]: c for c in resp.json()["cards"]}
        self.assertEqual(cards[milk["id"]]["category"], "fruit")
        self.assertEqual(cards[milk["id"]]["order"], 0)
        self.assertEqual(cards[apple["id"]]["order"], 10)

    def test_reorder_groups(self):
        self._add("Milk", "dairy", "Lidl")
        self._add("Apple", "fruit", "Aldi")
        self.client.post(f"/api/boards/{self.board_id}/reorder/groups", json={"groups": ["fruit", "dairy"]})
        groups = self.client.get("/api/state").json()["groups"]
        self.assertEqual([g["key"] for g in groups], ["fruit", "dairy"])

    def test_drag_flow(self):
        milk = self._add("Milk", "dairy", "Lidl")
        apple = self._add("Apple", "fruit", "Aldi")
        start = self.client.post("/api/drag/start", json={"active_id": milk["id"]}).json()
        self.assertEqual(start, {"accepted": True, "activeGroup": "dairy"})
        over = self.client.post("/api/drag/over", json={"active_id": milk["id"], "over_id": apple["id"]}).json()
        self.assertTrue(over["moved"])
        end = self.client.post("/api/drag/end", json={"active_id": milk["id"], "over_id": apple["id"]}).json()
        self.assertTrue(end["committed"])
        fruit = end["state"]["groups"][0]
        self.assertEqual([c["name"] for c in fruit["cards"]], ["Milk", "Apple"])

    def test_board_list_toggles(self):
        self.assertEqual(self.client.post("/api/board-list/toggle").json(), {"isBoardListVisible": True})
        self.assertEqual(self.client.post("/api/board-list/toggle-expanded").json(), {"isBoardListExpanded": False})

    def test_delete_board_clears_selection(self):
        resp = self.client.delete(f"/api/boards/{self.board_id}")
        self.assertIsNone(resp.json()["currentBoardId"])
        self.assertEqual(self.client.get("/api/boards").json()["boards"], [])

    def test_share_board(self):
        resp = self.client.post(f"/api/boards/{self.board_id}/share", json={"peer_id": "peer-1"})
        self.assertEqual(resp.json()["sharedWith"], ["peer-1"])

    def test_events_feed(self):
        self._add("Milk", "dairy", "Lidl")
        data = self.client.get("/api/events").json()
        self.assertTrue(any(e["type"] == "board.changed" and e.get("board_id") == self.board_id
                            for e in data["events"]))

    def test_events_feed_board_filter(self):
        other = self.client.post("/api/boards", json={"name": "Hardware"}).json()["id"]
        cursor = self.client.get("/api/events").json()["next_cursor"]
        self._add("Milk", "dairy", "Lidl")
        self.client.post(f"/api/boards/{other}/cards", json={"name": "Nails", "category": "tools", "store": "DIY"})
        data = self.client.get("/api/events", params={"since": cursor, "board_id": other}).json()
        self.assertEqual([e["board_id"] for e in data["events"]], [other])
        self.assertEqual(data["events"][0]["cards"], 1)

    def test_drop_on_stale_card_id_leaves_card_in_place(self):
        milk = self._add("Milk", "dairy", "Lidl")
        self.client.post("/api/drag/start", json={"active_id": milk["id"]})
        end = self.client.post("/api/drag/end", json={"active_id": milk["id"], "over_id": "deleted-card"}).json()
        self.assertFalse(end["committed"])
        self.assertEqual(end["state"]["currentBoard"]["cards"][0]["category"], "dairy")

    def test_drop_on_empty_group_key(self):
        milk = self._add("Milk", "dairy", "Lidl")
        self.client.post("/api/drag/start", json={"active_id": milk["id"]})
        end = self.client.post("/api/drag/end", json={
            "active_id": milk["id"], "over_id": "bakery", "over_kind": "group",
        }).json()
        self.assertTrue(end["committed"])
        self.assertEqual(end["state"]["currentBoard"]["cards"][0]["category"], "bakery")
