import unittest
from stockboard.domain.Board import Board
from stockboard.domain.Card import Card
from stockboard.domain.ViewMode import ViewMode


class TestCard(unittest.TestCase):

    def setUp(self):
        self.card = Card("c1", "Milk", "dairy", "Lidl", False, 3)

    def test_replace_returns_new_card(self):
        checked = self.card.replace(checked=True)
        self.assertTrue(checked.checked)
        self.assertFalse(self.card.checked)
        self.assertEqual(checked.id, "c1")

    def test_replace_ignores_id_and_unknown_keys(self):
        same = self.card.replace(id="other", colour="red")
        self.assertEqual(same, self.card)

    def test_dict_round_trip(self):
        self.assertEqual(Card.from_dict(self.card.to_dict()), self.card)

    def test_from_dict_defaults(self):
        card = Card.from_dict({"id": "x", "name": "Eggs"})
        self.assertEqual(card.category, "")
        self.assertEqual(card.order, 0)
        self.assertFalse(card.checked)

    def test_missing_id_gets_generated(self):
        self.assertTrue(Card(name="Bread").id)


class TestBoard(unittest.TestCase):

    def test_max_order_empty_board(self):
        self.assertEqual(Board(name="Home").max_order(), 0)

    def test_shared_with_has_no_duplicates(self):
        board = Board(name="Home", shared_with=["p1", "p2", "p1"])
        self.assertEqual(board.shared_with, ("p1", "p2"))

    def test_wire_format_uses_camel_case(self):
        board = Board("b1", "Home", [Card("c1", "Milk", "dairy", "Lidl")], ["p1"], "alice")
        data = board.to_dict()
        self.assertEqual(data["sharedWith"], ["p1"])
        self.assertEqual(data["createdBy"], "alice")
        self.assertEqual(Board.from_dict(data), board)


class TestViewMode(unittest.TestCase):

    def test_key_of(self):
        card = Card("c1", "Milk", "dairy", "Lidl")
        self.assertEqual(ViewMode.CATEGORY.key_of(card), "dairy")
        self.assertEqual(ViewMode.STORE.key_of(card), "Lidl")

    def test_assign_moves_only_the_mode_field(self):
        card = Card("c1", "Milk", "dairy", "Lidl")
        moved = ViewMode.STORE.assign(card, "Aldi")
        self.assertEqual(moved.store, "Aldi")
        self.assertEqual(moved.category, "dairy")

    def test_from_str(self):
        self.assertIs(ViewMode.from_str("store"), ViewMode.STORE)
        self.assertIs(ViewMode.from_str(" Category "), ViewMode.CATEGORY)
        self.assertIs(ViewMode.from_str("bogus"), ViewMode.CATEGORY)
