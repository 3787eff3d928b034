"""Ordering engine: pure functions that group cards and compute new order values.

Nothing here mutates its inputs; every function returns fresh Card values.

Order values are sparse ranks:
  - a card moved by drag and drop lands on a multiple of ORDER_SPACING
  - a group reordered as a block lands on a band of GROUP_BAND, keeping
    `order % GROUP_BAND` so cards keep their place inside the group
"""
from __future__ import annotations
from typing import Dict, Iterable, List, Optional, Sequence

from stockboard.domain.Card import Card
from stockboard.domain.ViewMode import ViewMode
from stockboard.utilities.constants import ORDER_SPACING, GROUP_BAND

__all__ = ["sort_by_order", "compute_grouped_order", "reorder_within_or_across_group", "reorder_groups"]


def _order_of(card: Card):
    return card.order or 0


def _band_remainder(order):
    '''order % GROUP_BAND truncated toward zero, so -5 stays -5 (not 995).'''
    remainder = abs(order) % GROUP_BAND
    return -remainder if order < 0 else remainder


def sort_by_order(cards: Iterable[Card]) -> List[Card]:
    """Ascending by order; ties keep their previous relative position."""
    return sorted(cards, key=_order_of)


def compute_grouped_order(cards: Iterable[Card], view_mode: ViewMode) -> Dict[str, List[Card]]:
    """Partition cards by the view mode's key.

    Each group is sorted by order. Groups are ordered by the order of their
    lowest-order member; groups tied on that value keep first appearance.
    """
    groups: Dict[str, List[Card]] = {}
    for card in cards:
        groups.setdefault(view_mode.key_of(card), []).append(card)
    for key in groups:
        groups[key] = sort_by_order(groups[key])
    ranked = sorted(groups.items(), key=lambda item: _order_of(item[1][0]))
    return dict(ranked)


def reorder_within_or_across_group(
    all_cards: Sequence[Card],
    moved_card_ids: Optional[Iterable[str]],
    source_group: str,
    destination_group: str,
    destination_sequence: Sequence,
    view_mode: ViewMode,
) -> List[Card]:
    """Place moved cards into `destination_group` following `destination_sequence`.

    `destination_sequence` holds cards (or card ids) in their new display order.
    `moved_card_ids=None` moves exactly the cards of the sequence. The moved
    card at position i gets order (resident_count + i) * ORDER_SPACING, where
    resident_count counts destination members that are not being moved.

    The returned list holds the same card ids as `all_cards`, sorted by order.
    `source_group` only documents where the drag began; when it equals the
    destination this is a plain in-group reorder.
    """
    sequence_ids = [item.id if isinstance(item, Card) else str(item) for item in destination_sequence]
    if moved_card_ids is None:
        moved_ids = set(sequence_ids)
    else:
        moved_ids = set(moved_card_ids)

    others: List[Card] = []
    by_id: Dict[str, Card] = {}
    for card in all_cards:
        if card.id in moved_ids:
            by_id[card.id] = card
        else:
            others.append(card)

    # Board version of each card wins over whatever the caller passed in
    moved: List[Card] = [by_id[cid] for cid in dict.fromkeys(sequence_ids) if cid in by_id]
    placed = {c.id for c in moved}
    moved.extend(c for c in all_cards if c.id in by_id and c.id not in placed)

    resident_count = sum(1 for c in others if view_mode.key_of(c) == destination_group)

    updated = [
        view_mode.assign(card, destination_group).replace(order=(resident_count + index) * ORDER_SPACING)
        for index, card in enumerate(moved)
    ]
    return sort_by_order(others + updated)


def reorder_groups(all_cards: Sequence[Card], new_group_order: Sequence[str], view_mode: ViewMode) -> List[Card]:
    """Move whole groups to the bands given by `new_group_order`.

    order = band_index * GROUP_BAND + remainder. The remainder keeps the sign
    of the old order, so negative ranks keep their place in the group (-5
    stays ahead of 3). A key missing from `new_group_order` is placed in the
    band right after the last listed group, so unlisted groups sort last and
    keep their relative order.
    """
    index_of = {}
    for index, key in enumerate(new_group_order):
        index_of.setdefault(key, index)
    fallback = len(new_group_order)

    result: List[Card] = []
    for card in all_cards:
        band = index_of.get(view_mode.key_of(card), fallback)
        result.append(card.replace(order=band * GROUP_BAND + _band_remainder(_order_of(card))))
    return result
