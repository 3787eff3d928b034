"""Core business logic layer.

Subpackages:
- ordering: pure order computations and the drag-event adapter
- grouping: the grouped projection of the active board
- store: the board store owning the state snapshot
"""
__all__ = ["ordering", "grouping", "store"]
