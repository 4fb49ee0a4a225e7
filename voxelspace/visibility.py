"""Hidden-instance bookkeeping for the dense voxel view."""

from typing import Iterator, Set


class VisibilityStore:
    """
Set of hidden instance ids. Wiped on every grid rebuild; there is no per-id unhide.
    """

    def __init__(self):
        self._hidden: Set[int] = set()

    def hide(self, linear_id: int) -> bool:
        """Hide ``linear_id``. Returns False if it was already hidden."""
        linear_id = int(linear_id)
        if linear_id in self._hidden:
            return False
        self._hidden.add(linear_id)
        return True

    def is_hidden(self, linear_id: int) -> bool:
        return int(linear_id) in self._hidden

    def clear(self):
        self._hidden.clear()

    @property
    def hidden_ids(self) -> frozenset:
        return frozenset(self._hidden)

    def __len__(self) -> int:
        return len(self._hidden)

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._hidden))

    def __contains__(self, linear_id) -> bool:
        return self.is_hidden(linear_id)
