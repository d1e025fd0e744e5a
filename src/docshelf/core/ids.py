"""Identifier generation for new tree nodes."""

import re

from docshelf.core.tree.store import iter_nodes
from docshelf.models.node import Forest

_LEADING_INT = re.compile(r"^\d+")


class IdGenerator:
    """Issue decimal string ids from a counter owned by one session.

    Ids are monotonic and never repeat for the lifetime of the generator.
    """

    def __init__(self, start: int = 1) -> None:
        if start < 1:
            msg = f"start must be positive, got {start!r}"
            raise ValueError(msg)
        self._next = start

    @classmethod
    def seeded_above(cls, forest: Forest) -> "IdGenerator":
        """Create a generator starting above the highest leading integer of any id.

        An id like ``"2.1"`` counts as 2; ids without leading digits are ignored.
        Any purely numeric existing id is therefore below the first issued id.
        """
        highest = 0
        for node in iter_nodes(forest):
            match = _LEADING_INT.match(node.id)
            if match:
                highest = max(highest, int(match.group()))
        return cls(start=highest + 1)

    @property
    def peek(self) -> str:
        return str(self._next)

    def next_id(self) -> str:
        node_id = str(self._next)
        self._next += 1
        return node_id
