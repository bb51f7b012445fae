"""Registry of mounted paragraph elements in each pane."""

from __future__ import annotations

import itertools
import weakref
from dataclasses import dataclass
from typing import Any

import shiboken6
from PySide6.QtCore import QObject

from bireader.models import Side
from bireader.services.logs import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Anchor:
    """A registry entry: which paragraph, on which side, under which handle."""

    #: The paragraph id.
    paragraph_id: int
    #: The pane the element is mounted in.
    side: Side
    #: Stable handle in the registry arena.
    handle: int


class AnchorRegistry:
    """
    Maps ``(paragraph id, side)`` to the element currently rendering that
    paragraph.

    The rendering layer owns the elements; the registry keeps only weak
    references to them in an arena keyed by integer handles, plus a table from
    ``(paragraph id, side)`` to handle.  A pane calls :meth:`clear_side` (or
    :meth:`unregister`) whenever it unmounts paragraphs, so entries never
    outlive their element.
    """

    def __init__(self) -> None:
        self._handles = itertools.count(1)
        #: handle -> (anchor, weak reference to the element)
        self._arena: dict[int, tuple[Anchor, weakref.ref[Any]]] = {}
        #: (paragraph id, side) -> handle
        self._keys: dict[tuple[int, Side], int] = {}

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, key: tuple[int, Side]) -> bool:
        return self.lookup(*key) is not None

    def register(self, paragraph_id: int, side: Side, element: Any) -> int:
        """
        Register ``element`` as the current renderer of a paragraph.

        There is at most one live element per ``(paragraph id, side)``;
        registering again replaces the previous entry.

        Args:
            paragraph_id: The paragraph id
            side: The pane the element is mounted in
            element: The rendered element (must support weak references)

        Returns:
            The new handle

        """
        side = Side(side)
        key = (paragraph_id, side)
        previous = self._keys.pop(key, None)
        if previous is not None:
            self._arena.pop(previous, None)
        handle = next(self._handles)
        self._arena[handle] = (Anchor(paragraph_id, side, handle), weakref.ref(element))
        self._keys[key] = handle
        return handle

    def unregister(
        self, paragraph_id: int, side: Side, handle: int | None = None
    ) -> bool:
        """
        Remove the entry for a paragraph.

        Removing a missing entry is a no-op.  If ``handle`` is given and no
        longer matches the current registration (the paragraph was re-mounted
        since), nothing is removed.

        Args:
            paragraph_id: The paragraph id
            side: The pane

        Keyword Args:
            handle: The handle returned by :meth:`register`

        Returns:
            Whether an entry was removed

        """
        key = (paragraph_id, Side(side))
        current = self._keys.get(key)
        if current is None or (handle is not None and handle != current):
            return False
        del self._keys[key]
        self._arena.pop(current, None)
        return True

    def clear_side(self, side: Side) -> int:
        """
        Remove every entry for one pane.

        Args:
            side: The pane that is re-rendering

        Returns:
            The number of entries removed

        """
        anchors = self.anchors(Side(side))
        for anchor in anchors:
            self.unregister(anchor.paragraph_id, anchor.side, anchor.handle)
        return len(anchors)

    def clear(self) -> None:
        """Remove every entry."""
        self._keys.clear()
        self._arena.clear()

    def lookup(self, paragraph_id: int, side: Side) -> Any | None:
        """
        Get the element rendering a paragraph on ``side``.

        Entries whose element is gone are pruned.

        Returns:
            The element, or ``None`` if the paragraph is not mounted there

        """
        key = (paragraph_id, Side(side))
        handle = self._keys.get(key)
        if handle is None:
            return None
        _anchor, ref = self._arena[handle]
        element = ref()
        if element is None or (
            isinstance(element, QObject) and not shiboken6.isValid(element)
        ):
            logger.debug("pruned dead anchor", paragraph_id=paragraph_id, side=side)
            self.unregister(paragraph_id, side, handle)
            return None
        return element

    def resolve(self, paragraph_id: int, side: Side) -> Any | None:
        """
        Get the counterpart of a paragraph in the *opposite* pane.

        Args:
            paragraph_id: The paragraph id
            side: The pane the paragraph was activated in

        Returns:
            The element on the other side, or ``None`` if not mounted there

        """
        return self.lookup(paragraph_id, Side(side).opposite)

    def anchors(self, side: Side | None = None) -> list[Anchor]:
        """
        List the registered anchors, optionally for one side only.
        """
        return [
            anchor
            for anchor, _ref in self._arena.values()
            if side is None or anchor.side == side
        ]
