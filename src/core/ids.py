"""
Item id allocation.

Components and wires draw from one counter. Ids only ever grow and are never
handed out twice, even after the item that held one is removed. The editor
has a single thread of control, so no locking is done.
"""

from __future__ import annotations

import itertools

_NEXT_ITEM_ID = itertools.count(1)


def next_item_id() -> int:
    return next(_NEXT_ITEM_ID)
