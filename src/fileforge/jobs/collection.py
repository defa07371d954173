"""Identity-stable, reorderable sequence of selected files.

For licensing see accompanying LICENSE file.
Copyright (C) 2025 Apple Inc. All Rights Reserved.
"""

import logging
from typing import Iterable, Iterator, List, Optional

from .files import SelectedFile, new_identity
from .validation import OK, ValidationPolicy, ValidationResult

logger = logging.getLogger(__name__)


class OrderedCollection:
    """Ordered files for multi-file operations; order is sent to the service."""

    def __init__(self, policy: ValidationPolicy):
        self.policy = policy
        self.items: List[SelectedFile] = []
        self._drag_source: Optional[int] = None

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[SelectedFile]:
        return iter(self.items)

    def __getitem__(self, index: int) -> SelectedFile:
        return self.items[index]

    @property
    def identities(self) -> List[str]:
        return [item.identity for item in self.items]

    def index_of(self, identity: str) -> Optional[int]:
        for index, item in enumerate(self.items):
            if item.identity == identity:
                return index
        return None

    def append(self, files: Iterable[SelectedFile]) -> ValidationResult:
        """Validate and append a batch; any rejection leaves the collection unchanged."""
        batch = list(files)
        result = self.policy.validate_batch(batch)
        if not result:
            logger.info("Rejected batch of %d file(s): %s", len(batch), result.reason)
            return result

        for item in batch:
            self.items.append(item.with_identity(new_identity()))
        logger.debug("Appended %d file(s), %d in collection", len(batch), len(self.items))
        return OK

    def remove(self, identity: str) -> bool:
        """Remove by identity. Absent identities are ignored."""
        index = self.index_of(identity)
        if index is None:
            return False
        del self.items[index]
        return True

    def move_to(self, identity: str, new_index: int) -> bool:
        index = self.index_of(identity)
        if index is None:
            return False
        new_index = max(0, min(new_index, len(self.items) - 1))
        if new_index == index:
            return False
        item = self.items.pop(index)
        self.items.insert(new_index, item)
        return True

    def swap(self, i: int, j: int) -> None:
        if not (0 <= i < len(self.items) and 0 <= j < len(self.items)):
            raise IndexError(f"swap indices out of range: {i}, {j}")
        self.items[i], self.items[j] = self.items[j], self.items[i]

    def move_up(self, index: int) -> bool:
        if index <= 0 or index >= len(self.items):
            return False
        self.swap(index - 1, index)
        return True

    def move_down(self, index: int) -> bool:
        if index < 0 or index >= len(self.items) - 1:
            return False
        self.swap(index, index + 1)
        return True

    def reorder(self, source: int, target: int) -> bool:
        """Splice the item at `source` out and re-insert it before `target`.

        `target` is an index in the list as it was before the removal, so a
        forward move lands one slot earlier than the raw target.
        """
        if source == target or not 0 <= source < len(self.items):
            return False
        target = max(0, min(target, len(self.items)))
        item = self.items.pop(source)
        insert_at = target - 1 if source < target else target
        self.items.insert(insert_at, item)
        return True

    def begin_drag(self, index: int) -> None:
        self._drag_source = index

    def drop(self, target: int) -> bool:
        source, self._drag_source = self._drag_source, None
        if source is None:
            return False
        return self.reorder(source, target)

    def end_drag(self) -> None:
        self._drag_source = None

    @property
    def dragging(self) -> bool:
        return self._drag_source is not None

    def clear(self) -> None:
        self.items.clear()
        self._drag_source = None
