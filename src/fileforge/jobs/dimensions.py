"""Width/height constraint solver for the resize operation.

For licensing see accompanying LICENSE file.
Copyright (C) 2025 Apple Inc. All Rights Reserved.
"""

from __future__ import annotations

import logging
import math
from typing import NamedTuple

logger = logging.getLogger(__name__)


class AspectRatio(NamedTuple):
    """Width:height in lowest terms."""

    width: int
    height: int

    @classmethod
    def from_dimensions(cls, width: int, height: int) -> AspectRatio:
        divisor = math.gcd(width, height)
        return cls(width // divisor, height // divisor)


def scale_rounded(value: int, numerator: int, denominator: int) -> int:
    """Return value * numerator / denominator rounded half away from zero."""
    product = value * numerator
    quotient, remainder = divmod(abs(product), denominator)
    if 2 * remainder >= denominator:
        quotient += 1
    return quotient if product >= 0 else -quotient


class DimensionConstraintSolver:
    """Keeps width and height proportionate while the aspect lock is engaged.

    The base ratio is captured once from the source image and never recomputed,
    so repeated edits do not drift with rounding. Presets and a disengaged lock
    are the only ways to leave that ratio.
    """

    def __init__(self, width: int, height: int, lock_aspect: bool = True):
        if width <= 0 or height <= 0:
            raise ValueError(f"Source dimensions must be positive, got {width}x{height}")
        self.original_width = width
        self.original_height = height
        self.base_ratio = AspectRatio.from_dimensions(width, height)
        self.width: int | None = width
        self.height: int | None = height
        self.lock_aspect = lock_aspect

    def set_width(self, width: int | None) -> None:
        self.width = width
        if self.lock_aspect and width is not None and width >= 1:
            self.height = scale_rounded(width, self.base_ratio.height, self.base_ratio.width)
            logger.debug("Width %s drives height %s", width, self.height)

    def set_height(self, height: int | None) -> None:
        self.height = height
        if self.lock_aspect and height is not None and height >= 1:
            self.width = scale_rounded(height, self.base_ratio.width, self.base_ratio.height)
            logger.debug("Height %s drives width %s", height, self.width)

    def apply_preset(self, width: int, height: int) -> None:
        """Set both fields as-is; the lock and base ratio are left untouched."""
        self.width = width
        self.height = height

    def toggle_lock(self) -> bool:
        # Only future edits are affected; current values are not reconciled.
        self.lock_aspect = not self.lock_aspect
        return self.lock_aspect

    def reset_to_original(self) -> None:
        self.width = self.original_width
        self.height = self.original_height

    def is_valid(self) -> bool:
        return self.width is not None and self.height is not None and self.width >= 1 and self.height >= 1
