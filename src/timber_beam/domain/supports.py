from __future__ import annotations

from enum import Enum


class SupportType(Enum):
    """
    Boundary condition at a beam node.

    PINNED and ROLLER behave identically for vertical loads: both restrain
    translation and release rotation.
    """
    FREE = "Free"
    PINNED = "Pinned"
    ROLLER = "Roller"
    FIXED = "Fixed"

    @property
    def restrains_vertical(self) -> bool:
        return self is not SupportType.FREE

    @property
    def restrains_rotation(self) -> bool:
        return self is SupportType.FIXED

    @property
    def releases_moment(self) -> bool:
        return self is not SupportType.FIXED

    @property
    def is_pin_like(self) -> bool:
        return self in (SupportType.PINNED, SupportType.ROLLER)
