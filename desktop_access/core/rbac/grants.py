"""Coarse API grants.

A grant is a single named capability occupying one bit. A role's grants
are packed into one integer mask, and masks from several roles are
combined with bitwise OR.
"""

from enum import IntFlag
from typing import Iterable, List


# Bit position -> grant name, in declaration order
GRANT_NAMES = (
    "ReadUsers",
    "WriteUsers",
    "ReadRoles",
    "WriteRoles",
    "ReadTemplates",
    "WriteTemplates",
    "LaunchTemplates",
    "ReadDesktopSessions",
)

ALL_GRANTS_NAME = "All"


class Grant(IntFlag):
    """Named capabilities gating API operations."""

    READ_USERS = 1 << 0
    WRITE_USERS = 1 << 1
    READ_ROLES = 1 << 2
    WRITE_ROLES = 1 << 3
    READ_TEMPLATES = 1 << 4
    WRITE_TEMPLATES = 1 << 5
    LAUNCH_TEMPLATES = 1 << 6
    READ_DESKTOP_SESSIONS = 1 << 7

    ALL = (
        READ_USERS | WRITE_USERS
        | READ_ROLES | WRITE_ROLES
        | READ_TEMPLATES | WRITE_TEMPLATES
        | LAUNCH_TEMPLATES | READ_DESKTOP_SESSIONS
    )

    def has(self, grant: int) -> bool:
        """
        Check if any bit of ``grant`` is set in this mask.

        For a multi-bit ``grant`` this is true when at least one of its
        bits is present. Use ``has_all`` to require every bit.
        """
        return (self & grant) != 0

    def has_all(self, grant: int) -> bool:
        """Check if every bit of ``grant`` is set in this mask."""
        return (self & grant) == grant

    def names(self) -> List[str]:
        """Get the names of the set grants in bit order."""
        return [
            name for bit, name in enumerate(GRANT_NAMES)
            if self & (1 << bit)
        ]

    @classmethod
    def from_name(cls, name: str) -> "Grant":
        """Parse a single grant name like 'ReadUsers' or 'All'."""
        if name == ALL_GRANTS_NAME:
            return cls.ALL
        try:
            return cls(1 << GRANT_NAMES.index(name))
        except ValueError:
            raise ValueError(f"Unknown grant: {name}") from None

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "Grant":
        """Build a mask from grant names. An empty list gives an empty mask."""
        mask = cls(0)
        for name in names:
            mask |= cls.from_name(name)
        return mask


def aggregate_grants(masks: Iterable[int]) -> Grant:
    """Combine grant masks with bitwise OR."""
    result = Grant(0)
    for mask in masks:
        result |= mask
    return result
