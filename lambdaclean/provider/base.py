"""
Abstract resource provider used by the sweep engine.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")

# The unqualified alias; every sentinel version starts with "$".
LATEST = "$LATEST"


class MemberKind(Enum):
    """Kinds of group members the discovery stream cares about."""
    FUNCTION = "function"
    GROUP = "group"
    OTHER = "other"


@dataclass(frozen=True)
class GroupMember:
    """A resource contained in a group (CloudFormation stack)."""
    kind: MemberKind
    physical_id: Optional[str]


@dataclass
class Page(Generic[T]):
    """One page of a paginated listing."""
    items: List[T] = field(default_factory=list)
    next_cursor: Optional[str] = None   # None means no further pages


def is_sentinel_version(version: str) -> bool:
    """True for alias markers such as $LATEST, which are never real versions."""
    return version.startswith("$")


class ResourceProvider(ABC):
    """Cloud API the sweep reads from and deletes through."""

    @abstractmethod
    def list_functions(self, cursor: Optional[str] = None) -> Page[str]:
        """
        List one page of function names.

        Args:
            cursor: Opaque cursor from the previous page, None for the first

        Returns:
            Page of function names
        """
        pass

    @abstractmethod
    def list_group_members(self, group: str, cursor: Optional[str] = None) -> Page[GroupMember]:
        """
        List one page of the resources contained in a group.

        Args:
            group: Group name or ID
            cursor: Opaque cursor from the previous page, None for the first

        Returns:
            Page of group members
        """
        pass

    @abstractmethod
    def list_versions(self, function: str, cursor: Optional[str] = None) -> Page[str]:
        """
        List one page of a function's versions, oldest first.

        Sentinel versions may be included; callers filter them.
        """
        pass

    @abstractmethod
    def delete_function_version(self, function: str, version: str) -> None:
        """Delete a single published version. Raises on failure."""
        pass
