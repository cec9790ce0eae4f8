"""
Resource providers: the cloud API seam of the sweep engine.
"""

from .base import (
    LATEST,
    GroupMember,
    MemberKind,
    Page,
    ResourceProvider,
    is_sentinel_version,
)
from .aws import AwsProvider

__all__ = [
    "LATEST",
    "GroupMember",
    "MemberKind",
    "Page",
    "ResourceProvider",
    "is_sentinel_version",
    "AwsProvider",
]
