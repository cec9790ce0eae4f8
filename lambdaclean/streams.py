"""
Lazy, pull-based listing streams over a ResourceProvider.

Each stream fetches the next page only once the consumer has drained the
current one, so at most one page is ever held ahead of the consumer.
Provider errors are wrapped in the error type of the stage and raised;
cancellation ends a stream quietly.
"""

import logging
from functools import partial
from typing import Callable, Iterator, List, Optional, TypeVar

from .cancel import CancelToken
from .config import SweepConfig
from .errors import DiscoveryError, ListVersionsError, SweepError
from .provider.base import MemberKind, Page, ResourceProvider, is_sentinel_version

logger = logging.getLogger(__name__)

T = TypeVar("T")


def paginate(fetch: Callable[[Optional[str]], Page[T]],
             cancel: CancelToken,
             on_error: Callable[[Exception], SweepError]) -> Iterator[T]:
    """
    Iterate over every item of a cursor-paginated listing.

    Args:
        fetch: Called with the previous page's cursor (None first)
        cancel: Stops the stream silently once set
        on_error: Builds the domain error for a failed fetch

    Yields:
        Items in page order
    """
    cursor = None
    while not cancel.cancelled:
        try:
            page = fetch(cursor)
        except Exception as e:
            if cancel.cancelled:
                return
            raise on_error(e) from e
        if cancel.cancelled:
            return

        for item in page.items:
            if cancel.cancelled:
                return
            yield item

        if page.next_cursor is None:
            return
        cursor = page.next_cursor


def iter_functions(provider: ResourceProvider, prefix: str, cancel: CancelToken) -> Iterator[str]:
    """Yield every function in the catalog whose name starts with prefix."""
    names = paginate(
        provider.list_functions,
        cancel,
        lambda e: DiscoveryError(f"failed to list Lambda functions: {e}"),
    )
    for name in names:
        if name.startswith(prefix):
            yield name


def iter_group_functions(provider: ResourceProvider, group: str, prefix: str,
                         cancel: CancelToken) -> Iterator[str]:
    """
    Yield functions contained in a group and, depth-first, its nested groups.

    Nested groups are expanded in place, in the order the provider lists
    them, using an explicit stack of member streams. Each group is expanded
    at most once per call; a function reachable through several groups may
    still be yielded more than once.

    Args:
        provider: Resource provider
        group: Root group name or ID
        prefix: Literal name prefix; empty matches everything
        cancel: Cancellation token

    Yields:
        Function physical IDs (names)
    """
    expanded = {group}
    pending: List[Iterator] = [_members(provider, group, cancel)]

    while pending:
        member = next(pending[-1], None)
        if member is None:
            pending.pop()
            continue
        if member.physical_id is None:
            continue

        if member.kind is MemberKind.FUNCTION:
            if member.physical_id.startswith(prefix):
                yield member.physical_id
        elif member.kind is MemberKind.GROUP:
            if member.physical_id in expanded:
                logger.debug(f"Group {member.physical_id} already expanded, skipping")
                continue
            expanded.add(member.physical_id)
            logger.debug(f"Expanding nested group {member.physical_id}")
            pending.append(_members(provider, member.physical_id, cancel))


def _members(provider: ResourceProvider, group: str, cancel: CancelToken) -> Iterator:
    return paginate(
        partial(provider.list_group_members, group),
        cancel,
        lambda e: DiscoveryError(f"failed to list resources for stack {group}: {e}", group=group),
    )


def iter_versions(provider: ResourceProvider, function: str, cancel: CancelToken) -> Iterator[str]:
    """Yield a function's published versions, oldest first, without $LATEST."""
    versions = paginate(
        partial(provider.list_versions, function),
        cancel,
        lambda e: ListVersionsError(function, str(e)),
    )
    for version in versions:
        if not is_sentinel_version(version):
            yield version


def discover(provider: ResourceProvider, config: SweepConfig, cancel: CancelToken) -> Iterator[str]:
    """Pick group or prefix discovery according to the config."""
    if config.group:
        logger.info(f"Discovering functions in stack {config.group} with prefix {config.prefix!r}")
        return iter_group_functions(provider, config.group, config.prefix, cancel)
    logger.info(f"Discovering functions with prefix {config.prefix!r}")
    return iter_functions(provider, config.prefix, cancel)
