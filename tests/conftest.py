"""
Shared fixtures: an in-memory ResourceProvider with failure injection.
"""

import io
import threading
import time
from typing import Callable, Dict, List, Optional, Sequence

import pytest

from lambdaclean.cancel import CancelToken
from lambdaclean.provider.base import GroupMember, Page, ResourceProvider
from lambdaclean.report import Reporter


def _page(items: Sequence, cursor: Optional[str], page_size: int) -> Page:
    start = int(cursor) if cursor else 0
    end = start + page_size
    next_cursor = str(end) if end < len(items) else None
    return Page(list(items[start:end]), next_cursor)


class FakeProvider(ResourceProvider):
    """In-memory provider that records calls and can be told to fail."""

    def __init__(self, functions: Sequence[str] = (), versions: Optional[Dict[str, List[str]]] = None,
                 groups: Optional[Dict[str, List[GroupMember]]] = None, page_size: int = 2):
        self.functions = list(functions)
        self.versions = versions or {}
        self.groups = groups or {}
        self.page_size = page_size

        self.function_pages: Optional[List[List[str]]] = None  # explicit pages override
        self.list_errors: Dict[str, Exception] = {}  # "functions", group name or function name
        self.delete_errors = set()                   # {(function, version)}
        self.delete_delay = 0.0
        self.concurrency_limit: Optional[int] = None
        self.on_delete: Optional[Callable[[str, str], None]] = None

        self.calls: List[tuple] = []
        self.deleted: List[tuple] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def list_functions(self, cursor=None):
        self.calls.append(("list_functions", cursor))
        if "functions" in self.list_errors:
            raise self.list_errors["functions"]
        if self.function_pages is not None:
            index = int(cursor) if cursor else 0
            next_cursor = str(index + 1) if index + 1 < len(self.function_pages) else None
            return Page(list(self.function_pages[index]), next_cursor)
        return _page(self.functions, cursor, self.page_size)

    def list_group_members(self, group, cursor=None):
        self.calls.append(("list_group_members", group, cursor))
        if group in self.list_errors:
            raise self.list_errors[group]
        return _page(self.groups.get(group, []), cursor, self.page_size)

    def list_versions(self, function, cursor=None):
        self.calls.append(("list_versions", function, cursor))
        if function in self.list_errors:
            raise self.list_errors[function]
        return _page(self.versions.get(function, []), cursor, self.page_size)

    def delete_function_version(self, function, version):
        with self._lock:
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
            over_limit = self.concurrency_limit is not None and self.in_flight > self.concurrency_limit
        try:
            if over_limit:
                raise RuntimeError(f"too many concurrent deletes: {self.in_flight}")
            if self.delete_delay:
                time.sleep(self.delete_delay)
            if (function, version) in self.delete_errors:
                raise RuntimeError("AccessDeniedException")
            with self._lock:
                self.deleted.append((function, version))
            if self.on_delete is not None:
                self.on_delete(function, version)
        finally:
            with self._lock:
                self.in_flight -= 1

    def listed_versions_of(self) -> List[str]:
        return [call[1] for call in self.calls if call[0] == "list_versions" and call[2] is None]


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def cancel():
    return CancelToken()


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def reporter(output):
    return Reporter(stream=output)
