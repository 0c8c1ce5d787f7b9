"""
Tests for the lazily bound session handle.
"""

from __future__ import annotations

import threading

import pytest
from _kwallet_test_helpers import FakeTerminal

from kwallet.errors import LifecycleError, SessionAlreadyBoundError
from kwallet.session import SessionHandle


class TestSessionHandle:
    def test_starts_unbound(self) -> None:
        handle = SessionHandle()
        assert handle.get() is None
        assert handle.is_bound is False

    def test_write_when_unbound_reports_failure(self) -> None:
        handle = SessionHandle()
        assert handle.write("dropped") is False

    def test_bind_then_write(self) -> None:
        handle = SessionHandle()
        term = FakeTerminal()
        handle.bind(term)

        assert handle.get() is term
        assert handle.write("hello") is True
        assert term.lines == ["hello"]

    def test_second_bind_raises(self) -> None:
        handle = SessionHandle()
        first = FakeTerminal()
        handle.bind(first)

        with pytest.raises(SessionAlreadyBoundError):
            handle.bind(FakeTerminal())
        assert handle.get() is first

    def test_already_bound_is_a_lifecycle_error(self) -> None:
        assert issubclass(SessionAlreadyBoundError, LifecycleError)

    def test_concurrent_writers(self) -> None:
        handle = SessionHandle()
        term = FakeTerminal()
        handle.bind(term)

        def writer(n: int) -> None:
            for i in range(100):
                handle.write(f"{n}:{i}")

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(term.lines) == 400
