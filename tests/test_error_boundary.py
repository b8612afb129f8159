"""Tests for ErrorBoundary dispatch, exit and suppression behavior."""

from __future__ import annotations

import pytest

from elastic_browser.error_boundary import ErrorBoundary


class TestDispatch:
    def test_most_specific_handler_wins(self) -> None:
        seen: list[str] = []
        boundary = ErrorBoundary(exit_code=None)

        @boundary.handler(LookupError)
        def _lookup(exc: LookupError) -> None:
            seen.append(f'lookup:{exc}')

        @boundary.handler(KeyError)
        def _key(exc: KeyError) -> None:
            seen.append(f'key:{exc}')

        with boundary:
            raise KeyError('x')
        with boundary:
            raise IndexError('y')

        assert seen == ["key:'x'", 'lookup:y']

    def test_catch_all_handler(self) -> None:
        seen: list[Exception] = []
        with ErrorBoundary(handler=seen.append, exit_code=None):
            raise ValueError('bad')
        assert [str(e) for e in seen] == ['bad']

    def test_default_prints_traceback(self, capsys: pytest.CaptureFixture[str]) -> None:
        with ErrorBoundary(exit_code=None):
            raise RuntimeError('kaboom')
        assert 'RuntimeError: kaboom' in capsys.readouterr().err

    def test_failing_handler_falls_back(self, capsys: pytest.CaptureFixture[str]) -> None:
        boundary = ErrorBoundary(exit_code=None)

        @boundary.handler(ValueError)
        def _broken(exc: ValueError) -> None:
            raise RuntimeError('handler bug')

        with boundary:
            raise ValueError('original')

        assert 'ValueError: original' in capsys.readouterr().err


class TestExit:
    def test_exits_with_code(self) -> None:
        boundary = ErrorBoundary(handler=lambda exc: None, exit_code=3)

        @boundary
        def fail() -> None:
            raise ValueError('x')

        with pytest.raises(SystemExit) as exc_info:
            fail()
        assert exc_info.value.code == 3

    def test_return_value_passes_through(self) -> None:
        @ErrorBoundary()
        def ok() -> int:
            return 42

        assert ok() == 42

    def test_keyboard_interrupt_is_not_handled(self) -> None:
        seen: list[Exception] = []
        with pytest.raises(KeyboardInterrupt):
            with ErrorBoundary(handler=seen.append, exit_code=None):
                raise KeyboardInterrupt
        assert seen == []
