"""Process-level error boundary for the CLI entrypoint.

Startup failures (invalid configuration, a gateway that cannot be built) end
the process with a readable message instead of a raw traceback. Handlers are
dispatched by exception type, most specific first (MRO order).

Usage::

    boundary = ErrorBoundary()

    @boundary.handler(pydantic.ValidationError)
    def _invalid_config(exc: pydantic.ValidationError) -> None:
        print_error(f'Invalid configuration: {exc}')

    @boundary
    def main() -> None:
        ...

System exceptions (KeyboardInterrupt, SystemExit, CancelledError) always pass
through; only Exception subclasses are handled.
"""

from __future__ import annotations

__all__ = [
    'ErrorBoundary',
    'ErrorHandler',
]

import functools
import sys
import traceback
from collections.abc import Callable
from functools import singledispatch
from types import TracebackType
from typing import Any, Self, TypeVar, cast

type ErrorHandler = Callable[[Exception], None]

_F = TypeVar('_F', bound=Callable[..., object])


class ErrorBoundary:
    """Catch application exceptions, report them, then exit or suppress.

    Args:
        handler: Catch-all handler (same as registering for Exception).
            Defaults to printing the traceback to stderr.
        exit_code: Exit status after handling. None suppresses and continues.
    """

    def __init__(
        self,
        *,
        handler: ErrorHandler | None = None,
        exit_code: int | None = 1,
    ) -> None:
        self._dispatch = singledispatch(_default_handler)
        if handler is not None:
            self._dispatch.register(Exception, handler)
        self._exit_code = exit_code

    def handler(self, exc_type: type[Exception]) -> Callable[[Callable[..., None]], Callable[..., None]]:
        """Register a handler for a specific exception type."""
        return self._dispatch.register(exc_type)

    def __call__(self, func: _F) -> _F:
        """Decorate a sync function. Parens required: ``@ErrorBoundary()``."""

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            with self:
                return func(*args, **kwargs)

        return cast(_F, wrapper)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> bool:
        if not isinstance(exc_value, Exception):
            return False

        try:
            self._dispatch(exc_value)
        except Exception:
            # Handler itself failed; fall back to the plain traceback
            _default_handler(exc_value)

        if self._exit_code is not None:
            sys.exit(self._exit_code)
        return True


def _default_handler(exc: Exception) -> None:
    """Print exception with traceback to stderr."""
    traceback.print_exception(type(exc), exc, exc.__traceback__, file=sys.stderr)
