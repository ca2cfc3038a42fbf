"""Request-scoped current locale.

The locale a request should be served in lives in a ContextVar, so each
thread and each asyncio task sees its own value and nothing leaks between
concurrent requests. A pooled worker still reuses its thread's context, so
the value must be cleared when the request ends. ``LocaleScope`` does that
by restoring the previous value on exit, including on error.

Usage:
    with LocaleScope("nb"):
        i18n.translate("Save")   # resolved for nb
    # previous locale restored here

Python 3.13+.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar, Token

__all__ = [
    "LocaleScope",
    "clear_current_locale",
    "get_current_locale",
    "reset_current_locale",
    "set_current_locale",
]

logger = logging.getLogger(__name__)

# None means "use the configured default locale"
_current_locale: ContextVar[str | None] = ContextVar(
    "fluenti18n_current_locale", default=None
)


def set_current_locale(locale: str | None) -> Token[str | None]:
    """Set the locale for the current context.

    Returns:
        Token for ``reset_current_locale`` / ContextVar.reset
    """
    if locale is None:
        logger.warning("Setting current locale to None; the default locale will be used")
    return _current_locale.set(locale)


def get_current_locale() -> str | None:
    """Locale of the current context, or None if unset."""
    return _current_locale.get()


def clear_current_locale() -> None:
    """Forget the current context's locale.

    Call at the end of every request handled on a pooled worker.
    """
    _current_locale.set(None)


def reset_current_locale(token: Token[str | None]) -> None:
    """Restore the value that was current before the matching set."""
    _current_locale.reset(token)


class LocaleScope:
    """Context manager that sets the current locale and restores it on exit.

    Scopes nest: leaving an inner scope brings back the outer one.
    """

    __slots__ = ("_locale", "_token")

    def __init__(self, locale: str) -> None:
        self._locale = locale
        self._token: Token[str | None] | None = None

    @property
    def locale(self) -> str:
        return self._locale

    def __enter__(self) -> LocaleScope:
        if self._token is not None:
            msg = "LocaleScope is not reentrant"
            raise RuntimeError(msg)
        self._token = _current_locale.set(self._locale)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        if self._token is not None:
            _current_locale.reset(self._token)
            self._token = None
