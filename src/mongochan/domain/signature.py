"""Flexible command signatures: positionals, named options, trailing callback.

Commands accept their required positionals first, then a free-form tail.
Inside the tail, any callable is the completion callback and the remaining
values are read pairwise as ``option-name, option-value``. Options may also
be passed as keyword arguments, and the callback as ``callback=``. Options
not supplied fall back to their declared defaults.

Example::

    @command("conn", "coll", where={}, one=False)
    def remove(conn, coll, *, where, one, callback): ...

    remove(conn, "users")                                  # defaults
    remove(conn, "users", "where", {"age": 3}, on_done)    # pairwise tail
    remove(conn, "users", on_done, where={"age": 3})       # keywords
"""

from __future__ import annotations

import copy
import functools
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, TypeVar

from mongochan.errors import SignatureError

CALLBACK = "callback"

_F = TypeVar("_F", bound=Callable[..., Any])


@dataclass(frozen=True)
class BoundCall:
    """Arguments of one call, resolved against a :class:`Signature`."""

    positionals: dict[str, Any]
    options: dict[str, Any]
    callback: Callable[..., Any] | None = None

    def args(self) -> list[Any]:
        """Positional values in declaration order."""
        return list(self.positionals.values())


@dataclass(frozen=True)
class Signature:
    """Declared shape of a command.

    Attributes:
        name: Command name, used in error messages.
        positionals: Required positional parameter names, in order.
        options: Named options and their defaults, in declaration order.
    """

    name: str
    positionals: tuple[str, ...]
    options: Mapping[str, Any] = field(default_factory=dict)

    def bind(self, args: Sequence[Any], kwargs: Mapping[str, Any]) -> BoundCall:
        """Partition a call's arguments into positionals, options, and callback.

        Raises:
            SignatureError: Missing positionals, unknown or duplicated options,
                or an option name left without a value.
        """
        kwargs = dict(kwargs)
        count = len(self.positionals)

        positionals: dict[str, Any] = dict(zip(self.positionals, args[:count], strict=False))
        for name in self.positionals[len(positionals) :]:
            if name not in kwargs:
                raise SignatureError(f"{self.name}() missing required argument {name!r}")
            positionals[name] = kwargs.pop(name)
        overlap = [name for name in self.positionals[: len(args)] if name in kwargs]
        if overlap:
            raise SignatureError(f"{self.name}() got multiple values for {overlap[0]!r}")

        tail = args[count:]
        callables = [value for value in tail if callable(value)]
        rest = [value for value in tail if not callable(value)]

        callback = kwargs.pop(CALLBACK, None)
        if callback is not None and not callable(callback):
            raise SignatureError(f"{self.name}() callback must be callable, got {callback!r}")
        if callback is None and callables:
            callback = callables[0]

        supplied: dict[str, Any] = {}
        if len(rest) % 2:
            raise SignatureError(f"{self.name}() option {rest[-1]!r} has no value")
        for name, value in zip(rest[::2], rest[1::2], strict=True):
            self._check_option(name, supplied)
            supplied[name] = value
        for name, value in kwargs.items():
            self._check_option(name, supplied)
            supplied[name] = value

        options = {
            name: supplied[name] if name in supplied else copy.deepcopy(default)
            for name, default in self.options.items()
        }
        return BoundCall(positionals=positionals, options=options, callback=callback)

    def _check_option(self, name: Any, supplied: Mapping[str, Any]) -> None:
        if not isinstance(name, str):
            raise SignatureError(f"{self.name}() option names must be strings, got {name!r}")
        if name not in self.options:
            known = ", ".join(self.options) or "none"
            raise SignatureError(f"{self.name}() got unknown option {name!r} (options: {known})")
        if name in supplied:
            raise SignatureError(f"{self.name}() got option {name!r} more than once")


def command(*positionals: str, **options: Any) -> Callable[[_F], _F]:
    """Decorator: give a command the flexible calling convention.

    The wrapped function is called with its positionals, every option as a
    keyword argument, and ``callback`` (``None`` when absent).
    """

    def decorate(fn: _F) -> _F:
        signature = Signature(fn.__name__, tuple(positionals), dict(options))

        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            call = signature.bind(args, kwargs)
            return fn(*call.args(), callback=call.callback, **call.options)

        wrapper.signature = signature  # type: ignore[attr-defined]
        return wrapper  # type: ignore[return-value]

    return decorate
