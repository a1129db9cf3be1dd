"""Bridge between coroutine operations and ``done(error, data)`` callbacks.

Only callers that expect the two-value completion signal need this module;
everything else should await `PeopleService` methods directly.
"""

from __future__ import annotations

import asyncio
import functools
from typing import Any, Awaitable, Callable, Optional

Done = Callable[[Optional[BaseException], Any], None]


async def to_done(done: Done, awaitable: Awaitable[Any]) -> None:
    """Await ``awaitable`` and report the outcome through ``done``.

    Exactly one of the two values is populated: ``done(None, data)`` on
    success, ``done(exc, None)`` on failure.
    """

    try:
        data = await awaitable
    except Exception as exc:
        done(exc, None)
        return
    done(None, data)


def callbackify(operation: Callable[..., Awaitable[Any]]) -> Callable[..., "asyncio.Task[None]"]:
    """Turn ``async def op(*args)`` into ``op(*args, done)`` returning the scheduled task."""

    @functools.wraps(operation)
    def wrapper(*args: Any) -> "asyncio.Task[None]":
        if not args or not callable(args[-1]):
            raise TypeError(f"{operation.__name__}() requires a trailing done callback")
        *call_args, done = args
        return asyncio.ensure_future(to_done(done, operation(*call_args)))

    return wrapper


async def run_callback(fn: Callable[..., Any], *args: Any) -> Any:
    """Call a callback-style ``fn(*args, done)`` and await what it signals."""

    loop = asyncio.get_running_loop()
    future: asyncio.Future[Any] = loop.create_future()

    def done(error: Optional[BaseException], data: Any = None) -> None:
        if future.done():
            return
        if error is not None:
            future.set_exception(error)
        else:
            future.set_result(data)

    # hold on to the scheduled task, if any, until it reports
    _pending = fn(*args, done)
    return await future
