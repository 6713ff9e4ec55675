"""Invoke helpers: call sync or async handlers uniformly.

Handlers can be ``def`` or ``async def``. A command line has no event
loop of its own, so an awaitable result is driven to completion with
``anyio.run`` here, in exactly one place.

Usage::

    from warble._internal.invoke import invoke

    result = invoke(handler, **kwargs)
"""

import inspect
from typing import Any

import anyio


def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and run the result to completion if it is awaitable.

    Works with both sync and async callables::

        @app.route("greet {name}")
        def greet(name: str) -> None:
            print(f"Hello, {name}")

        @app.route("fetch {url:url}")
        async def fetch(url: str) -> int:
            await anyio.sleep(0)
            return 0
    """
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = anyio.run(_await, result)
    return result


async def _await(awaitable: Any) -> Any:
    return await awaitable


def exit_code(result: Any) -> int:
    """Map a handler's return value to a process exit code.

    ``int`` is used as-is (``bool`` is not an exit code); anything else
    means success.
    """
    if isinstance(result, int) and not isinstance(result, bool):
        return result
    return 0
