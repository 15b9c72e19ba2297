"""Listener registry for rule outcome notifications."""

import asyncio
import inspect
import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]


class RuleEventEmitter:
    """Event emitter broadcasting rule outcomes to listeners.

    Listeners are grouped by event name (``success``/``failure``) and called
    in registration order. A listener returning an awaitable is scheduled on
    the running loop and not awaited.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}
        self._pending: set[asyncio.Task] = set()

    def on(self, name: str, listener: Listener) -> None:
        """Subscribe a listener to an event.

        Args:
            name: Event name
            listener: Callable invoked with the emitted arguments

        Raises:
            ValueError: If the listener is already subscribed to ``name``
        """
        listeners = self._listeners.setdefault(name, [])
        if listener in listeners:
            raise ValueError(f"Listener is already subscribed to '{name}'")
        listeners.append(listener)

    def off(self, name: str, listener: Listener) -> None:
        """Unsubscribe a listener from an event.

        Raises:
            ValueError: If the listener is not subscribed to ``name``
        """
        try:
            self._listeners.get(name, []).remove(listener)
        except ValueError:
            raise ValueError(f"Listener is not subscribed to '{name}'") from None

    def listeners(self, name: str) -> list[Listener]:
        return list(self._listeners.get(name, []))

    def emit(self, name: str, *args: Any) -> int:
        """Notify every listener subscribed to ``name``.

        Listener errors are logged and do not interrupt the remaining
        listeners or the caller.

        Returns:
            Number of listeners notified
        """
        listeners = self.listeners(name)
        logger.debug(f"RuleEventEmitter.emit('{name}') to {len(listeners)} listeners")

        for listener in listeners:
            try:
                outcome = listener(*args)
            except Exception:
                logger.exception(f"Listener {listener!r} for '{name}' failed")
                continue
            if inspect.isawaitable(outcome):
                self._schedule(name, outcome)
        return len(listeners)

    def _schedule(self, name: str, awaitable: Any) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No running loop, run the listener to completion here
            try:
                asyncio.run(awaitable)
            except Exception:
                logger.exception(f"Async listener for '{name}' failed")
            return

        task = loop.create_task(awaitable)
        self._pending.add(task)
        task.add_done_callback(lambda t: self._finish(name, t))

    def _finish(self, name: str, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Async listener for '{name}' failed", exc_info=exc)

    async def drain(self) -> None:
        """Wait for scheduled async listeners to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
