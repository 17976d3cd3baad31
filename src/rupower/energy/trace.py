"""Observer lists for values emitted by the energy model."""

from __future__ import annotations

from typing import Callable

TraceCallback = Callable[[float, float], None]


class TraceSource:
    """A named list of callbacks invoked with ``(time_s, value)``.

    Example:
        >>> trace = TraceSource("power", "W")
        >>> trace.connect(lambda t, v: print(f"{t}: {v} W"))
        >>> trace.emit(1.0, 320.0)
        1.0: 320.0 W
    """

    def __init__(self, name: str, unit: str = ""):
        self.name = name
        self.unit = unit
        self._callbacks: list[TraceCallback] = []

    def connect(self, callback: TraceCallback) -> None:
        """Register a callback."""
        self._callbacks.append(callback)

    def disconnect(self, callback: TraceCallback) -> None:
        """Remove a previously registered callback.

        Raises:
            ValueError: If the callback is not connected.
        """
        self._callbacks.remove(callback)

    def emit(self, time_s: float, value: float) -> None:
        """Invoke every connected callback."""
        for callback in list(self._callbacks):
            callback(time_s, value)

    def __len__(self) -> int:
        return len(self._callbacks)

    def __repr__(self) -> str:
        return f"TraceSource({self.name!r}, listeners={len(self._callbacks)})"
