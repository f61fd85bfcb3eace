"""Smooth, cancelable viewport transitions ("warp to note")."""
from __future__ import annotations

import asyncio
import itertools
import logging
import time
from collections import OrderedDict
from functools import partial
from typing import Callable, Hashable, Optional, Protocol

from wallboard.canvas.geometry import Vector, clamp
from wallboard.canvas.store import AnimationState, ViewportStore

LOGGER = logging.getLogger(__name__)

DEFAULT_DURATION_MS = 800.0

FrameCallback = Callable[[float], None]


def ease_out_cubic(progress: float) -> float:
    """Decelerating easing curve mapping ``[0, 1]`` onto ``[0, 1]``."""

    return 1.0 - (1.0 - progress) ** 3


def monotonic_ms() -> float:
    """Return a monotonic timestamp in milliseconds."""

    return time.monotonic() * 1000.0


class FrameScheduler(Protocol):
    """Source of animation frames."""

    def request_frame(self, callback: FrameCallback) -> Hashable:
        """Schedule ``callback(timestamp_ms)`` for the next frame and return a handle."""

    def cancel_frame(self, handle: Hashable) -> None:
        """Cancel a previously requested frame; unknown handles are ignored."""


class ManualFrameScheduler:
    """Scheduler whose frames are pumped explicitly by the caller.

    Used for headless sessions and tests: :meth:`run_frame` fires every
    callback that was pending when it was called.
    """

    def __init__(self) -> None:
        self._pending: "OrderedDict[int, FrameCallback]" = OrderedDict()
        self._counter = itertools.count(1)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def request_frame(self, callback: FrameCallback) -> int:
        handle = next(self._counter)
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: Hashable) -> None:
        self._pending.pop(handle, None)  # type: ignore[arg-type]

    def run_frame(self, timestamp_ms: float) -> int:
        """Fire the currently pending callbacks and return how many ran."""

        due = list(self._pending.items())
        self._pending.clear()
        for _, callback in due:
            callback(timestamp_ms)
        return len(due)


class AsyncioFrameScheduler:
    """Scheduler emitting frames from an asyncio event loop at a fixed interval."""

    def __init__(
        self,
        frame_interval_ms: float = 16.0,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        if frame_interval_ms <= 0:
            raise ValueError("frame_interval_ms must be positive")
        self._interval = frame_interval_ms / 1000.0
        self._loop = loop

    @property
    def frame_interval_ms(self) -> float:
        return self._interval * 1000.0

    def _resolve_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now_ms(self) -> float:
        """Loop time in milliseconds, the same clock frame timestamps use."""

        return self._resolve_loop().time() * 1000.0

    def request_frame(self, callback: FrameCallback) -> asyncio.TimerHandle:
        loop = self._resolve_loop()
        return loop.call_later(self._interval, lambda: callback(loop.time() * 1000.0))

    def cancel_frame(self, handle: Hashable) -> None:
        if isinstance(handle, asyncio.TimerHandle):
            handle.cancel()


class _Run:
    """Cancellation token identifying one animation."""

    __slots__ = ("handle",)

    def __init__(self) -> None:
        self.handle: Optional[Hashable] = None


class ViewportAnimator:
    """Drive the viewport offset towards a target with ease-out-cubic timing.

    The animator is an ``idle -> animating -> idle`` state machine. Starting a
    new transition cancels the pending frame of the previous one and replaces
    its token, so a stale callback that still fires does nothing.
    """

    def __init__(
        self,
        store: ViewportStore,
        scheduler: FrameScheduler,
        *,
        duration_ms: float = DEFAULT_DURATION_MS,
        clock: Callable[[], float] = monotonic_ms,
    ) -> None:
        if duration_ms < 0:
            raise ValueError("duration_ms cannot be negative")
        self._store = store
        self._scheduler = scheduler
        self._duration = duration_ms
        self._clock = clock
        self._run: Optional[_Run] = None

    @property
    def duration_ms(self) -> float:
        return self._duration

    @property
    def is_animating(self) -> bool:
        return self._run is not None

    def animate_to(self, target: Vector) -> None:
        """Start a transition from the current offset to ``target``."""

        self._cancel_pending()
        state = AnimationState(start=self._store.offset, target=target, start_time=self._clock())
        run = _Run()
        self._run = run
        self._store.begin_animation(state)
        LOGGER.debug(
            "Viewport animation started",
            extra={"start": (state.start.x, state.start.y), "target": (target.x, target.y)},
        )
        run.handle = self._scheduler.request_frame(partial(self._on_frame, run, state))

    def cancel(self) -> None:
        """Stop the in-flight transition, leaving the offset where it is."""

        if self._run is None:
            return
        self._cancel_pending()
        self._store.end_animation()

    def progress_at(self, state: AnimationState, timestamp_ms: float) -> float:
        """Return the clamped linear progress of ``state`` at ``timestamp_ms``."""

        if self._duration <= 0:
            return 1.0
        return clamp((timestamp_ms - state.start_time) / self._duration, 0.0, 1.0)

    def _cancel_pending(self) -> None:
        run, self._run = self._run, None
        if run is not None and run.handle is not None:
            self._scheduler.cancel_frame(run.handle)

    def _on_frame(self, run: _Run, state: AnimationState, timestamp_ms: float) -> None:
        if run is not self._run:
            return
        progress = self.progress_at(state, timestamp_ms)
        if progress >= 1.0:
            self._run = None
            self._store.apply_offset(state.target)
            self._store.end_animation()
            LOGGER.debug("Viewport animation finished", extra={"target": (state.target.x, state.target.y)})
            return
        eased = ease_out_cubic(progress)
        self._store.apply_offset(state.start + (state.target - state.start).scaled(eased))
        run.handle = self._scheduler.request_frame(partial(self._on_frame, run, state))


__all__ = [
    "AsyncioFrameScheduler",
    "DEFAULT_DURATION_MS",
    "FrameScheduler",
    "ManualFrameScheduler",
    "ViewportAnimator",
    "ease_out_cubic",
    "monotonic_ms",
]
