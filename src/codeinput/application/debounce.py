"""
DebounceScheduler - coalesces rapid input changes into one delayed trigger.
"""

import asyncio
from typing import Callable, Optional

from codeinput.logger import get_logger
from codeinput.utils import preview

logger = get_logger("debounce")


class DebounceScheduler:
    """
    Delays ``on_settled`` until input has been quiet for ``delay`` seconds.

    Every call to :meth:`on_input_change` cancels the pending timer and starts
    a new one, so only the last text of a burst is ever settled. Text shorter
    than ``min_length`` cancels the timer and fires ``on_cleared`` right away.

    The scheduler owns no network state; it only schedules callbacks on the
    running event loop.
    """

    def __init__(
        self,
        on_settled: Optional[Callable[[str], None]] = None,
        on_cleared: Optional[Callable[[], None]] = None,
        delay: float = 1.0,
        min_length: int = 1,
    ):
        """
        Args:
            on_settled: Called with the final text once input is quiet
            on_cleared: Called when the text drops below ``min_length``
            delay: Quiet interval in seconds
            min_length: Minimum text length that warrants a lookup
        """
        if delay < 0:
            raise ValueError("delay must be >= 0")
        if min_length < 1:
            raise ValueError("min_length must be >= 1")
        self._on_settled = on_settled
        self._on_cleared = on_cleared
        self.delay = delay
        self.min_length = min_length
        self._handle: Optional[asyncio.TimerHandle] = None
        self._pending_text: Optional[str] = None

    def bind(self, on_settled: Callable[[str], None], on_cleared: Callable[[], None]) -> None:
        """Attach the callbacks (used when the scheduler is caller-owned)."""
        self._on_settled = on_settled
        self._on_cleared = on_cleared

    @property
    def pending(self) -> bool:
        """Whether a settle is scheduled."""
        return self._handle is not None

    @property
    def pending_text(self) -> Optional[str]:
        """Text that will be settled if input stays quiet."""
        return self._pending_text

    def on_input_change(self, text: str) -> None:
        """
        Register a keystroke.

        Args:
            text: Full text of the input after the change
        """
        self.cancel()

        if len(text.strip()) < self.min_length:
            logger.debug(f"Input below minimum length ({self.min_length}), clearing")
            if self._on_cleared is not None:
                self._on_cleared()
            return

        loop = asyncio.get_running_loop()
        self._pending_text = text
        self._handle = loop.call_later(self.delay, self._fire)

    def flush(self) -> bool:
        """
        Settle the pending text immediately.

        Returns:
            True if a pending settle was fired, False if nothing was pending
        """
        if self._handle is None:
            return False
        self._handle.cancel()
        self._fire()
        return True

    def cancel(self) -> None:
        """Drop the pending settle, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
            self._pending_text = None

    def _fire(self) -> None:
        text = self._pending_text
        self._handle = None
        self._pending_text = None
        if text is None:
            return
        logger.debug(f"Input settled: '{preview(text)}'")
        if self._on_settled is not None:
            self._on_settled(text)
