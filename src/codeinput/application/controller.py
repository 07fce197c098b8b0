"""
CodeInputController - wires the autocomplete engine components together.

Control flow:
    keystroke -> DebounceScheduler -> (quiet period) QueryCorrelator.dispatch
    -> accepted response -> CandidateStore.replace -> SelectionStateMachine
    -> key/pointer event -> commit -> ValueCommitted on the event bus

Renderers subscribe to SnapshotChanged; host forms use on_commit/on_change.
"""

import asyncio
from typing import Callable, Optional, Union

from codeinput.config import CodeInputConfig
from codeinput.domain.errors import InvalidSelection, TransientSearchFailure
from codeinput.domain.events import (
    DefaultValueResolved,
    EventBus,
    InputChanged,
    SearchFailed,
    SnapshotChanged,
    ValueCommitted,
)
from codeinput.domain.protocols import LookupClient, LookupFunction
from codeinput.domain.types import Candidate, CommittedValue, InputSnapshot, Key, Query
from codeinput.infrastructure.cache import LookupCache
from codeinput.logger import get_logger

from .correlator import QueryCorrelator
from .debounce import DebounceScheduler
from .resolver import DefaultValueResolver
from .selection import SelectionStateMachine
from .store import CandidateStore

logger = get_logger("controller")


class CodeInputController:
    """
    Engine facade for one code input field.

    Scheduler, correlator, store and bus are caller-owned handles: pass
    them in to share or inspect them, or let the controller build defaults
    from ``config``.
    """

    def __init__(
        self,
        lookup: Union[LookupClient, LookupFunction],
        config: Optional[CodeInputConfig] = None,
        *,
        bus: Optional[EventBus] = None,
        scheduler: Optional[DebounceScheduler] = None,
        correlator: Optional[QueryCorrelator] = None,
        store: Optional[CandidateStore] = None,
        cache: Optional[LookupCache] = None,
    ):
        """
        Args:
            lookup: Lookup collaborator (client or coroutine function)
            config: Field settings; defaults to CodeInputConfig()
            bus: Event bus for host and renderer notifications
            scheduler: Debounce scheduler; its callbacks are rebound to this controller
            correlator: Query correlator; its handlers are rebound to this controller
            store: Candidate store
            cache: Lookup result cache (built from config.cache_ttl when omitted)
        """
        self.config = config or CodeInputConfig()
        self.bus = bus or EventBus()
        self.store = store or CandidateStore()
        self.machine = SelectionStateMachine(self.store)

        if cache is None and self.config.cache_ttl > 0:
            cache = LookupCache(ttl=self.config.cache_ttl)

        if scheduler is None:
            scheduler = DebounceScheduler(
                on_settled=self._on_settled,
                on_cleared=self._on_cleared,
                delay=self.config.debounce_delay,
                min_length=self.config.min_query_length,
            )
        else:
            scheduler.bind(on_settled=self._on_settled, on_cleared=self._on_cleared)
        self.scheduler = scheduler

        if correlator is None:
            correlator = QueryCorrelator(
                lookup,
                binding=self.config.binding,
                timeout=self.config.lookup_timeout,
                max_results=self.config.max_results,
                cache=cache,
            )
        correlator.bind(on_accepted=self._on_accepted, on_failed=self._on_failed)
        self.correlator = correlator

        self.resolver = DefaultValueResolver(
            lookup,
            binding=self.config.binding,
            timeout=self.config.lookup_timeout,
        )

        self._blur_handle: Optional[asyncio.TimerHandle] = None
        self._last_snapshot: Optional[InputSnapshot] = None

    # Host bindings

    def on_commit(self, handler: Callable[[CommittedValue], None]) -> None:
        """Call ``handler`` with the value each time the user confirms one."""
        self.bus.subscribe(ValueCommitted, lambda event: handler(event.value))

    def on_change(self, handler: Callable[[str], None]) -> None:
        """Call ``handler`` with the raw text on every keystroke."""
        self.bus.subscribe(InputChanged, lambda event: handler(event.text))

    def on_snapshot(self, handler: Callable[[InputSnapshot], None]) -> None:
        """Call ``handler`` with every new snapshot."""
        self.bus.subscribe(SnapshotChanged, lambda event: handler(event.snapshot))

    def snapshot(self) -> InputSnapshot:
        return self.machine.snapshot()

    # Input events

    def input_changed(self, text: str) -> None:
        """A keystroke changed the input to ``text``."""
        self._cancel_blur()
        self.bus.publish(InputChanged(text=text))
        self.machine.input_changed(text)
        self.scheduler.on_input_change(text)
        self._publish_snapshot()

    def key_pressed(self, key: Union[Key, str]) -> bool:
        """
        Handle a navigation key.

        Returns:
            True if the key was consumed (hosts should suppress its default action)
        """
        if not isinstance(key, Key):
            try:
                key = Key(key)
            except ValueError:
                return False

        if key in (Key.ARROW_UP, Key.ARROW_DOWN):
            handled = self.machine.move(-1 if key == Key.ARROW_UP else 1)
        elif key == Key.ENTER:
            try:
                candidate = self.machine.enter()
            except InvalidSelection as e:
                logger.debug(f"{e}")
                return False
            self._committed(candidate)
            return True
        else:
            handled = self._dismiss()

        if handled:
            self._publish_snapshot()
        return handled

    def pointer_down(self, index: int) -> bool:
        """
        Pointer pressed on result row ``index``.

        Cancels a blur-triggered close that is still pending, then commits
        the row whatever the cursor says.
        """
        self._cancel_blur()
        try:
            candidate = self.machine.commit_index(index)
        except InvalidSelection as e:
            logger.debug(f"{e}")
            return False
        self._committed(candidate)
        return True

    def blur(self) -> None:
        """The input lost focus; close the dropdown after the grace period."""
        self._cancel_blur()
        loop = asyncio.get_running_loop()
        self._blur_handle = loop.call_later(self.config.blur_grace, self._close_after_blur)

    def click_outside(self) -> None:
        self._cancel_blur()
        if self._dismiss():
            self._publish_snapshot()

    async def mount(self, default_value: Optional[CommittedValue] = None) -> Optional[CommittedValue]:
        """
        Present a pre-existing stored value as committed.

        Returns:
            The committed value shown, or None when there was nothing to resolve
            or the user started typing first
        """
        if default_value is None or default_value == "":
            return None

        if isinstance(default_value, str):
            self.machine.show_pending_default(default_value)
            self._publish_snapshot()

        value, fallback = await self.resolver.resolve(default_value)
        if not self.machine.hydrate(value):
            return None
        self.bus.publish(DefaultValueResolved(value=value, fallback=fallback))
        self._publish_snapshot()
        return value

    async def close(self) -> None:
        """Cancel timers and in-flight lookups."""
        self.scheduler.cancel()
        self._cancel_blur()
        await self.correlator.close()

    # Component callbacks

    def _on_settled(self, text: str) -> None:
        self.machine.search_started()
        self.correlator.dispatch(text)
        self._publish_snapshot()

    def _on_cleared(self) -> None:
        self.correlator.invalidate()
        self.machine.cleared()
        self._publish_snapshot()

    def _on_accepted(self, query: Query, candidates: tuple[Candidate, ...]) -> None:
        self.store.replace(candidates)
        self.machine.results_arrived()
        self._publish_snapshot()

    def _on_failed(self, failure: TransientSearchFailure) -> None:
        self.machine.lookup_failed()
        self.bus.publish(SearchFailed(failure=failure))
        self._publish_snapshot()

    # Internals

    def _committed(self, candidate: Candidate) -> None:
        self.scheduler.cancel()
        self.correlator.invalidate()
        self._cancel_blur()
        logger.info(f"Committed {candidate.system}|{candidate.code}")
        self.bus.publish(ValueCommitted(value=candidate))
        self._publish_snapshot()

    def _dismiss(self) -> bool:
        if not self.machine.dismiss():
            return False
        self.correlator.invalidate()
        return True

    def _close_after_blur(self) -> None:
        self._blur_handle = None
        if self._dismiss():
            self._publish_snapshot()

    def _cancel_blur(self) -> None:
        if self._blur_handle is not None:
            self._blur_handle.cancel()
            self._blur_handle = None

    def _publish_snapshot(self) -> None:
        snapshot = self.machine.snapshot()
        last = self._last_snapshot
        if last is not None and snapshot == last and snapshot.candidates is last.candidates:
            return
        self._last_snapshot = snapshot
        self.bus.publish(SnapshotChanged(snapshot=snapshot))
