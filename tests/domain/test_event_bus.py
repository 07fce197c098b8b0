"""Tests for the event bus."""

import pytest

from codeinput.domain.events import EventBus, InputChanged, ValueCommitted
from codeinput.domain.types import Candidate


def test_publish_reaches_subscribers_of_that_type_only():
    bus = EventBus()
    texts: list[str] = []
    commits: list[object] = []
    bus.subscribe(InputChanged, lambda event: texts.append(event.text))
    bus.subscribe(ValueCommitted, lambda event: commits.append(event.value))

    bus.publish(InputChanged(text="xy"))

    assert texts == ["xy"]
    assert commits == []


def test_async_handlers_are_rejected():
    bus = EventBus()

    async def handler(event):
        pass

    with pytest.raises(TypeError):
        bus.subscribe(InputChanged, handler)


def test_failing_handler_does_not_stop_others():
    bus = EventBus()
    seen: list[str] = []

    def broken(event):
        raise RuntimeError("boom")

    bus.subscribe(InputChanged, broken)
    bus.subscribe(InputChanged, lambda event: seen.append(event.text))

    bus.publish(InputChanged(text="a"))

    assert seen == ["a"]


def test_duplicate_subscription_is_ignored_and_unsubscribe_works():
    bus = EventBus()
    seen: list[object] = []

    def handler(event):
        seen.append(event.value)

    bus.subscribe(ValueCommitted, handler)
    bus.subscribe(ValueCommitted, handler)
    bus.publish(ValueCommitted(value=Candidate("a")))
    assert len(seen) == 1

    bus.unsubscribe(ValueCommitted, handler)
    assert not bus.has_subscribers(ValueCommitted)
    bus.publish(ValueCommitted(value=Candidate("a")))
    assert len(seen) == 1
