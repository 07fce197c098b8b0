import pytest
from textual.app import App, ComposeResult
from textual.widgets import Input

from codeinput.application.controller import CodeInputController
from codeinput.config import CodeInputConfig
from codeinput.presentation.widgets.code_input import NO_RESULTS_MESSAGE, CodeInput
from conftest import TEST_BINDING, TEST_CANDIDATE, FakeLookup


class _CodeInputApp(App):
    def __init__(self, widget: CodeInput) -> None:
        super().__init__()
        self._widget = widget
        self.committed: list[object] = []

    def compose(self) -> ComposeResult:
        yield self._widget

    def on_code_input_committed(self, message: CodeInput.Committed) -> None:
        self.committed.append(message.value)


def make_widget(default_value=None, results=None, lookup=None):
    if lookup is None:
        lookup = FakeLookup(results=results if results is not None else {"xyz": [TEST_CANDIDATE]})
    config = CodeInputConfig(binding=TEST_BINDING, debounce_ms=20)
    controller = CodeInputController(lookup, config)
    return CodeInput(controller, default_value=default_value), lookup


@pytest.mark.asyncio
async def test_renders_closed_dropdown():
    widget, _ = make_widget()
    app = _CodeInputApp(widget)

    async with app.run_test() as pilot:
        await pilot.pause()
        assert widget.dropdown_list.display is False
        assert widget.input_widget.value == ""


@pytest.mark.asyncio
async def test_string_default_value_is_shown_without_dropdown():
    widget, _ = make_widget(default_value="xyz")
    app = _CodeInputApp(widget)

    async with app.run_test() as pilot:
        await pilot.pause(0.1)
        assert widget.input_widget.value == "xyz"
        assert widget.dropdown_list.display is False
        assert app.committed == []


@pytest.mark.asyncio
async def test_string_default_value_is_shown_while_resolving():
    widget, lookup = make_widget(default_value="xyz", lookup=FakeLookup(manual=True))
    app = _CodeInputApp(widget)

    async with app.run_test() as pilot:
        await pilot.pause(0.1)
        assert lookup.queries == ["xyz"]
        assert widget.input_widget.value == "xyz"
        assert widget.dropdown_list.display is False


@pytest.mark.asyncio
async def test_search_then_enter_commits():
    widget, lookup = make_widget()
    app = _CodeInputApp(widget)

    async with app.run_test() as pilot:
        app.query_one(Input).focus()
        await pilot.press("x", "y", "z")
        await pilot.pause(0.2)

        assert lookup.queries == ["xyz"]
        assert widget.dropdown_list.display is True
        assert widget.dropdown_list.option_count == 1

        await pilot.press("down")
        await pilot.press("enter")
        await pilot.pause()

        assert app.committed == [TEST_CANDIDATE]
        assert widget.input_widget.value == "Test Display"
        assert widget.dropdown_list.display is False


@pytest.mark.asyncio
async def test_no_results_shows_empty_state():
    widget, _ = make_widget(results={})
    app = _CodeInputApp(widget)

    async with app.run_test() as pilot:
        app.query_one(Input).focus()
        await pilot.press("a", "b")
        await pilot.pause(0.2)

        assert widget.dropdown_list.display is True
        assert widget.dropdown_list.option_count == 1
        assert str(widget.dropdown_list.get_option_at_index(0).prompt) == NO_RESULTS_MESSAGE


@pytest.mark.asyncio
async def test_escape_closes_dropdown():
    widget, _ = make_widget()
    app = _CodeInputApp(widget)

    async with app.run_test() as pilot:
        app.query_one(Input).focus()
        await pilot.press("x", "y", "z")
        await pilot.pause(0.2)
        await pilot.press("escape")
        await pilot.pause()

        assert widget.dropdown_list.display is False
        assert widget.input_widget.value == "xyz"
        assert app.committed == []


@pytest.mark.asyncio
async def test_clicking_a_row_commits():
    widget, _ = make_widget()
    app = _CodeInputApp(widget)

    async with app.run_test() as pilot:
        app.query_one(Input).focus()
        await pilot.press("x", "y", "z")
        await pilot.pause(0.2)
        assert widget.dropdown_list.display is True

        await pilot.click("#code-input-dropdown", offset=(3, 1))
        await pilot.pause()

        assert app.committed == [TEST_CANDIDATE]
        assert widget.input_widget.value == "Test Display"
        assert widget.dropdown_list.display is False
