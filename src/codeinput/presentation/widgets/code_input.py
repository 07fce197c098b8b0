"""CodeInput - Textual widget projecting a CodeInputController.

The widget holds no autocomplete logic of its own: it forwards keystrokes,
keys, clicks and blur to the controller and redraws from the snapshots the
controller publishes.
"""

from typing import Optional

from rich.text import Text
from textual import events
from textual.app import ComposeResult
from textual.binding import Binding
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Input, OptionList
from textual.widgets.option_list import Option

from codeinput.application.controller import CodeInputController
from codeinput.domain.types import Candidate, CommittedValue, InputSnapshot, InputState, Key
from codeinput.logger import get_logger

logger = get_logger("code_input_widget")

NO_RESULTS_MESSAGE = "No results"


def candidate_prompt(candidate: Candidate) -> Text:
    """Dropdown row: display text followed by the dimmed code and system."""
    text = Text(candidate.label)
    origin = f"{candidate.system}|{candidate.code}" if candidate.system else candidate.code
    text.append(f"  {origin}", style="dim")
    return text


class CodeInput(Widget):
    """Autocomplete input for coded values."""

    DEFAULT_CSS = """
    CodeInput {
        height: auto;
    }

    CodeInput > #code-input-dropdown {
        height: auto;
        max-height: 10;
        border: round $accent;
    }

    CodeInput.-search-failed > Input {
        border: tall $warning;
    }
    """

    BINDINGS = [
        Binding("up", "cursor_up", "Previous", show=False),
        Binding("down", "cursor_down", "Next", show=False),
        Binding("escape", "dismiss", "Close", show=False),
    ]

    class Committed(Message):
        """Posted when the user confirms a value."""

        def __init__(self, value: CommittedValue) -> None:
            super().__init__()
            self.value = value

    def __init__(
        self,
        controller: CodeInputController,
        default_value: Optional[CommittedValue] = None,
        placeholder: str = "",
        *,
        name: Optional[str] = None,
        id: Optional[str] = None,
        classes: Optional[str] = None,
    ) -> None:
        super().__init__(name=name, id=id, classes=classes)
        self.controller = controller
        self.default_value = default_value
        self.placeholder = placeholder
        self._rendered_candidates: Optional[tuple[Candidate, ...]] = None
        self._rendered_state: Optional[InputState] = None
        self._user_edited = False

    def compose(self) -> ComposeResult:
        yield Input(placeholder=self.placeholder, id="code-input-field")
        dropdown = OptionList(id="code-input-dropdown")
        # Clicking a row must not steal focus from the input
        dropdown.can_focus = False
        yield dropdown

    @property
    def input_widget(self) -> Input:
        return self.query_one("#code-input-field", Input)

    @property
    def dropdown_list(self) -> OptionList:
        return self.query_one("#code-input-dropdown", OptionList)

    def on_mount(self) -> None:
        self.dropdown_list.display = False
        self.controller.on_snapshot(self._render_snapshot)
        self.controller.on_commit(lambda value: self.post_message(self.Committed(value)))
        if self.default_value is not None:
            self.run_worker(self.controller.mount(self.default_value), exclusive=True)

    async def on_unmount(self) -> None:
        await self.controller.close()

    def on_input_changed(self, event: Input.Changed) -> None:
        event.stop()
        # Echo of a value written by _render_snapshot
        if event.value == self.controller.snapshot().text:
            return
        self._user_edited = True
        self.controller.input_changed(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.controller.key_pressed(Key.ENTER)

    def on_descendant_blur(self, event: events.DescendantBlur) -> None:
        if not self.input_widget.has_focus:
            self.controller.blur()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        logger.debug(f"Row {event.option_index} selected with pointer")
        self.controller.pointer_down(event.option_index)

    def action_cursor_up(self) -> None:
        self.controller.key_pressed(Key.ARROW_UP)

    def action_cursor_down(self) -> None:
        self.controller.key_pressed(Key.ARROW_DOWN)

    def action_dismiss(self) -> None:
        self.controller.key_pressed(Key.ESCAPE)

    def _render_snapshot(self, snapshot: InputSnapshot) -> None:
        # Text is pushed into the Input for commits and for a pending default;
        # while the user is editing, the Input is the source of the text
        writable = snapshot.state == InputState.COMMITTED or not self._user_edited
        if writable and self.input_widget.value != snapshot.text:
            self.input_widget.value = snapshot.text
            self.input_widget.cursor_position = len(snapshot.text)

        dropdown = self.dropdown_list
        if snapshot.candidates is not self._rendered_candidates or snapshot.state != self._rendered_state:
            dropdown.clear_options()
            if snapshot.state == InputState.NO_RESULTS:
                dropdown.add_option(Option(NO_RESULTS_MESSAGE, disabled=True))
            else:
                dropdown.add_options([Option(candidate_prompt(c)) for c in snapshot.candidates])
            self._rendered_candidates = snapshot.candidates
            self._rendered_state = snapshot.state

        if snapshot.state != InputState.NO_RESULTS:
            dropdown.highlighted = snapshot.cursor
        dropdown.display = snapshot.dropdown_open
        self.set_class(snapshot.search_failed, "-search-failed")
