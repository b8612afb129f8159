"""Textual front end for the session runtime.

The app owns no session logic. It turns key presses, widget edits and
resizes into session events, and redraws from SessionState whenever the
runtime reports a change. Text entry is delegated to real input widgets;
their full contents are mirrored into the session with TextEdited.

Enter inside an editor is delivered by the editor itself (Input.Submitted,
DocumentBodyEditor.Submitted), after every keystroke typed before it has been
applied. The submission carries the final text, posted ahead of the key.
"""

from __future__ import annotations

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.message import Message
from textual.widgets import Input, Static, TextArea

from elastic_browser.clients.protocols import SearchGateway
from elastic_browser.schemas.config import DEFAULT_PAGE_SIZE, DEFAULT_TIMEOUT
from elastic_browser.session.events import InputField, KeyPressed, Resized, TextEdited
from elastic_browser.session.modes import CreatorStep, DocumentCreator, Mode, QueryEditor
from elastic_browser.session.runtime import SessionRuntime
from elastic_browser.session.state import SessionState
from elastic_browser.tui.views import body_text, header_text, status_text

__all__ = [
    'BrowserApp',
    'DocumentBodyEditor',
]

_INPUT_FIELDS: dict[str, InputField] = {
    'query': 'query',
    'doc-id': 'document-id',
}


class DocumentBodyEditor(TextArea):
    """Multi-line JSON editor where enter submits instead of inserting a newline."""

    class Submitted(Message):
        def __init__(self, editor: DocumentBodyEditor, text: str) -> None:
            super().__init__()
            self.editor = editor
            self.text = text

    async def _on_key(self, event: events.Key) -> None:
        # prevent_default stops TextArea._on_key from inserting the newline
        if event.key == 'enter':
            event.stop()
            event.prevent_default()
            self.post_message(self.Submitted(self, self.text))


class BrowserApp(App[None]):
    """Browse, query, create and delete documents."""

    TITLE = 'elastic-browser'
    # Browser modes read keys at the app level; inputs get focus only when shown.
    AUTO_FOCUS = None

    CSS = """
    #header {
        height: auto;
    }
    #body {
        height: 1fr;
    }
    #doc-body {
        height: 10;
    }
    #status {
        height: auto;
        dock: bottom;
    }
    """

    # Checked before any widget sees the key, so editors never consume them.
    BINDINGS = [
        Binding('ctrl+c', "forward_key('ctrl+c')", show=False, priority=True),
        Binding('escape', "forward_key('esc')", show=False, priority=True),
    ]

    def __init__(
        self,
        gateway: SearchGateway,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        super().__init__()
        self.runtime = SessionRuntime(gateway, on_change=self.render_state, page_size=page_size, timeout=timeout)
        self._shown_mode: Mode | None = None

    def compose(self) -> ComposeResult:
        yield Static(id='header')
        yield Input(placeholder='Query string (empty => match_all)', id='query')
        yield Input(placeholder='Document ID (leave blank for auto)', id='doc-id')
        yield DocumentBodyEditor(id='doc-body', show_line_numbers=False)
        yield Static(id='body')
        yield Static(id='status')

    def on_mount(self) -> None:
        self.render_state(self.runtime.state)
        self.run_worker(self._run_session(), name='session', exclusive=True)
        self.runtime.post(Resized(width=self.size.width, height=self.size.height))

    async def _run_session(self) -> None:
        await self.runtime.run()
        self.exit()

    # -- Input -> events --

    def on_key(self, event: events.Key) -> None:
        if event.key == 'enter' and isinstance(self.focused, (Input, TextArea)):
            # The editor reports it as a submission
            return
        if event.is_printable and event.character:
            key = event.character
        else:
            key = event.key
        self.runtime.post(KeyPressed(key))

    def action_forward_key(self, key: str) -> None:
        self.runtime.post(KeyPressed(key))

    def on_resize(self, event: events.Resize) -> None:
        self.runtime.post(Resized(width=event.size.width, height=event.size.height))

    def on_input_changed(self, event: Input.Changed) -> None:
        if (field := _INPUT_FIELDS.get(event.input.id or '')) is not None:
            self.runtime.post(TextEdited(field, event.value))

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if (field := _INPUT_FIELDS.get(event.input.id or '')) is not None:
            self.runtime.post(TextEdited(field, event.value))
            self.runtime.post(KeyPressed('enter'))

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if event.text_area.id == 'doc-body':
            self.runtime.post(TextEdited('document-body', event.text_area.text))

    def on_document_body_editor_submitted(self, event: DocumentBodyEditor.Submitted) -> None:
        self.runtime.post(TextEdited('document-body', event.text))
        self.runtime.post(KeyPressed('enter'))

    # -- State -> widgets --

    def render_state(self, state: SessionState) -> None:
        """Redraw from state; widget contents are only reset on mode entry."""
        query = self.query_one('#query', Input)
        doc_id = self.query_one('#doc-id', Input)
        doc_body = self.query_one('#doc-body', DocumentBodyEditor)

        mode = state.mode
        entered = self._shown_mode is None or type(mode) is not type(self._shown_mode)
        if entered and isinstance(mode, QueryEditor):
            query.value = state.query_input
            query.cursor_position = len(state.query_input)
        if entered and isinstance(mode, DocumentCreator):
            doc_id.value = state.id_input
            doc_body.load_text(state.body_input)

        query.display = isinstance(mode, QueryEditor)
        doc_id.display = isinstance(mode, DocumentCreator) and mode.step is CreatorStep.ID
        doc_body.display = isinstance(mode, DocumentCreator) and mode.step is CreatorStep.BODY

        if mode != self._shown_mode:
            if query.display:
                query.focus()
            elif doc_id.display:
                doc_id.focus()
            elif doc_body.display:
                doc_body.focus()
            else:
                self.set_focus(None)
        self._shown_mode = mode

        self.query_one('#header', Static).update(header_text(state))
        self.query_one('#body', Static).update(body_text(state))
        self.query_one('#status', Static).update(status_text(state))
