"""The session state machine.

Pure: handle() mutates SessionState and returns the commands to run, and
never performs I/O itself. One event at a time; the runtime guarantees no
reentrancy.

Stale-result policy: a documents-loaded event is applied only while its
(collection, query) pair is still the active one. Field and collection
results are merged unconditionally (field sets are additive, the collection
list has a single view).
"""

from __future__ import annotations

import dataclasses
import logging

from elastic_browser.rendering import format_payload, merge_fields, query_label
from elastic_browser.schemas.config import DEFAULT_PAGE_SIZE
from elastic_browser.session.commands import (
    Command,
    CreateDocument,
    DeleteDocument,
    LoadCollections,
    LoadDocuments,
    LoadFields,
    Quit,
)
from elastic_browser.session.events import (
    CollectionsLoaded,
    DocumentCreated,
    DocumentDeleted,
    DocumentsLoaded,
    Event,
    FieldsLoaded,
    InputField,
    KeyPressed,
    Resized,
    TextEdited,
)
from elastic_browser.session.keymap import Action, resolve
from elastic_browser.session.modes import (
    CollectionBrowser,
    CreatorStep,
    DeleteConfirmation,
    DocumentBrowser,
    DocumentCreator,
    DocumentDetail,
    QueryEditor,
)
from elastic_browser.session.state import BODY_TEMPLATE, SessionState
from elastic_browser.units import format_duration

__all__ = [
    'SessionMachine',
]

logger = logging.getLogger(__name__)

_NAVIGATION = frozenset({Action.UP, Action.DOWN, Action.PAGE_UP, Action.PAGE_DOWN, Action.HOME, Action.END})


class SessionMachine:
    """Owns SessionState and decides what every event means.

    Args:
        page_size: Documents requested per search.
        state: Initial state (tests); defaults to a fresh SessionState.
    """

    def __init__(self, *, page_size: int = DEFAULT_PAGE_SIZE, state: SessionState | None = None) -> None:
        self.state = state if state is not None else SessionState()
        self.page_size = page_size

    def start(self) -> list[Command]:
        """Commands to issue before any event arrives."""
        return [LoadCollections()]

    def handle(self, event: Event) -> list[Command]:
        """Apply one event; return the commands it triggers (possibly none)."""
        match event:
            case KeyPressed(key=key):
                return self._on_key(key)
            case TextEdited(field=field, value=value):
                self._on_text(field, value)
            case Resized(width=width, height=height):
                self._on_resize(width, height)
            case CollectionsLoaded():
                self._on_collections(event)
            case DocumentsLoaded():
                self._on_documents(event)
            case FieldsLoaded():
                self._on_fields(event)
            case DocumentCreated(document_id=document_id, error=error):
                return self._on_write_result(error, f'Document {document_id} indexed')
            case DocumentDeleted(document_id=document_id, error=error):
                return self._on_write_result(error, f'Document {document_id} deleted')
        return []

    # -- Keys --

    def _on_key(self, key: str) -> list[Command]:
        state = self.state
        action = resolve(state.mode, key)

        match state.mode:
            case CollectionBrowser():
                return self._collection_browser_key(action)
            case DocumentBrowser():
                return self._document_browser_key(action)
            case QueryEditor():
                return self._query_editor_key(action)
            case DocumentCreator() as creator:
                return self._creator_key(action, creator)
            case DeleteConfirmation(pending=pending):
                return self._delete_confirmation_key(action, pending.id)
            case DocumentDetail():
                self._detail_key(action)
        return []

    def _collection_browser_key(self, action: Action | None) -> list[Command]:
        state = self.state
        match action:
            case Action.QUIT:
                return self._quit()
            case Action.REFRESH:
                state.status = 'Refreshing indices...'
                state.error = ''
                return [LoadCollections()]
            case Action.OPEN:
                selected = state.selected_collection
                if selected is None:
                    return []
                if selected.name != state.active_collection:
                    state.documents = ()
                state.active_collection = selected.name
                state.active_query = ''
                state.query_input = ''
                state.fields = ()
                state.document_cursor = 0
                state.mode = DocumentBrowser()
                state.status = f'Loading docs for {selected.name}...'
                state.error = ''
                return self._reload(with_fields=True)
            case Action() if action in _NAVIGATION:
                state.collection_cursor = _move_cursor(
                    state.collection_cursor, len(state.collections), action, state.list_rows
                )
        return []

    def _document_browser_key(self, action: Action | None) -> list[Command]:
        state = self.state
        match action:
            case Action.QUIT:
                return self._quit()
            case Action.BACK:
                state.mode = CollectionBrowser()
                state.status = 'Back to indices'
            case Action.REFRESH:
                state.status = f'Refreshing {state.active_collection}'
                state.error = ''
                return self._reload(with_fields=True)
            case Action.EDIT_QUERY:
                state.mode = QueryEditor()
                state.query_input = state.active_query
            case Action.NEW_DOCUMENT:
                state.mode = DocumentCreator()
                state.id_input = ''
                state.body_input = BODY_TEMPLATE
            case Action.DELETE:
                document = state.selected_document
                if document is not None:
                    state.mode = DeleteConfirmation(pending=document)
                    state.status = f'Delete {document.id}? (y/N)'
            case Action.OPEN:
                document = state.selected_document
                if document is not None:
                    state.mode = DocumentDetail(document=document)
                    state.status = f'Viewing {document.title}'
            case Action() if action in _NAVIGATION:
                state.document_cursor = _move_cursor(
                    state.document_cursor, len(state.documents), action, state.list_rows
                )
        return []

    def _query_editor_key(self, action: Action | None) -> list[Command]:
        state = self.state
        match action:
            case Action.SUBMIT:
                state.active_query = state.query_input.strip()
                state.document_cursor = 0
                state.mode = DocumentBrowser()
                state.status = f'Searching {state.active_collection}...'
                state.error = ''
                return self._reload(with_fields=False)
            case Action.CANCEL:
                state.mode = DocumentBrowser()
        return []

    def _creator_key(self, action: Action | None, creator: DocumentCreator) -> list[Command]:
        state = self.state
        match action:
            case Action.CANCEL:
                state.mode = DocumentBrowser()
            case Action.SUBMIT if creator.step is CreatorStep.ID:
                state.mode = DocumentCreator(step=CreatorStep.BODY)
            case Action.SUBMIT if creator.submitting:
                logger.debug('[SESSION] Ignoring submit while a create is in flight')
            case Action.SUBMIT:
                # Leaves creator mode when the result arrives, not here
                state.mode = DocumentCreator(step=CreatorStep.BODY, submitting=True)
                state.status = 'Creating document...'
                state.error = ''
                return [
                    CreateDocument(
                        collection=state.active_collection,
                        document_id=state.id_input.strip(),
                        body=state.body_input.strip(),
                    )
                ]
        return []

    def _delete_confirmation_key(self, action: Action | None, document_id: str) -> list[Command]:
        state = self.state
        state.mode = DocumentBrowser()
        if action is not Action.CONFIRM:
            state.status = 'Delete canceled'
            return []
        state.status = f'Deleting {document_id}...'
        state.error = ''
        return [DeleteDocument(collection=state.active_collection, document_id=document_id)]

    def _detail_key(self, action: Action | None) -> None:
        state = self.state
        mode = state.mode
        assert isinstance(mode, DocumentDetail)

        if action is Action.BACK:
            state.mode = DocumentBrowser()
            state.status = f'Back to {state.active_collection}'
            return

        rows = state.detail_rows
        match action:
            case Action.UP:
                scroll = mode.scroll - 1
            case Action.DOWN:
                scroll = mode.scroll + 1
            case Action.PAGE_UP:
                scroll = mode.scroll - rows
            case Action.PAGE_DOWN:
                scroll = mode.scroll + rows
            case Action.HALF_PAGE_UP:
                scroll = mode.scroll - max(rows // 2, 1)
            case Action.HALF_PAGE_DOWN:
                scroll = mode.scroll + max(rows // 2, 1)
            case Action.HOME:
                scroll = 0
            case Action.END:
                scroll = self._max_scroll(mode)
            case _:
                return
        state.mode = dataclasses.replace(mode, scroll=min(max(scroll, 0), self._max_scroll(mode)))

    def _quit(self) -> list[Command]:
        self.state.running = False
        return [Quit()]

    # -- Input widgets and viewport --

    def _on_text(self, field: InputField, value: str) -> None:
        state = self.state
        match (field, state.mode):
            case ('query', QueryEditor()):
                state.query_input = value
            case ('document-id', DocumentCreator()):
                state.id_input = value
            case ('document-body', DocumentCreator()):
                state.body_input = value

    def _on_resize(self, width: int, height: int) -> None:
        state = self.state
        state.width = width
        state.height = height
        state.ready = True
        if isinstance(state.mode, DocumentDetail):
            mode = state.mode
            state.mode = dataclasses.replace(mode, scroll=min(mode.scroll, self._max_scroll(mode)))

    def _max_scroll(self, mode: DocumentDetail) -> int:
        lines = len(format_payload(mode.document.source).splitlines())
        return max(0, lines - self.state.detail_rows)

    # -- Completions --

    def _on_collections(self, event: CollectionsLoaded) -> None:
        state = self.state
        if event.error is not None:
            state.error = event.error
            return
        state.collections = tuple(event.collections)
        state.collection_cursor = _clamp(state.collection_cursor, len(state.collections))
        if state.collections:
            state.status = f'Loaded {len(state.collections)} indices'
        else:
            state.status = 'No indices found'

    def _on_documents(self, event: DocumentsLoaded) -> None:
        state = self.state
        if (event.collection, event.query) != (state.active_collection, state.active_query):
            logger.debug(
                f'[SESSION] Discarding stale page for {event.collection!r} query={event.query!r} '
                f'(active: {state.active_collection!r} query={state.active_query!r})'
            )
            return
        if event.error is not None:
            state.error = event.error
            return
        if event.result is None:
            return

        result = event.result
        state.documents = tuple(result.documents)
        state.document_cursor = _clamp(state.document_cursor, len(state.documents))
        state.fields = merge_fields(state.fields, result.fields)

        label = query_label(result.query)
        if state.documents:
            state.status = (
                f'{result.collection}: {len(state.documents)} docs • {format_duration(result.took)} • query={label}'
            )
        else:
            state.status = f'{result.collection}: no docs (query: {label})'

    def _on_fields(self, event: FieldsLoaded) -> None:
        state = self.state
        if event.error is not None:
            state.error = event.error
            return
        state.fields = merge_fields(state.fields, event.fields)

    def _on_write_result(self, error: str | None, success_status: str) -> list[Command]:
        state = self.state
        if error is not None:
            state.error = error
        else:
            state.status = success_status
        state.mode = DocumentBrowser()
        return self._reload(with_fields=True)

    def _reload(self, *, with_fields: bool) -> list[Command]:
        state = self.state
        commands: list[Command] = [
            LoadDocuments(collection=state.active_collection, query=state.active_query, page_size=self.page_size)
        ]
        if with_fields:
            commands.append(LoadFields(collection=state.active_collection))
        return commands


def _clamp(cursor: int, count: int) -> int:
    return min(max(cursor, 0), max(count - 1, 0))


def _move_cursor(cursor: int, count: int, action: Action, rows: int) -> int:
    match action:
        case Action.UP:
            cursor -= 1
        case Action.DOWN:
            cursor += 1
        case Action.PAGE_UP:
            cursor -= rows
        case Action.PAGE_DOWN:
            cursor += rows
        case Action.HOME:
            cursor = 0
        case Action.END:
            cursor = count - 1
    return _clamp(cursor, count)
