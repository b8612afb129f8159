"""Render SessionState into rich Text for the terminal UI.

Pure functions of state; the app decides which widget shows what.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from rich.text import Text

from elastic_browser.rendering import (
    QUERY_EXAMPLES,
    QUERY_HELP,
    preview_payload,
    query_label,
    render_field_hints,
    render_payload,
)
from elastic_browser.schemas.documents import display_document_id
from elastic_browser.session.keymap import help_text
from elastic_browser.session.modes import (
    CollectionBrowser,
    CreatorStep,
    DeleteConfirmation,
    DocumentBrowser,
    DocumentCreator,
    DocumentDetail,
    QueryEditor,
)
from elastic_browser.session.state import SessionState

__all__ = [
    'body_text',
    'header_text',
    'status_text',
]

TITLE_STYLE = 'bold color(229) on color(57)'
STATUS_STYLE = 'color(42)'
ERROR_STYLE = 'bold color(196)'
HELP_STYLE = 'color(244)'
CURSOR_STYLE = 'reverse'
DESCRIPTION_STYLE = 'color(244)'

LOADING = 'Loading...'

# Rows must not wrap: scrolling and paging count one row per line.
_NO_WRAP_NEWLINE = Text('\n', no_wrap=True, overflow='ellipsis')


def header_text(state: SessionState) -> Text:
    match state.mode:
        case CollectionBrowser():
            title = 'Indices'
        case DocumentBrowser():
            title = f'Index: {state.active_collection} | query={query_label(state.active_query)}'
        case QueryEditor():
            return Text('Enter search query:')
        case DocumentCreator(step=CreatorStep.ID):
            return Text.assemble(('Create Document', TITLE_STYLE), '\nDocument ID (blank => auto):')
        case DocumentCreator():
            return Text.assemble(('Create Document', TITLE_STYLE), '\nDocument body (compact JSON):')
        case DeleteConfirmation():
            title = 'Confirm delete'
        case DocumentDetail(document=document):
            title = f'Document {document.title}'
    return Text(f' {title} ', style=TITLE_STYLE)


def body_text(state: SessionState) -> Text:
    if not state.ready:
        return Text(LOADING)

    match state.mode:
        case CollectionBrowser():
            return _list_window(
                state.collections,
                state.collection_cursor,
                state.list_rows,
                lambda c: Text.assemble(c.title, '  ', (c.description, DESCRIPTION_STYLE)),
                empty='No indices',
            )
        case DocumentBrowser():
            return _list_window(
                state.documents,
                state.document_cursor,
                state.list_rows,
                lambda d: Text.assemble(d.title, '  ', (preview_payload(d.source), DESCRIPTION_STYLE)),
                empty='No documents',
            )
        case QueryEditor():
            lines = [Text(QUERY_HELP, style=HELP_STYLE), Text(QUERY_EXAMPLES, style=HELP_STYLE)]
            if hints := render_field_hints(state.fields):
                lines.append(Text(hints))
            return Text('\n').join(lines)
        case DocumentCreator(step=CreatorStep.BODY):
            return Text('Press Enter to submit', style=HELP_STYLE)
        case DocumentCreator():
            return Text()
        case DeleteConfirmation(pending=pending):
            return Text(f'Delete document {display_document_id(pending.id)}? (y/N)')
        case DocumentDetail(document=document, scroll=scroll):
            rendered = render_payload(document.source).split('\n')
            visible = rendered[scroll : scroll + state.detail_rows]
            return _NO_WRAP_NEWLINE.join([*visible, Text('(esc/q/enter to go back)', style=HELP_STYLE)])


def status_text(state: SessionState) -> Text:
    """'status | error | help', skipping empty parts."""
    parts: list[Text] = []
    if state.status:
        parts.append(Text(state.status, style=STATUS_STYLE))
    if state.error:
        parts.append(Text(state.error, style=ERROR_STYLE))
    parts.append(Text(help_text(state.mode), style=HELP_STYLE))
    return Text(' | ').join(parts)


def _list_window[T](
    items: Sequence[T],
    cursor: int,
    rows: int,
    render: Callable[[T], Text],
    *,
    empty: str,
) -> Text:
    """The page of items containing the cursor, cursor row highlighted."""
    if not items:
        return Text(empty, style=HELP_STYLE)
    start = (cursor // rows) * rows
    lines = []
    for index, item in enumerate(items[start : start + rows], start=start):
        line = render(item)
        if index == cursor:
            line.stylize(CURSOR_STYLE)
        lines.append(line)
    return _NO_WRAP_NEWLINE.join(lines)
