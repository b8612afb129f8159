"""Interactive session: modes, events, commands and the state machine.

The runtime lives in elastic_browser.session.runtime; it depends on the
dispatcher, which in turn depends on this package's commands and events.
"""

from __future__ import annotations

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
    KeyPressed,
    Resized,
    TextEdited,
)
from elastic_browser.session.machine import SessionMachine
from elastic_browser.session.modes import (
    CollectionBrowser,
    CreatorStep,
    DeleteConfirmation,
    DocumentBrowser,
    DocumentCreator,
    DocumentDetail,
    Mode,
    QueryEditor,
)
from elastic_browser.session.state import SessionState

__all__ = [
    'CollectionBrowser',
    'CollectionsLoaded',
    'Command',
    'CreateDocument',
    'CreatorStep',
    'DeleteConfirmation',
    'DeleteDocument',
    'DocumentBrowser',
    'DocumentCreated',
    'DocumentCreator',
    'DocumentDeleted',
    'DocumentDetail',
    'DocumentsLoaded',
    'Event',
    'FieldsLoaded',
    'KeyPressed',
    'LoadCollections',
    'LoadDocuments',
    'LoadFields',
    'Mode',
    'QueryEditor',
    'Quit',
    'Resized',
    'SessionMachine',
    'SessionState',
    'TextEdited',
]
