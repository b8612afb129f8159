"""Key bindings and help text per mode.

Keys not listed for a mode mean nothing to the machine: in the editor modes
they belong to the focused input widget, in delete confirmation they decline.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping

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

__all__ = [
    'Action',
    'help_text',
    'resolve',
]


class Action(enum.StrEnum):
    QUIT = 'quit'
    REFRESH = 'refresh'
    OPEN = 'open'
    BACK = 'back'
    EDIT_QUERY = 'edit-query'
    NEW_DOCUMENT = 'new-document'
    DELETE = 'delete'
    SUBMIT = 'submit'
    CANCEL = 'cancel'
    CONFIRM = 'confirm'
    UP = 'up'
    DOWN = 'down'
    PAGE_UP = 'page-up'
    PAGE_DOWN = 'page-down'
    HALF_PAGE_UP = 'half-page-up'
    HALF_PAGE_DOWN = 'half-page-down'
    HOME = 'home'
    END = 'end'


_NAVIGATION: Mapping[str, Action] = {
    'up': Action.UP,
    'k': Action.UP,
    'down': Action.DOWN,
    'j': Action.DOWN,
    'pageup': Action.PAGE_UP,
    'pagedown': Action.PAGE_DOWN,
    'home': Action.HOME,
    'g': Action.HOME,
    'end': Action.END,
    'G': Action.END,
}

_SCROLL: Mapping[str, Action] = {
    key: action for key, action in _NAVIGATION.items() if key not in ('g', 'G')
}

_KEYMAPS: Mapping[type[Mode], Mapping[str, Action]] = {
    CollectionBrowser: {
        'ctrl+c': Action.QUIT,
        'q': Action.QUIT,
        'r': Action.REFRESH,
        'enter': Action.OPEN,
        **_NAVIGATION,
    },
    DocumentBrowser: {
        'ctrl+c': Action.QUIT,
        'q': Action.BACK,
        'esc': Action.BACK,
        'r': Action.REFRESH,
        '/': Action.EDIT_QUERY,
        'n': Action.NEW_DOCUMENT,
        'x': Action.DELETE,
        'delete': Action.DELETE,
        'enter': Action.OPEN,
        'v': Action.OPEN,
        **_NAVIGATION,
    },
    QueryEditor: {
        'enter': Action.SUBMIT,
        'esc': Action.CANCEL,
    },
    DocumentCreator: {
        'enter': Action.SUBMIT,
        'esc': Action.CANCEL,
    },
    DeleteConfirmation: {
        'y': Action.CONFIRM,
        'Y': Action.CONFIRM,
    },
    DocumentDetail: {
        'esc': Action.BACK,
        'q': Action.BACK,
        'enter': Action.BACK,
        'v': Action.BACK,
        **_SCROLL,
        ' ': Action.PAGE_DOWN,
        'space': Action.PAGE_DOWN,
        'f': Action.PAGE_DOWN,
        'b': Action.PAGE_UP,
        'd': Action.HALF_PAGE_DOWN,
        'ctrl+d': Action.HALF_PAGE_DOWN,
        'u': Action.HALF_PAGE_UP,
        'ctrl+u': Action.HALF_PAGE_UP,
    },
}


def resolve(mode: Mode, key: str) -> Action | None:
    """What key means in mode, or None when it is not bound there."""
    return _KEYMAPS[type(mode)].get(key)


def help_text(mode: Mode) -> str:
    match mode:
        case CollectionBrowser():
            return 'enter:open index r:refresh q:quit'
        case DocumentBrowser():
            return 'esc:back r:refresh /:query n:new x:delete enter:view q:quit'
        case QueryEditor():
            return 'enter:run esc:cancel'
        case DocumentCreator(step=CreatorStep.ID):
            return 'enter:next esc:cancel'
        case DocumentCreator():
            return 'enter:create esc:cancel'
        case DeleteConfirmation():
            return 'y:confirm n:cancel'
        case DocumentDetail():
            return 'esc/q:back jk:scroll f/b:page d/u:half page'
