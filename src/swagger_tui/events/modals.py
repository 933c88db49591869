"""Key mapping for the search bar and the URL, token and confirmation modals.

Each mapper receives the key, the batched text for plain characters (a
terminal paste arrives as many key events and is coalesced by the router)
and the state fields it reads. They return actions and never touch state.
"""

from dataclasses import dataclass, field

from swagger_tui.actions import (
    Action,
    AppendToBaseUrlInput,
    AppendToSearchQuery,
    AppendToTokenInput,
    AppendToUrlInput,
    BackspaceBaseUrlInput,
    BackspaceSearchQuery,
    BackspaceTokenInput,
    BackspaceUrlInput,
    ClearAuthToken,
    ClearBaseUrlInput,
    ClearSearchQuery,
    ClearTokenInput,
    ClearUrlInput,
    DeleteWordBaseUrlInput,
    DeleteWordTokenInput,
    DeleteWordUrlInput,
    ExitConfirmClearTokenMode,
    ExitSearchMode,
    ExitTokenInputMode,
    ExitUrlInputMode,
    NavigateDown,
    NavigateUp,
    SetAuthToken,
    SetUrls,
    SetUrlValidationError,
    ToggleActiveUrlField,
)
from swagger_tui.config import validate_url
from swagger_tui.state.types import UrlInputField, UrlSubmission

from .keys import KeyCode, KeyEvent


@dataclass
class ModalResult:
    actions: list[Action] = field(default_factory=list)
    submission: UrlSubmission | None = None


def map_search_key(key: KeyEvent, text: str | None = None) -> list[Action]:
    if key.is_plain_char:
        return [AppendToSearchQuery(text or key.char)]
    if key.code is KeyCode.ENTER:
        return [ExitSearchMode()]
    if key.code is KeyCode.ESC:
        return [ClearSearchQuery(), ExitSearchMode()]
    if key.code is KeyCode.BACKSPACE:
        return [BackspaceSearchQuery()]
    if key.is_ctrl("u"):
        return [ClearSearchQuery()]
    if key.code is KeyCode.DOWN:
        return [NavigateDown()]
    if key.code is KeyCode.UP:
        return [NavigateUp()]
    return []


_URL_FIELD_ACTIONS = {
    UrlInputField.SWAGGER_URL: (AppendToUrlInput, BackspaceUrlInput, DeleteWordUrlInput, ClearUrlInput),
    UrlInputField.BASE_URL: (
        AppendToBaseUrlInput, BackspaceBaseUrlInput, DeleteWordBaseUrlInput, ClearBaseUrlInput,
    ),
}


def map_url_key(
    key: KeyEvent,
    active_field: UrlInputField,
    url_input: str,
    base_url_input: str,
    text: str | None = None,
) -> ModalResult:
    append, backspace, delete_word, clear = _URL_FIELD_ACTIONS[active_field]

    if key.is_plain_char:
        return ModalResult([append(text or key.char)])
    if key.code in (KeyCode.TAB, KeyCode.BACKTAB):
        return ModalResult([ToggleActiveUrlField()])
    if key.code is KeyCode.ESC:
        return ModalResult([ExitUrlInputMode()])
    if key.code is KeyCode.BACKSPACE:
        return ModalResult([backspace()])
    if key.is_ctrl("w"):
        return ModalResult([delete_word()])
    if key.is_ctrl("l"):
        return ModalResult([clear()])
    if key.code is KeyCode.ENTER:
        return submit_urls(url_input, base_url_input)
    return ModalResult()


def submit_urls(url_input: str, base_url_input: str) -> ModalResult:
    """Validate both fields. The base URL is optional but must be valid when given."""
    swagger_url = url_input.strip()
    base_url = base_url_input.strip()

    error = validate_url(swagger_url)
    if error is not None:
        return ModalResult([SetUrlValidationError(f"Swagger URL: {error}")])
    if base_url:
        error = validate_url(base_url)
        if error is not None:
            return ModalResult([SetUrlValidationError(f"Base URL: {error}")])

    return ModalResult(
        [SetUrls(swagger_url, base_url), ExitUrlInputMode()],
        UrlSubmission(swagger_url, base_url or None),
    )


def map_token_key(key: KeyEvent, token_input: str, text: str | None = None) -> list[Action]:
    if key.is_plain_char:
        return [AppendToTokenInput(text or key.char)]
    if key.code is KeyCode.ENTER:
        token = token_input.strip()
        return [SetAuthToken(token), ExitTokenInputMode()] if token else [ExitTokenInputMode()]
    if key.code is KeyCode.ESC:
        return [ExitTokenInputMode()]
    if key.code is KeyCode.BACKSPACE:
        return [BackspaceTokenInput()]
    if key.is_ctrl("w"):
        return [DeleteWordTokenInput()]
    if key.is_ctrl("l"):
        return [ClearTokenInput()]
    return []


def map_confirm_clear_key(key: KeyEvent) -> list[Action]:
    if key.code is KeyCode.CHAR and not key.ctrl and key.char in ("y", "Y"):
        return [ClearAuthToken(), ExitConfirmClearTokenMode()]
    if key.code is KeyCode.ESC or (key.is_plain_char and key.char in ("n", "N")):
        return [ExitConfirmClearTokenMode()]
    return []
