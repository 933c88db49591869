"""Actions and the reducer that applies them to AppState.

Every foreground mutation of the shared state goes through apply_action().
Handlers only touch the state passed in; they never perform network or file
I/O, which keeps transitions testable without a terminal or a server.
"""

import logging
from dataclasses import dataclass
from typing import Callable

from swagger_tui.formatting import delete_last_word, response_lines
from swagger_tui.parser.base import ParamLocation
from swagger_tui.state.app_state import AppState
from swagger_tui.state.types import (
    ApiResponse,
    DetailTab,
    EndpointKey,
    InputMode,
    LoadingKind,
    PanelFocus,
    RequestEditMode,
    UrlInputField,
    ViewMode,
)

logger = logging.getLogger(__name__)


class Action:
    """Base class for all reducer actions."""


# -- navigation ---------------------------------------------------------------

@dataclass(frozen=True)
class NavigateUp(Action):
    pass


@dataclass(frozen=True)
class NavigateDown(Action):
    pass


@dataclass(frozen=True)
class ResetSelection(Action):
    pass


@dataclass(frozen=True)
class NavigateToPanel(Action):
    panel: PanelFocus


@dataclass(frozen=True)
class NavigateToTab(Action):
    tab: DetailTab


@dataclass(frozen=True)
class NavigateTabForward(Action):
    pass


@dataclass(frozen=True)
class NavigateTabBackward(Action):
    pass


@dataclass(frozen=True)
class NavigateParamUp(Action):
    pass


@dataclass(frozen=True)
class NavigateParamDown(Action):
    pass


@dataclass(frozen=True)
class ScrollUp(Action):
    lines: int = 1


@dataclass(frozen=True)
class ScrollDown(Action):
    lines: int = 1


@dataclass(frozen=True)
class ResponseLineUp(Action):
    pass


@dataclass(frozen=True)
class ResponseLineDown(Action):
    pass


# -- view ---------------------------------------------------------------------

@dataclass(frozen=True)
class ToggleViewMode(Action):
    pass


@dataclass(frozen=True)
class ToggleGroupExpanded(Action):
    name: str


# -- modes --------------------------------------------------------------------

@dataclass(frozen=True)
class EnterUrlInputMode(Action):
    swagger_url: str = ""
    base_url: str = ""


@dataclass(frozen=True)
class ExitUrlInputMode(Action):
    pass


@dataclass(frozen=True)
class EnterTokenInputMode(Action):
    prefill: str = ""


@dataclass(frozen=True)
class ExitTokenInputMode(Action):
    pass


@dataclass(frozen=True)
class EnterSearchMode(Action):
    pass


@dataclass(frozen=True)
class ExitSearchMode(Action):
    pass


@dataclass(frozen=True)
class EnterBodyInputMode(Action):
    content: str = ""


@dataclass(frozen=True)
class ExitBodyInputMode(Action):
    pass


@dataclass(frozen=True)
class EnterConfirmClearTokenMode(Action):
    pass


@dataclass(frozen=True)
class ExitConfirmClearTokenMode(Action):
    pass


@dataclass(frozen=True)
class SetActiveUrlField(Action):
    field: UrlInputField


@dataclass(frozen=True)
class ToggleActiveUrlField(Action):
    pass


@dataclass(frozen=True)
class SetUrlValidationError(Action):
    message: str | None = None


@dataclass(frozen=True)
class SetUrls(Action):
    """Record a confirmed URL submission; an empty base URL keeps the current one."""

    swagger_url: str
    base_url: str = ""


# -- text buffers -------------------------------------------------------------

@dataclass(frozen=True)
class AppendToUrlInput(Action):
    text: str


@dataclass(frozen=True)
class AppendToBaseUrlInput(Action):
    text: str


@dataclass(frozen=True)
class AppendToTokenInput(Action):
    text: str


@dataclass(frozen=True)
class AppendToSearchQuery(Action):
    text: str


@dataclass(frozen=True)
class BackspaceUrlInput(Action):
    pass


@dataclass(frozen=True)
class BackspaceBaseUrlInput(Action):
    pass


@dataclass(frozen=True)
class BackspaceTokenInput(Action):
    pass


@dataclass(frozen=True)
class BackspaceSearchQuery(Action):
    pass


@dataclass(frozen=True)
class ClearUrlInput(Action):
    pass


@dataclass(frozen=True)
class ClearBaseUrlInput(Action):
    pass


@dataclass(frozen=True)
class ClearTokenInput(Action):
    pass


@dataclass(frozen=True)
class ClearSearchQuery(Action):
    pass


@dataclass(frozen=True)
class DeleteWordUrlInput(Action):
    pass


@dataclass(frozen=True)
class DeleteWordBaseUrlInput(Action):
    pass


@dataclass(frozen=True)
class DeleteWordTokenInput(Action):
    pass


# -- parameters ---------------------------------------------------------------

@dataclass(frozen=True)
class StartEditingParameter(Action):
    param_name: str
    endpoint_key: EndpointKey


@dataclass(frozen=True)
class AppendToParamBuffer(Action):
    text: str


@dataclass(frozen=True)
class BackspaceParamBuffer(Action):
    pass


@dataclass(frozen=True)
class ClearParamBuffer(Action):
    pass


@dataclass(frozen=True)
class ConfirmParameterEdit(Action):
    endpoint_key: EndpointKey


@dataclass(frozen=True)
class CancelParameterEdit(Action):
    pass


# -- body ---------------------------------------------------------------------

@dataclass(frozen=True)
class CommitBody(Action):
    endpoint_key: EndpointKey


@dataclass(frozen=True)
class SetBodyValidationError(Action):
    message: str | None = None


# -- auth and response --------------------------------------------------------

@dataclass(frozen=True)
class SetAuthToken(Action):
    token: str


@dataclass(frozen=True)
class ClearAuthToken(Action):
    pass


@dataclass(frozen=True)
class SetErrorResponse(Action):
    message: str
    endpoint_key: EndpointKey | None = None


@dataclass(frozen=True)
class ClearResponse(Action):
    pass


# -- misc ---------------------------------------------------------------------

@dataclass(frozen=True)
class ResetParamIndex(Action):
    pass


@dataclass(frozen=True)
class ToggleBodySection(Action):
    pass


@dataclass(frozen=True)
class SetYankFlash(Action):
    on: bool


@dataclass(frozen=True)
class RequestRetry(Action):
    pass


# -- reducer ------------------------------------------------------------------

_HANDLERS: dict[type, Callable[[Action, AppState], None]] = {}


def _handles(*action_types: type):
    def register(func):
        for action_type in action_types:
            _HANDLERS[action_type] = func
        return func
    return register


def apply_action(action: Action, state: AppState) -> None:
    """Apply one action to the state in place."""
    handler = _HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"No handler for action {type(action).__name__}")
    handler(action, state)


def apply_actions(actions: list[Action], state: AppState) -> None:
    for action in actions:
        apply_action(action, state)


def select_index(state: AppState, index: int) -> None:
    """Move the list selection, resetting per-endpoint view state if the endpoint changes."""
    previous = state.selected_endpoint()
    count = state.visible_count()
    state.ui.selected_index = max(0, min(index, count - 1)) if count else 0
    current = state.selected_endpoint()

    previous_key = previous.key if previous else None
    current_key = current.key if current else None
    if previous_key != current_key:
        state.reset_endpoint_view()
    if current is not None:
        state.get_or_create_config(current)


def _reset_response_view(state: AppState) -> None:
    state.ui.response_scroll = 0
    state.ui.headers_scroll = 0
    state.ui.response_selected_line = 0


def _set_tab(state: AppState, tab: DetailTab) -> None:
    old = state.ui.active_detail_tab
    if DetailTab.REQUEST in (old, tab):
        state.ui.selected_param_index = 0
    if DetailTab.RESPONSE in (old, tab):
        state.ui.response_scroll = 0
        state.ui.response_selected_line = 0
    state.ui.active_detail_tab = tab


@_handles(NavigateUp)
def _navigate_up(action, state):
    select_index(state, state.ui.selected_index - 1)


@_handles(NavigateDown)
def _navigate_down(action, state):
    select_index(state, state.ui.selected_index + 1)


@_handles(ResetSelection)
def _reset_selection(action, state):
    select_index(state, 0)


@_handles(NavigateToPanel)
def _navigate_to_panel(action, state):
    state.ui.panel_focus = action.panel


@_handles(NavigateToTab)
def _navigate_to_tab(action, state):
    _set_tab(state, action.tab)


_TAB_ORDER = [DetailTab.ENDPOINT, DetailTab.REQUEST, DetailTab.HEADERS, DetailTab.RESPONSE]


@_handles(NavigateTabForward)
def _tab_forward(action, state):
    # EndpointsList -> Endpoint -> Request -> Headers -> Response -> EndpointsList
    ui = state.ui
    if ui.panel_focus is PanelFocus.ENDPOINTS_LIST:
        ui.parked_tab = ui.active_detail_tab
        ui.panel_focus = PanelFocus.DETAILS
        _set_tab(state, DetailTab.ENDPOINT)
    elif ui.active_detail_tab is DetailTab.RESPONSE:
        ui.panel_focus = PanelFocus.ENDPOINTS_LIST
        _set_tab(state, ui.parked_tab)
    else:
        _set_tab(state, _TAB_ORDER[_TAB_ORDER.index(ui.active_detail_tab) + 1])


@_handles(NavigateTabBackward)
def _tab_backward(action, state):
    ui = state.ui
    if ui.panel_focus is PanelFocus.ENDPOINTS_LIST:
        ui.parked_tab = ui.active_detail_tab
        ui.panel_focus = PanelFocus.DETAILS
        _set_tab(state, DetailTab.RESPONSE)
    elif ui.active_detail_tab is DetailTab.ENDPOINT:
        ui.panel_focus = PanelFocus.ENDPOINTS_LIST
        _set_tab(state, ui.parked_tab)
    else:
        _set_tab(state, _TAB_ORDER[_TAB_ORDER.index(ui.active_detail_tab) - 1])


@_handles(NavigateParamUp)
def _param_up(action, state):
    state.ui.selected_param_index = max(state.ui.selected_param_index - 1, 0)


@_handles(NavigateParamDown)
def _param_down(action, state):
    count = len(state.selected_params())
    state.ui.selected_param_index = min(state.ui.selected_param_index + 1, max(count - 1, 0))


@_handles(ScrollUp, ScrollDown)
def _scroll(action, state):
    delta = action.lines if isinstance(action, ScrollDown) else -action.lines
    if state.ui.active_detail_tab is DetailTab.HEADERS:
        state.ui.headers_scroll = max(state.ui.headers_scroll + delta, 0)
    else:
        state.ui.response_scroll = max(state.ui.response_scroll + delta, 0)


@_handles(ResponseLineUp)
def _response_line_up(action, state):
    state.ui.response_selected_line = max(state.ui.response_selected_line - 1, 0)


@_handles(ResponseLineDown)
def _response_line_down(action, state):
    response = state.response_for_selected()
    if response is None:
        return
    last = max(len(response_lines(response.body)) - 1, 0)
    state.ui.response_selected_line = min(state.ui.response_selected_line + 1, last)


@_handles(ToggleViewMode)
def _toggle_view_mode(action, state):
    state.ui.view_mode = ViewMode.FLAT if state.ui.view_mode is ViewMode.GROUPED else ViewMode.GROUPED
    select_index(state, 0)


@_handles(ToggleGroupExpanded)
def _toggle_group(action, state):
    groups = state.ui.expanded_groups
    if action.name in groups:
        groups.remove(action.name)
    else:
        groups.add(action.name)
    select_index(state, state.ui.selected_index)


# -- modes --------------------------------------------------------------------

def _enter_mode(state: AppState, mode: InputMode) -> None:
    logger.debug("Input mode %s -> %s", state.input.mode.value, mode.value)
    state.input.mode = mode


@_handles(EnterUrlInputMode)
def _enter_url_mode(action, state):
    _enter_mode(state, InputMode.ENTERING_URL)
    state.input.url_input = action.swagger_url
    state.input.base_url_input = action.base_url
    state.input.active_url_field = UrlInputField.SWAGGER_URL
    state.input.url_validation_error = None


@_handles(ExitUrlInputMode)
def _exit_url_mode(action, state):
    _enter_mode(state, InputMode.NORMAL)
    state.input.url_input = ""
    state.input.base_url_input = ""
    state.input.active_url_field = UrlInputField.SWAGGER_URL
    state.input.url_validation_error = None


@_handles(EnterTokenInputMode)
def _enter_token_mode(action, state):
    _enter_mode(state, InputMode.ENTERING_TOKEN)
    state.input.token_input = action.prefill


@_handles(ExitTokenInputMode)
def _exit_token_mode(action, state):
    _enter_mode(state, InputMode.NORMAL)
    state.input.token_input = ""


@_handles(EnterSearchMode)
def _enter_search_mode(action, state):
    _enter_mode(state, InputMode.SEARCHING)


@_handles(ExitSearchMode)
def _exit_search_mode(action, state):
    _enter_mode(state, InputMode.NORMAL)


@_handles(EnterBodyInputMode)
def _enter_body_mode(action, state):
    _enter_mode(state, InputMode.ENTERING_BODY)
    state.input.body_editor.set_content(action.content)
    state.input.body_editor.mark_saved()
    state.input.body_validation_error = None


@_handles(ExitBodyInputMode)
def _exit_body_mode(action, state):
    _enter_mode(state, InputMode.NORMAL)
    state.input.body_editor.clear()
    state.input.body_editor.mark_saved()
    state.input.body_validation_error = None


@_handles(EnterConfirmClearTokenMode)
def _enter_confirm_mode(action, state):
    _enter_mode(state, InputMode.CONFIRM_CLEAR_TOKEN)


@_handles(ExitConfirmClearTokenMode)
def _exit_confirm_mode(action, state):
    _enter_mode(state, InputMode.NORMAL)


@_handles(SetActiveUrlField)
def _set_url_field(action, state):
    state.input.active_url_field = action.field


@_handles(ToggleActiveUrlField)
def _toggle_url_field(action, state):
    if state.input.active_url_field is UrlInputField.SWAGGER_URL:
        state.input.active_url_field = UrlInputField.BASE_URL
    else:
        state.input.active_url_field = UrlInputField.SWAGGER_URL


@_handles(SetUrlValidationError)
def _set_url_error(action, state):
    state.input.url_validation_error = action.message


@_handles(SetUrls)
def _set_urls(action, state):
    state.data.swagger_url = action.swagger_url
    if action.base_url:
        state.request.base_url = action.base_url


# -- text buffers -------------------------------------------------------------

@_handles(AppendToUrlInput)
def _append_url(action, state):
    state.input.url_input += action.text
    state.input.url_validation_error = None


@_handles(AppendToBaseUrlInput)
def _append_base_url(action, state):
    state.input.base_url_input += action.text
    state.input.url_validation_error = None


@_handles(AppendToTokenInput)
def _append_token(action, state):
    state.input.token_input += action.text


@_handles(BackspaceUrlInput)
def _backspace_url(action, state):
    state.input.url_input = state.input.url_input[:-1]


@_handles(BackspaceBaseUrlInput)
def _backspace_base_url(action, state):
    state.input.base_url_input = state.input.base_url_input[:-1]


@_handles(BackspaceTokenInput)
def _backspace_token(action, state):
    state.input.token_input = state.input.token_input[:-1]


@_handles(ClearUrlInput)
def _clear_url(action, state):
    state.input.url_input = ""


@_handles(ClearBaseUrlInput)
def _clear_base_url(action, state):
    state.input.base_url_input = ""


@_handles(ClearTokenInput)
def _clear_token_input(action, state):
    state.input.token_input = ""


@_handles(DeleteWordUrlInput)
def _delete_word_url(action, state):
    state.input.url_input = delete_last_word(state.input.url_input)


@_handles(DeleteWordBaseUrlInput)
def _delete_word_base_url(action, state):
    state.input.base_url_input = delete_last_word(state.input.base_url_input)


@_handles(DeleteWordTokenInput)
def _delete_word_token(action, state):
    state.input.token_input = delete_last_word(state.input.token_input)


def _set_search_query(state: AppState, query: str) -> None:
    state.search.query = query
    state.update_filtered_endpoints()
    select_index(state, 0)


@_handles(AppendToSearchQuery)
def _append_search(action, state):
    _set_search_query(state, state.search.query + action.text)


@_handles(BackspaceSearchQuery)
def _backspace_search(action, state):
    _set_search_query(state, state.search.query[:-1])


@_handles(ClearSearchQuery)
def _clear_search(action, state):
    _set_search_query(state, "")


# -- parameters ---------------------------------------------------------------

@_handles(StartEditingParameter)
def _start_editing(action, state):
    state.request.edit_mode = RequestEditMode.editing(action.param_name, action.endpoint_key)
    config = state.get_or_create_config_by_key(action.endpoint_key)
    value = config.path_params.get(action.param_name)
    if value is None:
        value = config.query_params.get(action.param_name, "")
    state.request.param_edit_buffer = value


@_handles(AppendToParamBuffer)
def _append_param(action, state):
    if state.request.edit_mode.is_editing:
        state.request.param_edit_buffer += action.text


@_handles(BackspaceParamBuffer)
def _backspace_param(action, state):
    state.request.param_edit_buffer = state.request.param_edit_buffer[:-1]


@_handles(ClearParamBuffer)
def _clear_param(action, state):
    state.request.param_edit_buffer = ""


@_handles(ConfirmParameterEdit)
def _confirm_param(action, state):
    edit_mode = state.request.edit_mode
    param_name = edit_mode.param_name
    if param_name is not None:
        # The value belongs to the endpoint the edit started on.
        key = edit_mode.endpoint_key or action.endpoint_key
        endpoint = state.endpoint_by_key(key)
        is_path = endpoint is not None and any(
            p.name == param_name and p.location is ParamLocation.PATH
            for p in endpoint.parameters
        )
        config = state.get_or_create_config_by_key(key)
        target = config.path_params if is_path else config.query_params
        target[param_name] = state.request.param_edit_buffer
    state.request.edit_mode = RequestEditMode.viewing()
    state.request.param_edit_buffer = ""


@_handles(CancelParameterEdit)
def _cancel_param(action, state):
    state.request.edit_mode = RequestEditMode.viewing()
    state.request.param_edit_buffer = ""


# -- body ---------------------------------------------------------------------

@_handles(CommitBody)
def _commit_body(action, state):
    editor = state.input.body_editor
    if editor.is_empty():
        body = None
    else:
        error = editor.format_json()
        if error is not None:
            state.input.body_validation_error = error
            return
        body = editor.content
    state.get_or_create_config_by_key(action.endpoint_key).body = body
    editor.mark_saved()
    _exit_body_mode(ExitBodyInputMode(), state)


@_handles(SetBodyValidationError)
def _set_body_error(action, state):
    state.input.body_validation_error = action.message


# -- auth and response --------------------------------------------------------

@_handles(SetAuthToken)
def _set_token(action, state):
    state.request.auth.set_token(action.token)


@_handles(ClearAuthToken)
def _clear_auth(action, state):
    state.request.auth.clear_token()


@_handles(SetErrorResponse)
def _set_error_response(action, state):
    state.request.current_response = ApiResponse.error(action.message)
    if action.endpoint_key is not None:
        state.request.response_endpoint = action.endpoint_key
    _reset_response_view(state)


@_handles(ClearResponse)
def _clear_response(action, state):
    state.request.current_response = None
    state.request.response_endpoint = None


# -- misc ---------------------------------------------------------------------

@_handles(ResetParamIndex)
def _reset_param_index(action, state):
    state.ui.selected_param_index = 0


@_handles(ToggleBodySection)
def _toggle_body_section(action, state):
    state.ui.body_section_expanded = not state.ui.body_section_expanded


@_handles(SetYankFlash)
def _set_yank_flash(action, state):
    state.ui.yank_flash = action.on


@_handles(RequestRetry)
def _request_retry(action, state):
    if state.data.loading_state.kind is LoadingKind.ERROR:
        state.data.retry_count += 1
