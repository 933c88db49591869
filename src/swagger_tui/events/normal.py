"""Key mapping for Normal mode, including parameter editing.

map_normal_key() is pure: it looks only at the key and a NormalContext
snapshot, and returns the actions to apply plus an optional command the
router must carry out (quit, execute, retry, yank).
"""

from dataclasses import dataclass, field
from enum import Enum

from swagger_tui.actions import (
    Action,
    AppendToParamBuffer,
    BackspaceParamBuffer,
    CancelParameterEdit,
    ClearSearchQuery,
    ConfirmParameterEdit,
    EnterBodyInputMode,
    EnterConfirmClearTokenMode,
    EnterSearchMode,
    EnterTokenInputMode,
    EnterUrlInputMode,
    NavigateDown,
    NavigateParamDown,
    NavigateParamUp,
    NavigateTabBackward,
    NavigateTabForward,
    NavigateToPanel,
    NavigateUp,
    ResponseLineDown,
    ResponseLineUp,
    ScrollDown,
    ScrollUp,
    StartEditingParameter,
    ToggleBodySection,
    ToggleGroupExpanded,
    ToggleViewMode,
)
from swagger_tui.parser.base import ApiEndpoint
from swagger_tui.state.app_state import AppState
from swagger_tui.state.types import DetailTab, PanelFocus

from .keys import KeyCode, KeyEvent

SCROLL_STEP = 10

EMPTY_BODY = "{}"


class Command(Enum):
    QUIT = "quit"
    EXECUTE = "execute"
    RETRY = "retry"
    YANK = "yank"


@dataclass
class Dispatch:
    actions: list[Action] = field(default_factory=list)
    command: Command | None = None


@dataclass(frozen=True)
class NormalContext:
    """What the Normal-mode mapping needs to know about the current state."""

    panel: PanelFocus = PanelFocus.ENDPOINTS_LIST
    tab: DetailTab = DetailTab.ENDPOINT
    editing: bool = False
    token: str | None = None
    swagger_url: str = ""
    base_url: str = ""
    selected_endpoint: ApiEndpoint | None = None
    selected_group: str | None = None
    selected_param: str | None = None
    body: str | None = None

    @classmethod
    def from_state(cls, state: AppState) -> "NormalContext":
        endpoint = state.selected_endpoint()
        params = state.selected_params()
        index = state.ui.selected_param_index
        config = state.config_for(endpoint.key) if endpoint else None
        return cls(
            panel=state.ui.panel_focus,
            tab=state.ui.active_detail_tab,
            editing=state.request.edit_mode.is_editing,
            token=state.request.auth.token,
            swagger_url=state.data.swagger_url,
            base_url=state.request.base_url,
            selected_endpoint=endpoint,
            selected_group=state.selected_group(),
            selected_param=params[index].name if index < len(params) else None,
            body=config.body if config else None,
        )

    def on_tab(self, tab: DetailTab) -> bool:
        return self.panel is PanelFocus.DETAILS and self.tab is tab


def map_normal_key(key: KeyEvent, ctx: NormalContext) -> Dispatch:
    if ctx.editing:
        return _map_editing_key(key, ctx)

    if key.code is KeyCode.CHAR and key.ctrl:
        return _map_ctrl_key(key.char, ctx)
    if key.code is KeyCode.CHAR:
        return _map_char(key.char, ctx)
    return _map_special(key.code, ctx)


def _map_editing_key(key: KeyEvent, ctx: NormalContext) -> Dispatch:
    # Every plain character belongs to the buffer; nothing else leaks through.
    if key.is_plain_char:
        return Dispatch([AppendToParamBuffer(key.char)])
    if key.code is KeyCode.ENTER:
        if ctx.selected_endpoint is None:
            return Dispatch([CancelParameterEdit()])
        return Dispatch([ConfirmParameterEdit(ctx.selected_endpoint.key)])
    if key.code is KeyCode.ESC:
        return Dispatch([CancelParameterEdit()])
    if key.code is KeyCode.BACKSPACE:
        return Dispatch([BackspaceParamBuffer()])
    return Dispatch()


def _move(ctx: NormalContext, down: bool) -> Dispatch:
    if ctx.panel is PanelFocus.ENDPOINTS_LIST:
        return Dispatch([NavigateDown() if down else NavigateUp()])
    if ctx.tab is DetailTab.REQUEST:
        return Dispatch([NavigateParamDown() if down else NavigateParamUp()])
    if ctx.tab is DetailTab.RESPONSE:
        return Dispatch([ResponseLineDown() if down else ResponseLineUp()])
    if ctx.tab is DetailTab.HEADERS:
        return Dispatch([ScrollDown() if down else ScrollUp()])
    return Dispatch()


def _activate(ctx: NormalContext) -> Dispatch:
    if ctx.selected_group is not None:
        return Dispatch([ToggleGroupExpanded(ctx.selected_group)])
    if ctx.selected_endpoint is not None:
        return Dispatch(command=Command.EXECUTE)
    return Dispatch()


def _map_char(char: str, ctx: NormalContext) -> Dispatch:
    if char == "q":
        return Dispatch(command=Command.QUIT)
    if char == "j":
        return _move(ctx, down=True)
    if char == "k":
        return _move(ctx, down=False)
    if char == "1":
        return Dispatch([NavigateToPanel(PanelFocus.ENDPOINTS_LIST)])
    if char == "2":
        return Dispatch([NavigateToPanel(PanelFocus.DETAILS)])
    if char == "g":
        return Dispatch([ToggleViewMode()])
    if char == "/":
        return Dispatch([EnterSearchMode()])
    if char == "a":
        return Dispatch([EnterTokenInputMode(ctx.token or "")])
    if char == "A":
        return Dispatch([EnterConfirmClearTokenMode()] if ctx.token else [])
    if char == ",":
        return Dispatch([EnterUrlInputMode(ctx.swagger_url, ctx.base_url)])
    if char == " ":
        return _activate(ctx)

    endpoint = ctx.selected_endpoint
    if char == "b":
        if endpoint is not None and endpoint.supports_body() and ctx.on_tab(DetailTab.REQUEST):
            return Dispatch([EnterBodyInputMode(ctx.body or EMPTY_BODY)])
        return Dispatch()
    if char == "e":
        if endpoint is not None and ctx.selected_param and ctx.on_tab(DetailTab.REQUEST):
            return Dispatch([StartEditingParameter(ctx.selected_param, endpoint.key)])
        return Dispatch()
    if char == "x":
        return Dispatch([ToggleBodySection()] if ctx.on_tab(DetailTab.REQUEST) else [])
    if char == "y":
        return Dispatch(command=Command.YANK) if ctx.on_tab(DetailTab.RESPONSE) else Dispatch()
    return Dispatch()


def _map_ctrl_key(char: str, ctx: NormalContext) -> Dispatch:
    if char == "r":
        return Dispatch(command=Command.RETRY)
    if char == "l":
        return Dispatch([ClearSearchQuery()])
    if char == "u" and ctx.panel is PanelFocus.DETAILS:
        return Dispatch([ScrollUp(SCROLL_STEP)])
    if char == "d" and ctx.panel is PanelFocus.DETAILS:
        return Dispatch([ScrollDown(SCROLL_STEP)])
    return Dispatch()


def _map_special(code: KeyCode, ctx: NormalContext) -> Dispatch:
    if code is KeyCode.DOWN:
        return _move(ctx, down=True)
    if code is KeyCode.UP:
        return _move(ctx, down=False)
    if code is KeyCode.TAB:
        return Dispatch([NavigateTabForward()])
    if code is KeyCode.BACKTAB:
        return Dispatch([NavigateTabBackward()])
    if code is KeyCode.ENTER and ctx.panel is PanelFocus.ENDPOINTS_LIST:
        return _activate(ctx)
    if code is KeyCode.PAGE_UP and ctx.panel is PanelFocus.DETAILS:
        return Dispatch([ScrollUp(SCROLL_STEP)])
    if code is KeyCode.PAGE_DOWN and ctx.panel is PanelFocus.DETAILS:
        return Dispatch([ScrollDown(SCROLL_STEP)])
    return Dispatch()
