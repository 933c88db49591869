"""Read-only projection of AppState onto a curses screen.

The text of every panel is built by plain functions returning (text, Style)
lines so it can be tested without a terminal; CursesRenderer only maps
styles to curses attributes and places the lines.
"""

import curses
from enum import Enum

from swagger_tui.formatting import response_lines
from swagger_tui.parser.base import ApiEndpoint, Param, ParamLocation
from swagger_tui.request import build_request_url
from swagger_tui.state.app_state import AppState
from swagger_tui.state.types import (
    DETAIL_TABS,
    ApiResponse,
    DetailTab,
    EndpointItem,
    GroupHeader,
    InputMode,
    LoadingKind,
    LoadingState,
    PanelFocus,
    UrlInputField,
    ViewMode,
)

SPINNER_FRAMES = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"


class Style(Enum):
    NORMAL = "normal"
    TITLE = "title"
    LABEL = "label"
    DIM = "dim"
    SELECTED = "selected"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


Line = tuple[str, Style]


# -- text helpers ---------------------------------------------------------------

def loading_label(loading: LoadingState, endpoint_count: int, spinner: str = "", retry_count: int = 0) -> str:
    if loading.kind is LoadingKind.FETCHING:
        return f"{spinner} Fetching...".strip()
    if loading.kind is LoadingKind.PARSING:
        return f"{spinner} Parsing...".strip()
    if loading.kind is LoadingKind.COMPLETE:
        return f"{endpoint_count} endpoints loaded"
    if loading.kind is LoadingKind.ERROR:
        label = f"Error: {loading.message}"
        if retry_count:
            label += f" (retry {retry_count})"
        return label
    return "Idle"


def error_lines(message: str, retry_count: int) -> list[Line]:
    lines: list[Line] = [(f"Error loading endpoints: {message}", Style.ERROR)]
    if retry_count:
        lines.append((f"Retry attempt: {retry_count}", Style.WARNING))
    lines.append(("Press Ctrl+R to retry", Style.DIM))
    return lines


def format_header(state: AppState, spinner: str = "") -> str:
    url = state.data.swagger_url or "(no swagger URL, press ',')"
    status = loading_label(
        state.data.loading_state, len(state.data.endpoints), spinner, state.data.retry_count
    )
    auth = f"token {state.request.auth.masked()}" if state.request.auth.is_authenticated() else "no token"
    return f"swagger-tui - {url} [{status}] | {auth}"


def format_status_line(response: ApiResponse) -> str:
    millis = round(response.duration * 1000)
    if response.is_error:
        return f"Error: {response.error_message}  ({millis}ms)"
    return f"Status: {response.status} {response.status_text}  Duration: {millis}ms".rstrip()


def status_style(response: ApiResponse) -> Style:
    if response.is_error or response.status >= 400:
        return Style.ERROR
    if response.status >= 300:
        return Style.WARNING
    return Style.SUCCESS


def format_endpoint_line(endpoint: ApiEndpoint, executing: bool = False, indent: str = "") -> str:
    marker = " *" if executing else ""
    return f"{indent}{endpoint.method:7} {endpoint.path}{marker}"


def format_param_line(
    param: Param,
    value: str,
    selected: bool = False,
    editing_buffer: str | None = None,
) -> str:
    indicator = "> " if selected else "  "
    required = "*" if param.required or param.location is ParamLocation.PATH else ""
    shown = f"[{editing_buffer}_]" if editing_buffer is not None else f"[{value}]"
    return f"{indicator}{param.name}{required}: {shown}  ({param.location.value}, {param.type_label})"


def tab_bar(active: DetailTab, executing: bool = False) -> str:
    labels = []
    for tab in DETAIL_TABS:
        label = tab.value
        if tab is DetailTab.RESPONSE and executing:
            label += " ..."
        labels.append(f"[{label}]" if tab is active else f" {label} ")
    return " ".join(labels)


def list_lines(state: AppState) -> list[Line]:
    lines: list[Line] = []
    executing = state.request.executing_endpoint
    for index, item in enumerate(state.render_items()):
        selected = index == state.ui.selected_index
        if isinstance(item, GroupHeader):
            icon = "v" if item.expanded else ">"
            text = f"{icon} {item.name} ({item.count})"
            lines.append((text, Style.SELECTED if selected else Style.TITLE))
        elif isinstance(item, EndpointItem):
            indent = "" if state.ui.view_mode is ViewMode.FLAT else "  "
            text = format_endpoint_line(item.endpoint, item.endpoint.key == executing, indent)
            lines.append((text, Style.SELECTED if selected else Style.NORMAL))
    if not lines:
        if state.data.loading_state.is_error:
            lines.extend(error_lines(state.data.loading_state.message, state.data.retry_count))
        elif state.search.query:
            lines.append(("No endpoints match the search", Style.DIM))
        else:
            lines.append(("No endpoints loaded", Style.DIM))
    return lines


def endpoint_tab_lines(endpoint: ApiEndpoint) -> list[Line]:
    lines: list[Line] = [(f"{endpoint.method} {endpoint.path}", Style.TITLE)]
    if endpoint.summary:
        lines.append((f"Summary: {endpoint.summary}", Style.NORMAL))
    if endpoint.tags:
        lines.append((f"Tags: {', '.join(endpoint.tags)}", Style.NORMAL))
    if endpoint.parameters:
        lines.append(("", Style.NORMAL))
        lines.append(("Parameters:", Style.LABEL))
        for p in endpoint.parameters:
            required = " (required)" if p.required else ""
            lines.append((f"  {p.name} in {p.location.value}: {p.type_label}{required}", Style.NORMAL))
            if p.description:
                lines.append((f"      {p.description}", Style.DIM))
    return lines


def request_tab_lines(state: AppState, endpoint: ApiEndpoint) -> list[Line]:
    config = state.config_for(endpoint.key)
    preview = build_request_url(state.request.base_url, endpoint, config)
    lines: list[Line] = [("URL:", Style.LABEL), (f"  {preview}", Style.NORMAL), ("", Style.NORMAL)]

    params = endpoint.editable_params()
    if params:
        lines.append(("Parameters (e: edit, Enter: save, Esc: cancel):", Style.LABEL))
    else:
        lines.append(("No path or query parameters", Style.DIM))
    editing = state.request.edit_mode.param_name
    for index, param in enumerate(params):
        selected = index == state.ui.selected_param_index
        value = config.value_for(param.name, param.location) if config else ""
        buffer = state.request.param_edit_buffer if selected and editing == param.name else None
        text = format_param_line(param, value, selected, buffer)
        lines.append((text, Style.SELECTED if selected else Style.NORMAL))

    if endpoint.supports_body():
        lines.append(("", Style.NORMAL))
        icon = "v" if state.ui.body_section_expanded else ">"
        lines.append((f"{icon} Request Body (b: edit, x: toggle):", Style.LABEL))
        if state.ui.body_section_expanded:
            body = config.body if config else None
            if body:
                lines.extend((f"  {line}", Style.NORMAL) for line in body.splitlines())
            else:
                lines.append(("  (no body)", Style.DIM))
    return lines


def headers_tab_lines(response: ApiResponse | None) -> list[Line]:
    if response is None:
        return [("No response yet. Press space to execute.", Style.DIM)]
    if response.is_error or not response.headers:
        return [("No headers", Style.DIM)]
    return [(f"{key}: {value}", Style.NORMAL) for key, value in sorted(response.headers.items())]


def response_tab_lines(response: ApiResponse | None, selected_line: int) -> list[Line]:
    if response is None:
        return [("No response yet. Press space to execute.", Style.DIM)]
    lines: list[Line] = [(format_status_line(response), status_style(response)), ("", Style.NORMAL)]
    if response.is_error:
        return lines
    for index, line in enumerate(response_lines(response.body)):
        lines.append((line, Style.SELECTED if index == selected_line else Style.NORMAL))
    return lines


def detail_lines(state: AppState) -> list[Line]:
    endpoint = state.selected_endpoint()
    if endpoint is None:
        return [("Select an endpoint", Style.DIM)]
    tab = state.ui.active_detail_tab
    if tab is DetailTab.ENDPOINT:
        return endpoint_tab_lines(endpoint)
    if tab is DetailTab.REQUEST:
        return request_tab_lines(state, endpoint)
    if state.is_executing(endpoint.key):
        return [("Executing request...", Style.WARNING)]
    response = state.response_for_selected()
    if tab is DetailTab.HEADERS:
        return headers_tab_lines(response)
    return response_tab_lines(response, state.ui.response_selected_line)


def footer_hints(state: AppState) -> str:
    mode = state.input.mode
    if mode is InputMode.SEARCHING:
        return "type to filter | Enter: keep | Esc: clear | Ctrl+U: clear query"
    if mode is InputMode.ENTERING_URL:
        return "Tab: switch field | Enter: save | Esc: cancel | Ctrl+W: delete word | Ctrl+L: clear"
    if mode is InputMode.ENTERING_TOKEN:
        return "Enter: save | Esc: cancel | Ctrl+W: delete word | Ctrl+L: clear"
    if mode is InputMode.CONFIRM_CLEAR_TOKEN:
        return "y: clear token | n/Esc: cancel"
    if mode is InputMode.ENTERING_BODY:
        return "Enter: save | Ctrl+N: newline | Esc: discard | Ctrl+L: clear"
    if state.request.edit_mode.is_editing:
        return "type value | Enter: save | Esc: cancel"
    if state.ui.yank_flash:
        return "Copied to clipboard"
    hints = "q: quit | j/k: move | Tab: next tab | g: group | /: search | a: token | ,: URLs | space: execute"
    if state.ui.panel_focus is PanelFocus.DETAILS and state.ui.active_detail_tab is DetailTab.RESPONSE:
        hints += " | y: copy value"
    return hints


def search_bar(state: AppState) -> str | None:
    if state.input.mode is not InputMode.SEARCHING and not state.search.query:
        return None
    cursor = "_" if state.input.mode is InputMode.SEARCHING else ""
    count = len(state.active_endpoints())
    return f"/{state.search.query}{cursor}  [{count}/{len(state.data.endpoints)}]"


def modal_lines(state: AppState, max_rows: int | None = None) -> tuple[str, list[Line]] | None:
    """Title and content of the active modal, or None in Normal and Searching modes.

    With ``max_rows`` the body editor is windowed so the cursor row stays visible.
    """
    mode = state.input.mode
    if mode is InputMode.ENTERING_URL:
        swagger_active = state.input.active_url_field is UrlInputField.SWAGGER_URL
        lines = [
            ("Swagger URL:", Style.LABEL),
            (f"  {state.input.url_input}{'_' if swagger_active else ''}",
             Style.SELECTED if swagger_active else Style.NORMAL),
            ("Base URL (optional):", Style.LABEL),
            (f"  {state.input.base_url_input}{'' if swagger_active else '_'}",
             Style.NORMAL if swagger_active else Style.SELECTED),
        ]
        if state.input.url_validation_error:
            lines.append((state.input.url_validation_error, Style.ERROR))
        return "Configure URLs", lines
    if mode is InputMode.ENTERING_TOKEN:
        return "Bearer Token", [(f"{state.input.token_input}_", Style.NORMAL)]
    if mode is InputMode.CONFIRM_CLEAR_TOKEN:
        return "Clear Token", [("Clear the stored bearer token? (y/n)", Style.WARNING)]
    if mode is InputMode.ENTERING_BODY:
        editor = state.input.body_editor
        error = state.input.body_validation_error
        start, stop = 0, len(editor.lines)
        if max_rows is not None:
            rows = max(max_rows - (1 if error else 0), 1)
            start = list_window_start(editor.row, rows, len(editor.lines))
            stop = start + rows
        lines = []
        for row, line in enumerate(editor.lines[start:stop], start):
            if row == editor.row:
                line = line[:editor.col] + "|" + line[editor.col:]
            lines.append((line, Style.NORMAL))
        if error:
            lines.append((error, Style.ERROR))
        return "Request Body (JSON)", lines
    return None


def list_window_start(selected: int, height: int, count: int) -> int:
    """First visible row so that ``selected`` stays on screen."""
    if height <= 0 or count <= height:
        return 0
    start = max(selected - height + 1, 0)
    return min(start, count - height)


# -- curses renderer ----------------------------------------------------------

class CursesRenderer:
    """Draws one frame per call; never mutates state."""

    def __init__(self, screen: "curses.window"):
        self.screen = screen
        self.styles = self._init_styles()

    def _init_styles(self) -> dict[Style, int]:
        styles = {
            Style.NORMAL: curses.A_NORMAL,
            Style.TITLE: curses.A_BOLD,
            Style.LABEL: curses.A_BOLD,
            Style.DIM: curses.A_DIM,
            Style.SELECTED: curses.A_REVERSE,
            Style.SUCCESS: curses.A_BOLD,
            Style.WARNING: curses.A_BOLD,
            Style.ERROR: curses.A_BOLD,
        }
        if curses.has_colors():
            curses.start_color()
            try:
                curses.use_default_colors()
                background = -1
            except curses.error:
                background = curses.COLOR_BLACK
            curses.init_pair(1, curses.COLOR_CYAN, background)
            curses.init_pair(2, curses.COLOR_GREEN, background)
            curses.init_pair(3, curses.COLOR_YELLOW, background)
            curses.init_pair(4, curses.COLOR_RED, background)
            styles[Style.LABEL] = curses.color_pair(1) | curses.A_BOLD
            styles[Style.SUCCESS] = curses.color_pair(2) | curses.A_BOLD
            styles[Style.WARNING] = curses.color_pair(3) | curses.A_BOLD
            styles[Style.ERROR] = curses.color_pair(4) | curses.A_BOLD
        return styles

    def draw(self, state: AppState, spinner: str = "") -> None:
        screen = self.screen
        screen.erase()
        height, width = screen.getmaxyx()
        if height < 6 or width < 20:
            self._put(0, 0, "Terminal too small", Style.WARNING, width)
            screen.refresh()
            return

        self._put(0, 0, format_header(state, spinner), Style.TITLE, width)
        top = 1
        bar = search_bar(state)
        if bar is not None:
            self._put(top, 0, bar, Style.LABEL, width)
            top += 1

        body_height = height - top - 1
        list_width = max(width * 2 // 5, 20)
        self._draw_list(state, top, body_height, list_width)
        self._draw_details(state, top, body_height, list_width + 1, width - list_width - 1)
        self._put(height - 1, 0, footer_hints(state), Style.DIM, width)

        modal = modal_lines(state, max_rows=height - 2)
        if modal is not None:
            self._draw_modal(*modal, height, width)
        screen.refresh()

    def _draw_list(self, state: AppState, top: int, height: int, width: int) -> None:
        focused = state.ui.panel_focus is PanelFocus.ENDPOINTS_LIST
        title = f"{'*' if focused else ' '}[1] Endpoints ({state.ui.view_mode.value})"
        self._put(top, 0, title, Style.TITLE if focused else Style.DIM, width)
        lines = list_lines(state)
        rows = height - 1
        start = list_window_start(state.ui.selected_index, rows, len(lines))
        for offset, (text, style) in enumerate(lines[start:start + rows]):
            self._put(top + 1 + offset, 0, text, style, width)

    def _draw_details(self, state: AppState, top: int, height: int, left: int, width: int) -> None:
        focused = state.ui.panel_focus is PanelFocus.DETAILS
        endpoint = state.selected_endpoint()
        executing = endpoint is not None and state.is_executing(endpoint.key)
        title = f"{'*' if focused else ' '}[2] {tab_bar(state.ui.active_detail_tab, executing)}"
        self._put(top, left, title, Style.TITLE if focused else Style.DIM, width)

        lines = detail_lines(state)
        tab = state.ui.active_detail_tab
        if tab is DetailTab.HEADERS:
            scroll = state.ui.headers_scroll
        elif tab in (DetailTab.RESPONSE, DetailTab.REQUEST):
            scroll = state.ui.response_scroll
        else:
            scroll = 0
        if tab is DetailTab.RESPONSE:
            # keep the selected response line (offset by the status lines) visible
            scroll = max(scroll, state.ui.response_selected_line + 2 - (height - 2))
        scroll = min(scroll, max(len(lines) - 1, 0))
        for offset, (text, style) in enumerate(lines[scroll:scroll + height - 1]):
            self._put(top + 1 + offset, left, text, style, width)

    def _draw_modal(self, title: str, lines: list[Line], height: int, width: int) -> None:
        modal_width = min(max(width * 3 // 4, 30), width)
        modal_height = min(len(lines) + 2, height)
        y = (height - modal_height) // 2
        x = (width - modal_width) // 2
        window = curses.newwin(modal_height, modal_width, y, x)
        window.erase()
        window.box()
        window.addnstr(0, 2, f" {title} ", modal_width - 4, self.styles[Style.TITLE])
        for offset, (text, style) in enumerate(lines[:modal_height - 2]):
            window.addnstr(1 + offset, 2, text, modal_width - 4, self.styles[style])
        window.refresh()

    def _put(self, y: int, x: int, text: str, style: Style, width: int) -> None:
        try:
            self.screen.addnstr(y, x, text, max(width - 1, 0), self.styles[style])
        except curses.error:
            # writing into the last cell of the screen raises after drawing
            pass
