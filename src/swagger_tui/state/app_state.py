"""The single shared application state and its derived views."""

from dataclasses import dataclass, field

from swagger_tui.editor import BodyEditor
from swagger_tui.parser.base import ApiEndpoint
from swagger_tui.parser.swagger import group_by_tag

from .types import (
    ApiResponse,
    AuthState,
    DetailTab,
    EndpointItem,
    EndpointKey,
    GroupHeader,
    InputMode,
    LoadingState,
    PanelFocus,
    RenderItem,
    RequestConfig,
    RequestEditMode,
    UrlInputField,
    ViewMode,
)


@dataclass
class DataState:
    endpoints: list[ApiEndpoint] = field(default_factory=list)
    grouped_endpoints: dict[str, list[ApiEndpoint]] = field(default_factory=dict)
    loading_state: LoadingState = field(default_factory=LoadingState.idle)
    retry_count: int = 0
    fetch_generation: int = 0
    swagger_url: str = ""


@dataclass
class UiState:
    view_mode: ViewMode = ViewMode.GROUPED
    expanded_groups: set[str] = field(default_factory=set)
    panel_focus: PanelFocus = PanelFocus.ENDPOINTS_LIST
    active_detail_tab: DetailTab = DetailTab.ENDPOINT
    # Tab restored when the cycle wraps back into the endpoint list.
    parked_tab: DetailTab = DetailTab.ENDPOINT
    selected_index: int = 0
    selected_param_index: int = 0
    body_section_expanded: bool = True
    response_scroll: int = 0
    headers_scroll: int = 0
    response_selected_line: int = 0
    yank_flash: bool = False


@dataclass
class InputState:
    mode: InputMode = InputMode.NORMAL
    token_input: str = ""
    url_input: str = ""
    base_url_input: str = ""
    active_url_field: UrlInputField = UrlInputField.SWAGGER_URL
    url_validation_error: str | None = None
    body_editor: BodyEditor = field(default_factory=BodyEditor)
    body_validation_error: str | None = None


@dataclass
class RequestState:
    auth: AuthState = field(default_factory=AuthState)
    base_url: str = ""
    executing_endpoint: EndpointKey | None = None
    execution_generation: int = 0
    current_response: ApiResponse | None = None
    response_endpoint: EndpointKey | None = None
    configs: dict[EndpointKey, RequestConfig] = field(default_factory=dict)
    edit_mode: RequestEditMode = field(default_factory=RequestEditMode.viewing)
    param_edit_buffer: str = ""


@dataclass
class SearchState:
    query: str = ""
    filtered_endpoints: list[ApiEndpoint] = field(default_factory=list)
    filtered_grouped_endpoints: dict[str, list[ApiEndpoint]] = field(default_factory=dict)


@dataclass
class AppState:
    data: DataState = field(default_factory=DataState)
    ui: UiState = field(default_factory=UiState)
    input: InputState = field(default_factory=InputState)
    request: RequestState = field(default_factory=RequestState)
    search: SearchState = field(default_factory=SearchState)

    @classmethod
    def initial(cls, swagger_url: str = "", base_url: str = "") -> "AppState":
        state = cls()
        state.data.swagger_url = swagger_url
        state.request.base_url = base_url
        return state

    # -- derived views -----------------------------------------------------

    def active_endpoints(self) -> list[ApiEndpoint]:
        """Endpoints after the search filter; all endpoints when no query is set."""
        return self.search.filtered_endpoints if self.search.query else self.data.endpoints

    def active_grouped_endpoints(self) -> dict[str, list[ApiEndpoint]]:
        if self.search.query:
            return self.search.filtered_grouped_endpoints
        return self.data.grouped_endpoints

    def render_items(self) -> list[RenderItem]:
        """Rows of the endpoint list in display order.

        Flat mode lists the active endpoints. Grouped mode lists a header per
        tag (sorted by name) followed by its endpoints when expanded.
        """
        if self.ui.view_mode is ViewMode.FLAT:
            return [EndpointItem(ep) for ep in self.active_endpoints()]

        items: list[RenderItem] = []
        groups = self.active_grouped_endpoints()
        for name in sorted(groups):
            endpoints = groups[name]
            expanded = name in self.ui.expanded_groups
            items.append(GroupHeader(name, len(endpoints), expanded))
            if expanded:
                items.extend(EndpointItem(ep) for ep in endpoints)
        return items

    def visible_count(self) -> int:
        return len(self.render_items())

    def selected_item(self) -> RenderItem | None:
        items = self.render_items()
        if 0 <= self.ui.selected_index < len(items):
            return items[self.ui.selected_index]
        return None

    def selected_endpoint(self) -> ApiEndpoint | None:
        item = self.selected_item()
        return item.endpoint if isinstance(item, EndpointItem) else None

    def selected_group(self) -> str | None:
        item = self.selected_item()
        return item.name if isinstance(item, GroupHeader) else None

    def endpoint_by_key(self, key: EndpointKey) -> ApiEndpoint | None:
        for ep in self.data.endpoints:
            if ep.key == key:
                return ep
        return None

    def selected_params(self) -> list:
        endpoint = self.selected_endpoint()
        return endpoint.editable_params() if endpoint else []

    # -- request configs ---------------------------------------------------

    def config_for(self, key: EndpointKey) -> RequestConfig | None:
        return self.request.configs.get(key)

    def get_or_create_config(self, endpoint: ApiEndpoint) -> RequestConfig:
        config = self.request.configs.get(endpoint.key)
        if config is None:
            config = RequestConfig.for_endpoint(endpoint)
            self.request.configs[endpoint.key] = config
        return config

    def get_or_create_config_by_key(self, key: EndpointKey) -> RequestConfig:
        endpoint = self.endpoint_by_key(key)
        if endpoint is not None:
            return self.get_or_create_config(endpoint)
        return self.request.configs.setdefault(key, RequestConfig())

    def response_for_selected(self) -> ApiResponse | None:
        """The current response, only if it belongs to the selected endpoint."""
        endpoint = self.selected_endpoint()
        if endpoint is None or self.request.response_endpoint != endpoint.key:
            return None
        return self.request.current_response

    def is_executing(self, key: EndpointKey) -> bool:
        return self.request.executing_endpoint == key

    # -- mutation helpers used by the reducer and the fetch pipeline -------

    def update_filtered_endpoints(self) -> None:
        """Recompute the filtered views from (endpoints, query)."""
        query = self.search.query.lower()
        if not query:
            self.search.filtered_endpoints = []
            self.search.filtered_grouped_endpoints = {}
            return
        matches = [ep for ep in self.data.endpoints if _matches(ep, query)]
        self.search.filtered_endpoints = matches
        self.search.filtered_grouped_endpoints = group_by_tag(matches)

    def set_endpoints(self, endpoints: list[ApiEndpoint]) -> None:
        """Replace the endpoint list, keeping the selection index where it still fits.

        When the endpoint under the selection changes, its per-endpoint view
        state is reset and any parameter edit is cancelled.
        """
        previous = self.selected_endpoint()
        self.data.endpoints = list(endpoints)
        self.data.grouped_endpoints = group_by_tag(self.data.endpoints)
        self.update_filtered_endpoints()
        self.clamp_selection()
        current = self.selected_endpoint()
        if _key_of(previous) != _key_of(current):
            self.reset_endpoint_view()
            self.request.edit_mode = RequestEditMode.viewing()
            self.request.param_edit_buffer = ""
        if current is not None:
            self.get_or_create_config(current)

    def reset_endpoint_view(self) -> None:
        """Drop the view state that belongs to the previously selected endpoint."""
        self.ui.selected_param_index = 0
        self.ui.response_scroll = 0
        self.ui.headers_scroll = 0
        self.ui.response_selected_line = 0
        self.request.current_response = None
        self.request.response_endpoint = None

    def clamp_selection(self) -> None:
        count = self.visible_count()
        self.ui.selected_index = min(self.ui.selected_index, max(count - 1, 0))
        self.clamp_param_index()

    def clamp_param_index(self) -> None:
        count = len(self.selected_params())
        if self.ui.selected_param_index >= count:
            self.ui.selected_param_index = max(count - 1, 0)


def _matches(endpoint: ApiEndpoint, query: str) -> bool:
    if query in endpoint.path.lower() or query in endpoint.method.lower():
        return True
    if endpoint.summary and query in endpoint.summary.lower():
        return True
    return any(query in tag.lower() for tag in endpoint.tags)


def _key_of(endpoint: ApiEndpoint | None) -> EndpointKey | None:
    return endpoint.key if endpoint else None
