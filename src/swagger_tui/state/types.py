"""Value types held by the shared application state."""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel

from swagger_tui.formatting import mask_token
from swagger_tui.parser.base import ApiEndpoint, ParamLocation

EndpointKey = tuple[str, str]  # (method, path)


class InputMode(Enum):
    NORMAL = "normal"
    SEARCHING = "searching"
    ENTERING_URL = "entering_url"
    ENTERING_TOKEN = "entering_token"
    CONFIRM_CLEAR_TOKEN = "confirm_clear_token"
    ENTERING_BODY = "entering_body"


class PanelFocus(Enum):
    ENDPOINTS_LIST = "endpoints_list"
    DETAILS = "details"


class DetailTab(Enum):
    ENDPOINT = "Endpoint"
    REQUEST = "Request"
    HEADERS = "Headers"
    RESPONSE = "Response"


DETAIL_TABS = list(DetailTab)


class ViewMode(Enum):
    FLAT = "flat"
    GROUPED = "grouped"


class UrlInputField(Enum):
    SWAGGER_URL = "swagger_url"
    BASE_URL = "base_url"


class LoadingKind(Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    PARSING = "parsing"
    COMPLETE = "complete"
    ERROR = "error"


@dataclass(frozen=True)
class LoadingState:
    """Progress of the fetch pipeline; ``message`` is set only for ERROR."""

    kind: LoadingKind = LoadingKind.IDLE
    message: str = ""

    @classmethod
    def idle(cls) -> "LoadingState":
        return cls(LoadingKind.IDLE)

    @classmethod
    def fetching(cls) -> "LoadingState":
        return cls(LoadingKind.FETCHING)

    @classmethod
    def parsing(cls) -> "LoadingState":
        return cls(LoadingKind.PARSING)

    @classmethod
    def complete(cls) -> "LoadingState":
        return cls(LoadingKind.COMPLETE)

    @classmethod
    def error(cls, message: str) -> "LoadingState":
        return cls(LoadingKind.ERROR, message)

    @property
    def is_error(self) -> bool:
        return self.kind is LoadingKind.ERROR

    @property
    def is_busy(self) -> bool:
        return self.kind in (LoadingKind.FETCHING, LoadingKind.PARSING)


@dataclass(frozen=True)
class RequestEditMode:
    """Either viewing the Request tab or editing the named parameter of one endpoint."""

    param_name: str | None = None
    endpoint_key: EndpointKey | None = None

    @classmethod
    def viewing(cls) -> "RequestEditMode":
        return cls()

    @classmethod
    def editing(cls, param_name: str, endpoint_key: EndpointKey | None = None) -> "RequestEditMode":
        return cls(param_name, endpoint_key)

    @property
    def is_editing(self) -> bool:
        return self.param_name is not None


@dataclass(frozen=True)
class GroupHeader:
    name: str
    count: int
    expanded: bool


@dataclass(frozen=True)
class EndpointItem:
    endpoint: ApiEndpoint


RenderItem = GroupHeader | EndpointItem


@dataclass(frozen=True)
class UrlSubmission:
    """Emitted when the URL modal is confirmed with valid input."""

    swagger_url: str
    base_url: str | None = None


@dataclass
class AuthState:
    token: str | None = None

    def set_token(self, token: str) -> None:
        self.token = token

    def clear_token(self) -> None:
        self.token = None

    def is_authenticated(self) -> bool:
        return bool(self.token)

    def masked(self) -> str:
        return mask_token(self.token or "")


class RequestConfig(BaseModel):
    """Per-endpoint parameter values and body chosen by the user."""

    path_params: dict[str, str] = {}
    query_params: dict[str, str] = {}
    body: str | None = None

    @classmethod
    def for_endpoint(cls, endpoint: ApiEndpoint) -> "RequestConfig":
        """Seed an entry for every path and query parameter, using schema defaults."""
        config = cls()
        for param in endpoint.parameters:
            if param.location is ParamLocation.PATH:
                target = config.path_params
            elif param.location is ParamLocation.QUERY:
                target = config.query_params
            else:
                continue
            default = param.param_schema.default_text() if param.param_schema else None
            target[param.name] = default or ""
        return config

    def value_for(self, name: str, location: ParamLocation) -> str:
        if location is ParamLocation.PATH:
            return self.path_params.get(name, "")
        return self.query_params.get(name, "")


class ApiResponse(BaseModel):
    """Result of one execution."""

    status: int = 0
    status_text: str = ""
    headers: dict[str, str] = {}
    body: str = ""
    duration: float = 0.0  # seconds
    is_error: bool = False
    error_message: str | None = None

    @classmethod
    def error(cls, message: str, duration: float = 0.0) -> "ApiResponse":
        return cls(duration=duration, is_error=True, error_message=message)
