import pytest

from swagger_tui.parser.base import ApiEndpoint, Param, ParamLocation, ParamSchema
from swagger_tui.state.app_state import AppState
from swagger_tui.state.store import StateStore
from swagger_tui.state.types import ViewMode


def make_endpoint(method: str, path: str, tags: list[str] | None = None, params: list[Param] | None = None,
                  summary: str | None = None) -> ApiEndpoint:
    return ApiEndpoint(method=method, path=path, summary=summary, tags=tags or [], parameters=params or [])


def path_param(name: str, param_type: str = "string") -> Param:
    return Param(name=name, location=ParamLocation.PATH, required=True, param_schema=ParamSchema(param_type=param_type))


def query_param(name: str, param_type: str = "string", default=None) -> Param:
    return Param(name=name, location=ParamLocation.QUERY, param_schema=ParamSchema(param_type=param_type, default=default))


@pytest.fixture
def user_endpoints() -> list[ApiEndpoint]:
    return [
        make_endpoint("GET", "/users", ["users"], [query_param("limit", "integer")], summary="List users"),
        make_endpoint("POST", "/users", ["users"], summary="Create user"),
        make_endpoint(
            "GET", "/users/{id}", ["users"],
            [path_param("id", "integer"), query_param("active", "boolean")],
            summary="Get user",
        ),
        make_endpoint("DELETE", "/users/{id}", ["users", "admin"], [path_param("id", "integer")]),
        make_endpoint("GET", "/health", summary="Health check"),
    ]


@pytest.fixture
def flat_state(user_endpoints) -> AppState:
    """A state with endpoints loaded and the flat view active."""
    state = AppState.initial(swagger_url="http://api.test/swagger.json", base_url="http://api.test")
    state.ui.view_mode = ViewMode.FLAT
    state.set_endpoints(user_endpoints)
    return state


@pytest.fixture
def store(flat_state) -> StateStore:
    return StateStore(flat_state)


class DeferredRunner:
    """Collects submitted tasks so a test decides when, and in which order, they run."""

    def __init__(self):
        self.tasks = []

    def submit(self, task, name="task"):
        self.tasks.append(task)
