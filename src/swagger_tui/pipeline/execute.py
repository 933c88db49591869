"""Background execution of one HTTP call for one endpoint."""

import logging
import time

import requests

from swagger_tui.parser.base import ApiEndpoint
from swagger_tui.request import build_request_url, check_can_execute
from swagger_tui.state.store import StateStore
from swagger_tui.state.types import ApiResponse, EndpointKey, RequestConfig

from .runner import BackgroundRunner, ImmediateRunner

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30

MISSING_BASE_URL = "Base URL not configured. Press ',' to set it."


def execute_request_background(
    store: StateStore,
    endpoint: ApiEndpoint,
    base_url: str | None = None,
    session: requests.Session | None = None,
    runner: BackgroundRunner | ImmediateRunner | None = None,
) -> bool:
    """Check preconditions and start executing ``endpoint``.

    Returns True if a request was dispatched. Rejections (already executing,
    no base URL, missing path parameters) are decided here, before any I/O.
    """
    session = session or requests.Session()
    runner = runner or ImmediateRunner()
    key = endpoint.key

    with store.write() as state:
        if state.request.executing_endpoint == key:
            logger.debug("%s is already executing", endpoint.label)
            return False

        base_url = base_url if base_url is not None else state.request.base_url
        config = state.get_or_create_config(endpoint)
        if not base_url:
            _store_rejection(state, key, MISSING_BASE_URL)
            logger.info("Rejected %s: no base URL", endpoint.label)
            return False
        error = check_can_execute(endpoint, config)
        if error is not None:
            _store_rejection(state, key, error)
            logger.info("Rejected %s: %s", endpoint.label, error)
            return False

        state.request.executing_endpoint = key
        state.request.execution_generation += 1
        generation = state.request.execution_generation
        state.request.current_response = None
        state.request.response_endpoint = None
        config = config.model_copy(deep=True)
        token = state.request.auth.token

    url = build_request_url(base_url, endpoint, config)
    logger.info("Executing %s %s (generation %d)", endpoint.method, url, generation)
    runner.submit(
        lambda: _execute(store, endpoint, url, config, token, session, generation),
        name=f"execute {endpoint.label}",
    )
    return True


def _store_rejection(state, key: EndpointKey, message: str) -> None:
    state.request.current_response = ApiResponse.error(message)
    state.request.response_endpoint = key
    state.ui.response_scroll = 0
    state.ui.headers_scroll = 0
    state.ui.response_selected_line = 0


def send_request(
    session: requests.Session,
    endpoint: ApiEndpoint,
    url: str,
    config: RequestConfig,
    token: str | None,
) -> ApiResponse:
    """Perform the HTTP call. Transport failures become an error response."""
    headers = {"Accept": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    data = None
    if endpoint.supports_body() and config.body:
        headers["Content-Type"] = "application/json"
        data = config.body.encode("utf-8")

    start = time.perf_counter()
    try:
        resp = session.request(endpoint.method, url, headers=headers, data=data, timeout=REQUEST_TIMEOUT)
        body = resp.text
    except requests.RequestException as e:
        return ApiResponse.error(f"Request failed: {e}", duration=time.perf_counter() - start)
    duration = time.perf_counter() - start

    return ApiResponse(
        status=resp.status_code,
        status_text=resp.reason or "",
        headers={k.lower(): v for k, v in resp.headers.items()},
        body=body,
        duration=duration,
    )


def _execute(
    store: StateStore,
    endpoint: ApiEndpoint,
    url: str,
    config: RequestConfig,
    token: str | None,
    session: requests.Session,
    generation: int,
) -> None:
    response = send_request(session, endpoint, url, config, token)
    logger.info(
        "%s finished: status=%s duration=%.3fs error=%s",
        endpoint.label, response.status, response.duration, response.error_message,
    )

    with store.write() as state:
        if state.request.execution_generation != generation:
            logger.debug("Dropping stale response for %s (generation %d)", endpoint.label, generation)
            return
        state.request.executing_endpoint = None
        state.request.current_response = response
        state.request.response_endpoint = endpoint.key
        state.ui.response_scroll = 0
        state.ui.headers_scroll = 0
        state.ui.response_selected_line = 0
