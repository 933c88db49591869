"""Background retrieval and parsing of the API description."""

import logging

import requests

from swagger_tui.errors import SpecParseError
from swagger_tui.parser.swagger import parse_openapi_text
from swagger_tui.state.store import StateStore
from swagger_tui.state.types import LoadingState

from .runner import BackgroundRunner, ImmediateRunner

logger = logging.getLogger(__name__)

FETCH_TIMEOUT = 30


def fetch_endpoints_background(
    store: StateStore,
    url: str,
    session: requests.Session | None = None,
    runner: BackgroundRunner | ImmediateRunner | None = None,
) -> int:
    """Start a fetch of ``url`` and return its generation.

    FETCHING is set before this returns. Only the most recently started fetch
    may commit; older completions are dropped.
    """
    session = session or requests.Session()
    runner = runner or ImmediateRunner()

    with store.write() as state:
        state.data.fetch_generation += 1
        generation = state.data.fetch_generation
        state.data.swagger_url = url
        state.data.loading_state = LoadingState.fetching()
    logger.info("Fetching %s (generation %d)", url, generation)

    runner.submit(lambda: _fetch(store, url, session, generation), name="fetch")
    return generation


def _fetch(store: StateStore, url: str, session: requests.Session, generation: int) -> None:
    try:
        response = session.get(url, timeout=FETCH_TIMEOUT)
        response.raise_for_status()
        text = response.text
    except requests.RequestException as e:
        logger.warning("Fetch of %s failed: %s", url, e)
        _set_loading(store, generation, LoadingState.error(f"Network error: {e}"))
        return

    if not _set_loading(store, generation, LoadingState.parsing()):
        return

    try:
        endpoints = parse_openapi_text(text)
    except SpecParseError as e:
        logger.warning("Parse of %s failed: %s", url, e)
        _set_loading(store, generation, LoadingState.error(f"Parse error: {e}"))
        return

    with store.write() as state:
        if state.data.fetch_generation != generation:
            logger.debug("Dropping stale fetch result (generation %d)", generation)
            return
        state.set_endpoints(endpoints)
        state.data.loading_state = LoadingState.complete()
        state.data.retry_count = 0
    logger.info("Loaded %d endpoints from %s", len(endpoints), url)


def _set_loading(store: StateStore, generation: int, loading: LoadingState) -> bool:
    with store.write() as state:
        if state.data.fetch_generation != generation:
            logger.debug("Dropping stale fetch update (generation %d)", generation)
            return False
        state.data.loading_state = loading
        return True
