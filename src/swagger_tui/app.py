"""Foreground application loop: render, poll input, dispatch, trigger pipelines."""

import logging
import threading
import time
from typing import Callable, Protocol

import pyperclip
import requests

from swagger_tui.actions import SetYankFlash
from swagger_tui.config import Config
from swagger_tui.errors import ConfigError
from swagger_tui.events.keys import InputSource
from swagger_tui.events.router import EventHandler, EventOutcome
from swagger_tui.pipeline.execute import execute_request_background
from swagger_tui.pipeline.fetch import fetch_endpoints_background
from swagger_tui.pipeline.runner import BackgroundRunner, ImmediateRunner
from swagger_tui.state.app_state import AppState
from swagger_tui.state.store import StateStore
from swagger_tui.ui.draw import SPINNER_FRAMES

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.05
SPINNER_INTERVAL = 0.1
YANK_FLASH_SECONDS = 0.2


class Renderer(Protocol):
    def draw(self, state: AppState, spinner: str = "") -> None: ...


class App:
    def __init__(
        self,
        store: StateStore,
        config: Config,
        source: InputSource,
        renderer: Renderer | None = None,
        runner: BackgroundRunner | ImmediateRunner | None = None,
        session: requests.Session | None = None,
        clipboard: Callable[[str], None] = pyperclip.copy,
    ):
        self.store = store
        self.config = config
        self.source = source
        self.renderer = renderer
        self.runner = runner or BackgroundRunner()
        self.session = session or requests.Session()
        self.clipboard = clipboard
        self.events = EventHandler(store, source)
        self.spinner_index = 0
        self._last_spin = time.monotonic()

    @property
    def spinner(self) -> str:
        return SPINNER_FRAMES[self.spinner_index % len(SPINNER_FRAMES)]

    def start(self) -> None:
        """Kick off the initial fetch when a swagger URL is configured."""
        with self.store.read() as state:
            url = state.data.swagger_url
        if url:
            self.fetch(url)

    def run(self) -> None:
        self.start()
        try:
            while self.step():
                pass
        finally:
            self.runner.shutdown()
            logger.info("Exiting")

    def step(self) -> bool:
        """One loop iteration. Returns False once the user asked to quit."""
        now = time.monotonic()
        if now - self._last_spin >= SPINNER_INTERVAL:
            self.spinner_index += 1
            self._last_spin = now

        if self.renderer is not None:
            with self.store.read() as state:
                self.renderer.draw(state, self.spinner)

        if not self.source.poll(POLL_INTERVAL):
            return True
        key = self.source.read()
        if key is None:
            return True
        return self.handle_outcome(self.events.handle_key(key))

    def handle_outcome(self, outcome: EventOutcome) -> bool:
        if outcome.quit:
            return False
        if outcome.url_submission is not None:
            self._persist_urls(outcome.url_submission.swagger_url, outcome.url_submission.base_url)
        if outcome.should_fetch:
            with self.store.read() as state:
                url = state.data.swagger_url
            if url:
                self.fetch(url)
        if outcome.execute is not None:
            execute_request_background(self.store, outcome.execute, session=self.session, runner=self.runner)
        if outcome.yank is not None:
            self.yank(outcome.yank)
        return True

    def fetch(self, url: str) -> None:
        fetch_endpoints_background(self.store, url, session=self.session, runner=self.runner)

    def yank(self, text: str) -> None:
        try:
            self.clipboard(text)
        except pyperclip.PyperclipException as e:
            logger.warning("Clipboard unavailable: %s", e)
            return
        logger.debug("Copied %d characters", len(text))
        self.store.apply(SetYankFlash(True))
        timer = threading.Timer(YANK_FLASH_SECONDS, lambda: self.store.apply(SetYankFlash(False)))
        timer.daemon = True
        timer.start()

    def _persist_urls(self, swagger_url: str, base_url: str | None) -> None:
        try:
            path = self.config.set_urls(swagger_url, base_url)
        except ConfigError as e:
            logger.error("Could not save URLs: %s", e)
            return
        logger.info("Saved URLs to %s", path)
