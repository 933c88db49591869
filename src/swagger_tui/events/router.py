"""Routes key events by input mode into actions, editor calls and pipeline requests."""

import logging
from dataclasses import dataclass

from swagger_tui.actions import (
    CommitBody,
    ExitBodyInputMode,
    RequestRetry,
    SetBodyValidationError,
    apply_action,
)
from swagger_tui.parser.base import ApiEndpoint
from swagger_tui.state.store import StateStore
from swagger_tui.state.types import InputMode, UrlSubmission

from .keys import InputSource, KeyCode, KeyEvent, collect_paste_batch
from .modals import map_confirm_clear_key, map_search_key, map_token_key, map_url_key
from .normal import Command, NormalContext, map_normal_key
from .yank import yank_text_for

logger = logging.getLogger(__name__)


@dataclass
class EventOutcome:
    """Side effects the application loop must carry out after a key."""

    quit: bool = False
    should_fetch: bool = False
    url_submission: UrlSubmission | None = None
    execute: ApiEndpoint | None = None
    yank: str | None = None


class EventHandler:
    def __init__(self, store: StateStore, source: InputSource):
        self.store = store
        self.source = source

    def handle_key(self, key: KeyEvent) -> EventOutcome:
        with self.store.read() as state:
            mode = state.input.mode

        handler = {
            InputMode.NORMAL: self._handle_normal,
            InputMode.SEARCHING: self._handle_search,
            InputMode.ENTERING_URL: self._handle_url,
            InputMode.ENTERING_TOKEN: self._handle_token,
            InputMode.CONFIRM_CLEAR_TOKEN: self._handle_confirm_clear,
            InputMode.ENTERING_BODY: self._handle_body,
        }[mode]
        return handler(key)

    def _batch(self, key: KeyEvent) -> str:
        text = collect_paste_batch(key.char, self.source)
        if len(text) > 1:
            logger.debug("Batched %d characters", len(text))
        return text

    # -- normal ------------------------------------------------------------

    def _handle_normal(self, key: KeyEvent) -> EventOutcome:
        with self.store.read() as state:
            ctx = NormalContext.from_state(state)

        if ctx.editing and key.is_plain_char:
            key = KeyEvent.of(self._batch(key))
        dispatch = map_normal_key(key, ctx)
        if dispatch.actions:
            self.store.apply(*dispatch.actions)

        outcome = EventOutcome()
        if dispatch.command is Command.QUIT:
            outcome.quit = True
        elif dispatch.command is Command.EXECUTE:
            outcome.execute = ctx.selected_endpoint
        elif dispatch.command is Command.RETRY:
            self.store.apply(RequestRetry())
            outcome.should_fetch = bool(ctx.swagger_url)
        elif dispatch.command is Command.YANK:
            with self.store.read() as state:
                outcome.yank = yank_text_for(state)
        return outcome

    # -- search and modals -------------------------------------------------

    def _handle_search(self, key: KeyEvent) -> EventOutcome:
        text = self._batch(key) if key.is_plain_char else None
        actions = map_search_key(key, text)
        if actions:
            self.store.apply(*actions)
        return EventOutcome()

    def _handle_url(self, key: KeyEvent) -> EventOutcome:
        text = self._batch(key) if key.is_plain_char else None
        with self.store.read() as state:
            field = state.input.active_url_field
            url_input = state.input.url_input
            base_url_input = state.input.base_url_input

        result = map_url_key(key, field, url_input, base_url_input, text)
        if result.actions:
            self.store.apply(*result.actions)
        if result.submission is not None:
            logger.info("URL submitted: %s", result.submission.swagger_url)
        return EventOutcome(
            url_submission=result.submission,
            should_fetch=result.submission is not None,
        )

    def _handle_token(self, key: KeyEvent) -> EventOutcome:
        text = self._batch(key) if key.is_plain_char else None
        with self.store.read() as state:
            token_input = state.input.token_input
        actions = map_token_key(key, token_input, text)
        if actions:
            self.store.apply(*actions)
        return EventOutcome()

    def _handle_confirm_clear(self, key: KeyEvent) -> EventOutcome:
        actions = map_confirm_clear_key(key)
        if actions:
            self.store.apply(*actions)
        return EventOutcome()

    # -- body editor -------------------------------------------------------

    def _handle_body(self, key: KeyEvent) -> EventOutcome:
        if key.code is KeyCode.ESC:
            self.store.apply(ExitBodyInputMode())
            return EventOutcome()

        if key.code is KeyCode.ENTER and not self.source.poll(0):
            with self.store.read() as state:
                endpoint = state.selected_endpoint()
            self.store.apply(CommitBody(endpoint.key) if endpoint else ExitBodyInputMode())
            return EventOutcome()

        with self.store.write() as state:
            editor = state.input.body_editor
            if key.code is KeyCode.ENTER or key.is_ctrl("n"):
                # An Enter followed by queued input is a newline inside a paste.
                editor.insert_newline()
                changed = True
            elif key.is_plain_char:
                count = editor.paste_batch(key.char, self.source)
                if count > 1:
                    logger.debug("Pasted %d characters into body", count)
                    error = editor.format_json()
                    if error is not None:
                        logger.debug("Pasted body kept unformatted: %s", error)
                changed = True
            else:
                changed = editor.handle_key(key)
            if changed:
                apply_action(SetBodyValidationError(None), state)
        return EventOutcome()
