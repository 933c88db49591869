"""Pick the value copied to the clipboard from the Response tab."""

from swagger_tui.formatting import extract_json_value, response_lines
from swagger_tui.state.app_state import AppState


def yank_text_for(state: AppState) -> str | None:
    """The scalar value on the selected response line, or None if there is nothing to copy."""
    response = state.response_for_selected()
    if response is None or response.is_error:
        return None
    lines = response_lines(response.body)
    index = state.ui.response_selected_line
    if index >= len(lines):
        return None
    value = extract_json_value(lines[index])
    return value or None
