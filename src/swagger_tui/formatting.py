"""Text helpers shared by the reducer, the yank handler and the renderer."""

import json

BULLET = "●"


def try_format_json(body: str) -> str:
    """Pretty-print JSON, returning the input unchanged if it is not valid JSON."""
    try:
        value = json.loads(body)
    except (json.JSONDecodeError, ValueError):
        return body
    return json.dumps(value, indent=2, ensure_ascii=False)


def response_lines(body: str) -> list[str]:
    return try_format_json(body).splitlines()


def extract_json_value(line: str) -> str:
    """Extract the scalar value from one line of pretty-printed JSON.

    '  "access_token": "abc123",' -> 'abc123'
    '  123,'                      -> '123'
    '  {'                         -> ''
    """
    trimmed = line.strip()
    if ":" in trimmed:
        value = trimmed.split(":", 1)[1]
        return value.strip().rstrip(",").strip().strip('"')
    return trimmed.strip("{}[],").strip()


def mask_token(token: str) -> str:
    """Hide a bearer token, keeping a recognisable prefix and suffix when long enough."""
    if len(token) <= 15:
        return BULLET * len(token)
    return f"{token[:7]}...{token[-6:]}"


def delete_last_word(text: str) -> str:
    """Ctrl+W: drop trailing whitespace, then everything after the last remaining whitespace."""
    text = text.rstrip()
    for i in range(len(text) - 1, -1, -1):
        if text[i].isspace():
            return text[:i]
    return ""
