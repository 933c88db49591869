"""Request URL construction and execution preconditions."""

from urllib.parse import quote, urlencode

from swagger_tui.parser.base import ApiEndpoint
from swagger_tui.state.types import RequestConfig


def build_path(endpoint: ApiEndpoint, config: RequestConfig | None) -> str:
    """Substitute stored path values into ``{name}`` placeholders.

    Empty values keep their placeholder so the preview shows what is missing.
    """
    path = endpoint.path
    path_values = config.path_params if config else {}
    for param in endpoint.path_params():
        value = path_values.get(param.name, "")
        if value:
            path = path.replace(f"{{{param.name}}}", quote(value, safe=""))
    return path


def build_query(endpoint: ApiEndpoint, config: RequestConfig | None) -> str:
    """Non-empty query parameters, in declaration order."""
    if config is None:
        return ""
    pairs = []
    for param in endpoint.query_params():
        value = config.query_params.get(param.name, "")
        if value:
            pairs.append((param.name, value))
    return urlencode(pairs)


def build_request_url(base_url: str, endpoint: ApiEndpoint, config: RequestConfig | None) -> str:
    """Full request URL. With an empty base URL this is the Request tab preview."""
    url = base_url.rstrip("/") + build_path(endpoint, config)
    query = build_query(endpoint, config)
    return f"{url}?{query}" if query else url


def check_can_execute(endpoint: ApiEndpoint, config: RequestConfig | None) -> str | None:
    """Return the reason execution must be rejected, or None if it may proceed."""
    missing = endpoint.missing_path_params(config.path_params if config else None)
    if missing:
        return f"Missing required path parameter(s): {', '.join(missing)}"
    return None
