"""OpenAPI / Swagger document parser.

Parses Swagger 2.0 and OpenAPI 3.x documents (JSON or YAML) into
ApiEndpoint models and groups them by tag.
"""

import json
from pathlib import Path

import yaml
from pydantic import ValidationError

from swagger_tui.errors import SpecParseError

from .base import ApiEndpoint, Param, ParamLocation, ParamSchema

HTTP_METHODS = ("get", "post", "put", "delete", "patch")

UNTAGGED_GROUP = "Other"


def parse_openapi_file(file_path: Path) -> list[ApiEndpoint]:
    """Parse an OpenAPI/Swagger file into a list of ApiEndpoint."""
    return parse_openapi_text(file_path.read_text(encoding="utf-8"))


def parse_openapi_text(text: str) -> list[ApiEndpoint]:
    """Decode a JSON or YAML document and parse it."""
    try:
        doc = json.loads(text)
    except (json.JSONDecodeError, ValueError):
        try:
            doc = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise SpecParseError(f"document is neither JSON nor YAML: {e}") from e
    return parse_openapi(doc)


def parse_openapi(doc: object) -> list[ApiEndpoint]:
    """Parse a decoded OpenAPI/Swagger document into a list of ApiEndpoint.

    Endpoints are ordered by path, then by method in HTTP_METHODS order.
    """
    if not isinstance(doc, dict):
        raise SpecParseError("document is not a JSON object")
    paths = doc.get("paths")
    if not isinstance(paths, dict):
        raise SpecParseError("document has no 'paths' object")

    endpoints = []
    try:
        for path in sorted(paths):
            methods = paths[path] or {}
            shared_params = methods.get("parameters") or []
            for method in HTTP_METHODS:
                operation = methods.get(method)
                if operation is None:
                    continue
                params = _merge_parameters(shared_params, operation.get("parameters") or [])
                endpoints.append(
                    ApiEndpoint(
                        method=method.upper(),
                        path=path,
                        summary=operation.get("summary"),
                        tags=operation.get("tags") or [],
                        parameters=_parse_parameters(params),
                    )
                )
    except (AttributeError, KeyError, TypeError, ValidationError) as e:
        raise SpecParseError(f"malformed operation: {e}") from e

    return endpoints


def group_by_tag(endpoints: list[ApiEndpoint]) -> dict[str, list[ApiEndpoint]]:
    """Group endpoints under every tag they carry. Untagged endpoints go to 'Other'."""
    groups: dict[str, list[ApiEndpoint]] = {}
    for ep in endpoints:
        for tag in ep.tags or [UNTAGGED_GROUP]:
            groups.setdefault(tag, []).append(ep)
    return groups


def _merge_parameters(shared: list[dict], own: list[dict]) -> list[dict]:
    # Operation-level parameters override path-level ones with the same name and location.
    own_ids = {(p.get("name"), p.get("in")) for p in own if "$ref" not in p}
    merged = [p for p in shared if (p.get("name"), p.get("in")) not in own_ids]
    return merged + list(own)


def _parse_parameters(params: list[dict]) -> list[Param]:
    result = []
    for p in params:
        if "$ref" in p:
            continue
        # Swagger 2 keeps type/format/default on the parameter itself.
        schema = p.get("schema") or {key: p[key] for key in ("type", "format", "default") if key in p}
        result.append(
            Param(
                name=p["name"],
                location=ParamLocation.parse(p.get("in")),
                required=p.get("required", False),
                param_schema=_parse_schema(schema),
                description=p.get("description", ""),
            )
        )
    return result


def _parse_schema(schema: dict) -> ParamSchema | None:
    if not schema:
        return None
    return ParamSchema(
        param_type=schema.get("type"),
        format=schema.get("format"),
        default=schema.get("default"),
    )
