"""Data models for parsed API documentation.

The Swagger/OpenAPI parser converts its input into these models. They are
immutable once parsed; all per-session values live in RequestConfig.
"""

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


class ParamLocation(str, Enum):
    """Where a parameter is sent (the OpenAPI ``in`` field)."""

    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    COOKIE = "cookie"
    BODY = "body"
    FORM_DATA = "formData"

    @classmethod
    def parse(cls, value: str | None) -> "ParamLocation":
        """Map an ``in`` value to a location, defaulting to query."""
        try:
            return cls(value)
        except ValueError:
            return cls.QUERY


class ParamSchema(BaseModel):
    """The subset of a parameter schema the client displays."""

    model_config = ConfigDict(frozen=True)

    param_type: str | None = None  # string / integer / boolean / array / object
    format: str | None = None  # int32 / date-time / uuid ...
    default: Any = None

    @property
    def type_label(self) -> str:
        if self.param_type is None:
            return "unknown"
        if self.format:
            return f"{self.param_type}/{self.format}"
        return self.param_type

    def default_text(self) -> str | None:
        """Render the schema default the way a user would type it."""
        return json_value_to_string(self.default) if self.default is not None else None


class Param(BaseModel):
    """A single API parameter (path, query, header, or cookie)."""

    model_config = ConfigDict(frozen=True)

    name: str
    location: ParamLocation
    required: bool = False
    param_schema: ParamSchema | None = None
    description: str = ""

    @property
    def type_label(self) -> str:
        return self.param_schema.type_label if self.param_schema else "unknown"


class ApiEndpoint(BaseModel):
    """A single API operation, identified by method and path."""

    model_config = ConfigDict(frozen=True)

    method: str  # GET / POST / PUT / DELETE / PATCH
    path: str  # /api/users/{id}
    summary: str | None = None
    tags: list[str] = []
    parameters: list[Param] = []

    @property
    def key(self) -> tuple[str, str]:
        return (self.method, self.path)

    @property
    def label(self) -> str:
        return f"{self.method} {self.path}"

    def path_params(self) -> list[Param]:
        return [p for p in self.parameters if p.location is ParamLocation.PATH]

    def query_params(self) -> list[Param]:
        return [p for p in self.parameters if p.location is ParamLocation.QUERY]

    def editable_params(self) -> list[Param]:
        """Path parameters followed by query parameters, as the Request tab lists them."""
        return self.path_params() + self.query_params()

    def supports_body(self) -> bool:
        return self.method.upper() in BODY_METHODS

    def missing_path_params(self, path_values: dict[str, str] | None) -> list[str]:
        """Names of path parameters without a non-empty value.

        Path parameters are always required by OpenAPI, so an unflagged one
        is treated the same as one marked ``required``.
        """
        path_values = path_values or {}
        return [
            p.name
            for p in self.path_params()
            if not path_values.get(p.name, "").strip()
        ]


def json_value_to_string(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, separators=(",", ":"))
