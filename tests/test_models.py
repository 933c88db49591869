import pytest
from pydantic import ValidationError

from swagger_tui.parser.base import ApiEndpoint, Param, ParamLocation, ParamSchema, json_value_to_string
from swagger_tui.state.types import (
    ApiResponse,
    AuthState,
    LoadingState,
    RequestConfig,
    RequestEditMode,
)

from conftest import make_endpoint, path_param, query_param


class TestParamLocation:
    def test_known_locations(self):
        assert ParamLocation.parse("path") is ParamLocation.PATH
        assert ParamLocation.parse("formData") is ParamLocation.FORM_DATA

    def test_unknown_location_falls_back_to_query(self):
        assert ParamLocation.parse("matrix") is ParamLocation.QUERY
        assert ParamLocation.parse(None) is ParamLocation.QUERY


class TestParam:
    def test_create_required_param(self):
        p = Param(name="id", location="path", required=True, param_schema={"param_type": "integer"})
        assert p.name == "id"
        assert p.location is ParamLocation.PATH
        assert p.required is True
        assert p.description == ""

    def test_type_label(self):
        assert ParamSchema(param_type="integer", format="int32").type_label == "integer/int32"
        assert ParamSchema(param_type="boolean").type_label == "boolean"
        assert Param(name="q", location=ParamLocation.QUERY).type_label == "unknown"

    def test_default_text(self):
        assert ParamSchema(default=True).default_text() == "true"
        assert ParamSchema(default=20).default_text() == "20"
        assert ParamSchema(default="asc").default_text() == "asc"
        assert ParamSchema().default_text() is None


class TestApiEndpoint:
    def test_key_and_label(self):
        ep = make_endpoint("GET", "/users/{id}")
        assert ep.key == ("GET", "/users/{id}")
        assert ep.label == "GET /users/{id}"

    def test_editable_params_lists_path_then_query(self):
        ep = make_endpoint("GET", "/users/{id}", params=[query_param("active"), path_param("id")])
        assert [p.name for p in ep.editable_params()] == ["id", "active"]

    def test_supports_body(self):
        assert make_endpoint("POST", "/users").supports_body()
        assert make_endpoint("PATCH", "/users/{id}").supports_body()
        assert not make_endpoint("GET", "/users").supports_body()
        assert not make_endpoint("DELETE", "/users/{id}").supports_body()

    def test_missing_path_params(self):
        ep = make_endpoint("GET", "/orgs/{org}/users/{id}", params=[path_param("org"), path_param("id")])
        assert ep.missing_path_params(None) == ["org", "id"]
        assert ep.missing_path_params({"org": "acme", "id": "  "}) == ["id"]
        assert ep.missing_path_params({"org": "acme", "id": "7"}) == []

    def test_endpoint_is_immutable(self):
        ep = make_endpoint("GET", "/users")
        with pytest.raises(ValidationError):
            ep.path = "/other"

    def test_endpoint_serialization_roundtrip(self):
        ep = make_endpoint("DELETE", "/api/users/{id}", ["users"], [path_param("id", "integer")])
        ep2 = ApiEndpoint(**ep.model_dump())
        assert ep2 == ep
        assert ep2.parameters[0].location is ParamLocation.PATH


class TestRequestConfig:
    def test_seeded_from_endpoint(self):
        ep = make_endpoint(
            "GET", "/pets/{petId}",
            params=[path_param("petId"), query_param("limit", "integer", default=20), query_param("q")],
        )
        config = RequestConfig.for_endpoint(ep)
        assert config.path_params == {"petId": ""}
        assert config.query_params == {"limit": "20", "q": ""}
        assert config.body is None

    def test_value_for(self):
        config = RequestConfig(path_params={"id": "42"}, query_params={"active": "true"})
        assert config.value_for("id", ParamLocation.PATH) == "42"
        assert config.value_for("active", ParamLocation.QUERY) == "true"
        assert config.value_for("missing", ParamLocation.QUERY) == ""

    def test_instances_do_not_share_maps(self):
        a, b = RequestConfig(), RequestConfig()
        a.path_params["id"] = "1"
        assert b.path_params == {}


class TestStateValues:
    def test_error_response(self):
        resp = ApiResponse.error("boom", duration=0.5)
        assert resp.is_error is True
        assert resp.error_message == "boom"
        assert resp.duration == 0.5
        assert resp.status == 0

    def test_auth_masking(self):
        auth = AuthState()
        assert not auth.is_authenticated()
        auth.set_token("short-token")
        assert auth.masked() == "●" * len("short-token")
        auth.set_token("eyJhbGciOiJIUzI1NiJ9.payload.signature")
        assert auth.masked() == "eyJhbGc...nature"
        auth.clear_token()
        assert auth.token is None

    def test_loading_state(self):
        assert LoadingState.error("bad").is_error
        assert LoadingState.error("bad").message == "bad"
        assert LoadingState.fetching().is_busy
        assert not LoadingState.complete().is_busy

    def test_edit_mode(self):
        assert not RequestEditMode.viewing().is_editing
        assert RequestEditMode.editing("id").param_name == "id"
        assert RequestEditMode.editing("id", ("GET", "/a")).endpoint_key == ("GET", "/a")

    def test_json_value_to_string(self):
        assert json_value_to_string(False) == "false"
        assert json_value_to_string(1.5) == "1.5"
        assert json_value_to_string([1, 2]) == "[1,2]"
