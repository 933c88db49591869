from swagger_tui.request import build_path, build_query, build_request_url, check_can_execute
from swagger_tui.state.types import RequestConfig

from conftest import make_endpoint, path_param, query_param


def get_user():
    return make_endpoint(
        "GET", "/users/{id}",
        params=[path_param("id", "integer"), query_param("active", "boolean"), query_param("fields")],
    )


class TestBuildUrl:
    def test_full_url(self):
        config = RequestConfig(path_params={"id": "42"}, query_params={"active": "true", "fields": ""})
        assert build_request_url("http://api.test", get_user(), config) == "http://api.test/users/42?active=true"

    def test_trailing_slash_on_base_is_dropped(self):
        config = RequestConfig(path_params={"id": "1"})
        assert build_request_url("http://api.test/", get_user(), config) == "http://api.test/users/1"

    def test_empty_value_keeps_placeholder(self):
        assert build_path(get_user(), RequestConfig(path_params={"id": ""})) == "/users/{id}"
        assert build_path(get_user(), None) == "/users/{id}"

    def test_path_values_are_percent_encoded(self):
        config = RequestConfig(path_params={"id": "a b/c"})
        assert build_path(get_user(), config) == "/users/a%20b%2Fc"

    def test_query_is_encoded_in_declaration_order(self):
        config = RequestConfig(query_params={"fields": "name,email", "active": "yes please"})
        assert build_query(get_user(), config) == "active=yes+please&fields=name%2Cemail"

    def test_preview_without_base(self):
        assert build_request_url("", get_user(), None) == "/users/{id}"


class TestCheckCanExecute:
    def test_missing_path_param(self):
        message = check_can_execute(get_user(), RequestConfig(path_params={"id": ""}))
        assert message == "Missing required path parameter(s): id"

    def test_lists_every_missing_param(self):
        ep = make_endpoint("GET", "/orgs/{org}/users/{id}", params=[path_param("org"), path_param("id")])
        assert check_can_execute(ep, None) == "Missing required path parameter(s): org, id"

    def test_ready(self):
        assert check_can_execute(get_user(), RequestConfig(path_params={"id": "42"})) is None
