from unittest.mock import MagicMock

import requests

from swagger_tui.pipeline.execute import (
    MISSING_BASE_URL,
    REQUEST_TIMEOUT,
    execute_request_background,
    send_request,
)
from swagger_tui.pipeline.runner import ImmediateRunner
from swagger_tui.state.types import RequestConfig

from conftest import DeferredRunner, make_endpoint, path_param, query_param

GET_USER = ("GET", "/users/{id}")


def mock_session(status=200, reason="OK", body='{"id": 42}', headers=None):
    session = MagicMock()
    resp = session.request.return_value
    resp.status_code = status
    resp.reason = reason
    resp.text = body
    resp.headers = headers if headers is not None else {"Content-Type": "application/json"}
    return session


def endpoint_for(state, key):
    return state.endpoint_by_key(key)


class TestExecuteRequest:
    def test_success_stores_response(self, store):
        with store.write() as state:
            endpoint = endpoint_for(state, GET_USER)
            config = state.get_or_create_config(endpoint)
            config.path_params["id"] = "42"
            config.query_params["active"] = "true"
        session = mock_session(headers={"Content-Type": "application/json", "X-Request-Id": "abc"})

        assert execute_request_background(store, endpoint, session=session, runner=ImmediateRunner())

        session.request.assert_called_once_with(
            "GET", "http://api.test/users/42?active=true",
            headers={"Accept": "application/json"}, data=None, timeout=REQUEST_TIMEOUT,
        )
        with store.read() as state:
            assert state.request.executing_endpoint is None
            assert state.request.response_endpoint == GET_USER
            response = state.request.current_response
            assert response.status == 200
            assert response.status_text == "OK"
            assert response.headers == {"content-type": "application/json", "x-request-id": "abc"}
            assert response.body == '{"id": 42}'
            assert response.duration >= 0

    def test_missing_path_param_is_rejected_without_io(self, store):
        with store.read() as state:
            endpoint = endpoint_for(state, GET_USER)
        session = mock_session()
        runner = ImmediateRunner()

        assert not execute_request_background(store, endpoint, session=session, runner=runner)

        session.request.assert_not_called()
        assert runner.submitted == []
        with store.read() as state:
            response = state.request.current_response
            assert response.is_error
            assert response.error_message == "Missing required path parameter(s): id"
            assert state.request.response_endpoint == GET_USER
            assert state.request.executing_endpoint is None

    def test_missing_base_url_is_rejected(self, store):
        with store.write() as state:
            state.request.base_url = ""
            endpoint = endpoint_for(state, ("GET", "/health"))
        session = mock_session()

        assert not execute_request_background(store, endpoint, session=session, runner=ImmediateRunner())

        session.request.assert_not_called()
        with store.read() as state:
            assert state.request.current_response.error_message == MISSING_BASE_URL

    def test_already_executing_is_ignored(self, store):
        with store.write() as state:
            endpoint = endpoint_for(state, ("GET", "/health"))
            state.request.executing_endpoint = endpoint.key
        session = mock_session()

        assert not execute_request_background(store, endpoint, session=session, runner=ImmediateRunner())
        session.request.assert_not_called()

    def test_executing_is_set_until_completion(self, store):
        with store.read() as state:
            endpoint = endpoint_for(state, ("GET", "/health"))
        runner = DeferredRunner()

        execute_request_background(store, endpoint, session=mock_session(), runner=runner)
        with store.read() as state:
            assert state.is_executing(("GET", "/health"))
            assert state.request.current_response is None

        runner.tasks[0]()
        with store.read() as state:
            assert not state.is_executing(("GET", "/health"))
            assert state.request.current_response.status == 200

    def test_stale_execution_is_dropped(self, store):
        with store.read() as state:
            health = endpoint_for(state, ("GET", "/health"))
            users = endpoint_for(state, ("GET", "/users"))
        runner = DeferredRunner()

        execute_request_background(store, health, session=mock_session(body="old"), runner=runner)
        execute_request_background(store, users, session=mock_session(body="new"), runner=runner)
        first, second = runner.tasks
        second()
        first()

        with store.read() as state:
            assert state.request.response_endpoint == ("GET", "/users")
            assert state.request.current_response.body == "new"

    def test_config_is_snapshotted_at_dispatch(self, store):
        with store.write() as state:
            endpoint = endpoint_for(state, GET_USER)
            state.get_or_create_config(endpoint).path_params["id"] = "1"
        runner = DeferredRunner()
        session = mock_session()

        execute_request_background(store, endpoint, session=session, runner=runner)
        with store.write() as state:
            state.config_for(GET_USER).path_params["id"] = "2"
        runner.tasks[0]()

        assert session.request.call_args.args[1] == "http://api.test/users/1"


class TestSendRequest:
    def test_bearer_token_and_json_body(self):
        endpoint = make_endpoint("POST", "/users")
        session = mock_session(status=201, reason="Created")
        config = RequestConfig(body='{"name": "é"}')

        response = send_request(session, endpoint, "http://api.test/users", config, "tok")

        kwargs = session.request.call_args.kwargs
        assert kwargs["headers"] == {
            "Accept": "application/json",
            "Authorization": "Bearer tok",
            "Content-Type": "application/json",
        }
        assert kwargs["data"] == '{"name": "é"}'.encode("utf-8")
        assert response.status == 201

    def test_body_is_not_sent_for_get(self):
        endpoint = make_endpoint("GET", "/users", params=[query_param("limit")])
        session = mock_session()
        send_request(session, endpoint, "http://api.test/users", RequestConfig(body="{}"), None)
        kwargs = session.request.call_args.kwargs
        assert kwargs["data"] is None
        assert "Content-Type" not in kwargs["headers"]

    def test_transport_failure_becomes_error_response(self):
        endpoint = make_endpoint("GET", "/users/{id}", params=[path_param("id")])
        session = MagicMock()
        session.request.side_effect = requests.ConnectionError("connection refused")

        response = send_request(session, endpoint, "http://api.test/users/1", RequestConfig(), None)

        assert response.is_error
        assert response.error_message == "Request failed: connection refused"
        assert response.status == 0

    def test_http_error_status_is_a_normal_response(self):
        endpoint = make_endpoint("GET", "/users")
        session = mock_session(status=404, reason="Not Found", body='{"error": "missing"}')
        response = send_request(session, endpoint, "http://api.test/users", RequestConfig(), None)
        assert not response.is_error
        assert response.status == 404
