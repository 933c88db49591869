from swagger_tui.state.app_state import AppState
from swagger_tui.state.types import ApiResponse, DetailTab, EndpointItem, GroupHeader, RequestEditMode, ViewMode

from conftest import make_endpoint, path_param, query_param


class TestDerivedViews:
    def test_flat_render_items(self, flat_state):
        items = flat_state.render_items()
        assert all(isinstance(item, EndpointItem) for item in items)
        assert [item.endpoint.label for item in items][:2] == ["GET /users", "POST /users"]

    def test_grouped_render_items_collapsed_by_default(self, flat_state):
        flat_state.ui.view_mode = ViewMode.GROUPED
        items = flat_state.render_items()
        assert items == [GroupHeader("Other", 1, False), GroupHeader("admin", 1, False), GroupHeader("users", 4, False)]
        assert flat_state.selected_group() == "Other"
        assert flat_state.selected_endpoint() is None

    def test_search_matches_path_method_summary_and_tag(self, flat_state):
        for query, expected in [
            ("health", ["/health"]),
            ("delete", ["/users/{id}"]),
            ("create", ["/users"]),
            ("ADMIN", ["/users/{id}"]),
        ]:
            flat_state.search.query = query
            flat_state.update_filtered_endpoints()
            assert [ep.path for ep in flat_state.active_endpoints()] == expected

    def test_search_filters_groups(self, flat_state):
        flat_state.ui.view_mode = ViewMode.GROUPED
        flat_state.search.query = "health"
        flat_state.update_filtered_endpoints()
        assert flat_state.render_items() == [GroupHeader("Other", 1, False)]

    def test_no_match_is_empty(self, flat_state):
        flat_state.search.query = "zzz"
        flat_state.update_filtered_endpoints()
        assert flat_state.visible_count() == 0
        assert flat_state.selected_endpoint() is None


class TestSetEndpoints:
    def test_reload_clamps_selection(self, flat_state):
        flat_state.ui.selected_index = 4
        flat_state.set_endpoints([make_endpoint("GET", "/only")])
        assert flat_state.ui.selected_index == 0
        assert flat_state.selected_endpoint().path == "/only"

    def test_reload_reapplies_search(self, flat_state):
        flat_state.search.query = "only"
        flat_state.set_endpoints([make_endpoint("GET", "/only"), make_endpoint("GET", "/other")])
        assert [ep.path for ep in flat_state.active_endpoints()] == ["/only"]

    def test_reload_with_new_endpoint_under_selection_resets_view(self, flat_state):
        flat_state.ui.selected_index = 2
        flat_state.ui.active_detail_tab = DetailTab.REQUEST
        flat_state.ui.selected_param_index = 1
        flat_state.ui.response_selected_line = 3
        flat_state.request.current_response = ApiResponse(status=200, body="{}")
        flat_state.request.response_endpoint = ("GET", "/users/{id}")
        flat_state.request.edit_mode = RequestEditMode.editing("active", ("GET", "/users/{id}"))
        flat_state.request.param_edit_buffer = "tr"

        flat_state.set_endpoints([
            make_endpoint("GET", "/a"),
            make_endpoint("GET", "/b"),
            make_endpoint("GET", "/c/{x}", params=[path_param("x"), query_param("q")]),
        ])

        assert flat_state.selected_endpoint().path == "/c/{x}"
        assert flat_state.ui.selected_param_index == 0
        assert flat_state.ui.response_selected_line == 0
        assert flat_state.request.current_response is None
        assert not flat_state.request.edit_mode.is_editing
        assert flat_state.request.param_edit_buffer == ""
        assert flat_state.config_for(("GET", "/c/{x}")).path_params == {"x": ""}

    def test_reload_keeping_same_endpoint_preserves_view(self, flat_state):
        flat_state.ui.selected_index = 2
        flat_state.ui.selected_param_index = 1
        flat_state.request.current_response = ApiResponse(status=200, body="{}")
        flat_state.request.response_endpoint = ("GET", "/users/{id}")

        flat_state.set_endpoints(list(flat_state.data.endpoints))

        assert flat_state.ui.selected_param_index == 1
        assert flat_state.request.current_response is not None

    def test_empty_state(self):
        state = AppState.initial()
        assert state.visible_count() == 0
        assert state.selected_item() is None
        assert state.selected_params() == []

    def test_config_by_unknown_key_is_created(self):
        state = AppState.initial()
        config = state.get_or_create_config_by_key(("GET", "/gone"))
        assert config.path_params == {}
        assert state.config_for(("GET", "/gone")) is config
