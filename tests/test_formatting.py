from swagger_tui.formatting import (
    delete_last_word,
    extract_json_value,
    mask_token,
    response_lines,
    try_format_json,
)


class TestJsonText:
    def test_pretty_prints_json(self):
        assert try_format_json('{"a":[1,2]}') == '{\n  "a": [\n    1,\n    2\n  ]\n}'

    def test_non_json_is_returned_unchanged(self):
        assert try_format_json("<html>oops</html>") == "<html>oops</html>"
        assert response_lines("line one\nline two") == ["line one", "line two"]

    def test_unicode_is_kept(self):
        assert try_format_json('{"name": "\\u00e9"}') == '{\n  "name": "é"\n}'


class TestExtractJsonValue:
    def test_string_value(self):
        assert extract_json_value('  "access_token": "abc123",') == "abc123"

    def test_number_and_bool(self):
        assert extract_json_value('  "count": 42,') == "42"
        assert extract_json_value('  "ok": true') == "true"

    def test_array_item(self):
        assert extract_json_value("    123,") == "123"

    def test_structural_lines_are_empty(self):
        assert extract_json_value("  {") == ""
        assert extract_json_value("  ],") == ""

    def test_value_containing_colon(self):
        assert extract_json_value('  "url": "http://api.test:8080",') == "http://api.test:8080"


class TestMaskToken:
    def test_short_token_fully_masked(self):
        assert mask_token("abc") == "●●●"

    def test_long_token_keeps_ends(self):
        assert mask_token("0123456789abcdefXYZ") == "0123456...defXYZ"

    def test_empty(self):
        assert mask_token("") == ""


class TestDeleteLastWord:
    def test_removes_last_word(self):
        assert delete_last_word("hello big world") == "hello big"

    def test_trailing_spaces_are_skipped(self):
        assert delete_last_word("hello world   ") == "hello"

    def test_single_word(self):
        assert delete_last_word("http://api.test") == ""
