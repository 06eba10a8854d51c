import pytest


def test_has_path_walks_dicts_and_lists():
    from clipnote.llm._json import has_path

    data = {"a": {"b": [{"c": "x"}]}}
    assert has_path(data, ["a", "b", 0, "c"]) is True
    assert has_path(data, ["a", "b", 1, "c"]) is False


def test_has_path_accepts_string_indices_for_lists():
    from clipnote.llm._json import has_path

    data = {"candidates": [{"content": {"parts": [{"text": "hi"}]}}]}
    assert has_path(data, ["candidates", "0", "content", "parts", "0", "text"]) is True


def test_has_path_falsy_but_defined_terminal_is_present():
    from clipnote.llm._json import has_path

    assert has_path({"a": ""}, ["a"]) is True
    assert has_path({"a": 0}, ["a"]) is True
    assert has_path({"a": False}, ["a"]) is True
    assert has_path({"a": None}, ["a"]) is False


def test_has_path_rejects_missing_and_non_container_steps():
    from clipnote.llm._json import has_path

    assert has_path({}, ["a"]) is False
    assert has_path({"a": "text"}, ["a", "b"]) is False
    assert has_path({"a": [1, 2]}, ["a", "x"]) is False
    assert has_path({"a": [1, 2]}, ["a", -1]) is False
    assert has_path(None, ["a"]) is False
    # empty path: the value itself
    assert has_path({"a": 1}, []) is True


def test_get_path_and_parse_json_errors():
    from clipnote.llm._json import get_path, parse_json
    from clipnote.llm.errors import MalformedResponseError

    assert get_path({"a": [{"b": 3}]}, ("a", 0, "b")) == 3
    with pytest.raises(MalformedResponseError):
        get_path({"a": []}, ("a", 0))

    assert parse_json('{"ok": true}') == {"ok": True}
    with pytest.raises(MalformedResponseError):
        parse_json("<html>nope</html>")
