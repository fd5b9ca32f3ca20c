import pytest

from browser_tool_adapter.llm.json_parser import extract_json_list, extract_json_object


def test_extract_json_object_from_code_fence():
    text = """```json\n{"selector": "#go", "method": "click"}\n```"""
    result = extract_json_object(text)
    assert result == {"selector": "#go", "method": "click"}


def test_extract_json_object_ignores_surrounding_prose():
    result = extract_json_object('Sure! {"title": "Hello"} Let me know.')
    assert result == {"title": "Hello"}


def test_extract_json_object_without_object_raises():
    with pytest.raises(ValueError):
        extract_json_object("no json here")


def test_extract_json_list_accepts_wrapped_or_bare_arrays():
    assert extract_json_list('{"elements": [{"selector": "a"}]}', "elements") == [{"selector": "a"}]
    assert extract_json_list('```json\n[{"selector": "b"}]\n```', "elements") == [{"selector": "b"}]
    assert extract_json_list("{}", "elements") == []
