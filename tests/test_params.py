import pytest
from asana_mcp.core.client import AsanaParseError, AsanaValidationError
from asana_mcp.core.fields import build_opt_fields, with_opt_fields
from asana_mcp.core.params import (
    parse_json_object,
    parse_optional_json_object,
    split_list,
)


def test_split_drops_empty_tokens_and_trims():
    assert split_list("a, b ,, c") == ["a", "b", "c"]


def test_split_trailing_comma():
    assert split_list("123,456,") == ["123", "456"]


@pytest.mark.parametrize(
    "tokens",
    [
        ["1", "2", "3"],
        ["  alpha", "beta  ", "gamma"],
        ["x", "x", "y"],
    ],
)
def test_array_and_joined_string_normalize_identically(tokens):
    assert split_list(tokens) == split_list(",".join(tokens))


def test_split_preserves_order_and_duplicates():
    assert split_list(["3", "1", "3"]) == ["3", "1", "3"]


def test_split_none_is_empty():
    assert split_list(None) == []


def test_split_accepts_integer_items():
    assert split_list([12, "34"]) == ["12", "34"]


def test_split_rejects_other_types():
    with pytest.raises(AsanaValidationError) as exc:
        split_list({"a": 1}, name="task_ids")
    assert "task_ids" in str(exc.value)


def test_split_rejects_nested_items():
    with pytest.raises(AsanaValidationError):
        split_list([["a"]], name="dependencies")


def test_parse_json_object_from_string_and_mapping_match():
    assert parse_json_object('{"gid": "123"}') == parse_json_object({"gid": "123"})


def test_parse_json_object_returns_copy():
    source = {"parent": "1"}
    result = parse_json_object(source)
    result["parent"] = "2"
    assert source == {"parent": "1"}


def test_parse_json_object_invalid_json_names_parameter():
    with pytest.raises(AsanaParseError) as exc:
        parse_json_object("{parent: 1", name="data")
    assert exc.value.parameter == "data"
    assert "data is not valid JSON" in str(exc.value)


def test_parse_json_object_rejects_non_object_json():
    with pytest.raises(AsanaValidationError) as exc:
        parse_json_object("[1, 2]", name="opts")
    assert not isinstance(exc.value, AsanaParseError)
    assert "opts" in str(exc.value)


def test_parse_optional_json_object_blank_is_none():
    assert parse_optional_json_object(None) is None
    assert parse_optional_json_object("   ") is None
    assert parse_optional_json_object('{"a": 1}') == {"a": 1}


def test_build_opt_fields_absent_sends_nothing():
    assert build_opt_fields(None) == {}
    assert build_opt_fields("") == {}


def test_build_opt_fields_normalizes_and_keeps_nested_paths():
    assert build_opt_fields(" name , custom_fields.name,") == {
        "opt_fields": "name,custom_fields.name"
    }


def test_build_opt_fields_passes_unknown_fields_verbatim():
    assert build_opt_fields("not_a_field") == {"opt_fields": "not_a_field"}


def test_build_opt_fields_default_applies_only_when_absent():
    assert build_opt_fields(None, default="name,gid") == {"opt_fields": "name,gid"}
    assert build_opt_fields("notes", default="name,gid") == {"opt_fields": "notes"}


def test_with_opt_fields_merges_without_mutating():
    params = {"limit": 10}
    merged = with_opt_fields(params, ["name", "gid"])
    assert merged == {"limit": 10, "opt_fields": "name,gid"}
    assert params == {"limit": 10}
