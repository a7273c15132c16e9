import pytest

from src.templates.engine import (
    extract_variables,
    append_variable,
    insert_variable,
    substitute_variables,
    suggest_variables,
)


def test_extract_empty_text():
    assert extract_variables("") == []


def test_extract_dedupes_in_first_occurrence_order():
    assert extract_variables("hello {{name}}, {{name}} again") == ["name"]
    assert extract_variables("{{a}} and {{b}} and {{a}}") == ["a", "b"]
    assert extract_variables("{{z}} {{y}} {{z}} {{x}}") == ["z", "y", "x"]


@pytest.mark.parametrize(
    "text",
    [
        "{{1bad}}",
        "{{}}",
        "{{ name}}",
        "{{name }}",
        "{name}",
        "{{name}",
        "{{name",
        "}}name{{",
        "{{na-me}}",
        "{{héllo}}",
    ],
)
def test_extract_ignores_malformed_placeholders(text):
    assert extract_variables(text) == []


def test_extract_keeps_valid_names_among_invalid_ones():
    assert extract_variables("{{1bad}} {{ok_1}} {{}}") == ["ok_1"]
    assert extract_variables("{{_private}} {{A1}}") == ["_private", "A1"]


def test_extract_is_case_sensitive():
    assert extract_variables("{{Name}} {{name}}") == ["Name", "name"]


def test_extract_triple_braces_matches_inner_placeholder():
    assert extract_variables("{{{a}}}") == ["a"]
    assert substitute_variables("{{{a}}}", {"a": "x"}) == "{x}"


def test_extract_is_repeatable():
    text = "{{b}} {{a}} {{b}} {{c}}"
    assert extract_variables(text) == extract_variables(text)


def test_substitute_replaces_values():
    assert substitute_variables("Hi {{name}}", {"name": "Sam"}) == "Hi Sam"


def test_substitute_missing_values_become_empty():
    assert substitute_variables("Hi {{name}}", {}) == "Hi "
    assert substitute_variables("Hi {{name}}, {{missing}}", {"name": "Sam"}) == "Hi Sam, "
    assert substitute_variables("Hi {{name}}", {"name": None}) == "Hi "


def test_substitute_replaces_every_occurrence():
    assert substitute_variables("{{x}}-{{x}}-{{y}}", {"x": "1", "y": "2"}) == "1-1-2"


def test_substitute_ignores_unused_keys():
    assert substitute_variables("Hi {{name}}", {"name": "Sam", "other": "x"}) == "Hi Sam"


@pytest.mark.parametrize(
    "text",
    ["", "plain text", "{single}", "{{ spaced }}", "{{1bad}} and {{}}", "unclosed {{name"],
)
def test_substitute_leaves_text_without_placeholders_unchanged(text):
    assert substitute_variables(text, {"name": "Sam", "spaced": "x", "1bad": "y"}) == text


def test_substitute_is_not_recursive():
    out = substitute_variables("{{a}}", {"a": "{{b}}", "b": "nope"})
    assert out == "{{b}}"
    # re-extracting the output surfaces the injected placeholder
    assert extract_variables(out) == ["b"]


def test_suggest_lists_used_names_before_common_ones():
    suggestions = suggest_variables("{{event}} with {{host}}")
    names = [s.name for s in suggestions]

    assert names[:2] == ["event", "host"]
    assert names.count("event") == 1
    assert "location" in names
    assert all(not s.suggested for s in suggestions[:2])
    assert all(s.suggested for s in suggestions[2:])


def test_suggest_filters_case_insensitively():
    names = [s.name for s in suggest_variables("{{Timezone}}", query="TIME")]
    assert names == ["Timezone", "time"]


def test_insert_variable_replaces_at_search():
    text = "Hello @na and more"
    new_text, caret = insert_variable(text, caret=9, name="name")

    assert new_text == "Hello {{name}} and more"
    assert caret == len("Hello {{name}}")


def test_insert_variable_without_at_inserts_at_caret():
    new_text, caret = insert_variable("Hi !", caret=3, name="who")
    assert new_text == "Hi {{who}}!"
    assert caret == 10


def test_insert_variable_leaves_earlier_at_signs_alone():
    text = "Mail a@b.com then "
    new_text, caret = insert_variable(text, caret=len(text), name="time")

    assert new_text == "Mail a@b.com then {{time}}"
    assert caret == len(new_text)


def test_append_variable_consumes_trailing_search():
    assert append_variable("Hello @na", "name") == "Hello {{name}}"
    assert append_variable("Hello @", "name") == "Hello {{name}}"
    assert append_variable("Hello ", "name") == "Hello {{name}}"
    assert append_variable("", "name") == "{{name}}"


def test_append_variable_keeps_trailing_newline():
    assert append_variable("Hello @na\n", "name") == "Hello @na\n{{name}}"


def test_appended_variable_is_extracted():
    body = append_variable("Dear @", "recipient")
    assert extract_variables(body) == ["recipient"]
