from __future__ import annotations

from slidesmith.templating.replacer import replace_tokens
from slidesmith.templating.validator import (
    find_missing_tokens,
    generate_config_suggestions,
    generate_validation_report,
    validate_against_tokens,
)


def test_found_and_missing_are_reported() -> None:
    config = {"client_name": "X", "payment": {"amount": 1500}}
    result = validate_against_tokens(config, ["client_name", "payment.amount", "date"])

    assert [(f.token, f.value, f.type) for f in result.found] == [
        ("client_name", "X", "string"),
        ("payment.amount", 1500, "number"),
    ]
    assert [(m.token, m.reason) for m in result.missing] == [("date", "not found in config")]
    assert result.valid is True
    assert result.errors == []
    assert result.warnings == ["Token 'date' is missing: not found in config"]


def test_strict_mode_collects_every_error() -> None:
    result = validate_against_tokens({}, ["a", "b.c"], strict_mode=True)
    assert result.valid is False
    assert len(result.errors) == 2
    assert "'a'" in result.errors[0]
    assert "'b.c'" in result.errors[1]


def test_empty_strings_are_missing_unless_allowed() -> None:
    config = {"title": ""}
    assert validate_against_tokens(config, ["title"]).missing[0].reason == "value is empty string"
    assert validate_against_tokens(config, ["title"], allow_empty=True).found[0].value == ""


def test_unused_detection_is_informational() -> None:
    config = {"client_name": "X", "unused_field": "Y"}
    result = validate_against_tokens(
        config, ["client_name"], strict_mode=True, warn_on_unused=True
    )
    assert "unused_field" in result.unused
    assert "client_name" not in result.unused
    assert result.valid is True
    assert result.warnings == ["Unused config values: unused_field"]


def test_unused_not_computed_by_default() -> None:
    assert validate_against_tokens({"x": 1}, []).unused == []


def test_found_set_matches_replaced_set() -> None:
    config = {"a": "1", "b": None, "c": "", "d": {"e": "2"}}
    tokens = ["a", "b", "c", "d.e", "f"]
    result = validate_against_tokens(config, tokens)
    outcome = replace_tokens("{{a}}{{b}}{{c}}{{d.e}}{{f}}", config, tokens, error_handling="graceful")
    assert {f.token for f in result.found} == set(outcome.replaced)


def test_find_missing_tokens() -> None:
    assert find_missing_tokens({"a": "", "b": "x"}, ["a", "b", "c"]) == ["a", "c"]


def test_config_suggestions_nest_dotted_tokens() -> None:
    result = validate_against_tokens({}, ["client_name", "payment.amount", "payment.provider"])
    assert generate_config_suggestions(result.missing) == {
        "client_name": "[client_name]",
        "payment": {"amount": "[payment.amount]", "provider": "[payment.provider]"},
    }


def test_validation_report_recommendations() -> None:
    report = generate_validation_report(
        {"client_name": "X", "old": "y"},
        ["client_name", "date"],
        warn_on_unused=True,
    )
    assert report.summary.total == 2
    assert report.summary.found == 1
    assert report.summary.missing == 1
    assert report.summary.valid is True
    assert report.suggested_config == {"date": "[date]"}
    assert report.recommendations == [
        "Add missing tokens to your config file",
        "Consider adding these fields to your config",
        "Remove unused config values to keep config clean",
    ]


def test_clean_report_has_no_recommendations() -> None:
    report = generate_validation_report({"a": "1"}, ["a"])
    assert report.recommendations == []
    assert report.suggested_config is None
