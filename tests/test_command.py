"""Unit tests for the cldf command builder."""

from cldf_mcp.command import build_args, build_flags, render


def test_build_skips_none_and_false_and_keeps_order():
    argv = build_args(
        "test",
        {
            "string": "value",
            "number": 123,
            "boolean": True,
            "falseBoolean": False,
            "nullValue": None,
        },
    )
    assert argv == ["cldf", "test", "--string", "value", "--number", "123", "--boolean"]
    assert render(argv) == 'cldf test --string "value" --number "123" --boolean'


def test_build_flags_preserves_insertion_order():
    flags = build_flags({"z": "1", "a": "2", "m": True})
    assert flags == ["--z", "1", "--a", "2", "--m"]


def test_build_flags_empty():
    assert build_flags({}) == []
    assert build_args("schema") == ["cldf", "schema"]


def test_positionals_come_before_flags():
    argv = build_args(
        "merge",
        {"output": "out.cldf", "strategy": "merge", "json": "json"},
        positional=["a.cldf", "b.cldf"],
    )
    assert argv == [
        "cldf",
        "merge",
        "a.cldf",
        "b.cldf",
        "--output",
        "out.cldf",
        "--strategy",
        "merge",
        "--json",
        "json",
    ]
    assert render(argv) == (
        'cldf merge "a.cldf" "b.cldf" --output "out.cldf" --strategy "merge" --json "json"'
    )


def test_custom_cli_path():
    argv = build_args("validate", {"strict": True}, positional=["x.cldf"], cli_path="/opt/cldf/bin/cldf")
    assert argv[0] == "/opt/cldf/bin/cldf"
    assert argv[1:] == ["validate", "x.cldf", "--strict"]


def test_values_with_quotes_and_spaces_stay_single_tokens():
    argv = build_args("query", {"filter": 'name = "The Nose"'}, positional=["my archive.cldf"])
    assert argv[2] == "my archive.cldf"
    assert argv[-1] == 'name = "The Nose"'
    assert len(argv) == 5
