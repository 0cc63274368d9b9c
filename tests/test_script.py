"""Tests for replaying edit scripts on a LineBuffer."""

import logging
import pathlib

import pytest
import toml

from ttyline import script
from ttyline.datatypes import Default, EditOp, ExitCode, OutputFormat
from ttyline.linebuffer import LineBuffer

_HISTORY_SCRIPT = """
prompt = "qtpy $ "
text = "hello"

[[steps]]
op = "move_left"
count = 2

[[steps]]
op = "insert"
chars = "XY"

[[steps]]
op = "move_to_end"

[[steps]]
op = "remove"
count = 3
"""


def _write_script(folder: pathlib.Path, contents: str) -> pathlib.Path:
    script_file = folder.joinpath("script.toml")
    script_file.write_text(contents, encoding="UTF-8")
    return script_file


def test_parse_defaults() -> None:
    """Does an empty document give the default prompt and no steps?"""
    edit_script = script.parse_script({})

    assert edit_script.prompt == Default.Prompt
    assert edit_script.text == ""
    assert edit_script.steps == []


def test_parse_steps() -> None:
    """Does it turn step tables into EditSteps with defaults for missing fields?"""
    document = {
        "prompt": "> ",
        "text": "abc",
        "steps": [
            {"op": "move_left"},
            {"op": "set_at", "index": 5, "chars": "b"},
            {"op": "set_range", "index": 1, "stop": 2, "chars": ""},
        ],
    }

    edit_script = script.parse_script(document)

    assert edit_script.prompt == "> "
    assert edit_script.text == "abc"
    assert edit_script.steps == [
        script.EditStep(EditOp.MoveLeft),
        script.EditStep(EditOp.SetAt, index=5, chars="b"),
        script.EditStep(EditOp.SetRange, index=1, stop=2, chars=""),
    ]
    assert edit_script.steps[0].count == 1


@pytest.mark.parametrize(
    ("document", "expected_message"),
    [
        ({"prompt": 3}, "'prompt' must be a string"),
        ({"text": ["a"]}, "'text' must be a string"),
        ({"steps": "move_left"}, "'steps' must be an array of tables"),
        ({"steps": ["move_left"]}, "Step 1 must be a table"),
        ({"steps": [{"count": 2}]}, "Step 1 is missing 'op'"),
        ({"steps": [{"op": "move_left"}, {"op": "jump"}]}, "Step 2 has unknown op 'jump'"),
        ({"steps": [{"op": "insert", "text": "a"}]}, "Step 1 has unknown field 'text'"),
        ({"steps": [{"op": "move_left", "count": "2"}]}, "Step 1 field 'count' must be int"),
        ({"steps": [{"op": "move_left", "count": True}]}, "Step 1 field 'count' must be int"),
        ({"steps": [{"op": "insert", "chars": 1}]}, "Step 1 field 'chars' must be str"),
    ],
)
def test_parse_errors(document: dict, expected_message: str) -> None:
    """Does it reject malformed documents with a message naming the problem?"""
    with pytest.raises(script.ScriptError, match=expected_message):
        script.parse_script(document)


def test_script_error_is_value_error() -> None:
    """Can callers catch script problems as ValueError?"""
    assert issubclass(script.ScriptError, ValueError)


@pytest.mark.parametrize(
    ("step", "expected_text", "expected_cursor"),
    [
        (script.EditStep(EditOp.MoveLeft, count=2), "abcde", 1),
        (script.EditStep(EditOp.MoveRight, count=9), "abcde", 5),
        (script.EditStep(EditOp.MoveToStart), "abcde", 0),
        (script.EditStep(EditOp.MoveToEnd), "abcde", 5),
        (script.EditStep(EditOp.Insert, chars="X"), "abcXde", 4),
        (script.EditStep(EditOp.Append, chars="XY"), "abcdeXY", 5),
        (script.EditStep(EditOp.Delete, count=2), "abc", 3),
        (script.EditStep(EditOp.Remove, count=2), "ade", 1),
        (script.EditStep(EditOp.Replace, chars="hi"), "hi", 2),
        (script.EditStep(EditOp.SetAt, index=7, chars="Z"), "abcde  Z", 8),
        (script.EditStep(EditOp.SetRange, index=0, stop=2, chars="Q"), "Qcde", 4),
    ],
)
def test_apply_step(step: script.EditStep, expected_text: str, expected_cursor: int) -> None:
    """Does each step call the matching buffer operation?"""
    buffy = LineBuffer("$ ", "abcde")
    buffy.move_left(2)

    script.apply_step(buffy, step)

    assert buffy.text == expected_text
    assert buffy.cursor == expected_cursor


def test_every_op_has_a_handler() -> None:
    """Does every EditOp change or move the buffer in some case?"""
    for op in EditOp:
        buffy = LineBuffer("$ ", "abcde")
        buffy.move_left(2)
        before = (buffy.text, buffy.cursor)

        script.apply_step(buffy, script.EditStep(op, count=1, index=1, stop=2, chars="X"))

        assert (buffy.text, buffy.cursor) != before, f"'{op}' did nothing"


def test_replay(caplog: pytest.LogCaptureFixture) -> None:
    """Does it apply all steps in order and log each one?"""
    edit_script = script.parse_script(toml.loads(_HISTORY_SCRIPT))

    with caplog.at_level(logging.DEBUG, logger="ttyline.script"):
        buffy = script.replay(edit_script)

    assert buffy.prompt == "qtpy $ "
    assert buffy.text == "helX"
    assert buffy.cursor == 4
    step_messages = [r.getMessage() for r in caplog.records if r.getMessage().startswith("Step")]
    assert len(step_messages) == 4
    assert step_messages[1] == "Step 2 insert: text 'helXYlo' cursor 5"


def test_load_script(tmp_path: pathlib.Path) -> None:
    """Does it read an edit script from a TOML file?"""
    script_file = _write_script(tmp_path, _HISTORY_SCRIPT)

    edit_script = script.load_script(script_file)

    assert edit_script.text == "hello"
    assert [step.op for step in edit_script.steps] == [
        EditOp.MoveLeft,
        EditOp.Insert,
        EditOp.MoveToEnd,
        EditOp.Remove,
    ]


def test_load_script_with_escape_sequences(tmp_path: pathlib.Path) -> None:
    """Does a prompt with escape sequences survive the TOML round trip?"""
    script_file = _write_script(tmp_path, 'prompt = "\\u001b[32mqtpy\\u001b[0m $ "\ntext = "ls"\n')

    buffy = script.replay(script.load_script(script_file))

    assert buffy.render() == "\x1b[32mqtpy\x1b[0m $ ls"
    assert buffy.prompt_width() == 7


def test_load_script_decode_error(tmp_path: pathlib.Path) -> None:
    """Does a file that is not TOML raise a ScriptError?"""
    script_file = _write_script(tmp_path, "prompt = \n[[steps\n")

    with pytest.raises(script.ScriptError, match="Cannot decode"):
        script.load_script(script_file)


def test_describe() -> None:
    """Does it summarize the buffer's line, cursor, and widths?"""
    buffy = LineBuffer("\x1b[1mqtpy\x1b[0m> ", "abc")
    buffy.move_left()

    summary = script.describe(buffy)

    assert summary == {
        "render": "\x1b[1mqtpy\x1b[0m> abc",
        "text": "abc",
        "cursor": 2,
        "prompt_width": 6,
        "total_width": 9,
    }


def test_format_summary_text() -> None:
    """Does the text format align keys and quote values?"""
    summary = {"text": "ab", "cursor": 1}

    formatted = script.format_summary(summary, OutputFormat.Text)

    assert formatted.splitlines() == ["text    'ab'", "cursor  1"]


def test_format_summary_toml() -> None:
    """Does the TOML format load back to the same summary?"""
    buffy = LineBuffer("qtpy> ", "abc")
    summary = script.describe(buffy)

    formatted = script.format_summary(summary, OutputFormat.Toml)

    assert toml.loads(formatted) == summary


@pytest.mark.parametrize(
    ("prompt", "text"),
    [
        ("\x1b[32mqtpy\x1b[0m $ ", "hello"),
        ("\x1b[?25l> ", "say \"hi\" C:\\temp"),
        ("\x1b[1m>\x1b[0m ", "tab\there\x7f"),
    ],
)
def test_format_summary_toml_keeps_escape_sequences(prompt: str, text: str) -> None:
    """Does the TOML format keep ESC and other control characters intact?"""
    buffy = LineBuffer(prompt, text)
    summary = script.describe(buffy)

    formatted = script.format_summary(summary, OutputFormat.Toml)

    assert "\\u001b" in formatted
    assert "\x1b" not in formatted
    assert toml.loads(formatted) == summary
    assert toml.loads(formatted)["render"] == buffy.render()


def test_handle_show(capsys: pytest.CaptureFixture) -> None:
    """Does it print the line and a summary with the clamped cursor?"""
    script.handle_show("> ", "abc", 10, OutputFormat.Text)

    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "> abc"
    assert f"{'cursor':<12}  3" in lines


def test_handle_replay_failure(tmp_path: pathlib.Path, caplog: pytest.LogCaptureFixture) -> None:
    """Does a bad script exit with the script failure code and log why?"""
    script_file = _write_script(tmp_path, '[[steps]]\nop = "jump"\n')

    with pytest.raises(SystemExit) as exit_info:
        script.handle_replay(script_file, OutputFormat.Text)

    assert exit_info.value.code == ExitCode.Script_Failure
    assert "Step 1 has unknown op 'jump'" in caplog.text
