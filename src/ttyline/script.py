"""
Replayable edit scripts for a LineBuffer.

An edit script is a TOML document that names a prompt, an initial text, and
the steps a reader loop would apply to the line, for example

```
prompt = "$ "
text = "hello"

[[steps]]
op = "move_left"
count = 2

[[steps]]
op = "insert"
chars = "XY"
```
"""

import dataclasses
import logging
import pathlib
from typing import Any, NamedTuple

import click
import toml

from .datatypes import Default, EditOp, ExitCode, OutputFormat
from .linebuffer import LineBuffer

logger = logging.getLogger(__name__)


class ScriptError(ValueError):
    """An edit script that cannot be parsed or replayed."""


class EditStep(NamedTuple):
    """One operation to apply to a LineBuffer."""

    op: EditOp
    count: int = 1
    index: int = 0
    stop: int | None = None
    chars: str = ""


@dataclasses.dataclass
class EditScript:
    """A prompt, its initial text, and the steps to replay on them."""

    prompt: str = Default.Prompt
    text: str = ""
    steps: list[EditStep] = dataclasses.field(default_factory=list)


_STEP_FIELD_TYPES = {
    "count": int,
    "index": int,
    "stop": int,
    "chars": str,
}


def load_script(path: pathlib.Path) -> EditScript:
    """Read and parse the edit script at path."""
    logger.debug(f"Loading edit script '{path!s}'")
    try:
        document = toml.load(path)
    except (toml.TomlDecodeError, UnicodeDecodeError) as decode_error:
        exception_message = f"Cannot decode '{path!s}': {decode_error}"
        raise ScriptError(exception_message) from decode_error
    return parse_script(document)


def parse_script(document: dict[str, Any]) -> EditScript:
    """Build an EditScript from a parsed TOML document."""
    prompt = document.get("prompt", Default.Prompt)
    text = document.get("text", "")
    for key, value in [("prompt", prompt), ("text", text)]:
        if not isinstance(value, str):
            exception_message = f"'{key}' must be a string, not {type(value).__name__}"
            raise ScriptError(exception_message)

    raw_steps = document.get("steps", [])
    if not isinstance(raw_steps, list):
        exception_message = "'steps' must be an array of tables"
        raise ScriptError(exception_message)

    steps = [_parse_step(number, raw_step) for number, raw_step in enumerate(raw_steps, start=1)]
    return EditScript(prompt=prompt, text=text, steps=steps)


def _parse_step(number: int, raw_step: Any) -> EditStep:  # noqa: ANN401 -- any TOML value can show up here
    if not isinstance(raw_step, dict):
        exception_message = f"Step {number} must be a table"
        raise ScriptError(exception_message)

    fields = dict(raw_step)
    op_name = fields.pop("op", None)
    if op_name is None:
        exception_message = f"Step {number} is missing 'op'"
        raise ScriptError(exception_message)
    try:
        op = EditOp(op_name)
    except ValueError as lookup_error:
        exception_message = f"Step {number} has unknown op '{op_name}'"
        raise ScriptError(exception_message) from lookup_error

    for key, value in fields.items():
        expected_type = _STEP_FIELD_TYPES.get(key)
        if expected_type is None:
            exception_message = f"Step {number} has unknown field '{key}'"
            raise ScriptError(exception_message)
        # bool is an int subclass but never a valid count or index
        if not isinstance(value, expected_type) or isinstance(value, bool):
            exception_message = f"Step {number} field '{key}' must be {expected_type.__name__}"
            raise ScriptError(exception_message)

    return EditStep(op, **fields)


def apply_step(buffer: LineBuffer, step: EditStep) -> None:  # noqa: C901 PLR0912 -- one branch per operation
    """Apply one step to the buffer."""
    if step.op == EditOp.MoveLeft:
        buffer.move_left(step.count)
    elif step.op == EditOp.MoveRight:
        buffer.move_right(step.count)
    elif step.op == EditOp.MoveToStart:
        buffer.move_to_start()
    elif step.op == EditOp.MoveToEnd:
        buffer.move_to_end()
    elif step.op == EditOp.Insert:
        buffer.insert(step.chars)
    elif step.op == EditOp.Append:
        for char in step.chars:
            buffer.append(char)
    elif step.op == EditOp.Delete:
        for _ in range(step.count):
            buffer.delete()
    elif step.op == EditOp.Remove:
        for _ in range(step.count):
            buffer.remove()
    elif step.op == EditOp.Replace:
        buffer.replace(step.chars)
    elif step.op == EditOp.SetAt:
        buffer.set_at(step.index, step.chars)
    elif step.op == EditOp.SetRange:
        buffer.set_at(slice(step.index, step.stop), step.chars)


def replay(script: EditScript) -> LineBuffer:
    """Build a LineBuffer from the script and apply all of its steps in order."""
    buffer = LineBuffer(script.prompt, script.text)
    logger.debug(f"Start: text '{buffer.text}' cursor {buffer.cursor}")
    for number, step in enumerate(script.steps, start=1):
        apply_step(buffer, step)
        logger.debug(f"Step {number} {step.op}: text '{buffer.text}' cursor {buffer.cursor}")
    return buffer


def describe(buffer: LineBuffer) -> dict[str, str | int]:
    """Summarize the state of the buffer."""
    return {
        "render": buffer.render(),
        "text": buffer.text,
        "cursor": buffer.cursor,
        "prompt_width": buffer.prompt_width(),
        "total_width": buffer.total_width(),
    }


def _dump_escaped_str(value: str) -> str:
    escaped_chars = []
    for char in value:
        if char in ('"', "\\"):
            escaped_chars.append(f"\\{char}")
        elif ord(char) < 0x20 or ord(char) == 0x7F:  # noqa: PLR2004 -- control character range
            escaped_chars.append(f"\\u{ord(char):04x}")
        else:
            escaped_chars.append(char)
    return f'"{"".join(escaped_chars)}"'


class ControlCharEncoder(toml.TomlEncoder):
    """A TomlEncoder that writes control characters like ESC as \\u escapes."""

    def __init__(self: "ControlCharEncoder") -> None:
        """Create a new encoder that escapes every control character in strings."""
        super().__init__()
        self.dump_funcs[str] = _dump_escaped_str


def format_summary(summary: dict[str, str | int], output_format: OutputFormat) -> str:
    """Format a buffer summary as aligned text or as a TOML document."""
    if output_format == OutputFormat.Toml:
        return toml.dumps(summary, encoder=ControlCharEncoder())
    key_width = max(len(key) for key in summary)
    return "\n".join(f"{key:<{key_width}}  {value!r}" for key, value in summary.items())


def handle_show(prompt: str, text: str, cursor: int | None, output_format: OutputFormat) -> None:
    """Handle the show CLI command."""
    logger.debug(f"prompt: '{prompt}', text: '{text}', cursor: '{cursor}'")
    buffer = LineBuffer(prompt, text)
    if cursor is not None:
        buffer.move_to_start()
        buffer.move_right(cursor)
    click.echo(buffer.render())
    click.echo(format_summary(describe(buffer), output_format))


def handle_replay(script_path: pathlib.Path, output_format: OutputFormat) -> None:
    """Handle the replay CLI command."""
    logger.debug(f"script_path: '{script_path!s}', output_format: '{output_format}'")
    try:
        script = load_script(script_path)
    except ScriptError as script_error:
        logger.error(f"Cannot replay '{script_path!s}'")
        logger.error(f"  {script_error}")
        raise SystemExit(ExitCode.Script_Failure) from script_error

    logger.info(f"Replaying {len(script.steps)} steps from '{script_path.name}'")
    buffer = replay(script)
    click.echo(format_summary(describe(buffer), output_format))
