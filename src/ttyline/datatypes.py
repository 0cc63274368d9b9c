"""Shared constants and classes used by ttyline."""

import enum


class ExitCode(enum.IntEnum):
    """Exit codes for commands."""

    Success = 0
    Script_Failure = 61


class OutputFormat(enum.StrEnum):
    """Supported formats for printing a line summary."""

    Text = "text"
    Toml = "toml"


class Default:
    """Default values for commands and edit scripts."""

    Prompt = "$ "
    Format = OutputFormat.Text


class EditOp(enum.StrEnum):
    """Line buffer operations that an edit script step can invoke."""

    MoveLeft = "move_left"
    MoveRight = "move_right"
    MoveToStart = "move_to_start"
    MoveToEnd = "move_to_end"
    Insert = "insert"
    Append = "append"
    Delete = "delete"
    Remove = "remove"
    Replace = "replace"
    SetAt = "set_at"
    SetRange = "set_range"
