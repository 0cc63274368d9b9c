"""A cursor-addressed line buffer for interactive terminal input."""

from .linebuffer import ANSI_MATCHER, LineBuffer, strip_ansi

__all__ = ["ANSI_MATCHER", "LineBuffer", "strip_ansi"]
