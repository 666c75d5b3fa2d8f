"""Line-oriented, ed-style text editor operating on an in-memory document."""

from .commands import AddressRange, Substitution, parse_substitution, resolve_addresses
from .core import (
    AddressError,
    CommandSyntaxError,
    Document,
    EditorError,
    EditorIOError,
    ModifiedWarning,
    NoMatchError,
    PatternError,
    UnknownCommandError,
    cyclic_search,
    read_lines,
    safe_edit_context,
    write_lines,
)
from .editor import CommandOutcome, Editor, escape_line

__version__ = "0.1.0"

__all__ = [
    # Editor
    "Editor",
    "CommandOutcome",
    "escape_line",
    # Buffer and engines
    "Document",
    "AddressRange",
    "resolve_addresses",
    "Substitution",
    "parse_substitution",
    "cyclic_search",
    # File collaborators
    "read_lines",
    "write_lines",
    "safe_edit_context",
    # Errors
    "EditorError",
    "AddressError",
    "UnknownCommandError",
    "CommandSyntaxError",
    "EditorIOError",
    "PatternError",
    "NoMatchError",
    "ModifiedWarning",
]
