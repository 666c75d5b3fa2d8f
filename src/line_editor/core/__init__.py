"""Core editing modules."""

from .buffer import Document
from .errors import (
    AddressError,
    CommandSyntaxError,
    EditorError,
    EditorIOError,
    ModifiedWarning,
    NoMatchError,
    PatternError,
    UnknownCommandError,
)
from .files import iter_file_lines, iter_stream_lines, line_size, read_lines, write_lines
from .safety import SafeFileOperation, safe_edit_context
from .search import compile_pattern, cyclic_addresses, cyclic_search

__all__ = [
    # Line buffer
    'Document',

    # Errors
    'EditorError',
    'AddressError',
    'UnknownCommandError',
    'CommandSyntaxError',
    'EditorIOError',
    'PatternError',
    'NoMatchError',
    'ModifiedWarning',

    # File collaborators
    'iter_file_lines',
    'iter_stream_lines',
    'line_size',
    'read_lines',
    'write_lines',

    # Safety mechanisms
    'SafeFileOperation',
    'safe_edit_context',

    # Search
    'compile_pattern',
    'cyclic_addresses',
    'cyclic_search',
]
