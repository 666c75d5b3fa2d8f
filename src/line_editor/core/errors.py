"""Error taxonomy for editor commands.

Every failure a command can hit derives from ``EditorError``. The editor
catches these per command, prints ``?`` and keeps ``str(error)`` around for
the ``h`` command.
"""


class EditorError(Exception):
    """Base class for handled command failures."""

    default_message = "error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class AddressError(EditorError):
    """Malformed or out-of-range line address."""

    default_message = "invalid address"


class UnknownCommandError(EditorError):
    default_message = "unknown command"


class CommandSyntaxError(EditorError):
    """Known verb with arguments it does not accept."""

    default_message = "invalid command suffix"


class EditorIOError(EditorError):
    """Opening, reading or writing a file failed."""

    default_message = "cannot access file"


class PatternError(EditorError):
    """Invalid regular expression, or an empty one with nothing to reuse."""

    default_message = "invalid pattern"


class NoMatchError(EditorError):
    default_message = "no match"


class ModifiedWarning(EditorError):
    """One-shot refusal to discard unsaved changes."""

    default_message = "warning: file modified"
