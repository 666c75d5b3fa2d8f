#!/usr/bin/env python3
"""Basic usage examples for the line-editor library."""

import io
import os
import tempfile

from line_editor import CommandOutcome, Editor, resolve_addresses


def scripted_session_example():
    """Drive the editor with a fixed list of input lines."""
    print("=== Scripted Session Example ===")

    script = [
        "a",
        "def hello_world():",
        "    print('hello')",
        "",
        "hello_world()",
        ".",
        ",n",
        ",s/hello_world/greet_user/g",
        "/print/l",
        "Q",
    ]
    output = io.StringIO()
    editor = Editor(input_lines=script, output=output)
    status = editor.run()

    print(output.getvalue(), end="")
    print(f"Exit status: {status}")


def address_example():
    """Show how address expressions resolve."""
    print("\n=== Address Resolution Example ===")

    editor = Editor(input_lines=[f"line {i}" for i in range(1, 11)] + ["."], output=io.StringIO())
    editor.execute("a")
    editor.line = 4

    for text in [".", "$", "%p", "-2,+3n", "/line 7/", "?line 2?d", "3;+2p"]:
        addresses = resolve_addresses(editor, text)
        print(f"{text!r:14} -> start={addresses.start} end={addresses.end} command={addresses.text!r}")


def file_example():
    """Write a document, reopen it, and quit past the unsaved-changes warning."""
    print("\n=== File Example ===")

    with tempfile.TemporaryDirectory() as temp_dir:
        path = os.path.join(temp_dir, "notes.txt")
        output = io.StringIO()
        editor = Editor(input_lines=["first", "second", "."], output=output, verbose=True)

        editor.execute("a")
        editor.execute(f"w {path}")
        print(f"Wrote {output.getvalue().strip()} bytes to notes.txt")

        editor.execute("1d")
        outcome = editor.execute("q")
        print(f"First q: {outcome.value} ({editor.last_error})")
        outcome = editor.execute("q")
        print(f"Second q: {outcome.value}")
        assert outcome is CommandOutcome.TERMINATE

        reopened = Editor(input_lines=[], output=io.StringIO())
        reopened.execute(f"e {path}")
        print(f"Reopened: {list(reopened.document)}")


if __name__ == "__main__":
    scripted_session_example()
    address_example()
    file_example()

    print("\n=== All examples completed successfully! ===")
