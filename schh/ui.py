"""Interactive session picker.

Shows the running sessions of a host as a numbered menu and asks for a
name when a new session is requested. Reads one line per prompt from a
text stream, so it works with stdin as well as with StringIO in tests.
"""

import enum
import re
from dataclasses import dataclass
from typing import TextIO

from rich.console import Console
from rich.markup import escape

from .labels import LabelGenerator
from .session import SessionInfo

NUMBER_PATTERN = re.compile(r"[+-]?[0-9]+")


class Action(enum.Enum):
    CANCEL = "cancel"
    ATTACH = "attach"
    CREATE = "create"


@dataclass(frozen=True)
class Choice:
    """Outcome of one session picker interaction."""

    action: Action
    session_id: str = ""
    label: str = ""

    @classmethod
    def cancel(cls) -> "Choice":
        return cls(Action.CANCEL)

    @classmethod
    def attach(cls, session_id: str, label: str) -> "Choice":
        return cls(Action.ATTACH, session_id=session_id, label=label)

    @classmethod
    def create(cls, label: str) -> "Choice":
        return cls(Action.CREATE, label=label)


class PromptError(Exception):
    """Raised when the input stream is closed or cannot be read."""

    pass


def choose_session(
    host_name: str,
    sessions: list[SessionInfo],
    in_stream: TextIO,
    out_stream: TextIO,
    labels: LabelGenerator | None = None,
) -> Choice:
    """Let the user attach to one of ``sessions`` or start a new one.

    With no sessions the user goes straight to the name prompt. Otherwise a
    menu is shown until a valid entry is typed; cancelling the name prompt
    from the menu returns to the menu. The session list is not refreshed
    during the interaction.

    Parameters
    ----------
    host_name : str
        Host shown in prompts
    sessions : list[SessionInfo]
        Running sessions for the host
    in_stream, out_stream : TextIO
        Streams to read answers from and render prompts to
    labels : LabelGenerator | None
        Source of suggested names (default: a fresh generator)

    Returns
    -------
    Choice
        CANCEL, ATTACH with the selected session, or CREATE with the
        label as typed.

    Raises
    ------
    PromptError
        When the input ends or fails before a choice is made
    """
    if in_stream is None or out_stream is None:
        raise ValueError("input and output streams are required")

    labels = labels or LabelGenerator()
    console = Console(
        file=out_stream, highlight=False, emoji=False, soft_wrap=True
    )

    if not sessions:
        label = _prompt_for_label(host_name, labels.generate(), in_stream, console)
        if label is None:
            return Choice.cancel()
        return Choice.create(label)

    new_entry = len(sessions) + 1
    while True:
        console.print(f"\nActive sessions for {escape(host_name)}:")
        for index, info in enumerate(sessions, start=1):
            console.print(f"  {index}) {escape(info.label)}")
        console.print(f"  {new_entry}) Start a new session")
        console.print("Type the number to select an option, or 'q' to cancel.")
        console.print("> ", end="")

        answer = _read_line(in_stream)
        if not answer:
            continue
        if answer.lower() == "q":
            return Choice.cancel()

        if not NUMBER_PATTERN.fullmatch(answer):
            console.print("Please enter a valid number.")
            continue
        number = int(answer)

        if 1 <= number <= len(sessions):
            selected = sessions[number - 1]
            return Choice.attach(selected.id, selected.label)

        if number == new_entry:
            label = _prompt_for_label(
                host_name, labels.generate(), in_stream, console
            )
            if label is None:
                continue
            return Choice.create(label)

        console.print("Selection out of range. Try again.")


def _prompt_for_label(
    host_name: str, suggestion: str, in_stream: TextIO, console: Console
) -> str | None:
    """Ask for a new session name. Returns None if the user cancels."""
    console.print(f"\nStarting a new session for {escape(host_name)}.")
    if suggestion:
        console.print(f"Suggested name: {escape(suggestion)}")
        console.print(
            "Press Enter to accept the suggestion, type a custom name, "
            "or 'q' to cancel."
        )
    else:
        console.print("Type a session name, or 'q' to cancel.")
    console.print("> ", end="")

    answer = _read_line(in_stream)
    if not answer:
        return suggestion or None
    if answer.lower() == "q":
        return None
    return answer


def _read_line(in_stream: TextIO) -> str:
    """Read one stripped line, raising PromptError at end of input.

    A last line without a newline means the stream was closed mid-answer
    and counts as end of input.
    """
    try:
        line = in_stream.readline()
    except OSError as e:
        raise PromptError(f"unable to read input: {e}") from e
    if not line.endswith("\n"):
        raise PromptError("input closed")
    return line.strip()
