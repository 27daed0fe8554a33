"""GNU screen process management for schh.

Starting a session runs ``screen -dmS <id> ssh <target>``; attaching
replaces the current process with ``screen -r <id>``.
"""

import os
import shutil
import subprocess

SCREEN_BIN = "screen"
SSH_BIN = "ssh"


class ScreenError(Exception):
    """Raised when screen cannot be run or reports a failure."""

    pass


def start_detached_session(session_id: str, target: str) -> None:
    """Start a detached screen session running ssh to the target.

    Parameters
    ----------
    session_id : str
        Session id from build_session_id
    target : str
        Argument passed to ssh (host alias, user@host, ...)

    Raises
    ------
    ValueError
        If either argument is empty
    ScreenError
        If screen is missing or exits non-zero
    """
    if not session_id or not target:
        raise ValueError("missing session identifier or target")

    try:
        subprocess.run(
            [SCREEN_BIN, "-dmS", session_id, SSH_BIN, target],
            check=True,
        )
    except subprocess.CalledProcessError as e:
        raise ScreenError(
            f"{SCREEN_BIN} exited with status {e.returncode} "
            f"starting '{session_id}'"
        ) from e
    except OSError as e:
        raise ScreenError(f"unable to run {SCREEN_BIN}: {e}") from e


def attach_session(session_id: str) -> None:
    """Replace the current process with ``screen -r <session_id>``.

    Does not return on success. The environment and standard streams are
    inherited by screen.

    Raises
    ------
    ValueError
        If session_id is empty
    ScreenError
        If screen is not on PATH or the exec fails
    """
    if not session_id:
        raise ValueError("missing session identifier")

    screen_path = shutil.which(SCREEN_BIN)
    if not screen_path:
        raise ScreenError(f"'{SCREEN_BIN}' command not found in PATH")

    try:
        os.execv(screen_path, [SCREEN_BIN, "-r", session_id])
    except OSError as e:
        raise ScreenError(f"unable to exec {screen_path}: {e}") from e
