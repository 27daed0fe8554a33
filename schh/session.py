"""Discovery of running screen sessions for a host."""

import subprocess
from dataclasses import dataclass

from .identifier import session_prefix
from .screen import SCREEN_BIN, ScreenError


@dataclass(frozen=True)
class SessionInfo:
    """A running screen session owned by schh.

    ``id`` is the ``pid.name`` field exactly as screen reports it and is
    what ``screen -r`` accepts; ``label`` is the name with the host prefix
    stripped.
    """

    id: str
    label: str

    @property
    def name(self) -> str:
        """Session name without the pid, as produced by build_session_id."""
        return self.id.split(".", 1)[1]


def parse_screen_output(output: str, prefix: str) -> list[SessionInfo]:
    """Parse ``screen -ls`` output into sessions whose name has ``prefix``.

    The first whitespace-separated field containing a dot on each line is
    taken as ``pid.name``. Lines without one, or whose name does not match
    the prefix, are skipped. Order follows the listing.
    """
    sessions = []
    for raw_line in output.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        candidate = next((field for field in line.split() if "." in field), "")
        if not candidate:
            continue

        name = candidate.split(".", 1)[1]
        if not name.startswith(prefix):
            continue

        label = name[len(prefix) :]
        if not label:
            continue

        sessions.append(SessionInfo(id=candidate, label=label))

    return sessions


def list_sessions(host_name: str) -> list[SessionInfo]:
    """List running schh sessions for a host.

    screen exits non-zero when there is nothing to list, so a failing exit
    status is only an error when it also produced no output.

    Raises
    ------
    ScreenError
        When screen cannot be run or fails without output.
    """
    prefix = session_prefix(host_name)
    if not prefix:
        return []

    try:
        result = subprocess.run(
            [SCREEN_BIN, "-ls"],
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
        )
    except OSError as e:
        raise ScreenError(f"unable to run {SCREEN_BIN}: {e}") from e

    output = result.stdout or ""
    if result.returncode != 0 and not output:
        raise ScreenError(
            f"{SCREEN_BIN} -ls exited with status {result.returncode}"
        )

    return parse_screen_output(output, prefix)
