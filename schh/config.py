"""Host and recent-session storage for schh.

Both stores are plain text files under the user config directory, one
whitespace-separated pair per line:

    ~/.config/schh/hosts          <name> <target>
    ~/.config/schh/last_sessions  <host> <label>

Blank lines and lines starting with "#" are ignored.
"""

import os
from dataclasses import dataclass
from pathlib import Path

HOSTS_FILE = "hosts"
LAST_SESSIONS_FILE = "last_sessions"


class HostExistsError(Exception):
    """Raised when adding a host name that is already configured."""

    pass


class HostNotFoundError(Exception):
    """Raised when removing a host name that is not configured."""

    pass


class LabelNotFoundError(Exception):
    """Raised when no session label is stored for a host."""

    pass


@dataclass(frozen=True)
class Host:
    """A configured host: ``name`` is what the user types, ``target`` goes to ssh."""

    name: str
    target: str


def get_config_dir() -> Path:
    """Get the schh config directory, creating it if needed.

    Uses $XDG_CONFIG_HOME/schh, falling back to ~/.config/schh.
    """
    base = os.environ.get("XDG_CONFIG_HOME")
    base_path = Path(base) if base else Path.home() / ".config"
    config_dir = base_path / "schh"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def _read_pairs(path: Path) -> list[list[str]]:
    """Read the non-comment lines of a store file as field lists."""
    if not path.exists():
        return []

    entries = []
    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        entries.append(line.split())
    return entries


def _write_pairs(path: Path, pairs: list[tuple[str, str]]) -> None:
    path.write_text("".join(f"{key} {value}\n" for key, value in pairs))


def load_hosts() -> list[Host]:
    """Load configured hosts in file order."""
    hosts = []
    for fields in _read_pairs(get_config_dir() / HOSTS_FILE):
        name = fields[0]
        target = fields[1] if len(fields) > 1 else name
        hosts.append(Host(name=name, target=target))
    return hosts


def find_host(hosts: list[Host], name: str) -> Host | None:
    """Return the host with the given name, or None."""
    for host in hosts:
        if host.name == name:
            return host
    return None


def add_host(name: str, target: str) -> None:
    """Append a host to the hosts file.

    Raises
    ------
    HostExistsError
        If a host with this name is already configured
    """
    hosts = load_hosts()
    if find_host(hosts, name) is not None:
        raise HostExistsError(name)

    path = get_config_dir() / HOSTS_FILE
    with path.open("a") as f:
        f.write(f"{name} {target}\n")


def remove_host(name: str) -> None:
    """Remove a host from the hosts file.

    Raises
    ------
    HostNotFoundError
        If no host with this name is configured
    """
    hosts = load_hosts()
    if find_host(hosts, name) is None:
        raise HostNotFoundError(name)

    remaining = [(h.name, h.target) for h in hosts if h.name != name]
    _write_pairs(get_config_dir() / HOSTS_FILE, remaining)


def _load_label_entries() -> dict[str, str]:
    entries = {}
    for fields in _read_pairs(get_config_dir() / LAST_SESSIONS_FILE):
        if len(fields) < 2:
            continue
        entries[fields[0]] = fields[1]
    return entries


def _save_label_entries(entries: dict[str, str]) -> None:
    _write_pairs(get_config_dir() / LAST_SESSIONS_FILE, list(entries.items()))


def get_last_label(host_name: str) -> str:
    """Get the label of the session last used on a host.

    Raises
    ------
    LabelNotFoundError
        If nothing is stored for the host
    """
    for fields in _read_pairs(get_config_dir() / LAST_SESSIONS_FILE):
        if len(fields) >= 2 and fields[0] == host_name:
            return fields[1]
    raise LabelNotFoundError(host_name)


def set_last_label(host_name: str, label: str) -> None:
    """Remember the label of the session last used on a host."""
    entries = _load_label_entries()
    entries[host_name] = label
    _save_label_entries(entries)


def clear_last_label(host_name: str) -> bool:
    """Forget the stored label for a host. Returns whether one existed."""
    entries = _load_label_entries()
    if host_name not in entries:
        return False
    del entries[host_name]
    _save_label_entries(entries)
    return True
