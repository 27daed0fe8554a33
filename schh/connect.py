"""Session workflows for schh.

Each public function implements one command line mode: list the sessions
of a host, reattach the last one, open a named one, or pick interactively.
Attaching replaces the process, so successful workflows do not return.
"""

import sys
from typing import TextIO

from rich.console import Console
from rich.markup import escape

from .config import (
    Host,
    LabelNotFoundError,
    add_host,
    clear_last_label,
    find_host,
    get_last_label,
    load_hosts,
    remove_host,
    set_last_label,
)
from .identifier import build_session_id, canonicalize
from .screen import attach_session, start_detached_session
from .session import SessionInfo, list_sessions
from .ui import Action, choose_session

console = Console()


class ConnectError(Exception):
    """Raised when a workflow cannot continue; the message is user-facing."""

    pass


def resolve_host(host_name: str) -> Host:
    """Look up a configured host by name."""
    host = find_host(load_hosts(), host_name)
    if host is None:
        raise ConnectError(
            f"Host '{host_name}' is not configured. "
            f"Use 'schh host add {host_name} [target]'."
        )
    return host


def remember_label(host: Host, label: str) -> None:
    """Store the last used label; failures only produce a warning."""
    try:
        set_last_label(host.name, label)
    except OSError as e:
        console.print(
            f"[yellow]Warning: unable to update recent sessions: {escape(str(e))}[/yellow]"
        )


def _is_running(session_id: str, sessions: list[SessionInfo]) -> bool:
    return any(info.name == session_id for info in sessions)


def open_session(
    host: Host, label: str, sessions: list[SessionInfo] | None = None
) -> None:
    """Start the session for ``label`` unless running, remember it, attach.

    ``label`` must already be canonical. ``sessions`` is the current
    listing for the host; it is fetched when not given.
    """
    session_id = build_session_id(host.name, label)
    if sessions is None:
        sessions = list_sessions(host.name)

    if not _is_running(session_id, sessions):
        start_detached_session(session_id, host.target)
        console.print(f"[cyan]Started session:[/cyan] {escape(label)}")

    remember_label(host, label)
    attach_session(session_id)


def print_host_sessions(host: Host) -> None:
    """Print the running sessions of a host, marking the last used one."""
    sessions = list_sessions(host.name)
    try:
        last_label = get_last_label(host.name)
    except LabelNotFoundError:
        last_label = None

    console.print(f"Active sessions for {escape(host.name)}:")
    if not sessions:
        console.print("  [dim](none)[/dim]")
        return

    for info in sessions:
        marker = "  [green](last used)[/green]" if info.label == last_label else ""
        console.print(f"  - {escape(info.label)}{marker}")


def attach_last_session(host: Host) -> None:
    """Reattach the session last used on a host, starting it if needed."""
    try:
        last_label = get_last_label(host.name)
    except LabelNotFoundError:
        raise ConnectError(f"No recent session stored for '{host.name}'.")

    open_session(host, last_label)


def run_named_session(host: Host, session_name: str) -> None:
    """Attach the session with the given name, starting it if needed."""
    label = canonicalize(session_name)
    if not label:
        raise ConnectError(f"Invalid session name: '{session_name}'.")

    open_session(host, label)


def run_interactive(
    host: Host,
    in_stream: TextIO | None = None,
    out_stream: TextIO | None = None,
) -> None:
    """Show the session picker for a host and act on the choice."""
    sessions = list_sessions(host.name)
    choice = choose_session(
        host.name,
        sessions,
        in_stream or sys.stdin,
        out_stream or sys.stdout,
    )

    if choice.action is Action.CANCEL:
        return

    if choice.action is Action.ATTACH:
        remember_label(host, canonicalize(choice.label) or choice.label)
        attach_session(choice.session_id)
        return

    label = canonicalize(choice.label)
    if not label:
        raise ConnectError(f"Invalid session name: '{choice.label}'.")
    open_session(host, label, sessions)


def add_host_entry(name: str, target: str = "") -> Host:
    """Validate and store a new host. ``target`` defaults to ``name``."""
    target = target or name
    if any(c in text for text in (name, target) for c in " \t"):
        raise ConnectError("Host names and targets cannot contain spaces.")

    add_host(name, target)
    return Host(name=name, target=target)


def remove_host_entry(name: str) -> bool:
    """Remove a host and its stored label.

    Returns whether a stored label was cleared. Failing to clear it does
    not undo the removal and only produces a warning.

    Raises
    ------
    HostNotFoundError
        If the host is not configured
    """
    remove_host(name)
    try:
        return clear_last_label(name)
    except OSError as e:
        console.print(
            f"[yellow]Warning: unable to clear recent sessions: {escape(str(e))}[/yellow]"
        )
        return False


def print_hosts() -> None:
    """Print all configured hosts."""
    hosts = load_hosts()
    if not hosts:
        console.print(
            "[yellow]No hosts configured. "
            "Use 'schh host add <name> \\[target]'.[/yellow]"
        )
        return

    console.print("Configured hosts:")
    for host in hosts:
        if host.name == host.target:
            console.print(f"  - {escape(host.name)}")
        else:
            console.print(f"  - {escape(host.name)} -> {escape(host.target)}")
