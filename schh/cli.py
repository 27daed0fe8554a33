"""Main CLI entry point for schh."""

from typing import Annotated

from cyclopts import App, Parameter
from rich.console import Console
from rich.markup import escape

from .config import HostExistsError, HostNotFoundError
from .connect import (
    ConnectError,
    add_host_entry,
    attach_last_session,
    print_host_sessions,
    print_hosts,
    remove_host_entry,
    resolve_host,
    run_interactive,
    run_named_session,
)
from .identifier import InvalidIdentityError
from .screen import ScreenError
from .ui import PromptError

app = App(
    name="schh",
    help="Named, resumable screen sessions over ssh, per host.\n\n"
    "Use 'schh COMMAND --help' for detailed command options.",
    version_flags=["--version", "-v"],
)
host_app = App(name="host", help="Manage configured hosts: host add|remove|list")
app.command(host_app)

console = Console()


@app.default
def connect(
    host_name: str,
    session_name: str = "",
    *,
    show_list: Annotated[bool, Parameter(name="--list", negative="")] = False,
    last: Annotated[bool, Parameter(name="--last", negative="")] = False,
):
    """Open a session: HOST [SESSION-NAME] [--list | --last]

    Without a session name, shows the running sessions of the host and lets
    you attach to one or start a new one. Attaching replaces this process
    with 'screen -r'.

    Parameters
    ----------
    host_name : str
        Configured host name (see 'schh host add')
    session_name : str
        Session to attach, started first if it is not running
    show_list : bool
        List running sessions for the host and exit
    last : bool
        Reattach the session used most recently on the host
    """
    if show_list and last:
        console.print("[red]Error: --list and --last cannot be combined.[/red]")
        raise SystemExit(1)
    if (show_list or last) and session_name:
        flag = "--list" if show_list else "--last"
        console.print(
            f"[red]Error: {flag} cannot be combined with a session name.[/red]"
        )
        raise SystemExit(1)

    try:
        host = resolve_host(host_name)
        if show_list:
            print_host_sessions(host)
        elif last:
            attach_last_session(host)
        elif session_name:
            run_named_session(host, session_name)
        else:
            run_interactive(host)
    except (
        ConnectError,
        InvalidIdentityError,
        ScreenError,
        PromptError,
        OSError,
    ) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise SystemExit(1)
    except Exception as e:
        console.print(f"[red]Unexpected error: {escape(str(e))}[/red]")
        raise SystemExit(1)


@host_app.command
def add(name: str, target: str = ""):
    """Add a host: host add NAME [TARGET]

    Parameters
    ----------
    name : str
        Name used on the schh command line
    target : str
        Argument passed to ssh (default: NAME)
    """
    try:
        host = add_host_entry(name, target)
    except HostExistsError:
        console.print(f"[red]Error: Host '{escape(name)}' already exists.[/red]")
        raise SystemExit(1)
    except ConnectError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise SystemExit(1)
    except OSError as e:
        console.print(
            f"[red]Error: Unable to save host '{escape(name)}': {escape(str(e))}[/red]"
        )
        raise SystemExit(1)

    console.print(
        f"[green]Host '{escape(host.target)}' saved as '{escape(host.name)}'.[/green]"
    )


@host_app.command
def remove(name: str):
    """Remove a host: host remove NAME

    Also forgets the last session used on the host.

    Parameters
    ----------
    name : str
        Configured host name
    """
    try:
        cleared = remove_host_entry(name)
    except HostNotFoundError:
        console.print(f"[red]Error: Host '{escape(name)}' was not found.[/red]")
        raise SystemExit(1)
    except OSError as e:
        console.print(
            f"[red]Error: Unable to remove host '{escape(name)}': {escape(str(e))}[/red]"
        )
        raise SystemExit(1)

    if cleared:
        console.print(
            f"[green]Host '{escape(name)}' removed and recent sessions cleared.[/green]"
        )
    else:
        console.print(f"[green]Host '{escape(name)}' removed.[/green]")


@host_app.command(name="list")
def list_hosts():
    """List hosts: host list"""
    try:
        print_hosts()
    except OSError as e:
        console.print(
            f"[red]Error: Unable to load configured hosts: {escape(str(e))}[/red]"
        )
        raise SystemExit(1)


if __name__ == "__main__":
    app()
