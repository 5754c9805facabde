import os

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from syncwand.types import Container, SyncStatus

_console = Console()
_err_console = Console(stderr=True)

# Check if we should use simple UI (e.g., when output is parsed by an editor)
_use_simple_ui = os.getenv("SYNCWAND_SIMPLE_UI") == "1"


def status_text(status: SyncStatus) -> str:
    if status.running:
        return f"Devspace: Sync to {status.pod_name}"
    return "Devspace: No Sync"


def render_status(status: SyncStatus):
    text = status_text(status)

    if _use_simple_ui:
        _console.print(text, markup=False, highlight=False)
        return

    style = "green" if status.running else "dim"
    icon = "🔄" if status.running else "⏸️"
    _console.print(
        Panel(f"[{style} bold]{icon} {escape(text)}[/{style} bold]", border_style=style, expand=False)
    )


def render_unavailable(reason: str):
    """Print the disabled state shown when the state file can't be used."""
    if _use_simple_ui:
        _err_console.print(f"Devspace: Unavailable ({reason})", markup=False, highlight=False)
        return

    _err_console.print(
        Panel(
            f"[red bold]⛔ Devspace: Unavailable[/red bold]\n{escape(reason)}",
            border_style="red",
            expand=False,
        )
    )


def render_containers_table(containers: list[Container]):
    table = Table()

    table.add_column("Namespace", style="magenta")
    table.add_column("Pod Name", style="cyan", no_wrap=True)
    table.add_column("Container", style="green")

    for container in containers:
        table.add_row(container.namespace, container.pod_name, container.container_name)

    _console.print(table)
