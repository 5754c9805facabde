import asyncio
import dataclasses
import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from syncwand.exceptions import StateFileError
from syncwand.state import load_namespaces
from syncwand.status import collect_containers, refresh_sync_status
from syncwand.types import DEFAULT_LABEL_SELECTOR, ClusterContext
from syncwand.ui import (
    render_containers_table,
    render_status,
    render_unavailable,
)

app = typer.Typer(help="Check whether DevSpace sync is running for this workspace.")

_STATE_FILE_EXIT_CODE = 2


@dataclasses.dataclass
class _Options:
    root: Path
    cluster: ClusterContext


def _configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    root: Path = typer.Option(
        Path("."),
        "--root",
        "-r",
        envvar="SYNCWAND_ROOT",
        help="Workspace directory containing .devspace/generated.yaml.",
    ),
    context: str | None = typer.Option(
        None,
        "--context",
        envvar="SYNCWAND_KUBE_CONTEXT",
        help="The kubeconfig context to use. Defaults to kubectl's current context.",
    ),
    selector: str = typer.Option(
        DEFAULT_LABEL_SELECTOR,
        "--selector",
        "-l",
        envvar="SYNCWAND_LABEL_SELECTOR",
        help="Label selector for pods replaced by DevSpace.",
    ),
    probe_timeout: float = typer.Option(
        10.0,
        "--probe-timeout",
        envvar="SYNCWAND_PROBE_TIMEOUT",
        min=0.1,
        help="Seconds to wait for a container's process list.",
    ),
    kubectl: str = typer.Option(
        "kubectl", "--kubectl", envvar="SYNCWAND_KUBECTL", help="The kubectl binary."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log every probe to stderr."
    ),
):
    _configure_logging(verbose)
    ctx.obj = _Options(
        root=root,
        cluster=ClusterContext(
            kubectl=kubectl,
            context=context,
            label_selector=selector,
            probe_timeout=probe_timeout,
        ),
    )


@app.command(help="Check whether DevSpace sync is running.")
def status(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Print the status as JSON."),
):
    options: _Options = ctx.obj
    try:
        sync_status = refresh_sync_status(options.cluster, options.root)
    except StateFileError as e:
        render_unavailable(str(e))
        raise typer.Exit(code=_STATE_FILE_EXIT_CODE)

    if as_json:
        typer.echo(json.dumps(dataclasses.asdict(sync_status)))
    else:
        render_status(sync_status)


@app.command(help="List the namespaces DevSpace last deployed to.")
def namespaces(ctx: typer.Context):
    options: _Options = ctx.obj
    try:
        found = load_namespaces(options.root)
    except StateFileError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=_STATE_FILE_EXIT_CODE)

    if not found:
        typer.echo("❌ No namespaces found in the DevSpace state file.", err=True)
        raise typer.Exit(code=1)

    for namespace in sorted(found):
        typer.echo(namespace)


@app.command(help="List the containers that would be checked for sync.")
def containers(ctx: typer.Context):
    options: _Options = ctx.obj
    try:
        found = load_namespaces(options.root)
    except StateFileError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=_STATE_FILE_EXIT_CODE)

    container_list = asyncio.run(collect_containers(options.cluster, found))
    if not container_list:
        typer.echo("❌ No running DevSpace-replaced containers found.", err=True)
        raise typer.Exit(code=1)

    render_containers_table(container_list)


if __name__ == "__main__":
    app()
