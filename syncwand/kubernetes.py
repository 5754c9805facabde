"""Kubernetes operations for syncwand."""

import json
import logging
import subprocess

from syncwand.exceptions import ClusterQueryError
from syncwand.types import ClusterContext, Container, ExecResult

logger = logging.getLogger(__name__)


# ===== Pod listing =====


def _containers_from_pod(item: dict, namespace: str) -> list[Container]:
    metadata = item.get("metadata") or {}
    spec = item.get("spec")
    # Pods still being scheduled or torn down are expected, not errors
    if not metadata.get("name") or not spec:
        return []

    phase = (item.get("status") or {}).get("phase")
    if phase != "Running":
        return []

    return [
        Container(
            namespace=namespace,
            pod_name=metadata["name"],
            container_name=container["name"],
        )
        for container in spec.get("containers") or []
        if container.get("name")
    ]


def list_containers(ctx: ClusterContext, namespace: str) -> list[Container]:
    """List the containers of running, DevSpace-replaced pods in a namespace.

    Raises:
        ClusterQueryError: If kubectl fails or returns something that isn't JSON
    """
    cmd = ctx.base_command() + [
        "get",
        "pods",
        "-n",
        namespace,
        "-l",
        ctx.label_selector,
        "-o",
        "json",
        f"--request-timeout={int(ctx.request_timeout)}s",
    ]

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            check=False,
            timeout=ctx.request_timeout + 5,
        )
    except FileNotFoundError as e:
        raise ClusterQueryError(namespace, f"'{ctx.kubectl}' not found") from e
    except subprocess.TimeoutExpired as e:
        raise ClusterQueryError(namespace, "kubectl timed out") from e

    if result.returncode != 0:
        raise ClusterQueryError(
            namespace, result.stderr.strip() or f"kubectl exited with {result.returncode}"
        )

    try:
        pods_json = json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise ClusterQueryError(namespace, f"invalid JSON from kubectl ({e})") from e

    if not isinstance(pods_json, dict):
        raise ClusterQueryError(namespace, "unexpected output from kubectl")

    containers: list[Container] = []
    for item in pods_json.get("items") or []:
        containers.extend(_containers_from_pod(item, namespace))
    return containers


# ===== Container command execution =====


def exec_in_container(
    ctx: ClusterContext, container: Container, command: list[str]
) -> ExecResult:
    """Run a command inside a container, with no tty and no stdin.

    Never raises for kubectl failures; they are reported through the result.
    """
    cmd = ctx.base_command() + [
        "exec",
        container.pod_name,
        "-n",
        container.namespace,
        "-c",
        container.container_name,
        "--",
    ] + command

    try:
        result = subprocess.run(
            cmd,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            timeout=ctx.probe_timeout,
        )
    except FileNotFoundError:
        return ExecResult(success=False, message=f"'{ctx.kubectl}' not found")
    except subprocess.TimeoutExpired:
        return ExecResult(
            success=False, message=f"timed out after {ctx.probe_timeout}s"
        )

    if result.stderr:
        logger.debug(
            "stderr from %s/%s: %s",
            container.pod_name,
            container.container_name,
            result.stderr.strip(),
        )

    if result.returncode != 0:
        return ExecResult(
            success=False,
            stdout=result.stdout,
            message=f"kubectl exec exited with {result.returncode}",
        )
    return ExecResult(success=True, stdout=result.stdout)
