"""Type definitions for syncwand."""

from dataclasses import dataclass

DEFAULT_LABEL_SELECTOR = "devspace.sh/replaced=true"


@dataclass(frozen=True)
class ClusterContext:
    """Everything the kubectl-facing operations need, built once per run."""

    kubectl: str = "kubectl"
    context: str | None = None
    label_selector: str = DEFAULT_LABEL_SELECTOR
    probe_timeout: float = 10.0
    request_timeout: float = 30.0

    def base_command(self) -> list[str]:
        cmd = [self.kubectl]
        if self.context:
            cmd.extend(["--context", self.context])
        return cmd


@dataclass(frozen=True)
class Container:
    namespace: str
    pod_name: str
    container_name: str


@dataclass
class ExecResult:
    success: bool
    stdout: str = ""
    message: str = ""


@dataclass
class ProbeResult:
    container: Container
    sync_running: bool
    command: str | None = None

    def __post_init__(self):
        if self.command is not None and not self.sync_running:
            raise ValueError("A probe result can only carry a command when sync is running.")


@dataclass
class SyncStatus:
    running: bool
    pod_name: str | None = None

    def __post_init__(self):
        if self.pod_name is not None and not self.running:
            raise ValueError("A sync status can only name a pod when sync is running.")
