"""
Syncwand exception classes.

State file errors are fatal to a refresh. Cluster query errors only affect the
namespace being listed.
"""


class SyncwandError(Exception):
    """Base exception for all syncwand errors."""

    pass


class StateFileError(SyncwandError):
    """Raised when the DevSpace state file cannot be used."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class StateFileUnavailable(StateFileError):
    """Raised when the state file cannot be opened or read."""

    pass


class StateFileMalformed(StateFileError):
    """Raised when the state file is not a YAML document of the expected shape."""

    pass


class ClusterQueryError(SyncwandError):
    """
    Raised when listing pods in a namespace fails.

    Covers a missing kubectl binary, a non-zero kubectl exit, a timeout and
    output that is not valid JSON.
    """

    def __init__(self, namespace: str, reason: str):
        self.namespace = namespace
        self.reason = reason
        super().__init__(f"Failed to list pods in namespace '{namespace}': {reason}")
