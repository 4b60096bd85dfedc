"""
Cluster capability used by the snapshot pipeline

The orchestrator only needs two things from the cluster: list pods by
label and open an exec stream in one of them. Anything that provides
these (the kubernetes adapter, a test fake) can be injected.
"""
from typing import List, Optional, Protocol


class ExecStream(Protocol):
    """A started remote command with captured stdout/stderr"""

    def run(self, timeout: Optional[float] = None) -> None:
        """Block until the command finishes or the timeout passes"""

    def is_open(self) -> bool:
        """True while the command is still running"""

    def read_stdout(self) -> str:
        ...

    def read_stderr(self) -> str:
        ...

    def exit_error(self) -> Optional[str]:
        """Failure reported by the remote side after completion, None on success"""

    def close(self) -> None:
        ...


class ClusterClient(Protocol):
    """Read-only cluster access shared by all requests"""

    def list_workloads(
        self,
        namespace: str,
        label_selector: str,
        timeout: Optional[float] = None
    ) -> List[str]:
        """Names of the pods matching the selector, in listing order"""

    def open_exec_stream(self, pod_name: str, namespace: str, command: List[str]) -> ExecStream:
        """Start command in the pod: stdout and stderr captured, no stdin, no TTY"""
