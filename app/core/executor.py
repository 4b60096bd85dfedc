"""
Remote command execution inside a pod
"""
from typing import List, Optional

from app.cluster.base import ClusterClient
from app.core.errors import ExecutorSetupError, ExecutorStreamError
from app.utils.logger import setup_logger

logger = setup_logger(__name__)


class PodCommandExecutor:
    """Runs a command in a pod and returns its stdout"""

    def __init__(self, cluster: ClusterClient, timeout_seconds: Optional[float] = None):
        if timeout_seconds is not None and timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {timeout_seconds}")
        self.cluster = cluster
        self.timeout_seconds = timeout_seconds

    def execute(self, pod_name: str, namespace: str, command: List[str]) -> str:
        """
        Run command in the pod and wait for it to finish

        Blocks the calling request for at most timeout_seconds. No retry.

        Args:
            pod_name: Target pod
            namespace: Namespace of the pod
            command: Command argument vector

        Returns:
            Captured stdout; stderr is dropped on success

        Raises:
            ExecutorSetupError: If the exec stream could not be opened
            ExecutorStreamError: If the stream failed, timed out or the command failed
        """
        cmd_str = " ".join(command)
        logger.info(f"Executing '{cmd_str}' in pod {namespace}/{pod_name}")

        try:
            exec_stream = self.cluster.open_exec_stream(pod_name, namespace, command)
        except Exception as e:
            raise ExecutorSetupError(f"failed to create executor: {e}") from e

        try:
            exec_stream.run(timeout=self.timeout_seconds)

            if exec_stream.is_open():
                raise ExecutorStreamError(
                    f"command '{cmd_str}' did not finish within {self.timeout_seconds}s",
                    stderr=self._drain_stderr(exec_stream)
                )

            stdout = exec_stream.read_stdout()
            stderr = exec_stream.read_stderr()
            exit_error = exec_stream.exit_error()
            if exit_error:
                raise ExecutorStreamError(f"command '{cmd_str}' failed: {exit_error}", stderr=stderr)
        except ExecutorStreamError:
            raise
        except Exception as e:
            raise ExecutorStreamError(
                f"failed to stream command execution: {e}",
                stderr=self._drain_stderr(exec_stream)
            ) from e
        finally:
            exec_stream.close()

        return stdout

    @staticmethod
    def _drain_stderr(exec_stream) -> str:
        """Best-effort stderr read for error messages; the stream failure takes precedence"""
        try:
            return exec_stream.read_stderr()
        except Exception as e:
            logger.debug(f"Could not read stderr after stream failure: {e}")
            return ""
