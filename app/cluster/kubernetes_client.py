"""
Kubernetes-backed cluster capability (pod listing and pod exec)
"""
import json
from pathlib import Path
from typing import List, Optional

from kubernetes import client, config
from kubernetes.config.config_exception import ConfigException
from kubernetes.stream import stream
from kubernetes.stream.ws_client import ERROR_CHANNEL

from app.core.errors import ClusterConfigError
from app.utils.logger import setup_logger

logger = setup_logger(__name__)


def load_kube_config(kubeconfig_path: Path) -> client.Configuration:
    """
    Build a client configuration, preferring the local kubeconfig

    Falls back to the in-cluster service account when the kubeconfig is
    missing or unusable.

    Args:
        kubeconfig_path: Path to a kubeconfig file

    Returns:
        Loaded client configuration

    Raises:
        ClusterConfigError: If neither source works
    """
    configuration = client.Configuration()

    if kubeconfig_path.exists():
        try:
            config.load_kube_config(
                config_file=str(kubeconfig_path),
                client_configuration=configuration
            )
            logger.info(f"Using local kubeconfig: {kubeconfig_path}")
            return configuration
        except Exception as e:
            # malformed YAML surfaces as a yaml error, not ConfigException
            logger.warning(f"Could not use local kubeconfig: {e}")

    logger.info("Local kubeconfig not found or unusable, trying in-cluster config")
    try:
        config.load_incluster_config(client_configuration=configuration)
    except ConfigException as e:
        raise ClusterConfigError(
            f"In-cluster config not available: {e}. And failed to use local kubeconfig"
        ) from e

    logger.info("Using in-cluster config")
    return configuration


class KubernetesExecStream:
    """Exec session over the kubernetes websocket client"""

    def __init__(self, ws_client, api_client: Optional[client.ApiClient] = None):
        self._ws = ws_client
        self._api_client = api_client

    def run(self, timeout: Optional[float] = None) -> None:
        self._ws.run_forever(timeout=timeout)

    def is_open(self) -> bool:
        return self._ws.is_open()

    def read_stdout(self) -> str:
        return self._ws.read_stdout(timeout=0)

    def read_stderr(self) -> str:
        return self._ws.read_stderr(timeout=0)

    def exit_error(self) -> Optional[str]:
        """
        Read the exec status from the error channel

        The API server sends a metav1.Status there once the command exits;
        anything other than "Success" carries the reason in its message.
        """
        raw = self._ws.read_channel(ERROR_CHANNEL, timeout=0)
        if not raw:
            return None

        try:
            status = json.loads(raw)
        except ValueError:
            return f"unreadable exec status: {raw}"

        if status.get("status") == "Success":
            return None
        return status.get("message") or status.get("reason") or raw

    def close(self) -> None:
        try:
            self._ws.close()
        finally:
            if self._api_client is not None:
                self._api_client.close()


class KubernetesCluster:
    """ClusterClient implementation over the CoreV1 API"""

    def __init__(self, core_api: client.CoreV1Api, configuration: Optional[client.Configuration] = None):
        self.core_api = core_api
        self.configuration = configuration or core_api.api_client.configuration

    @classmethod
    def from_kubeconfig(cls, kubeconfig_path: Path) -> "KubernetesCluster":
        """Create the process-wide client; called once at startup"""
        configuration = load_kube_config(kubeconfig_path)
        return cls(client.CoreV1Api(client.ApiClient(configuration)), configuration)

    def list_workloads(
        self,
        namespace: str,
        label_selector: str,
        timeout: Optional[float] = None
    ) -> List[str]:
        pods = self.core_api.list_namespaced_pod(
            namespace,
            label_selector=label_selector,
            _request_timeout=timeout
        )
        return [pod.metadata.name for pod in pods.items]

    def open_exec_stream(self, pod_name: str, namespace: str, command: List[str]) -> KubernetesExecStream:
        """
        Start command in the pod over a websocket

        stream() swaps call_api on the ApiClient it is given while it
        connects. Each exec gets its own ApiClient so the shared core_api
        is never patched while other threads list pods.
        """
        api_client = client.ApiClient(self.configuration)
        try:
            ws_client = stream(
                client.CoreV1Api(api_client).connect_get_namespaced_pod_exec,
                pod_name,
                namespace,
                command=command,
                stdin=False,
                stdout=True,
                stderr=True,
                tty=False,
                _preload_content=False
            )
        except Exception:
            api_client.close()
            raise
        return KubernetesExecStream(ws_client, api_client)
