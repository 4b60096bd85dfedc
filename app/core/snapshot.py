"""
Snapshot orchestration: find the Ollama pod, run 'ollama ps', build the budget
"""
from typing import Callable, List, Optional, Tuple

from app.cluster.base import ClusterClient
from app.config import settings
from app.core.errors import DiscoveryError, ExecutorError
from app.core.executor import PodCommandExecutor
from app.core.ps_parser import parse_ollama_ps
from app.schemas.snapshot import LoadedModel, SnapshotResult, VRAMBudget
from app.utils.diagnostics import DiagnosticLog
from app.utils.logger import setup_logger

logger = setup_logger(__name__)

NO_WORKLOAD_MESSAGE = "no matching workload found"

PsParser = Callable[[str, Optional[DiagnosticLog]], Tuple[List[LoadedModel], float]]


class VRAMSnapshotService:
    """
    Builds one SnapshotResult per request

    Never raises: every failure ends up in SnapshotResult.error_message so
    the dashboard can still render its framing around an error banner.
    """

    def __init__(
        self,
        cluster: ClusterClient,
        executor: Optional[PodCommandExecutor] = None,
        parser: PsParser = parse_ollama_ps,
        namespace: str = settings.NAMESPACE,
        label_selector: str = settings.LABEL_SELECTOR,
        command: Optional[List[str]] = None,
        total_vram_gib: float = settings.TOTAL_VRAM_GIB,
        timeout_seconds: Optional[float] = settings.EXEC_TIMEOUT_SECONDS
    ):
        self.cluster = cluster
        self.executor = executor or PodCommandExecutor(cluster, timeout_seconds)
        self.parser = parser
        self.namespace = namespace
        self.label_selector = label_selector
        self.command = list(command or settings.PS_COMMAND)
        self.total_vram_gib = total_vram_gib
        self.timeout_seconds = timeout_seconds

    def _failed(self, message: str, pod_name: Optional[str] = None) -> SnapshotResult:
        logger.error(message)
        return SnapshotResult(
            budget=VRAMBudget.empty(),
            namespace=self.namespace,
            pod_name=pod_name,
            error_message=message,
        )

    def discover_pods(self) -> List[str]:
        """
        List pods matching the label selector

        Raises:
            DiscoveryError: If the list call fails
        """
        try:
            return self.cluster.list_workloads(
                self.namespace, self.label_selector, timeout=self.timeout_seconds
            )
        except Exception as e:
            raise DiscoveryError(f"Failed to list pods: {e}") from e

    def handle_snapshot_request(self) -> SnapshotResult:
        """
        Take one snapshot of the models loaded in the Ollama pod

        Returns:
            SnapshotResult with models and budget, or with error_message set
        """
        try:
            pods = self.discover_pods()
        except DiscoveryError as e:
            return self._failed(str(e))

        if not pods:
            return self._failed(NO_WORKLOAD_MESSAGE)

        # First in listing order; no health ranking
        pod_name = pods[0]
        if len(pods) > 1:
            logger.info(f"{len(pods)} pods match '{self.label_selector}', using {pod_name}")

        cmd_str = " ".join(self.command)
        try:
            output = self.executor.execute(pod_name, self.namespace, self.command)
        except ExecutorError as e:
            return self._failed(f"Failed to execute '{cmd_str}': {e}", pod_name=pod_name)

        diagnostics = DiagnosticLog()
        try:
            models, used_gib = self.parser(output, diagnostics)
        except Exception as e:
            return self._failed(f"Failed to parse '{cmd_str}' output: {e}", pod_name=pod_name)
        if len(diagnostics):
            logger.warning(f"Snapshot of {pod_name} is partial: {diagnostics.get_summary()}")

        budget = VRAMBudget.compute(self.total_vram_gib, used_gib)
        logger.info(
            f"{pod_name}: {len(models)} models loaded, "
            f"{budget.used_gib:.2f}/{budget.total_gib:.1f} GiB used"
        )

        return SnapshotResult(
            models=models,
            budget=budget,
            namespace=self.namespace,
            pod_name=pod_name,
        )
