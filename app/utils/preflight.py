"""
Preflight check - verify the server can reach the cluster before serving
"""
import sys
from typing import Dict, List, Optional

from app.cluster.kubernetes_client import KubernetesCluster
from app.config import settings
from app.core.errors import ClusterConfigError
from app.utils.logger import setup_logger

logger = setup_logger(__name__)


class PreflightResult:
    """Preflight check results"""

    def __init__(self):
        self.checks: List[Dict] = []
        self.warnings: List[str] = []
        self.errors: List[str] = []
        self.cluster: Optional[KubernetesCluster] = None

    def add_check(self, name: str, passed: bool, message: str, critical: bool = False):
        """Record a check outcome"""
        self.checks.append({
            "name": name,
            "passed": passed,
            "message": message,
            "critical": critical
        })

        if not passed:
            if critical:
                self.errors.append(f"{name}: {message}")
            else:
                self.warnings.append(f"{name}: {message}")

    def is_fatal(self) -> bool:
        """True if any critical check failed"""
        return len(self.errors) > 0

    def get_summary(self) -> str:
        """Multi-line summary for the startup log"""
        passed = sum(1 for c in self.checks if c["passed"])
        total = len(self.checks)

        lines = [f"Preflight Check: {passed}/{total} passed"]

        if self.errors:
            lines.append(f"Errors ({len(self.errors)}):")
            for err in self.errors:
                lines.append(f"  - {err}")

        if self.warnings:
            lines.append(f"Warnings ({len(self.warnings)}):")
            for warn in self.warnings:
                lines.append(f"  - {warn}")

        return "\n".join(lines)


def check_python_version(result: PreflightResult):
    """Python 3.9+ is required"""
    major = sys.version_info.major
    minor = sys.version_info.minor

    if major == 3 and minor >= 9:
        result.add_check("Python Version", True, f"Python {major}.{minor} detected")
    else:
        result.add_check(
            "Python Version",
            False,
            f"Python 3.9+ required, got {major}.{minor}",
            critical=True
        )


def check_template(result: PreflightResult):
    """The dashboard template must ship with the package"""
    template = settings.TEMPLATES_DIR / "index.html"
    if template.exists():
        result.add_check("Dashboard Template", True, f"Found at {template}")
    else:
        result.add_check("Dashboard Template", False, f"Missing: {template}", critical=True)


def check_cluster_config(result: PreflightResult):
    """Build the cluster client; without it no request can be served"""
    try:
        result.cluster = KubernetesCluster.from_kubeconfig(settings.KUBECONFIG)
        result.add_check("Kubernetes Config", True, "Cluster client created")
    except ClusterConfigError as e:
        result.add_check("Kubernetes Config", False, str(e), critical=True)


def check_namespace(result: PreflightResult):
    """
    Probe the target namespace once

    Not critical: the pod may simply not be scheduled yet, and every
    request repeats the lookup anyway.
    """
    if result.cluster is None:
        return

    try:
        pods = result.cluster.list_workloads(
            settings.NAMESPACE,
            settings.LABEL_SELECTOR,
            timeout=settings.EXEC_TIMEOUT_SECONDS
        )
    except Exception as e:
        result.add_check("Ollama Pod", False, f"Cannot list pods in '{settings.NAMESPACE}': {e}")
        return

    if pods:
        result.add_check("Ollama Pod", True, f"Found {len(pods)} pod(s): {', '.join(pods)}")
    else:
        result.add_check(
            "Ollama Pod",
            False,
            f"No pod in '{settings.NAMESPACE}' with label '{settings.LABEL_SELECTOR}'"
        )


def run_preflight_check() -> PreflightResult:
    """
    Run all startup checks

    Returns:
        PreflightResult; result.cluster holds the client when it could be built
    """
    logger.info("Starting preflight check...")
    result = PreflightResult()

    check_python_version(result)
    check_template(result)
    check_cluster_config(result)
    check_namespace(result)

    logger.info(result.get_summary())

    return result
