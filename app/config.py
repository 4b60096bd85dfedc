"""
Application configuration settings
"""
import os
from pathlib import Path
from typing import List


def _positive_int(name: str, default: str) -> int:
    """Read an integer env var that must be greater than zero"""
    value = int(os.getenv(name, default))
    if value <= 0:
        raise ValueError(f"{name} must be a positive integer, got {value}")
    return value


class Settings:
    """Application settings and configuration"""

    # Project paths
    BASE_DIR: Path = Path(__file__).parent
    TEMPLATES_DIR: Path = BASE_DIR / "templates"

    # API Settings
    APP_TITLE: str = "Ollama Model Viewer"
    APP_DESCRIPTION: str = "Loaded Ollama models and vRAM usage of the serving node"
    APP_VERSION: str = "1.0.0"
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8080"))
    DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"

    # Target workload
    NAMESPACE: str = os.getenv("NAMESPACE", "ollama")
    LABEL_SELECTOR: str = os.getenv("LABEL_SELECTOR", "app=ollama-serve")
    PS_COMMAND: List[str] = ["ollama", "ps"]

    # Node capacity (g5.2xlarge carries a single 24 GiB A10G)
    NODE_TYPE: str = os.getenv("NODE_TYPE", "g5.2xlarge")
    TOTAL_VRAM_GIB: float = float(os.getenv("TOTAL_VRAM_GIB", "24.0"))

    EDIT_URL: str = os.getenv(
        "EDIT_URL",
        "https://github.com/redhat-ai-dev/rosa-gitops/edit/main/ollama/ollama-models-config.yaml"
    )

    # Kubernetes client
    KUBECONFIG: Path = Path(os.getenv("KUBECONFIG", str(Path.home() / ".kube" / "config")))
    EXEC_TIMEOUT_SECONDS: int = _positive_int("EXEC_TIMEOUT_SECONDS", "30")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


# Global settings instance
settings = Settings()
