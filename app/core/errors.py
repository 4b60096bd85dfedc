"""
Error types raised by the snapshot pipeline
"""


class VRAMViewerError(Exception):
    """Base class for all pipeline errors"""


class DiscoveryError(VRAMViewerError):
    """Listing the target pods failed"""


class ExecutorError(VRAMViewerError):
    """Base class for remote command execution failures"""


class ExecutorSetupError(ExecutorError):
    """The exec stream could not be established"""


class ExecutorStreamError(ExecutorError):
    """The exec stream was established but the command did not complete cleanly"""

    def __init__(self, message: str, stderr: str = ""):
        self.stderr = stderr
        if stderr:
            message = f"{message} (stderr: {stderr.strip()})"
        super().__init__(message)


class ParseError(VRAMViewerError):
    """The 'ollama ps' header could not be resolved into a column layout"""

    def __init__(self, header: str, missing: list):
        self.header = header
        self.missing = missing
        super().__init__(
            f"Could not parse 'ollama ps' header (missing {', '.join(missing)}). Header was: {header}"
        )


class ConversionWarning(VRAMViewerError):
    """A size literal could not be converted to GiB; the row contributes 0"""


class ClusterConfigError(VRAMViewerError):
    """Neither a local kubeconfig nor in-cluster config could be loaded"""
