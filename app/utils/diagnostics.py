"""
Per-request diagnostics collector

Best-effort parsing zeroes bad sizes and drops bad headers instead of
failing the request. Every such event is recorded here so the loss is
visible in the request summary log.
"""
from collections import Counter
from typing import Dict, List


class DiagnosticLog:
    """Collects non-fatal diagnostics raised while building one snapshot"""

    def __init__(self):
        self.entries: List[Dict[str, str]] = []
        self.counts: Counter = Counter()

    def add(self, kind: str, message: str):
        """Record a diagnostic of the given kind"""
        self.entries.append({"kind": kind, "message": message})
        self.counts[kind] += 1

    def messages(self, kind: str = None) -> List[str]:
        """Messages recorded so far, optionally filtered by kind"""
        return [e["message"] for e in self.entries if kind is None or e["kind"] == kind]

    def __len__(self) -> int:
        return len(self.entries)

    def get_summary(self) -> str:
        """One-line summary suitable for a log record"""
        if not self.entries:
            return "no diagnostics"
        parts = [f"{kind}={count}" for kind, count in sorted(self.counts.items())]
        return f"{len(self.entries)} diagnostics ({', '.join(parts)})"
