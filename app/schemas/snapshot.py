"""
Pydantic schemas for the vRAM snapshot shown on the dashboard
"""
from pydantic import BaseModel, ConfigDict
from typing import Optional, List


class LoadedModel(BaseModel):
    """One row of 'ollama ps' output"""
    model_config = ConfigDict(frozen=True)

    name: str
    id: str
    size: str
    processor: str
    until: str


class VRAMBudget(BaseModel):
    """vRAM budget of the serving node, in GiB"""
    total_gib: float = 0.0
    used_gib: float = 0.0
    remaining_gib: float = 0.0
    used_percentage: float = 0.0

    @classmethod
    def compute(cls, total_gib: float, used_gib: float) -> "VRAMBudget":
        """Derive remaining capacity and usage percentage from the used total"""
        used_percentage = (used_gib / total_gib) * 100 if total_gib > 0 else 0.0
        return cls(
            total_gib=total_gib,
            used_gib=used_gib,
            remaining_gib=total_gib - used_gib,
            used_percentage=used_percentage,
        )

    @classmethod
    def empty(cls) -> "VRAMBudget":
        """All-zero budget for a snapshot that could not be taken"""
        return cls()


class SnapshotResult(BaseModel):
    """Everything the dashboard template renders for one request"""
    models: List[LoadedModel] = []
    budget: VRAMBudget
    namespace: str
    pod_name: Optional[str] = None
    error_message: Optional[str] = None
