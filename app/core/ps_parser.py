"""
Parser for the fixed-column table printed by 'ollama ps'

    NAME         ID              SIZE      PROCESSOR    UNTIL
    llama3:8b    365c0bd3c000    6.7 GB    100% GPU     4 minutes from now

Fields may contain spaces ("6.7 GB", "4 minutes from now"), so rows are
sliced by the character offsets of the header columns instead of being
split on whitespace. This module is the only place that knows the text
format; the rest of the pipeline works with LoadedModel records.
"""
import re
from typing import Dict, List, Optional, Tuple

from app.core.errors import ParseError
from app.core.units import convert_size_to_gib
from app.schemas.snapshot import LoadedModel
from app.utils.diagnostics import DiagnosticLog
from app.utils.logger import setup_logger

logger = setup_logger(__name__)

REQUIRED_COLUMNS = ("NAME", "ID", "SIZE", "PROCESSOR", "UNTIL")


class ColumnLayout:
    """Start offsets of the required columns, as found in the header line"""

    def __init__(self, offsets: Dict[str, int]):
        self.offsets = offsets
        # (column, start, end) in left-to-right order; last column runs to end of line
        ordered = sorted(offsets.items(), key=lambda item: item[1])
        self.spans: List[Tuple[str, int, Optional[int]]] = [
            (column, start, ordered[i + 1][1] if i + 1 < len(ordered) else None)
            for i, (column, start) in enumerate(ordered)
        ]

    @property
    def last_offset(self) -> int:
        """Offset of the rightmost column; shorter rows are truncated"""
        return self.spans[-1][1]

    def slice_row(self, line: str) -> Dict[str, str]:
        """Cut a data row into stripped fields keyed by column name"""
        return {column: line[start:end].strip() for column, start, end in self.spans}


def resolve_column_layout(header: str) -> ColumnLayout:
    """
    Locate each required column in the header line

    Args:
        header: First line of 'ollama ps' output

    Returns:
        ColumnLayout for the header

    Raises:
        ParseError: If any required column is missing
    """
    header = header.upper()
    offsets = {}
    missing = []
    for column in REQUIRED_COLUMNS:
        match = re.search(rf"\b{column}\b", header)
        if match:
            offsets[column] = match.start()
        else:
            missing.append(column)

    if missing:
        raise ParseError(header, missing)

    return ColumnLayout(offsets)


def parse_ollama_ps(
    output: str,
    diagnostics: Optional[DiagnosticLog] = None
) -> Tuple[List[LoadedModel], float]:
    """
    Parse 'ollama ps' output into loaded models and their summed size

    Args:
        output: Raw stdout of 'ollama ps'
        diagnostics: Optional collector for header and size problems

    Returns:
        (models in output order, total size in GiB)
    """
    output = output.replace("\r\n", "\n")
    lines = output.strip().split("\n")
    if len(lines) <= 1:
        return [], 0.0

    try:
        layout = resolve_column_layout(lines[0])
    except ParseError as e:
        logger.error(str(e))
        if diagnostics is not None:
            diagnostics.add("parse", str(e))
        return [], 0.0

    models: List[LoadedModel] = []
    total_size_gib = 0.0

    for line in lines[1:]:
        if len(line) < layout.last_offset:
            logger.debug(f"Skipping truncated 'ollama ps' row: {line!r}")
            continue

        fields = layout.slice_row(line)
        models.append(LoadedModel(
            name=fields["NAME"],
            id=fields["ID"],
            size=fields["SIZE"],
            processor=fields["PROCESSOR"],
            until=fields["UNTIL"],
        ))

        total_size_gib += convert_size_to_gib(fields["SIZE"], diagnostics)

    return models, total_size_gib
