"""
Requirement traceability matrix parser.

This module parses the CSV matrix into SystemFunction objects. Header
columns are matched against ranked synonym lists, so matrices exported
from different tools load without configuration.
"""

import csv
import io
import logging
import re
from difflib import SequenceMatcher
from typing import Dict, List, Optional, Sequence

from stubdriver.config.settings import Settings
from stubdriver.core.errors import ColumnsNotFoundError, EmptyResultWarning
from stubdriver.core.function import SystemFunction
from stubdriver.parsers.base import BaseParser, ParseResult

logger = logging.getLogger(__name__)

_QUOTES = "\"'"


def normalize_header(header: str) -> str:
    """Lower-case a header cell and collapse whitespace."""
    return " ".join(header.strip().strip(_QUOTES).lower().split())


def _tokens(text: str) -> List[str]:
    return [t for t in re.split(r"[\s_\-/]+", text.lower()) if t]


def split_diagram_names(cell: str, separators: Sequence[str] = (",", ";", "|")) -> List[str]:
    """
    Split a diagram-name cell into names.

    The first separator (in priority order) present in the cell is used.
    Each token is trimmed and stripped of surrounding quotes; empty tokens
    are dropped.

    Args:
        cell: Raw cell text
        separators: Candidate separators in priority order

    Returns:
        Diagram names, in cell order
    """
    if not cell:
        return []
    separator = next((s for s in separators if s in cell), None)
    parts = cell.split(separator) if separator else [cell]
    names = []
    for part in parts:
        name = part.strip()
        name = re.sub(r"^[\"']|[\"']$", "", name).strip()
        if name:
            names.append(name)
    return names


class ColumnMatcher:
    """
    Resolves logical columns against a header row.

    Each synonym list is tried with exact normalized equality, then
    substring containment, then token-fuzzy comparison. The first column
    satisfying a tier wins.
    """

    def __init__(self, headers: Sequence[str], fuzzy_threshold: float = 0.8):
        self.headers = [normalize_header(h) for h in headers]
        self.fuzzy_threshold = fuzzy_threshold

    def find(self, synonyms: Sequence[str], exclude: Sequence[int] = ()) -> int:
        """
        Find the best column for a list of synonyms.

        Args:
            synonyms: Ranked synonyms for the logical column
            exclude: Column indices already claimed by other roles

        Returns:
            Column index, or -1 if none matches
        """
        candidates = [(i, h) for i, h in enumerate(self.headers) if h and i not in exclude]

        for name in synonyms:
            for i, header in candidates:
                if header == name:
                    return i

        for name in synonyms:
            for i, header in candidates:
                if name in header or header in name:
                    return i

        for name in synonyms:
            wanted = _tokens(name)
            for i, header in candidates:
                if self._tokens_match(wanted, _tokens(header)):
                    return i

        return -1

    def _tokens_match(self, wanted: List[str], available: List[str]) -> bool:
        if not wanted or not available:
            return False
        for token in wanted:
            best = max(SequenceMatcher(None, token, other).ratio() for other in available)
            if best < self.fuzzy_threshold:
                return False
        return True


class RequirementTableParser(BaseParser):
    """
    Parses a requirements traceability matrix in CSV form.

    Rows are grouped by function id; rows sharing an id merge their diagram
    names. Rows with missing id or name are skipped with a warning.
    """

    def empty_value(self) -> list:
        return []

    def __init__(self, settings: Optional[Settings] = None):
        """
        Initialize the parser.

        Args:
            settings: Settings providing column synonyms and separators
        """
        self.settings = settings or Settings()
        self.columns: Dict[str, List[str]] = self.settings.get("rtm", "columns")
        self.separators: List[str] = self.settings.get("rtm", "separators", default=[",", ";", "|"])
        self.fuzzy_threshold: float = self.settings.get("rtm", "fuzzy_threshold", default=0.8)

    def _parse(self, content: str, source_name: str, result: ParseResult) -> List[SystemFunction]:
        rows = [row for row in csv.reader(io.StringIO(content.lstrip("\ufeff"))) if any(c.strip() for c in row)]

        if len(rows) < 2:
            result.add_warning("RTM file is empty or has no data rows")
            return []

        header = rows[0]
        logger.debug(f"RTM header: {header}")
        indices = self.resolve_columns(header)
        id_index = indices["id"]
        name_index = indices["name"]

        if id_index == -1 and name_index == -1:
            raise ColumnsNotFoundError(
                "Required columns not found in RTM file. Please ensure your CSV has "
                "columns for Requirement ID and System Function.",
                {"header": ", ".join(header)},
            )
        if id_index == -1:
            id_index = name_index
        if name_index == -1:
            name_index = id_index

        diagram_indices = [indices[k] for k in ("diagram", "related") if indices[k] != -1]
        if not diagram_indices:
            result.add_warning("Sequence diagram column not found. Some features may be limited.")

        functions: Dict[str, SystemFunction] = {}
        for line_number, row in enumerate(rows[1:], start=2):
            cells = [c.strip() for c in row]
            if len(cells) <= max(id_index, name_index):
                result.add_warning(f"Line {line_number} has fewer columns than expected")
                continue

            function_id = cells[id_index]
            function_name = cells[name_index]
            if not function_id or not function_name:
                result.add_warning(f"Line {line_number} has empty required values")
                continue

            diagram_names: List[str] = []
            for index in diagram_indices:
                if index < len(cells):
                    diagram_names.extend(split_diagram_names(cells[index], self.separators))

            existing = functions.get(function_id)
            if existing:
                existing.merge_diagram_names(diagram_names)
            else:
                functions[function_id] = SystemFunction(function_id, function_name, diagram_names)
            logger.debug(f"Function {function_id}: diagrams {diagram_names}")

        parsed = list(functions.values())
        if parsed:
            result.add_message(f"Successfully processed {len(parsed)} system functions")
        else:
            result.add_diagnostic(EmptyResultWarning("No valid system functions found in the RTM file"))
        return parsed

    def resolve_columns(self, header: Sequence[str]) -> Dict[str, int]:
        """
        Resolve the logical columns of a header row.

        Roles are resolved in the order id, name, diagram, related, and a
        column claimed by one role is not offered to later roles.

        Args:
            header: Raw header cells

        Returns:
            Mapping of role to column index (-1 when absent)
        """
        matcher = ColumnMatcher(header, self.fuzzy_threshold)
        claimed: List[int] = []
        indices: Dict[str, int] = {}
        for role in ("id", "name", "diagram", "related"):
            index = matcher.find(self.columns.get(role, []), exclude=claimed)
            indices[role] = index
            if index != -1:
                claimed.append(index)
        logger.debug(f"RTM column indices: {indices}")
        return indices
