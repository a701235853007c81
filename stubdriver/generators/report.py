"""
Generation summary module.

This module provides the SummaryGenerator class for the human-readable
report emitted when a selection of classes needs no stubs or drivers.
"""

import time
from typing import List

from stubdriver.analysis.resolver import StubDriverPlan
from stubdriver.core.artifact import GeneratedArtifact
from stubdriver.core.call_graph import CallGraph
from stubdriver.core.enums import ArtifactKind

DEFAULT_SUMMARY_FILE = "GenerationSummary.txt"


class SummaryGenerator:
    """
    Generator for the self-contained selection summary.

    The summary lists the selected classes and the calls among them, and
    explains why no stub or driver was produced.
    """

    def __init__(self, graph: CallGraph, file_name: str = DEFAULT_SUMMARY_FILE):
        """
        Initialize the summary generator.

        Args:
            graph: Call graph of the generation run
            file_name: Name of the summary artifact
        """
        self.graph = graph
        self.file_name = file_name

    def generate_text(self, plan: StubDriverPlan) -> str:
        """
        Generate the summary text.

        Args:
            plan: The (empty) resolution plan

        Returns:
            Summary as plain text
        """
        selected = plan.selected_class_names
        lines: List[str] = ["Stub/Driver Generation Summary", "=" * 30, ""]
        lines.append(f"Generated on: {time.strftime('%Y-%m-%d %H:%M:%S')}")
        lines.append("")

        lines.append("Selected classes:")
        for name in selected:
            lines.append(f"  - {name}")
        lines.append("")

        internal = [(a, b) for a, b in self.graph.iter_edges() if a in selected and b in selected]
        if internal:
            lines.append("Calls between selected classes:")
            for caller, callee in internal:
                operations = sorted(self.graph.operations.get(callee, set()))
                suffix = f" ({', '.join(operations)})" if operations else ""
                lines.append(f"  {caller} -> {callee}{suffix}")
            lines.append("")

        lines.append("No stubs or drivers were generated.")
        if not any(a in selected or b in selected for a, b in self.graph.iter_edges()):
            lines.append("The selected classes take part in no calls recorded in the loaded sequence diagrams.")
        else:
            lines.append(
                "Every class that calls or is called by the selection is itself selected, "
                "so the selection is self-contained and can be tested as one unit."
            )
        return "\n".join(lines) + "\n"

    def generate(self, plan: StubDriverPlan) -> GeneratedArtifact:
        return GeneratedArtifact(
            file_name=self.file_name,
            file_content=self.generate_text(plan),
            kind=ArtifactKind.SUMMARY,
            related_class_name=", ".join(plan.selected_class_names),
        )
