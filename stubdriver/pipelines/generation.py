"""
Stub/driver generation pipeline.

This module implements the generation run: build the call graph from the
loaded diagrams, resolve stub and driver targets for the selected
classes, and render each target once. A run either returns all of its
artifacts or none of them.
"""

import logging
from typing import Iterable, List, Optional

from stubdriver.analysis.call_graph_builder import CallGraphBuilder
from stubdriver.analysis.classifier import MessageClassifier
from stubdriver.analysis.matching import NameMatcher
from stubdriver.analysis.resolver import StubDriverPlan, StubDriverResolver
from stubdriver.config.settings import Settings
from stubdriver.core.artifact import GeneratedArtifact, GenerationSession
from stubdriver.core.class_catalog import ClassCatalog
from stubdriver.core.diagram import SequenceDiagramModel
from stubdriver.core.errors import GenerationError
from stubdriver.generators.driver import DriverGenerator
from stubdriver.generators.report import SummaryGenerator
from stubdriver.generators.stub import StubGenerator
from stubdriver.generators.values import ValueGenerator
from stubdriver.pipelines.base_pipeline import Pipeline, PipelineResult

logger = logging.getLogger(__name__)


class GenerationPipeline(Pipeline):
    """
    Pipeline producing stub and driver sources for a class selection.

    The call graph is rebuilt on every execute() call, so the pipeline
    never holds derived state between runs.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        matcher: Optional[NameMatcher] = None,
        classifier: Optional[MessageClassifier] = None,
        values: Optional[ValueGenerator] = None,
    ):
        """
        Initialize the generation pipeline.

        Args:
            settings: Settings; defaults are used when omitted
            matcher: Name matcher for reference resolution
            classifier: Message classifier
            values: Literal generator shared by stubs and drivers
        """
        super().__init__("Stub/Driver Generation")
        self.settings = settings or Settings()
        self.matcher = matcher or NameMatcher.from_settings(self.settings)
        self.classifier = classifier or MessageClassifier()
        self.values = values or ValueGenerator.from_settings(self.settings)
        self.diagrams: List[SequenceDiagramModel] = []
        self.catalog = ClassCatalog()

    def setup(
        self,
        diagrams: Iterable[SequenceDiagramModel] = (),
        catalog: Optional[ClassCatalog] = None,
    ) -> bool:
        """
        Provide the inputs for the next run.

        Args:
            diagrams: Loaded sequence diagrams
            catalog: Class catalog

        Returns:
            True when at least one diagram is available
        """
        self.diagrams = list(diagrams)
        self.catalog = catalog if catalog is not None else ClassCatalog()
        return bool(self.diagrams)

    def execute(self, selected_class_names: Iterable[str] = ()) -> PipelineResult:
        """
        Run a generation for the selected classes.

        Args:
            selected_class_names: Classes under test

        Returns:
            Result with outputs "artifacts", "session", "plan" and
            "call_graph" on success; on failure, one error and no outputs
        """
        self._start_execution()
        selected = sorted(set(selected_class_names))
        if not selected:
            self.add_error("No classes selected for generation")
            return self.create_result(False)

        try:
            builder = CallGraphBuilder(self.matcher, self.classifier)
            graph = builder.build(self.diagrams, classes_under_test=selected)
            plan = StubDriverResolver(self.catalog).resolve(graph, selected)
            artifacts = self.render(plan, graph)
        except Exception as e:
            logger.exception("Generation failed")
            self.add_error(f"Failed to generate code: {e}")
            return self.create_result(False)

        for name in selected:
            if not graph.callees(name) and not graph.callers(name):
                self.add_warning(f"Class {name} takes part in no call of the loaded diagrams")

        session = GenerationSession(tuple(selected), tuple(artifacts))
        self.add_metric("edges", graph.edge_count())
        self.add_metric("stubs", len(plan.stub_targets))
        self.add_metric("drivers", len(plan.driver_targets))
        self.add_message(
            f"Generated {len(artifacts)} file(s) for {', '.join(selected)}"
        )
        return self.create_result(
            True,
            {"artifacts": artifacts, "session": session, "plan": plan, "call_graph": graph},
        )

    def render(self, plan: StubDriverPlan, graph) -> List[GeneratedArtifact]:
        """
        Render every target of a plan, or the summary when there are none.

        Args:
            plan: Resolved targets
            graph: Call graph the plan came from

        Returns:
            Artifacts with unique file names
        """
        if plan.is_empty:
            file_name = self.settings.get("generation", "summary_file_name", default="GenerationSummary.txt")
            self.add_message("Selection is self-contained; writing a summary instead of sources")
            return [SummaryGenerator(graph, file_name).generate(plan)]

        stubs = StubGenerator(self.values)
        drivers = DriverGenerator(self.values)
        artifacts: List[GeneratedArtifact] = []
        seen = set()

        for target in plan.stub_targets:
            file_name = stubs.file_name(target.class_name)
            if file_name in seen:
                continue
            seen.add(file_name)
            artifacts.append(stubs.generate(target))

        for target in plan.driver_targets:
            file_name = drivers.file_name(target.class_name)
            if file_name in seen:
                continue
            seen.add(file_name)
            artifacts.append(drivers.generate(target))

        if len({a.file_name for a in artifacts}) != len(artifacts):
            raise GenerationError("Duplicate file names in generation batch")
        return artifacts
