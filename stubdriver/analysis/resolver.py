"""
Stub/driver set resolution module.

Given the call graph and the classes selected for test, decides which
classes need a stub (callees outside the selection) and which need a
driver (callers outside the selection).
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from stubdriver.core.call_graph import CallGraph
from stubdriver.core.class_catalog import ClassCatalog
from stubdriver.core.class_model import ClassModel

logger = logging.getLogger(__name__)


@dataclass
class ResolvedTarget:
    """A class that needs a stub or a driver."""

    class_name: str
    class_model: Optional[ClassModel] = None
    # Selected classes this target was derived from
    related_classes: List[str] = field(default_factory=list)
    operations: List[str] = field(default_factory=list)

    @property
    def is_modeled(self) -> bool:
        return self.class_model is not None


@dataclass
class StubDriverPlan:
    """Outcome of one resolution: ordered stub and driver targets."""

    selected_class_names: List[str]
    stub_targets: List[ResolvedTarget] = field(default_factory=list)
    driver_targets: List[ResolvedTarget] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.stub_targets and not self.driver_targets

    def target_names(self) -> Dict[str, List[str]]:
        return {
            "stubs": [t.class_name for t in self.stub_targets],
            "drivers": [t.class_name for t in self.driver_targets],
        }


class StubDriverResolver:
    """
    Computes the stub and driver targets for a selection of classes.

    The result depends only on the graph, the catalog and the selection,
    and targets are returned in sorted order, so resolving the same inputs
    twice yields the same targets.
    """

    def __init__(self, catalog: Optional[ClassCatalog] = None):
        self.catalog = catalog or ClassCatalog()

    def resolve(self, graph: CallGraph, selected_class_names: Iterable[str]) -> StubDriverPlan:
        """
        Resolve stub and driver targets.

        Args:
            graph: Call graph of the current diagrams
            selected_class_names: Classes under test

        Returns:
            The resolved plan
        """
        selected = sorted(set(selected_class_names))
        under_test = set(selected)
        stubs: Dict[str, List[str]] = {}
        drivers: Dict[str, List[str]] = {}

        for class_name in selected:
            for callee in graph.callees(class_name):
                if callee not in under_test:
                    stubs.setdefault(callee, []).append(class_name)
            for caller in graph.callers(class_name):
                if caller not in under_test:
                    drivers.setdefault(caller, []).append(class_name)

        plan = StubDriverPlan(
            selected_class_names=selected,
            stub_targets=[self._target(name, stubs[name], graph) for name in sorted(stubs)],
            driver_targets=[self._target(name, drivers[name], graph) for name in sorted(drivers)],
        )
        logger.info(
            f"Resolved {len(plan.stub_targets)} stub target(s) and "
            f"{len(plan.driver_targets)} driver target(s) for {selected}"
        )
        return plan

    def _target(self, class_name: str, related: List[str], graph: CallGraph) -> ResolvedTarget:
        model = self.catalog.get_by_name(class_name)
        if model is None:
            logger.debug(f"No class model for {class_name}, using a generic rendering")
        return ResolvedTarget(
            class_name=class_name,
            class_model=model,
            related_classes=sorted(set(related)),
            operations=sorted(graph.operations.get(class_name, set())),
        )
