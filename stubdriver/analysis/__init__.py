"""
Analysis components: name matching, message classification, call graph
construction, stub/driver resolution and traceability.
"""

from stubdriver.analysis.call_graph_builder import CallGraphBuilder, derive_service_name, operation_name
from stubdriver.analysis.classifier import Classification, ClassificationRule, MessageClassifier
from stubdriver.analysis.matching import MatchResult, NameMatcher, generate_variants
from stubdriver.analysis.resolver import ResolvedTarget, StubDriverPlan, StubDriverResolver
from stubdriver.analysis.traceability import map_functions_to_classes

__all__ = [
    "CallGraphBuilder",
    "Classification",
    "ClassificationRule",
    "MatchResult",
    "MessageClassifier",
    "NameMatcher",
    "ResolvedTarget",
    "StubDriverPlan",
    "StubDriverResolver",
    "derive_service_name",
    "generate_variants",
    "map_functions_to_classes",
    "operation_name",
]
