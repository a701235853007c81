"""
Core model components.

This package contains the data structures for system functions, classes,
sequence diagrams, the call graph, generated artifacts and the error
taxonomy.
"""

from stubdriver.core.enums import (
    ACTOR,
    REF,
    UNKNOWN,
    DEFAULT_PACKAGE,
    ArtifactKind,
    FileType,
    MatchStrategy,
    MessageKind,
    MessageRole,
)
from stubdriver.core.function import SystemFunction
from stubdriver.core.class_model import ClassModel, MethodModel, ParameterModel
from stubdriver.core.class_catalog import ClassCatalog
from stubdriver.core.diagram import (
    MessageModel,
    ParticipantModel,
    ReferenceModel,
    SequenceDiagramModel,
)
from stubdriver.core.call_graph import CallGraph
from stubdriver.core.artifact import GeneratedArtifact, GenerationSession
from stubdriver.core.uploaded_file import UploadedFile

__all__ = [
    'ACTOR',
    'REF',
    'UNKNOWN',
    'DEFAULT_PACKAGE',
    'ArtifactKind',
    'FileType',
    'MatchStrategy',
    'MessageKind',
    'MessageRole',
    'SystemFunction',
    'ClassModel',
    'MethodModel',
    'ParameterModel',
    'ClassCatalog',
    'MessageModel',
    'ParticipantModel',
    'ReferenceModel',
    'SequenceDiagramModel',
    'CallGraph',
    'GeneratedArtifact',
    'GenerationSession',
    'UploadedFile',
]
