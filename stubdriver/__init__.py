"""
stubdriver - stub and driver derivation from UML design artifacts.

This package reads a requirements traceability matrix and Visual Paradigm
sequence and class diagram exports, derives the call graph between
classes, and generates the Java stubs and JUnit drivers needed to test a
selection of classes in isolation.
"""

__version__ = "0.1.0"

from stubdriver.config.settings import Settings
from stubdriver.config.logging_config import setup_logging
from stubdriver.core.enums import ArtifactKind, FileType
from stubdriver.pipelines.generation import GenerationPipeline
from stubdriver.workspace import Notice, ReferenceStatus, Workspace

__all__ = [
    'ArtifactKind',
    'FileType',
    'GenerationPipeline',
    'Notice',
    'ReferenceStatus',
    'Settings',
    'Workspace',
    'setup_logging',
]
