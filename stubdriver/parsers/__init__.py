"""
Input parsers.

This package provides parsers for the requirements traceability matrix,
sequence diagram exports and class diagram exports.
"""

from stubdriver.parsers.base import ParseResult, BaseParser
from stubdriver.parsers.rtm import RequirementTableParser
from stubdriver.parsers.sequence_diagram import SequenceDiagramParser
from stubdriver.parsers.class_diagram import ClassDiagramParser

__all__ = [
    'ParseResult',
    'BaseParser',
    'RequirementTableParser',
    'SequenceDiagramParser',
    'ClassDiagramParser',
]
