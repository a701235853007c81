"""
Enumeration types used across the ingestion and generation pipeline.

This module defines the categorical values that appear in the parsed
diagram model, the call/return classification, and generated artifacts.
"""

from enum import Enum

# Participant type sentinels
ACTOR = "ACTOR"
REF = "REF"
UNKNOWN = "unknown"

NON_CLASS_TYPES = frozenset({ACTOR, REF, UNKNOWN, ""})

DEFAULT_PACKAGE = "default"


class FileType(Enum):
    """Kinds of design artifact a user can upload."""
    RTM = "rtm"
    SEQUENCE_DIAGRAM = "sequenceDiagram"
    CLASS_DIAGRAM = "classDiagram"


class MessageKind(Enum):
    """
    Message type as declared by the vendor export.

    The declared type is not reliable; the MessageClassifier derives the
    real call/return distinction mostly from the message text.
    """
    CREATE = "create"
    SYNCH_CALL = "synchCall"
    MESSAGE = "message"
    RETURN = "return"


class MessageRole(Enum):
    """Outcome of classifying a message."""
    CALL = "call"
    RETURN = "return"


class ArtifactKind(Enum):
    """Kinds of generated file."""
    STUB = "stub"
    DRIVER = "driver"
    SUMMARY = "summary"


class MatchStrategy(Enum):
    """Matcher tier that produced a match, strongest first."""
    EXACT = 1
    CASE_INSENSITIVE = 2
    SUBSTRING = 3
    NORMALIZED = 4
