"""
Identifier helpers.
"""

import uuid


def generate_id() -> str:
    """Return a short random identifier for synthetic model elements."""
    return uuid.uuid4().hex[:13]
