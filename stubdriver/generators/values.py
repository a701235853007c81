"""
Literal value generation module.

This module provides the ValueGenerator class, which produces Java source
literals for stub return values and driver parameters. Values depend on
the declared type and on the name of the method or parameter: "count"
gives a small integer, "id" a large one, "amount" a decimal, "email" an
address-shaped string, and so on. Randomness comes from a numpy Generator
so a seed makes output reproducible.
"""

import re
from typing import List, Optional, Sequence, Tuple

import numpy as np

INTEGER_TYPES = {"int", "Integer"}
SHORT_TYPES = {"short", "Short"}
BYTE_TYPES = {"byte", "Byte"}
LONG_TYPES = {"long", "Long", "BigInteger"}
DECIMAL_TYPES = {"double", "Double", "float", "Float", "BigDecimal"}
BOOLEAN_TYPES = {"boolean", "Boolean"}
CHAR_TYPES = {"char", "Character"}
STRING_TYPES = {"String", "CharSequence"}

COLLECTION_FACTORIES = {
    "List": "new java.util.ArrayList<>()",
    "ArrayList": "new java.util.ArrayList<>()",
    "Collection": "new java.util.ArrayList<>()",
    "Set": "new java.util.HashSet<>()",
    "HashSet": "new java.util.HashSet<>()",
    "Map": "new java.util.HashMap<>()",
    "HashMap": "new java.util.HashMap<>()",
    "Optional": "java.util.Optional.empty()",
}

FIRST_NAMES = ["Alice", "Bob", "Carol", "David", "Emma", "Frank", "Grace", "Henry"]
LAST_NAMES = ["Smith", "Johnson", "Brown", "Garcia", "Miller", "Davis", "Wilson", "Clark"]
STATUS_VALUES = ["ACTIVE", "PENDING", "COMPLETED", "APPROVED", "REJECTED"]

# Ordered (pattern, category) rules applied to the method or parameter name
NAME_RULES: List[Tuple[re.Pattern, str]] = [
    (re.compile(r"e-?mail", re.IGNORECASE), "email"),
    (re.compile(r"phone|mobile|^tel$", re.IGNORECASE), "phone"),
    (re.compile(r"status|state$", re.IGNORECASE), "status"),
    (re.compile(r"^(count|size|quantity|qty|length|numberOf)|(Count|Size|Quantity|Qty|Length)$"), "small_int"),
    (re.compile(r"^(id|Id|ID)$|[a-z0-9](Id|ID)$|_id$|[Ii]dentifier|[Nn]umber$"), "large_int"),
    (re.compile(r"amount|balance|price|cost|fee|rate|total|salary|sum", re.IGNORECASE), "decimal"),
    (re.compile(r"date|time(stamp)?$", re.IGNORECASE), "date"),
    (re.compile(r"name$|^name|title", re.IGNORECASE), "name"),
    (re.compile(r"^(is|has|can|should)[A-Z_]|flag|enabled|active|valid|success", re.IGNORECASE), "flag"),
]


def name_category(name: str) -> Optional[str]:
    """
    Classify a method or parameter name for value generation.

    Args:
        name: Identifier such as "accountId" or "getBalance"

    Returns:
        Category name, or None when no rule applies
    """
    base = re.sub(r"^(get|find|fetch|load|calculate|compute|is|has)(?=[A-Z])", "", name or "")
    for pattern, category in NAME_RULES:
        if pattern.search(base) or pattern.search(name or ""):
            return category
    return None


def base_type(type_name: str) -> str:
    """Strip package qualifiers and generic arguments: "java.util.List<X>" -> "List"."""
    text = (type_name or "").strip()
    text = text.split("<", 1)[0].strip()
    return text.rsplit(".", 1)[-1]


def java_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class ValueGenerator:
    """
    Produces type- and name-aware Java literals.

    Booleans are biased toward true (boolean_true_bias). Unknown object
    types yield "null".
    """

    def __init__(self, seed: Optional[int] = None, boolean_true_bias: float = 0.8):
        """
        Initialize the generator.

        Args:
            seed: Seed for numpy.random.default_rng, None for fresh entropy
            boolean_true_bias: Probability of generating true
        """
        self.seed = seed
        self.boolean_true_bias = boolean_true_bias
        self.rng = np.random.default_rng(seed)

    @classmethod
    def from_settings(cls, settings) -> "ValueGenerator":
        return cls(
            seed=settings.get("generation", "seed"),
            boolean_true_bias=settings.get("generation", "boolean_true_bias", default=0.8),
        )

    # Primitive draws

    def boolean(self) -> bool:
        return bool(self.rng.random() < self.boolean_true_bias)

    def integer(self, low: int, high: int) -> int:
        """Random integer in [low, high]."""
        return int(self.rng.integers(low, high + 1))

    def decimal(self, low: float, high: float, places: int = 2) -> float:
        return round(float(self.rng.uniform(low, high)), places)

    def choice(self, values: Sequence[str]) -> str:
        return values[int(self.rng.integers(0, len(values)))]

    def person_name(self) -> str:
        return f"{self.choice(FIRST_NAMES)} {self.choice(LAST_NAMES)}"

    # Literals

    def literal(self, type_name: str, name: str = "") -> Optional[str]:
        """
        Generate a Java literal for a declared type.

        Args:
            type_name: Declared Java type
            name: Method or parameter name used to pick a realistic value

        Returns:
            Java expression text, or None for void
        """
        declared = (type_name or "").strip()
        if declared in ("", "void", "Void"):
            return None
        if declared.endswith("[]"):
            return f"new {declared[:-2]}[0]"

        kind = base_type(declared)
        category = name_category(name)

        if kind in BOOLEAN_TYPES:
            return "true" if self.boolean() else "false"
        if kind in CHAR_TYPES:
            return f"'{chr(ord('A') + self.integer(0, 25))}'"
        if kind in INTEGER_TYPES | SHORT_TYPES | BYTE_TYPES | LONG_TYPES:
            return self._integral_literal(kind, category)
        if kind in DECIMAL_TYPES:
            return self._decimal_literal(kind, category)
        if kind in STRING_TYPES:
            return java_string(self._string_value(category, name))
        if kind in COLLECTION_FACTORIES:
            return COLLECTION_FACTORIES[kind]
        return "null"

    def _integral_literal(self, kind: str, category: Optional[str]) -> str:
        if kind in BYTE_TYPES:
            return f"(byte) {self.integer(1, 100)}"
        if category == "small_int" or kind in SHORT_TYPES:
            value = self.integer(1, 10) if category == "small_int" else self.integer(1, 1000)
        elif category == "large_int":
            value = self.integer(100000, 999999)
        elif category == "decimal":
            value = self.integer(10, 5000)
        else:
            value = self.integer(1, 100)

        if kind in SHORT_TYPES:
            return f"(short) {value}"
        if kind == "BigInteger":
            return f'new java.math.BigInteger("{value}")'
        if kind in LONG_TYPES:
            return f"{value}L"
        return str(value)

    def _decimal_literal(self, kind: str, category: Optional[str]) -> str:
        if category == "decimal":
            value = self.decimal(10.0, 5000.0)
        elif category == "small_int":
            value = float(self.integer(1, 10))
        else:
            value = self.decimal(0.0, 100.0)

        if kind == "BigDecimal":
            return f'new java.math.BigDecimal("{value:.2f}")'
        if kind in ("float", "Float"):
            return f"{value}f"
        return repr(value)

    def _string_value(self, category: Optional[str], name: str) -> str:
        if category == "email":
            first, last = self.choice(FIRST_NAMES), self.choice(LAST_NAMES)
            return f"{first.lower()}.{last.lower()}@example.com"
        if category == "phone":
            return f"555-{self.integer(100, 999)}-{self.integer(1000, 9999)}"
        if category == "status":
            return self.choice(STATUS_VALUES)
        if category == "name":
            return self.person_name()
        if category == "large_int":
            return f"ID-{self.integer(100000, 999999)}"
        if category == "date":
            return f"2024-{self.integer(1, 12):02d}-{self.integer(1, 28):02d}"
        label = re.sub(r"\W+", "_", name or "value").strip("_").lower() or "value"
        return f"{label}_{self.integer(1, 999)}"
