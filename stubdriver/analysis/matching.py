"""
Name resolution module.

Diagram and class references in the input are free text ("ref Process
Deposit", "ProcessDeposit", "process_deposit"), so names are resolved by
generating spelling variants and trying progressively looser comparisons.
"""

import logging
import re
from dataclasses import dataclass
from difflib import SequenceMatcher
from typing import Any, Iterable, List, Mapping, Optional

from stubdriver.core.enums import MatchStrategy
from stubdriver.core.errors import UnresolvedReferenceError

logger = logging.getLogger(__name__)

_LEADING_TOKEN = re.compile(r"^\s*(ref|sd|seq|sequence|diagram)(?=[\s:_\-]|$)[\s:_\-]*", re.IGNORECASE)
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_SEPARATORS = re.compile(r"[_\-]+")
_NON_ALNUM = re.compile(r"[^a-z0-9]")


def strip_leading_token(label: str) -> str:
    """Remove a leading ref/sd/seq/sequence/diagram token."""
    return _LEADING_TOKEN.sub("", label).strip()


def expand_camel_case(text: str) -> str:
    """Split camelCase and PascalCase words with spaces."""
    return _CAMEL_BOUNDARY.sub(" ", text)


def replace_separators(text: str) -> str:
    """Replace underscores and hyphens with single spaces."""
    return " ".join(_SEPARATORS.sub(" ", text).split())


def normalize_name(text: str) -> str:
    """Lower-case and drop everything but letters and digits."""
    return _NON_ALNUM.sub("", text.lower())


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


def generate_variants(label: str) -> List[str]:
    """
    Generate the candidate spellings of a free-text label.

    Variants: the label verbatim, the label without a leading
    ref/sd/seq/sequence/diagram token, camelCase expanded, separators
    replaced by spaces, capitalized, suffixed with "Diagram" and
    " Diagram", and all of those lower-cased.

    Args:
        label: Free-text name

    Returns:
        Unique non-empty variants, most literal first
    """
    base = (label or "").strip()
    forms = [base, strip_leading_token(base)]
    forms += [expand_camel_case(f) for f in forms]
    forms += [replace_separators(f) for f in forms]
    forms += [_capitalize(f) for f in forms]
    forms += [f + suffix for f in forms if f for suffix in ("Diagram", " Diagram")]
    forms += [f.lower() for f in forms]

    variants: List[str] = []
    for form in forms:
        form = form.strip()
        if form and form not in variants:
            variants.append(form)
    return variants


@dataclass(frozen=True)
class MatchResult:
    """A resolved name, the tier that matched, and its similarity score."""

    key: str
    value: Any
    strategy: MatchStrategy
    confidence: float

    @property
    def is_fuzzy(self) -> bool:
        return self.strategy in (MatchStrategy.SUBSTRING, MatchStrategy.NORMALIZED)


class NameMatcher:
    """
    Finds the best-matching entry of a name-keyed collection.

    Tiers are tried in strict order until one produces a match: exact key
    on any variant, case-insensitive equality, substring containment in
    either direction, and containment after stripping whitespace and
    punctuation. Ties within a tier go to the highest similarity ratio.
    No match is not an error; callers apply their own fallback.
    """

    def __init__(self, strict: bool = False, min_length: int = 3):
        """
        Initialize the matcher.

        Args:
            strict: Only allow the exact and case-insensitive tiers
            min_length: Shortest string considered for containment tiers
        """
        self.strict = strict
        self.min_length = min_length

    @classmethod
    def from_settings(cls, settings) -> "NameMatcher":
        return cls(
            strict=bool(settings.get("matching", "strict", default=False)),
            min_length=int(settings.get("matching", "min_length", default=3)),
        )

    def find(self, label: str, candidates: Mapping[str, Any]) -> Optional[MatchResult]:
        """
        Resolve a label against a collection keyed by name.

        Args:
            label: Free-text name to resolve
            candidates: Collection keyed by name

        Returns:
            MatchResult, or None when unresolved
        """
        if not label or not candidates:
            return None

        variants = generate_variants(label)

        for variant in variants:
            if variant in candidates:
                return self._result(label, variant, candidates, MatchStrategy.EXACT)

        lowered = {}
        for key in candidates:
            lowered.setdefault(key.lower(), key)
        for variant in variants:
            key = lowered.get(variant.lower())
            if key is not None:
                return self._result(label, key, candidates, MatchStrategy.CASE_INSENSITIVE)

        if self.strict:
            logger.debug(f"No strict match for {label!r}")
            return None

        hits = [key for key in candidates if self._contains_any(key.lower(), [v.lower() for v in variants])]
        if hits:
            return self._best(label, hits, candidates, MatchStrategy.SUBSTRING)

        normalized_variants = [normalize_name(v) for v in variants]
        hits = [key for key in candidates if self._contains_any(normalize_name(key), normalized_variants)]
        if hits:
            return self._best(label, hits, candidates, MatchStrategy.NORMALIZED)

        logger.debug(f"No match for {label!r}")
        return None

    def resolve(self, label: str, candidates: Mapping[str, Any]) -> MatchResult:
        """
        Like find(), but raise when nothing matches.

        Raises:
            UnresolvedReferenceError: If no candidate matches the label
        """
        match = self.find(label, candidates)
        if match is None:
            raise UnresolvedReferenceError(f"Unresolved reference {label!r}", {"candidates": len(candidates)})
        return match

    def find_name(self, label: str, names: Iterable[str]) -> Optional[str]:
        """Resolve a label against plain names, returning the matched name."""
        match = self.find(label, {name: name for name in names})
        return match.key if match else None

    def matches(self, label: str, name: str) -> bool:
        """Whether label resolves to name when name is the only candidate."""
        return self.find(label, {name: name}) is not None

    def _contains_any(self, key: str, variants: List[str]) -> bool:
        if len(key) < self.min_length:
            return False
        for variant in variants:
            if len(variant) < self.min_length:
                continue
            if variant in key or key in variant:
                return True
        return False

    def _best(self, label: str, keys: List[str], candidates: Mapping[str, Any], strategy: MatchStrategy) -> MatchResult:
        best_key = max(keys, key=lambda k: self._similarity(label, k))
        return self._result(label, best_key, candidates, strategy)

    def _result(self, label: str, key: str, candidates: Mapping[str, Any], strategy: MatchStrategy) -> MatchResult:
        result = MatchResult(key, candidates[key], strategy, self._similarity(label, key))
        logger.debug(f"Matched {label!r} -> {key!r} ({strategy.name}, {result.confidence:.2f})")
        return result

    @staticmethod
    def _similarity(label: str, key: str) -> float:
        return SequenceMatcher(
            None,
            normalize_name(strip_leading_token(label)),
            normalize_name(key),
        ).ratio()
