"""
Class catalog container module.

This module defines the ClassCatalog class, which holds the classes read
from a class diagram and enforces the (package, name) identity rule.
"""

import logging
from typing import Dict, Iterable, Iterator, List, Optional

from stubdriver.core.class_model import ClassModel

logger = logging.getLogger(__name__)


class ClassCatalog:
    """
    Container for the class models of a project.

    Adding a class whose identity collides with an existing one never
    produces a duplicate. The definition with more methods is kept, a
    non-default package breaks ties, and methods only the losing definition
    has are merged into the winner by signature. A class in the "default"
    package collides with a same-named class in any package.
    """

    def __init__(self, classes: Optional[Iterable[ClassModel]] = None):
        """Initialize a catalog, optionally seeded with classes."""
        self._classes: Dict[tuple, ClassModel] = {}
        for cls in classes or []:
            self.add_class(cls)

    def _find_collision(self, cls: ClassModel) -> Optional[tuple]:
        if cls.identity in self._classes:
            return cls.identity
        for key, existing in self._classes.items():
            if existing.name != cls.name:
                continue
            if existing.has_default_package or cls.has_default_package:
                return key
        return None

    def add_class(self, cls: ClassModel) -> ClassModel:
        """
        Add a class, merging it with a colliding definition if any.

        Args:
            cls: The class to add

        Returns:
            The class kept in the catalog
        """
        key = self._find_collision(cls)
        if key is None:
            self._classes[cls.identity] = cls
            return cls

        existing = self._classes[key]
        winner, loser = existing, cls
        if len(cls.methods) > len(existing.methods):
            winner, loser = cls, existing
        elif len(cls.methods) == len(existing.methods):
            if existing.has_default_package and not cls.has_default_package:
                winner, loser = cls, existing

        added = winner.merge_methods_from(loser)
        winner.related_function_ids |= loser.related_function_ids
        logger.debug(
            "Merged duplicate class %s.%s into %s.%s (%d methods added)",
            loser.package_name, loser.name, winner.package_name, winner.name, added,
        )

        if winner is not existing:
            del self._classes[key]
            self._classes[winner.identity] = winner
        return winner

    def get(self, name: str, package_name: Optional[str] = None) -> Optional[ClassModel]:
        """
        Find a class by name, optionally restricted to a package.

        Args:
            name: Class name (exact)
            package_name: Package to look in, any package when None

        Returns:
            The matching ClassModel or None
        """
        if package_name is not None:
            return self._classes.get((package_name, name))
        for cls in self._classes.values():
            if cls.name == name:
                return cls
        return None

    def get_by_name(self, name: str) -> Optional[ClassModel]:
        """Find a class by name (case-insensitive)."""
        found = self.get(name)
        if found is not None:
            return found
        name_lower = name.lower()
        for cls in self._classes.values():
            if cls.name.lower() == name_lower:
                return cls
        return None

    def get_by_id(self, class_id: str) -> Optional[ClassModel]:
        for cls in self._classes.values():
            if cls.id == class_id:
                return cls
        return None

    def by_name(self) -> Dict[str, ClassModel]:
        """Map of class name to class, used for name-keyed lookups."""
        return {cls.name: cls for cls in self._classes.values()}

    def classes_for_function(self, function_id: str) -> List[ClassModel]:
        return [cls for cls in self._classes.values() if function_id in cls.related_function_ids]

    def names(self) -> List[str]:
        return [cls.name for cls in self._classes.values()]

    def __len__(self) -> int:
        return len(self._classes)

    def __iter__(self) -> Iterator[ClassModel]:
        return iter(list(self._classes.values()))

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def to_list(self) -> List[dict]:
        return [cls.to_dict() for cls in self._classes.values()]

    @classmethod
    def from_list(cls, data: Iterable[dict]) -> "ClassCatalog":
        return cls(ClassModel.from_dict(item) for item in data)
