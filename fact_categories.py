"""Fact category catalog loader."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from pydantic import ValidationError

from schemas import FactCategory

logger = logging.getLogger(__name__)

CATALOG_DIR = Path(__file__).resolve().parent / "catalogs"


class FactCategoryConfigError(ValueError):
    """Raised when ``fact_categories.json`` contains invalid data."""


def _default_path() -> Path:
    override = os.getenv("FACT_CATEGORIES_PATH")
    if override:
        return Path(override)
    return CATALOG_DIR / "fact_categories.json"


class FactCategoryRegistry:
    """Static catalog of fact categories, loaded once and never mutated.

    With ``lazy=True`` nothing is read until the catalog is first used, and the
    default location (``FACT_CATEGORIES_PATH`` or the bundled file) is resolved
    at that point rather than at construction.
    """

    def __init__(self, path: str | Path | None = None, *, lazy: bool = False) -> None:
        self._path = Path(path) if path is not None else None
        self._categories: Optional[List[FactCategory]] = None
        if not lazy:
            self.reload()

    @property
    def path(self) -> Path:
        return self._path if self._path is not None else _default_path()

    # ------------------------------------------------------------------
    def reload(self) -> None:
        """Reload the catalog from disk and validate the structure."""

        path = self.path
        if not path.exists():
            raise FileNotFoundError(f"Fact category file not found: {path}")

        with path.open("r", encoding="utf-8") as fh:
            try:
                raw = json.load(fh)
            except json.JSONDecodeError as exc:
                raise FactCategoryConfigError(
                    f"Fact category file is not valid JSON: {exc}"
                ) from exc

        if not isinstance(raw, list):
            raise FactCategoryConfigError("Fact category file must contain a JSON list")

        categories: List[FactCategory] = []
        seen: set[str] = set()
        for idx, entry in enumerate(raw, start=1):
            if not isinstance(entry, dict):
                raise FactCategoryConfigError(f"Entry #{idx} must be a JSON object")
            try:
                category = FactCategory.model_validate(entry)
            except ValidationError as exc:
                raise FactCategoryConfigError(f"Entry #{idx} is invalid: {exc}") from exc
            if category.id in seen:
                raise FactCategoryConfigError(f"Duplicate fact category id detected: {category.id}")
            seen.add(category.id)
            categories.append(category)

        if not categories:
            raise FactCategoryConfigError("Fact category file may not be empty")

        self._categories = categories
        logger.debug("Loaded %d fact categories from %s", len(categories), path)

    def _loaded(self) -> List[FactCategory]:
        if self._categories is None:
            self.reload()
        return self._categories

    # ------------------------------------------------------------------
    @property
    def categories(self) -> List[FactCategory]:
        """Return a shallow copy of the catalog in file order."""

        return list(self._loaded())

    def ids(self) -> Sequence[str]:
        return tuple(category.id for category in self._loaded())

    def get(self, category_id: str) -> Optional[FactCategory]:
        for category in self._loaded():
            if category.id == category_id:
                return category
        return None

    def by_operation(self, operation: str) -> List[FactCategory]:
        """Return the categories for ``operation`` (e.g. ``"addition"``)."""

        return [category for category in self._loaded() if category.operation == operation]

    # ------------------------------------------------------------------
    def __iter__(self) -> Iterator[FactCategory]:
        return iter(self._loaded())

    def __len__(self) -> int:
        return len(self._loaded())


FACT_CATEGORIES = FactCategoryRegistry(lazy=True)
"""Singleton catalog used throughout the application; read on first use."""
