"""Category resolution for the ethnicity composition factor.

Ethnicity columns form a tree: a parent column holds the aggregate of its
children. Requesting several siblings together must not add the children
up, since the same person can be counted under more than one subgroup
convention. The resolver therefore reads the shared parent when one exists,
and otherwise takes the single largest candidate.
"""

import logging
import re
from collections.abc import Iterable, Mapping

from src.data.catalog import ETHNICITY_NAMES, ETHNICITY_PARENTS, ETHNICITY_ROOTS
from src.models.scoring import CategorySelection, TokenBreakdown, ValueInfo
from src.models.zone import CompositionRow

logger = logging.getLogger(__name__)

_NON_LETTERS = re.compile(r"[^a-z]")


class ColumnHierarchy:
    """Parent-pointer tree over column ids."""

    def __init__(self, parents: Mapping[str, str], roots: Iterable[str] = ()):
        self._parents = dict(parents)
        self._columns = frozenset(roots) | frozenset(parents) | frozenset(parents.values())
        children: dict[str, list[str]] = {}
        for child, parent in self._parents.items():
            children.setdefault(parent, []).append(child)
        self._children = {k: tuple(v) for k, v in children.items()}

    def is_column(self, column: str) -> bool:
        return column in self._columns

    def parent_of(self, column: str) -> str | None:
        return self._parents.get(column)

    def children_of(self, column: str) -> tuple[str, ...]:
        return self._children.get(column, ())

    def common_parent(self, columns: Iterable[str]) -> str | None:
        """Return the one parent every column shares, if there is one."""
        parents = {self._parents.get(c) for c in columns}
        if len(parents) == 1:
            return parents.pop()
        return None


def normalize_token(token: str) -> str:
    return _NON_LETTERS.sub("_", token.strip().lower())


def _share(value: float, total: float) -> float:
    return value / total * 100 if total > 0 else 0.0


class CategoryResolver:
    def __init__(
        self,
        hierarchy: ColumnHierarchy,
        vocabulary: Mapping[str, tuple[str, ...]],
    ):
        self.hierarchy = hierarchy
        self.vocabulary = vocabulary

    def resolve(self, token: str) -> CategorySelection:
        """Map a raw column id or human-readable name to its columns."""
        if self.hierarchy.is_column(token):
            return CategorySelection(token=token, columns=(token,))

        columns = self.vocabulary.get(normalize_token(token))
        if not columns:
            logger.warning("No column mapping for category %r", token)
            return CategorySelection(token=token)

        parent = self.hierarchy.common_parent(columns) if len(columns) > 1 else None
        return CategorySelection(token=token, columns=tuple(columns), parent=parent)

    def value_for(self, selection: CategorySelection, row: CompositionRow) -> TokenBreakdown:
        """Read the single deduplicated value a selection contributes for a row."""
        total = row.total or 0.0
        columns = selection.columns

        if not columns:
            return TokenBreakdown(token=selection.token, columns=(), method="unresolved")

        if len(columns) == 1:
            value = row.number(columns[0])
            return TokenBreakdown(
                token=selection.token,
                columns=columns,
                method="single_column",
                value=value,
                values=[ValueInfo(columns[0], value, _share(value, total), selected=True)],
            )

        parent = selection.parent
        if parent is not None and row.has(parent):
            value = row.number(parent)
            return TokenBreakdown(
                token=selection.token,
                columns=columns,
                method="parent_column",
                value=value,
                values=[
                    ValueInfo(
                        parent,
                        value,
                        _share(value, total),
                        note="parent column replaces its children",
                        selected=True,
                    )
                ],
            )

        # No usable parent: take the largest child rather than the sum
        candidates = [(c, row.number(c)) for c in columns]
        best_column, best_value = max(candidates, key=lambda cv: cv[1])
        return TokenBreakdown(
            token=selection.token,
            columns=columns,
            method="maximum_child",
            value=max(0.0, best_value),
            values=[
                ValueInfo(c, v, _share(v, total), selected=(c == best_column))
                for c, v in candidates
            ],
        )


DEFAULT_HIERARCHY = ColumnHierarchy(ETHNICITY_PARENTS, ETHNICITY_ROOTS)
DEFAULT_RESOLVER = CategoryResolver(DEFAULT_HIERARCHY, ETHNICITY_NAMES)
