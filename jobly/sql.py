"""
SQL fragment builders.

Builds parameterized SET and WHERE fragments at runtime from sparse
update payloads and optional filters. Placeholders are numbered from 1
and placeholder i always binds values[i - 1].
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .errors import ValidationError

NAMED = "named"      # :p1, :p2 ... (SQLAlchemy text() binds)
NUMERIC = "numeric"  # $1, $2 ... (PostgreSQL native)


def placeholder(index: int, paramstyle: str = NAMED) -> str:
    """Render the 1-based positional placeholder for the given style."""
    if paramstyle == NAMED:
        return f":p{index}"
    if paramstyle == NUMERIC:
        return f"${index}"
    raise ValueError(f"Unknown paramstyle: {paramstyle}")


def bind_params(values: List[Any]) -> Dict[str, Any]:
    """Turn an ordered value list into the {p1: ..., p2: ...} bind mapping."""
    return {f"p{i}": v for i, v in enumerate(values, start=1)}


def sql_for_partial_update(
    data: Mapping[str, Any],
    field_map: Mapping[str, str],
    paramstyle: str = NAMED,
) -> Tuple[str, List[Any]]:
    """
    Build the SET fragment of a partial UPDATE.

    Args:
        data: Fields to change, keyed by domain name. Only these columns change.
        field_map: Domain name -> column name. Unmapped names are used as-is.
        paramstyle: Placeholder syntax (NAMED or NUMERIC)

    Returns:
        Tuple of (set_cols, values), e.g.
        {"name": "Aliya", "numEmployees": 32} ->
        ('"name"=:p1, "num_employees"=:p2', ["Aliya", 32])

    Raises:
        ValidationError: If data is empty
    """
    keys = list(data.keys())
    if not keys:
        raise ValidationError("No data")

    cols = [
        f'"{field_map.get(key, key)}"={placeholder(idx, paramstyle)}'
        for idx, key in enumerate(keys, start=1)
    ]
    return ", ".join(cols), [data[key] for key in keys]


# Predicate kinds
CONTAINS = "contains"
GTE = "gte"
LTE = "lte"
POSITIVE = "positive"


@dataclass(frozen=True)
class Predicate:
    """One filter condition; value is None for literal-only kinds."""

    kind: str
    column: str
    value: Any = None

    @property
    def parameterized(self) -> bool:
        return self.kind != POSITIVE

    def render(self, ph: Optional[str]) -> str:
        if self.kind == CONTAINS:
            return f"LOWER({self.column}) LIKE LOWER({ph})"
        if self.kind == GTE:
            return f"{self.column} >= {ph}"
        if self.kind == LTE:
            return f"{self.column} <= {ph}"
        if self.kind == POSITIVE:
            return f"{self.column} > 0"
        raise ValueError(f"Unknown predicate kind: {self.kind}")


@dataclass(frozen=True)
class FilterColumns:
    """Storage columns an entity exposes to filtering."""

    text: Optional[str] = None
    bound: Optional[str] = None
    presence: Optional[str] = None


@dataclass
class FilterSpec:
    """Optional list filters. Unset fields are inactive."""

    text_match: Optional[str] = None
    min_bound: Optional[float] = None
    max_bound: Optional[float] = None
    presence_flag: bool = False

    def validate(self) -> None:
        if (
            self.min_bound is not None
            and self.max_bound is not None
            and self.min_bound > self.max_bound
        ):
            raise ValidationError(
                f"Minimum ({self.min_bound}) cannot be greater than maximum ({self.max_bound})"
            )

    def predicates(self, columns: FilterColumns) -> List[Predicate]:
        """Active predicates in fixed order: text, lower bound, upper bound, presence."""
        preds: List[Predicate] = []
        if self.text_match:
            preds.append(Predicate(CONTAINS, _column(columns.text, "text match"), f"%{self.text_match}%"))
        if self.min_bound is not None:
            preds.append(Predicate(GTE, _column(columns.bound, "minimum"), self.min_bound))
        if self.max_bound is not None:
            preds.append(Predicate(LTE, _column(columns.bound, "maximum"), self.max_bound))
        if self.presence_flag:
            preds.append(Predicate(POSITIVE, _column(columns.presence, "presence")))
        return preds


def _column(name: Optional[str], kind: str) -> str:
    if name is None:
        raise ValidationError(f"Filter not supported: {kind}")
    return name


@dataclass
class ClauseAccumulator:
    """Collects predicates and renders them against one shared placeholder counter."""

    paramstyle: str = NAMED
    fragments: List[str] = field(default_factory=list)
    values: List[Any] = field(default_factory=list)
    next_index: int = 1

    def add(self, pred: Predicate) -> None:
        ph = None
        if pred.parameterized:
            ph = placeholder(self.next_index, self.paramstyle)
            self.values.append(pred.value)
            self.next_index += 1
        self.fragments.append(pred.render(ph))

    def render(self) -> Tuple[str, List[Any]]:
        return " AND ".join(self.fragments), list(self.values)


def build_filter_clause(
    spec: FilterSpec,
    columns: FilterColumns,
    paramstyle: str = NAMED,
) -> Tuple[str, List[Any]]:
    """
    Build a WHERE fragment (without the WHERE keyword) from optional filters.

    Args:
        spec: Filters to apply
        columns: Columns the filters target
        paramstyle: Placeholder syntax (NAMED or NUMERIC)

    Returns:
        Tuple of (where_clause, values). ("", []) when nothing is active.

    Raises:
        ValidationError: If min_bound > max_bound, or a filter targets a
            column the entity does not expose
    """
    spec.validate()
    acc = ClauseAccumulator(paramstyle=paramstyle)
    for pred in spec.predicates(columns):
        acc.add(pred)
    return acc.render()
