"""
Data models for bookstore queries

Filters, updates, projections, sorts, aggregation stages and index specs are
validated when they are built, so a malformed query never reaches the server.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any, Tuple

from .constants import (
    SortDirection, FilterOperator, AccumulatorOperator,
    RANGE_OPERATORS, EXPRESSION_ARITY,
)
from .errors import QueryValidationError


def _validate_field_name(name: Any) -> None:
    if not isinstance(name, str) or not name:
        raise QueryValidationError(f"Field name must be a non-empty string, got {name!r}")
    if name.startswith("$"):
        raise QueryValidationError(f"Field name '{name}' must not start with '$'")


def _validate_count(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise QueryValidationError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise QueryValidationError(f"{name} must not be negative, got {value}")


def field_ref(name: str) -> str:
    """Reference a document field inside an aggregation expression"""
    _validate_field_name(name)
    return f"${name}"


def _render(value: Any) -> Any:
    if isinstance(value, Expr):
        return value.to_mongo()
    return value


# ============== BOOK RECORD ==============

@dataclass
class Book:
    """A book document as stored in the collection"""

    title: Optional[str] = None
    author: Optional[str] = None
    genre: Optional[str] = None
    published_year: Optional[int] = None
    price: Optional[float] = None
    in_stock: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Book':
        """Create from a document; unknown fields are ignored"""
        return cls(
            title=data.get("title"),
            author=data.get("author"),
            genre=data.get("genre"),
            published_year=data.get("published_year"),
            price=data.get("price"),
            in_stock=data.get("in_stock"),
        )

    def describe(self) -> str:
        """One-line human readable summary"""
        parts = [self.title or "<untitled>"]
        if self.author:
            parts.append(f"by {self.author}")
        if self.published_year is not None:
            parts.append(f"({self.published_year})")
        if self.genre:
            parts.append(f"[{self.genre}]")
        if isinstance(self.price, (int, float)):
            parts.append(f"${self.price:.2f}")
        elif self.price is not None:
            parts.append(f"${self.price}")
        if self.in_stock is not None:
            parts.append("in stock" if self.in_stock else "out of stock")
        return " ".join(parts)


# ============== FILTERS & UPDATES ==============

@dataclass(frozen=True)
class Condition:
    """A single comparison on one field"""

    field: str
    operator: FilterOperator
    value: Any

    def __post_init__(self):
        _validate_field_name(self.field)
        if not isinstance(self.operator, FilterOperator):
            raise QueryValidationError(f"Unknown filter operator {self.operator!r}")
        if self.operator in RANGE_OPERATORS and (self.value is None or isinstance(self.value, bool)):
            raise QueryValidationError(
                f"Operator {self.operator.value} on '{self.field}' needs an orderable value, got {self.value!r}"
            )
        # A {"$op": ...} value would render as a raw query operator
        if isinstance(self.value, dict) and any(
            isinstance(key, str) and key.startswith("$") for key in self.value
        ):
            raise QueryValidationError(
                f"Value for '{self.field}' must not contain query operators, got {self.value!r}"
            )

    @classmethod
    def eq(cls, field: str, value: Any) -> 'Condition':
        return cls(field, FilterOperator.EQ, value)

    @classmethod
    def gt(cls, field: str, value: Any) -> 'Condition':
        return cls(field, FilterOperator.GT, value)


@dataclass(frozen=True)
class Filter:
    """Conjunction of conditions; an empty filter matches every document"""

    conditions: Tuple[Condition, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "conditions", tuple(self.conditions))
        for condition in self.conditions:
            if not isinstance(condition, Condition):
                raise QueryValidationError(f"Filter expects Condition items, got {condition!r}")
        # Rendering checks field/operator combinations
        self.to_mongo()

    def to_mongo(self) -> Dict[str, Any]:
        """Render as a MongoDB filter document"""
        document: Dict[str, Any] = {}
        equality_fields = set()
        operators_by_field: Dict[str, set] = {}

        for condition in self.conditions:
            name = condition.field
            if condition.operator is FilterOperator.EQ:
                if name in equality_fields or name in operators_by_field:
                    raise QueryValidationError(f"Conflicting conditions on field '{name}'")
                equality_fields.add(name)
                document[name] = condition.value
                continue

            if name in equality_fields:
                raise QueryValidationError(f"Conflicting conditions on field '{name}'")
            seen = operators_by_field.setdefault(name, set())
            if condition.operator in seen:
                raise QueryValidationError(
                    f"Operator {condition.operator.value} given twice for field '{name}'"
                )
            seen.add(condition.operator)
            document.setdefault(name, {})[condition.operator.value] = condition.value

        return document


def where(*conditions: Condition) -> Filter:
    """Build a filter from conditions"""
    return Filter(conditions)


@dataclass(frozen=True)
class SetUpdate:
    """Set fields on the matched document"""

    values: Dict[str, Any]

    def __post_init__(self):
        if not isinstance(self.values, dict) or not self.values:
            raise QueryValidationError("SetUpdate needs at least one field to set")
        for name in self.values:
            _validate_field_name(name)
            if name == "_id":
                raise QueryValidationError("SetUpdate cannot modify '_id'")

    def to_mongo(self) -> Dict[str, Any]:
        return {"$set": dict(self.values)}


# ============== FIND OPTIONS ==============

@dataclass(frozen=True)
class Projection:
    """Inclusion projection"""

    fields: Tuple[str, ...]
    include_id: bool = False

    def __post_init__(self):
        object.__setattr__(self, "fields", tuple(self.fields))
        if not self.fields:
            raise QueryValidationError("Projection needs at least one field")
        for name in self.fields:
            _validate_field_name(name)
            if name == "_id":
                raise QueryValidationError("Use include_id to control '_id' in a projection")

    def to_mongo(self) -> Dict[str, int]:
        document = {name: 1 for name in self.fields}
        if not self.include_id:
            document["_id"] = 0
        return document


@dataclass(frozen=True)
class SortKey:
    """One field of a sort or index specification"""

    field: str
    direction: SortDirection = SortDirection.ASCENDING

    def __post_init__(self):
        _validate_field_name(self.field)
        if not isinstance(self.direction, SortDirection):
            raise QueryValidationError(f"Unknown sort direction {self.direction!r}")

    def to_pymongo(self) -> Tuple[str, int]:
        return (self.field, self.direction.value)


def _validate_sort_keys(keys: Tuple[SortKey, ...], what: str) -> None:
    if not keys:
        raise QueryValidationError(f"{what} needs at least one key")
    names = []
    for key in keys:
        if not isinstance(key, SortKey):
            raise QueryValidationError(f"{what} expects SortKey items, got {key!r}")
        names.append(key.field)
    if len(names) != len(set(names)):
        raise QueryValidationError(f"{what} lists a field more than once: {names}")


@dataclass(frozen=True)
class FindQuery:
    """A find with optional projection, sort and skip/limit"""

    filter: Filter = field(default_factory=Filter)
    projection: Optional[Projection] = None
    sort: Tuple[SortKey, ...] = ()
    skip: int = 0
    limit: int = 0  # 0 means no limit

    def __post_init__(self):
        object.__setattr__(self, "sort", tuple(self.sort))
        if not isinstance(self.filter, Filter):
            raise QueryValidationError(f"FindQuery expects a Filter, got {self.filter!r}")
        if self.projection is not None and not isinstance(self.projection, Projection):
            raise QueryValidationError(f"FindQuery expects a Projection, got {self.projection!r}")
        if self.sort:
            _validate_sort_keys(self.sort, "Sort")
        _validate_count("skip", self.skip)
        _validate_count("limit", self.limit)

    def find_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for Collection.find"""
        kwargs: Dict[str, Any] = {
            "filter": self.filter.to_mongo(),
            "projection": self.projection.to_mongo() if self.projection else None,
            "skip": self.skip,
            "limit": self.limit,
        }
        if self.sort:
            kwargs["sort"] = [key.to_pymongo() for key in self.sort]
        return kwargs


# ============== AGGREGATION ==============

@dataclass(frozen=True)
class Expr:
    """Aggregation expression operator applied to arguments"""

    operator: str
    args: Tuple[Any, ...]

    def __post_init__(self):
        object.__setattr__(self, "args", tuple(self.args))
        if self.operator not in EXPRESSION_ARITY:
            raise QueryValidationError(f"Unsupported expression operator {self.operator!r}")
        arity = EXPRESSION_ARITY[self.operator]
        if arity is None:
            if not self.args:
                raise QueryValidationError(f"{self.operator} needs at least one argument")
        elif len(self.args) != arity:
            raise QueryValidationError(
                f"{self.operator} takes {arity} argument(s), got {len(self.args)}"
            )

    def to_mongo(self) -> Dict[str, Any]:
        rendered = [_render(arg) for arg in self.args]
        if EXPRESSION_ARITY[self.operator] == 1:
            return {self.operator: rendered[0]}
        return {self.operator: rendered}


def floor(value: Any) -> Expr:
    return Expr("$floor", (value,))


def divide(dividend: Any, divisor: Any) -> Expr:
    return Expr("$divide", (dividend, divisor))


def multiply(*values: Any) -> Expr:
    return Expr("$multiply", values)


def to_string(value: Any) -> Expr:
    return Expr("$toString", (value,))


def concat(*values: Any) -> Expr:
    return Expr("$concat", values)


@dataclass(frozen=True)
class Accumulator:
    """Group accumulator such as {"$avg": "$price"}"""

    operator: AccumulatorOperator
    operand: Any

    def __post_init__(self):
        if not isinstance(self.operator, AccumulatorOperator):
            raise QueryValidationError(f"Unknown accumulator {self.operator!r}")

    def to_mongo(self) -> Dict[str, Any]:
        return {self.operator.value: _render(self.operand)}


class PipelineStage:
    """Base class for aggregation stages"""

    def to_mongo(self) -> Dict[str, Any]:
        raise NotImplementedError


@dataclass(frozen=True)
class GroupStage(PipelineStage):
    key: Any
    accumulators: Dict[str, Accumulator]

    def __post_init__(self):
        if not self.accumulators:
            raise QueryValidationError("GroupStage needs at least one accumulator")
        for name, accumulator in self.accumulators.items():
            _validate_field_name(name)
            if name == "_id":
                raise QueryValidationError("GroupStage output field cannot be named '_id'")
            if not isinstance(accumulator, Accumulator):
                raise QueryValidationError(f"'{name}' must be an Accumulator, got {accumulator!r}")

    def to_mongo(self) -> Dict[str, Any]:
        group: Dict[str, Any] = {"_id": _render(self.key)}
        for name, accumulator in self.accumulators.items():
            group[name] = accumulator.to_mongo()
        return {"$group": group}


@dataclass(frozen=True)
class SortStage(PipelineStage):
    keys: Tuple[SortKey, ...]

    def __post_init__(self):
        object.__setattr__(self, "keys", tuple(self.keys))
        _validate_sort_keys(self.keys, "SortStage")

    def to_mongo(self) -> Dict[str, Any]:
        return {"$sort": dict(key.to_pymongo() for key in self.keys)}


@dataclass(frozen=True)
class LimitStage(PipelineStage):
    count: int

    def __post_init__(self):
        _validate_count("LimitStage count", self.count)
        if self.count == 0:
            raise QueryValidationError("LimitStage count must be positive")

    def to_mongo(self) -> Dict[str, Any]:
        return {"$limit": self.count}


@dataclass(frozen=True)
class ProjectStage(PipelineStage):
    """Reshape documents; values are 0/1 flags or expressions"""

    fields: Dict[str, Any]

    def __post_init__(self):
        if not self.fields:
            raise QueryValidationError("ProjectStage needs at least one field")
        for name, value in self.fields.items():
            _validate_field_name(name)
            if isinstance(value, bool) or value in (0, 1):
                continue
            if not isinstance(value, (Expr, str)):
                raise QueryValidationError(
                    f"ProjectStage field '{name}' must be 0/1, a field reference or an expression"
                )

    def to_mongo(self) -> Dict[str, Any]:
        return {"$project": {name: _render(value) for name, value in self.fields.items()}}


@dataclass(frozen=True)
class Pipeline:
    stages: Tuple[PipelineStage, ...]

    def __post_init__(self):
        object.__setattr__(self, "stages", tuple(self.stages))
        if not self.stages:
            raise QueryValidationError("Pipeline needs at least one stage")
        for stage in self.stages:
            if not isinstance(stage, PipelineStage):
                raise QueryValidationError(f"Pipeline expects PipelineStage items, got {stage!r}")

    def to_mongo(self) -> List[Dict[str, Any]]:
        return [stage.to_mongo() for stage in self.stages]


# ============== INDEXES ==============

@dataclass(frozen=True)
class IndexSpec:
    """Single-field or compound index"""

    keys: Tuple[SortKey, ...]

    def __post_init__(self):
        object.__setattr__(self, "keys", tuple(self.keys))
        _validate_sort_keys(self.keys, "IndexSpec")

    def to_pymongo(self) -> List[Tuple[str, int]]:
        return [key.to_pymongo() for key in self.keys]

    @property
    def is_compound(self) -> bool:
        return len(self.keys) > 1
