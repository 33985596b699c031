"""
Bookstore operations

Each step wraps one call into the collection, translates driver errors into
OperationError subclasses and knows how to render and count its result.
"""

from dataclasses import dataclass
from typing import Any, List, Tuple, Type

from pymongo.errors import PyMongoError

from queries.core.constants import (
    StepKind, SortDirection, AccumulatorOperator, STATUS_EMOJIS,
    FICTION_GENRE, RECENT_YEAR, FEATURED_AUTHOR, REPRICED_TITLE, NEW_PRICE,
    IN_STOCK_RECENT_YEAR, PAGE_SIZE, EXPLAIN_TITLE, EXPLAIN_VERBOSITY,
)
from queries.core.errors import OperationError, QueryExecutionError, IndexCreationError
from queries.core.models import (
    Condition, Filter, where, SetUpdate, Projection, SortKey, FindQuery,
    Accumulator, GroupStage, SortStage, LimitStage, ProjectStage, Pipeline,
    IndexSpec, field_ref, floor, divide, multiply, to_string, concat,
)
from queries.core.utils import format_documents, to_json
from queries.monitoring.metrics import RunStatistics


@dataclass
class StepResult:
    """Outcome of one executed step"""

    name: str
    kind: StepKind
    value: Any
    duration: float = 0.0


class Step:
    """Base class for one database operation"""

    kind: StepKind
    emoji: str = STATUS_EMOJIS["step"]
    error_class: Type[OperationError] = QueryExecutionError

    def __init__(self, name: str):
        self.name = name

    async def execute(self, collection) -> Any:
        """Run against the collection, translating driver errors"""
        try:
            return await self._run(collection)
        except PyMongoError as e:
            raise self.error_class(str(e), step=self.name) from e

    async def _run(self, collection) -> Any:
        raise NotImplementedError

    def describe(self, value: Any) -> str:
        return f"{self.name}: {value}"

    def record(self, stats: RunStatistics, value: Any) -> None:
        """Update run counters from the step result"""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"


class FindStep(Step):
    kind = StepKind.FIND

    def __init__(self, name: str, query: FindQuery):
        super().__init__(name)
        self.query = query

    async def _run(self, collection) -> List[dict]:
        cursor = collection.find(**self.query.find_kwargs())
        return await cursor.to_list(length=None)

    def describe(self, value: List[dict]) -> str:
        return f"{self.name} ({len(value)}):\n{format_documents(value)}"

    def record(self, stats: RunStatistics, value: List[dict]) -> None:
        stats.increment("documents_returned", len(value))


class UpdateStep(Step):
    """update_one; the result is the modified count"""

    kind = StepKind.UPDATE

    def __init__(self, name: str, filter: Filter, update: SetUpdate):
        super().__init__(name)
        self.filter = filter
        self.update = update

    async def _run(self, collection) -> int:
        result = await collection.update_one(self.filter.to_mongo(), self.update.to_mongo())
        return result.modified_count

    def record(self, stats: RunStatistics, value: int) -> None:
        stats.increment("documents_modified", value)


class DeleteStep(Step):
    """delete_one; the result is the deleted count"""

    kind = StepKind.DELETE

    def __init__(self, name: str, filter: Filter):
        super().__init__(name)
        self.filter = filter

    async def _run(self, collection) -> int:
        result = await collection.delete_one(self.filter.to_mongo())
        return result.deleted_count

    def record(self, stats: RunStatistics, value: int) -> None:
        stats.increment("documents_deleted", value)


class PaginateStep(Step):
    """Fetch consecutive skip/limit pages; without an order they follow store order"""

    kind = StepKind.PAGINATE

    def __init__(self, name: str, page_size: int = PAGE_SIZE, pages: int = 2,
                 order: Tuple[SortKey, ...] = ()):
        super().__init__(name)
        self.pages = [
            FindQuery(sort=order, skip=page * page_size, limit=page_size)
            for page in range(pages)
        ]

    async def _run(self, collection) -> List[List[dict]]:
        results = []
        for query in self.pages:
            results.append(await collection.find(**query.find_kwargs()).to_list(length=None))
        return results

    def describe(self, value: List[List[dict]]) -> str:
        lines = [f"{self.name}:"]
        for number, page in enumerate(value, 1):
            lines.append(f" Page {number}:\n{format_documents(page)}")
        return "\n".join(lines)

    def record(self, stats: RunStatistics, value: List[List[dict]]) -> None:
        stats.increment("documents_returned", sum(len(page) for page in value))


class AggregateStep(Step):
    kind = StepKind.AGGREGATE

    def __init__(self, name: str, pipeline: Pipeline):
        super().__init__(name)
        self.pipeline = pipeline

    async def _run(self, collection) -> List[dict]:
        cursor = collection.aggregate(self.pipeline.to_mongo())
        return await cursor.to_list(length=None)

    def describe(self, value: List[dict]) -> str:
        return f"{self.name}:\n{format_documents(value)}"

    def record(self, stats: RunStatistics, value: List[dict]) -> None:
        stats.increment("documents_returned", len(value))


class CreateIndexStep(Step):
    """create_index; the result is the index name reported by the server"""

    kind = StepKind.CREATE_INDEX
    emoji = STATUS_EMOJIS["index"]
    error_class = IndexCreationError

    def __init__(self, name: str, index: IndexSpec):
        super().__init__(name)
        self.index = index

    async def _run(self, collection) -> str:
        return await collection.create_index(self.index.to_pymongo())

    def describe(self, value: str) -> str:
        kind = "compound index" if self.index.is_compound else "index"
        return f"{self.name} ({kind} name: {value})"

    def record(self, stats: RunStatistics, value: str) -> None:
        stats.increment("indexes_created")


class ExplainStep(Step):
    """Run the explain command for a find and keep its executionStats"""

    kind = StepKind.EXPLAIN
    emoji = STATUS_EMOJIS["explain"]

    def __init__(self, name: str, query: FindQuery, verbosity: str = EXPLAIN_VERBOSITY):
        super().__init__(name)
        self.query = query
        self.verbosity = verbosity

    async def _run(self, collection) -> dict:
        command = {
            "explain": {"find": collection.name, "filter": self.query.filter.to_mongo()},
            "verbosity": self.verbosity,
        }
        result = await collection.database.command(command)
        return result.get("executionStats", {})

    def describe(self, value: dict) -> str:
        return f"{self.name}:\n{to_json(value)}"


# ============== THE BOOKSTORE SCRIPT ==============

def decade_pipeline() -> Pipeline:
    """Count books per decade, e.g. {"decade": "1990s", "count": 3}"""
    return Pipeline((
        GroupStage(
            key=floor(divide(field_ref("published_year"), 10)),
            accumulators={"count": Accumulator(AccumulatorOperator.SUM, 1)},
        ),
        ProjectStage({
            "decade": concat(to_string(multiply(field_ref("_id"), 10)), "s"),
            "count": 1,
            "_id": 0,
        }),
    ))


def build_bookstore_steps() -> List[Step]:
    """The fixed, ordered sequence of operations run against the books collection"""
    gatsby = where(Condition.eq("title", REPRICED_TITLE))

    return [
        # Basic queries (CRUD)
        FindStep("Fiction Books", FindQuery(where(Condition.eq("genre", FICTION_GENRE)))),
        FindStep(f"Books Published After {RECENT_YEAR}",
                 FindQuery(where(Condition.gt("published_year", RECENT_YEAR)))),
        FindStep(f"Books by {FEATURED_AUTHOR}",
                 FindQuery(where(Condition.eq("author", FEATURED_AUTHOR)))),
        UpdateStep(f"Updated {REPRICED_TITLE} Price", gatsby, SetUpdate({"price": NEW_PRICE})),
        DeleteStep(f"Deleted {REPRICED_TITLE}", gatsby),

        # Advanced queries
        FindStep("In-Stock & Recent Books", FindQuery(where(
            Condition.eq("in_stock", True),
            Condition.gt("published_year", IN_STOCK_RECENT_YEAR),
        ))),
        FindStep("Projection (Title, Author, Price)",
                 FindQuery(projection=Projection(("title", "author", "price")))),
        FindStep("Books Sorted by Price (Ascending)",
                 FindQuery(sort=(SortKey("price", SortDirection.ASCENDING),))),
        FindStep("Books Sorted by Price (Descending)",
                 FindQuery(sort=(SortKey("price", SortDirection.DESCENDING),))),
        PaginateStep("Pagination"),

        # Aggregation pipelines
        AggregateStep("Average Price by Genre", Pipeline((
            GroupStage(
                key=field_ref("genre"),
                accumulators={"avgPrice": Accumulator(AccumulatorOperator.AVG, field_ref("price"))},
            ),
        ))),
        # Ties on count are resolved by the server's ordering
        AggregateStep("Author with Most Books", Pipeline((
            GroupStage(
                key=field_ref("author"),
                accumulators={"count": Accumulator(AccumulatorOperator.SUM, 1)},
            ),
            SortStage((SortKey("count", SortDirection.DESCENDING),)),
            LimitStage(1),
        ))),
        AggregateStep("Books by Decade", decade_pipeline()),

        # Indexing
        CreateIndexStep("Index created on 'title'", IndexSpec((SortKey("title"),))),
        CreateIndexStep("Compound index on 'author' and 'published_year'", IndexSpec((
            SortKey("author", SortDirection.ASCENDING),
            SortKey("published_year", SortDirection.DESCENDING),
        ))),
        ExplainStep("Performance Analysis with explain()",
                    FindQuery(where(Condition.eq("title", EXPLAIN_TITLE)))),
    ]
