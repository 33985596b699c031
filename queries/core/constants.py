"""
Constants and enums used throughout the query runner
"""

from enum import Enum
from typing import Dict

from pymongo import ASCENDING, DESCENDING


class SortDirection(Enum):
    """Sort direction enum"""
    ASCENDING = ASCENDING
    DESCENDING = DESCENDING


class FilterOperator(Enum):
    """Comparison operators allowed in a filter condition"""
    EQ = "$eq"
    NE = "$ne"
    GT = "$gt"
    GTE = "$gte"
    LT = "$lt"
    LTE = "$lte"


class AccumulatorOperator(Enum):
    """Group accumulators"""
    AVG = "$avg"
    SUM = "$sum"


class StepKind(Enum):
    """Kind of database operation a step performs"""
    FIND = "find"
    UPDATE = "update"
    DELETE = "delete"
    PAGINATE = "paginate"
    AGGREGATE = "aggregate"
    CREATE_INDEX = "create_index"
    EXPLAIN = "explain"


# Range operators need an orderable, non-boolean operand
RANGE_OPERATORS = frozenset({
    FilterOperator.GT, FilterOperator.GTE, FilterOperator.LT, FilterOperator.LTE,
})

# Aggregation expression operators the pipeline builder accepts, with arity
# (None means any number of arguments)
EXPRESSION_ARITY: Dict[str, int] = {
    "$floor": 1,
    "$toString": 1,
    "$divide": 2,
    "$multiply": None,
    "$concat": None,
}

# ============== BOOKSTORE SCRIPT LITERALS ==============
FICTION_GENRE = "Fiction"
RECENT_YEAR = 2000
FEATURED_AUTHOR = "Harper Lee"
REPRICED_TITLE = "The Great Gatsby"
NEW_PRICE = 12.99
IN_STOCK_RECENT_YEAR = 2010
PAGE_SIZE = 5
EXPLAIN_TITLE = "The Hobbit"
EXPLAIN_VERBOSITY = "executionStats"

# Step result emojis
STATUS_EMOJIS: Dict[str, str] = {
    "step": "📚",
    "index": "🗂️",
    "explain": "🔎",
    "error": "❌",
}
