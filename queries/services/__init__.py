"""
Services: bookstore steps and the runner that executes them
"""

from .query_runner import QueryRunner, RunReport
from .steps import build_bookstore_steps

__all__ = ["QueryRunner", "RunReport", "build_bookstore_steps"]
