"""
Utility functions for the query runner
"""

import os
import sys
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from bson import json_util

from .models import Book


# ============== LOGGING SETUP ==============

def setup_logging(level: str = "INFO", log_to_file: bool = False, log_dir: str = "logs") -> None:
    """Setup logging configuration"""
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(log_format, date_format))
    root_logger.addHandler(console_handler)

    if log_to_file:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(
            os.path.join(log_dir, f"queries_{datetime.now().strftime('%Y%m%d')}.log"),
            encoding="utf-8"
        )
        file_handler.setFormatter(logging.Formatter(log_format, date_format))
        root_logger.addHandler(file_handler)

    # Set specific log levels for noisy libraries
    logging.getLogger("pymongo").setLevel(logging.WARNING)
    logging.getLogger("motor").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get logger instance"""
    return logging.getLogger(name)


# ============== RESULT FORMATTING ==============

def to_json(value: Any, indent: Optional[int] = 2) -> str:
    """JSON dump that understands BSON types (ObjectId, datetime, Decimal128)"""
    return json_util.dumps(value, indent=indent)


def _looks_like_book(document: Dict[str, Any]) -> bool:
    return "title" in document and ("author" in document or "price" in document)


def format_document(document: Dict[str, Any]) -> str:
    """Render one result document on a single line"""
    if _looks_like_book(document):
        return Book.from_dict(document).describe()
    return to_json(document, indent=None)


def format_documents(documents: List[Dict[str, Any]]) -> str:
    """Render a list of result documents, one per line"""
    if not documents:
        return "  (no documents)"
    return "\n".join(f"  {index}. {format_document(doc)}" for index, doc in enumerate(documents, 1))
