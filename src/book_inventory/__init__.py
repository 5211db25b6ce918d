"""
Book Inventory - A personal book catalog manager

Features:
- Record books (title, author, ISBN, read status) with unique ISBNs
- JSON persistence rewritten after every change
- Listing sorted by author, ISBN and title/author search
- Read statistics and top authors
- CSV export and import
"""

from ._version import __version__
from .models import Book, sort_by_author
from .reports import ImportSummary, Report, Statistics
from .store import InventoryStore

__all__ = [
    "__version__",
    "Book",
    "InventoryStore",
    "ImportSummary",
    "Report",
    "Statistics",
    "sort_by_author",
]
