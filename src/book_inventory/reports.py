"""
Result objects returned by the inventory store.

Every store operation returns a Report instead of printing. The caller
decides how to display it; ``Report.render()`` gives the plain-text layout
used by the command line and the interactive menu.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from .models import Book

# Report statuses
ADDED = "added"
DUPLICATE = "duplicate"
REMOVED = "removed"
NOT_FOUND = "not_found"
UPDATED = "updated"
LISTING = "listing"
EMPTY = "empty"
FOUND = "found"
STATISTICS = "statistics"
EXPORTED = "exported"
IMPORTED = "imported"
FAILED = "failed"

# Statuses that describe something the user asked for but did not get
UNSUCCESSFUL = frozenset({DUPLICATE, NOT_FOUND, EMPTY, FAILED})


@dataclass
class Statistics:
    """Collection statistics."""
    total: int
    read: int
    unread: int
    read_percentage: float
    top_authors: list[tuple[str, int]] = field(default_factory=list)

    @property
    def percentage_text(self) -> str:
        """Read percentage with one decimal place, e.g. "30.0"."""
        return f"{self.read_percentage:.1f}"


@dataclass
class ImportSummary:
    """Outcome of a CSV import."""
    imported: int = 0
    skipped: int = 0


@dataclass
class Report:
    """
    Outcome of a store operation.

    Attributes:
        status: One of the status constants in this module
        heading: Short title, e.g. "Book Added Successfully"
        lines: Detail lines shown under the heading
        books: Books to show, already in display order
        statistics: Set for statistics reports
        summary: Set for successful import reports
    """
    status: str
    heading: str
    lines: list[str] = field(default_factory=list)
    books: list[Book] = field(default_factory=list)
    statistics: Statistics | None = None
    summary: ImportSummary | None = None

    @property
    def ok(self) -> bool:
        return self.status not in UNSUCCESSFUL

    @property
    def book(self) -> Book | None:
        """The first book of the report, if any."""
        return self.books[0] if self.books else None

    def render(self) -> str:
        out = [self.heading, "=" * len(self.heading)]
        if self.lines:
            out.extend(self.lines)
        for book in self.books:
            out.append(format_book(book))
        return "\n".join(out)


def format_book(book: Book) -> str:
    """Format one book as a display block."""
    return "\n".join([
        "",
        f"Title: {book.title}",
        f"Author: {book.author}",
        f"ISBN: {book.isbn}",
        f"Status: {book.status}",
        "-" * 24,
    ])
