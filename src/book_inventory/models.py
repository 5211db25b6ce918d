"""
Book record and ordering helpers.

A book is identified by its ISBN. The inventory keeps books in insertion
order and only sorts them (by author) when presenting them.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Book:
    """A single catalogued book. Immutable; the store swaps in new records.

    Attributes:
        title: Book title
        author: Author name, conventionally "Last, First"
        isbn: ISBN, used as the unique key (exact, case-sensitive match)
        is_read: Whether the book has been read
    """
    title: str
    author: str
    isbn: str
    is_read: bool = False

    @property
    def status(self) -> str:
        """Return the read status as a word."""
        return "Read" if self.is_read else "Unread"

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted JSON shape."""
        return {
            "title": self.title,
            "author": self.author,
            "isbn": self.isbn,
            "isRead": self.is_read,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Book:
        """Build a Book from its persisted JSON shape.

        Raises:
            KeyError: If a field is missing.
            TypeError: If a field has the wrong type.
        """
        if not isinstance(data, dict):
            raise TypeError(f"Expected an object, got {type(data).__name__}")
        title, author, isbn, is_read = data["title"], data["author"], data["isbn"], data["isRead"]
        for name, value in (("title", title), ("author", author), ("isbn", isbn)):
            if not isinstance(value, str):
                raise TypeError(f"Field '{name}' must be a string")
        if not isinstance(is_read, bool):
            raise TypeError("Field 'isRead' must be a boolean")
        return cls(title=title, author=author, isbn=isbn, is_read=is_read)


def author_key(book: Book) -> str:
    """Sort key: author, case-insensitive."""
    return book.author.lower()


def sort_by_author(books: Iterable[Book]) -> list[Book]:
    """Return books sorted by author, case-insensitive.

    Python's sort is stable, so books with equal keys (e.g. "Lee" and "lee")
    keep their relative order.
    """
    return sorted(books, key=author_key)
