"""
Inventory store: the book collection and its persistence.

The store owns the list of books, keeps ISBNs unique, and rewrites the JSON
persistence file after every change. Persistence is best effort: load and
save failures are logged and reported through ``load_ok`` and
``last_save_ok`` but never raised, so the in-memory inventory stays usable.
"""
from __future__ import annotations

import dataclasses
import errno
import json
import logging
import os
from collections import Counter
from pathlib import Path

from . import csv_codec, reports
from .models import Book, sort_by_author
from .reports import ImportSummary, Report, Statistics

logger = logging.getLogger(__name__)

DEFAULT_INVENTORY_FILE = "bookInventory.json"
DEFAULT_TOP_AUTHORS = 5


def default_inventory_path() -> Path:
    """Persistence file in the current working directory."""
    return Path.cwd() / DEFAULT_INVENTORY_FILE


def load_books(path: Path) -> list[Book]:
    """Load books from a JSON persistence file.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the content is not valid JSON (json.JSONDecodeError)
            or not a list.
        KeyError, TypeError: If a record is incomplete or mistyped.
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array in {path}")
    return [Book.from_dict(entry) for entry in data]


def save_books(books: list[Book], path: Path) -> None:
    """Save books to a JSON persistence file, replacing it."""
    _write_text(path, json.dumps([b.to_dict() for b in books], ensure_ascii=False, indent=2))


def _write_text(path: Path, text: str) -> None:
    """Write UTF-8 text to a temporary sibling file, then replace the target.

    The temporary file is removed if either step fails.

    Raises:
        OSError: If the path names no file or cannot be written.
    """
    path = Path(path)
    if not path.name:
        raise IsADirectoryError(errno.EISDIR, "Not a file path", str(path))
    tmp = path.with_name(f".{path.name}.tmp")
    try:
        tmp.write_text(text, encoding="utf-8")
        os.replace(tmp, path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


class InventoryStore:
    """Book inventory with JSON persistence.

    Books are kept in insertion order; listings and searches present them
    sorted by author. An index maps each ISBN to its first record.
    """

    def __init__(self, path: Path | str | None = None):
        """Create the store and load any existing inventory.

        Args:
            path: Persistence file. Defaults to ``bookInventory.json`` in the
                  current working directory.
        """
        self._path = Path(path) if path is not None else default_inventory_path()
        self._books: list[Book] = []
        self._index: dict[str, Book] = {}
        self.load_ok = False
        self.last_save_ok: bool | None = None
        self.load()

    @property
    def path(self) -> Path:
        """Return the persistence file path."""
        return self._path

    @property
    def books(self) -> list[Book]:
        """Return a copy of the books in insertion order."""
        return list(self._books)

    def __len__(self) -> int:
        return len(self._books)

    def __contains__(self, isbn: object) -> bool:
        return isbn in self._index

    def get(self, isbn: str) -> Book | None:
        """Return the book with exactly this ISBN, or None."""
        return self._index.get(isbn)

    def _reindex(self) -> None:
        self._index = {}
        for book in self._books:
            self._index.setdefault(book.isbn, book)

    # Persistence

    def load(self) -> bool:
        """Load the inventory from the persistence file.

        Any failure leaves an empty inventory.

        Returns:
            True if the file was read and decoded.
        """
        try:
            books = load_books(self._path)
        except FileNotFoundError:
            logger.debug("No inventory file at %s, starting empty", self._path)
            books, self.load_ok = [], False
        except (OSError, ValueError, KeyError, TypeError, RecursionError) as e:
            logger.warning("Could not load inventory from %s: %s", self._path, e)
            books, self.load_ok = [], False
        else:
            logger.debug("Loaded %d books from %s", len(books), self._path)
            self.load_ok = True
        self._books = books
        self._reindex()
        return self.load_ok

    def save(self) -> bool:
        """Write the whole inventory to the persistence file.

        Returns:
            True on success. Failures are logged, not raised.
        """
        try:
            save_books(self._books, self._path)
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Could not save inventory to %s: %s", self._path, e)
            self.last_save_ok = False
        else:
            logger.debug("Saved %d books to %s", len(self._books), self._path)
            self.last_save_ok = True
        return self.last_save_ok

    # Mutations

    def add_book(self, title: str, author: str, isbn: str, is_read: bool = False) -> Report:
        """Add a book unless its ISBN is already present."""
        if isbn in self._index:
            return Report(
                reports.DUPLICATE,
                "Error",
                [f"Book with ISBN {isbn} already exists"],
            )

        book = Book(title=title, author=author, isbn=isbn, is_read=is_read)
        self._books.append(book)
        self._index[isbn] = book
        self.save()
        logger.debug("Added %s", isbn)
        return Report(reports.ADDED, "Book Added Successfully", books=[book])

    def remove_book(self, isbn: str) -> Report:
        """Remove every book with this ISBN."""
        before = len(self._books)
        self._books = [b for b in self._books if b.isbn != isbn]
        if len(self._books) == before:
            return Report(reports.NOT_FOUND, f"No Book Found with ISBN: {isbn}")

        self._reindex()
        self.save()
        logger.debug("Removed %s", isbn)
        return Report(reports.REMOVED, "Book Removed Successfully")

    def toggle_read_status(self, isbn: str) -> Report:
        """Flip the read flag of the book with this ISBN."""
        book = self._index.get(isbn)
        if book is None:
            return Report(reports.NOT_FOUND, f"No Book Found with ISBN: {isbn}")

        updated = dataclasses.replace(book, is_read=not book.is_read)
        position = next(i for i, b in enumerate(self._books) if b is book)
        self._books[position] = updated
        self._index[isbn] = updated
        self.save()
        return Report(reports.UPDATED, "Read Status Updated", books=[updated])

    # Queries

    def list_books(self) -> Report:
        """List all books sorted by author."""
        if not self._books:
            return Report(reports.EMPTY, "No Books in Inventory")
        return Report(reports.LISTING, "Current Inventory", [""], books=sort_by_author(self._books))

    def statistics(self, top: int = DEFAULT_TOP_AUTHORS) -> Report:
        """Compute read counts and the most frequent authors.

        Args:
            top: Number of authors to include in the ranking.
        """
        total = len(self._books)
        read = sum(1 for b in self._books if b.is_read)
        percentage = read / total * 100 if total else 0.0
        # most_common() keeps first-seen order among equal counts
        top_authors = Counter(b.author for b in self._books).most_common(top)
        stats = Statistics(
            total=total,
            read=read,
            unread=total - read,
            read_percentage=percentage,
            top_authors=top_authors,
        )

        lines = [
            "",
            f"Total Books: {stats.total}",
            f"Read Books: {stats.read} ({stats.percentage_text}%)",
            f"Unread Books: {stats.unread}",
            "",
            f"Top {top} Authors",
            "============",
        ]
        if top_authors:
            for position, (author, count) in enumerate(top_authors, 1):
                lines.append(f"{position}. {author} ({count} books)")
        else:
            lines.append("No authors in collection")
        lines.extend(["", "Save File Location", "==================", str(self._path)])

        return Report(reports.STATISTICS, "Collection Statistics", lines, statistics=stats)

    def search_by_isbn(self, isbn: str) -> Report:
        """Find a book by ISBN, ignoring case. No partial matches."""
        wanted = isbn.lower()
        for book in self._books:
            if book.isbn.lower() == wanted:
                return Report(reports.FOUND, "Book Found", books=[book])
        return Report(reports.NOT_FOUND, "No Book Found", [f"ISBN: {isbn}"])

    def search_by_title_or_author(self, term: str) -> Report:
        """Find books whose title or author contains the term, ignoring case."""
        needle = term.lower()
        matches = sort_by_author(
            b for b in self._books
            if needle in b.title.lower() or needle in b.author.lower()
        )
        if not matches:
            return Report(reports.NOT_FOUND, "No Books Found", [f"Search term: {needle}"])
        return Report(
            reports.FOUND,
            "Search Results",
            [f"Found {len(matches)} matching books:", ""],
            books=matches,
        )

    # CSV

    def export_csv(self, path: Path | str) -> Report:
        """Export the inventory, sorted by author, to a CSV file."""
        path = Path(path)
        try:
            _write_text(path, csv_codec.encode_books(sort_by_author(self._books)))
        except OSError as e:
            logger.warning("Export to %s failed: %s", path, e)
            return Report(reports.FAILED, "Export Failed", [f"Error: {e}"])
        logger.info("Exported %d books to %s", len(self._books), path)
        return Report(reports.EXPORTED, "Export Successful", [f"File: {path}"])

    def import_csv(self, path: Path | str) -> Report:
        """Import books from a CSV file.

        Rows that are malformed or whose ISBN is already present are
        skipped and counted.
        """
        path = Path(path)
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Import from %s failed: %s", path, e)
            return Report(reports.FAILED, "Import Failed", [f"Error: {e}"])

        summary = ImportSummary()
        for line in csv_codec.data_lines(content):
            book = csv_codec.parse_row(line)
            if book is None:
                logger.debug("Skipping malformed row: %r", line)
                summary.skipped += 1
                continue
            if self.add_book(book.title, book.author, book.isbn, book.is_read).ok:
                summary.imported += 1
            else:
                summary.skipped += 1

        logger.info("Imported %d books from %s (%d skipped)", summary.imported, path, summary.skipped)
        return Report(
            reports.IMPORTED,
            "Import Summary",
            [
                "",
                f"Successfully imported: {summary.imported} books",
                f"Skipped: {summary.skipped} books",
                "(Invalid format or duplicate ISBN)",
            ],
            summary=summary,
        )
