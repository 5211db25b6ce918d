"""
CSV encoding and decoding for book inventories.

Export format:

    Title,Author,ISBN,Read Status
    "Dune","Herbert, Frank",9780441013593,Unread

Title and author are always quoted, with embedded quotes doubled. ISBN and
the status word are written as-is.

Import uses a small quote-aware scanner rather than the csv module: a quote
character toggles "inside quotes" and is dropped, so commas inside quoted
fields are kept but embedded quotes do not survive a round trip
(a title exported as 'He said ""hi""' imports as 'He said hi'). Files written by earlier
exports depend on this behaviour.
"""
from __future__ import annotations

from collections.abc import Iterable, Iterator

from .models import Book

HEADER = "Title,Author,ISBN,Read Status"
QUOTE = '"'
SEPARATOR = ","
MIN_FIELDS = 4


def quote_field(value: str) -> str:
    """Wrap a value in quotes, doubling embedded quotes."""
    return QUOTE + value.replace(QUOTE, QUOTE * 2) + QUOTE


def encode_row(book: Book) -> str:
    return SEPARATOR.join([
        quote_field(book.title),
        quote_field(book.author),
        book.isbn,
        book.status,
    ])


def encode_books(books: Iterable[Book]) -> str:
    """Encode books as CSV text, header included, in the order given."""
    rows = [HEADER]
    rows.extend(encode_row(book) for book in books)
    return "\n".join(rows) + "\n"


def split_row(line: str) -> list[str]:
    """Split a CSV line into fields.

    Quotes toggle quoted mode and are not kept. A comma separates fields
    only outside quotes. Leading and trailing quotes are stripped from each
    field afterwards.

    Args:
        line: One line of CSV text, without the line terminator.

    Returns:
        List of field values (always at least one).
    """
    fields: list[str] = []
    current: list[str] = []
    inside_quotes = False

    for char in line:
        if char == QUOTE:
            inside_quotes = not inside_quotes
        elif char == SEPARATOR and not inside_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
    fields.append("".join(current))

    return [f.strip(QUOTE) for f in fields]


def parse_row(line: str) -> Book | None:
    """Parse a CSV data line into a Book.

    Returns:
        The Book, or None if the row has fewer than four fields or an empty
        title, author or ISBN.
    """
    fields = split_row(line)
    if len(fields) < MIN_FIELDS:
        return None
    title, author, isbn, status = fields[0], fields[1], fields[2], fields[3]
    if not title or not author or not isbn:
        return None
    return Book(title=title, author=author, isbn=isbn, is_read=status.lower() == "read")


def data_lines(content: str) -> Iterator[str]:
    """Yield the data lines of CSV text: header dropped, empty lines skipped."""
    lines = content.splitlines()
    for line in lines[1:]:
        if line:
            yield line
