#!/usr/bin/env python3
# PYTHON_ARGCOMPLETE_OK
"""
Command-line interface for Book Inventory
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import argcomplete

from ._version import __version__
from .config import Config
from .reports import Report
from .store import InventoryStore

logger = logging.getLogger(__name__)

MENU = """Book Inventory Management System
==============================

1. Add Book
2. Remove Book
3. Toggle Read Status
4. List Books
5. Export to CSV
6. Import from CSV
7. Search by ISBN
8. Search by Title/Author
9. Show Statistics
10. Exit
"""


def show(report: Report) -> int:
    """Print a report and return the matching exit status."""
    print(report.render())
    return 0 if report.ok else 1


def config_command(config: Config, show_path: bool = False) -> int:
    """Show configuration information."""
    if show_path:
        if config.path:
            print(config.path)
        else:
            print("No configuration file found")
        return 0

    if config.path:
        print(f"# Configuration loaded from: {config.path}")
    else:
        print("# No configuration file found, showing defaults")
    print()
    print(json.dumps(config.data, indent=2))
    return 0


def prompt(text: str, input_func=input) -> str | None:
    """Ask for a value. Returns None on empty input, 'q', or end of input."""
    print(text)
    try:
        value = input_func()
    except EOFError:
        return None
    if not value or value.lower() == "q":
        return None
    return value


def run_menu(store: InventoryStore, config: Config, input_func=input) -> int:
    """Run the interactive menu until the user exits or input ends.

    Args:
        store: Inventory to operate on.
        config: Used for the statistics ranking size.
        input_func: Line reader, replaceable for testing.
    """
    back_hint = "(Press 'q' or Enter to return to main menu)\n"

    def ask(text: str) -> str | None:
        return prompt(text, input_func)

    while True:
        print(MENU)
        print("Enter your choice (1-10): ", end="")
        try:
            choice = input_func().strip()
        except EOFError:
            print()
            return 0

        if choice == "1":
            print("Add New Book\n===========\n")
            print(back_hint)
            title = ask("Enter title: ")
            if title is None:
                continue
            author = ask("Enter author (LAST, FIRST): ")
            if author is None:
                continue
            isbn = ask("Enter ISBN: ")
            if isbn is None:
                continue
            answer = ask("Have you read this book? (y/n): ")
            if answer is None:
                continue
            show(store.add_book(title, author, isbn, answer.lower().startswith("y")))
        elif choice == "2":
            print("Remove Book\n===========\n")
            print(back_hint)
            isbn = ask("Enter ISBN to remove: ")
            if isbn is None:
                continue
            show(store.remove_book(isbn))
        elif choice == "3":
            print("Toggle Read Status\n=================\n")
            print(back_hint)
            isbn = ask("Enter ISBN to toggle: ")
            if isbn is None:
                continue
            show(store.toggle_read_status(isbn))
        elif choice == "4":
            show(store.list_books())
        elif choice == "5":
            print("Export to CSV\n============\n")
            print(back_hint)
            filename = ask("Enter filename for export (e.g., inventory.csv): ")
            if filename is None:
                continue
            show(store.export_csv(filename))
        elif choice == "6":
            print("Import from CSV\n==============\n")
            print(back_hint)
            filename = ask("Enter CSV filename to import: ")
            if filename is None:
                continue
            show(store.import_csv(filename))
        elif choice == "7":
            print("Search by ISBN\n=============\n")
            print(back_hint)
            isbn = ask("Enter ISBN to search: ")
            if isbn is None:
                continue
            show(store.search_by_isbn(isbn))
        elif choice == "8":
            print("Search by Title/Author\n====================\n")
            print(back_hint)
            term = ask("Enter search term: ")
            if term is None:
                continue
            show(store.search_by_title_or_author(term))
        elif choice == "9":
            show(store.statistics(config.top_authors))
        elif choice == "10":
            print("Thank you for using the Book Inventory Management System!")
            print("\nGoodbye!")
            return 0
        else:
            print("Invalid Selection\n================")
        print()


def _non_empty(value: str) -> str:
    """argparse type rejecting empty strings."""
    if not value:
        raise argparse.ArgumentTypeError("value must not be empty")
    return value


def _positive_int(value: str) -> int:
    """argparse type accepting integers of at least 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: '{value}'") from None
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser_cli = argparse.ArgumentParser(
        prog="book-inventory",
        description="Book Inventory - Manage a personal book catalog",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Add a book you have read
  book-inventory add "Dune" "Herbert, Frank" 9780441013593 --read

  # List books sorted by author
  book-inventory list

  # Export to CSV and import it elsewhere
  book-inventory export books.csv
  book-inventory --file other.json import books.csv

  # Interactive menu
  book-inventory menu
        """
    )
    parser_cli.add_argument(
        '--version', '-V',
        action='version',
        version=f'%(prog)s {__version__}'
    )
    parser_cli.add_argument('--file', '-f', type=Path, default=None,
                            help='Inventory JSON file (default: from config or ./bookInventory.json)')
    parser_cli.add_argument('--config', '-c', type=Path, default=None, help='Explicit config file')
    parser_cli.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')

    subparsers = parser_cli.add_subparsers(dest='command', help='Command to run')

    config_parser = subparsers.add_parser('config', help='Show configuration')
    config_parser.add_argument('--show', action='store_true', help='Show merged configuration')
    config_parser.add_argument('--path', action='store_true', help='Show config file path')

    add_parser = subparsers.add_parser('add', help='Add a book')
    add_parser.add_argument('title', type=_non_empty, help='Book title')
    add_parser.add_argument('author', type=_non_empty, help='Author (LAST, FIRST)')
    add_parser.add_argument('isbn', type=_non_empty, help='ISBN')
    add_parser.add_argument('--read', '-r', action='store_true', help='Mark the book as read')

    remove_parser = subparsers.add_parser('remove', help='Remove a book by ISBN')
    remove_parser.add_argument('isbn', type=_non_empty, help='ISBN')

    toggle_parser = subparsers.add_parser('toggle', help='Toggle read status of a book')
    toggle_parser.add_argument('isbn', type=_non_empty, help='ISBN')

    subparsers.add_parser('list', help='List books sorted by author')

    stats_parser = subparsers.add_parser('stats', help='Show collection statistics')
    stats_parser.add_argument('--top', '-n', type=_positive_int, default=None,
                              help='Number of top authors to show (default: from config or 5)')

    isbn_parser = subparsers.add_parser('search-isbn', help='Find a book by ISBN (case-insensitive)')
    isbn_parser.add_argument('isbn', type=_non_empty, help='ISBN')

    search_parser = subparsers.add_parser('search', help='Search titles and authors')
    search_parser.add_argument('term', type=_non_empty, help='Search term')

    export_parser = subparsers.add_parser('export', help='Export inventory to CSV')
    export_parser.add_argument('output', type=Path, nargs='?',
                               help='CSV file to write (default: from config or inventory.csv)')

    import_parser = subparsers.add_parser('import', help='Import books from CSV')
    import_parser.add_argument('input', type=Path, help='CSV file to read')

    subparsers.add_parser('menu', help='Interactive menu')

    # Enable shell tab completion
    argcomplete.autocomplete(parser_cli)

    return parser_cli


def setup_logging(level: str, verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser_cli = build_parser()
    args = parser_cli.parse_args(argv)

    config = Config(args.config)
    setup_logging(config.log_level, args.verbose)

    if args.command is None:
        parser_cli.print_help()
        return 1
    if args.command == 'config':
        return config_command(config, show_path=args.path)

    inventory_file = args.file if args.file is not None else config.inventory_file
    store = InventoryStore(inventory_file)
    logger.debug("Using inventory file %s", store.path)

    if args.command == 'add':
        return show(store.add_book(args.title, args.author, args.isbn, args.read))
    elif args.command == 'remove':
        return show(store.remove_book(args.isbn))
    elif args.command == 'toggle':
        return show(store.toggle_read_status(args.isbn))
    elif args.command == 'list':
        return show(store.list_books())
    elif args.command == 'stats':
        top = args.top if args.top is not None else config.top_authors
        return show(store.statistics(top))
    elif args.command == 'search-isbn':
        return show(store.search_by_isbn(args.isbn))
    elif args.command == 'search':
        return show(store.search_by_title_or_author(args.term))
    elif args.command == 'export':
        return show(store.export_csv(args.output or config.export_file))
    elif args.command == 'import':
        return show(store.import_csv(args.input))
    elif args.command == 'menu':
        return run_menu(store, config)
    else:
        parser_cli.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
