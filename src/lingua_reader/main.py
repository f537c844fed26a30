"""Main entry point: wires the application and exposes a small CLI."""

import argparse
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from lingua_reader.coordinators import LibraryCoordinator, ReadingCoordinator
from lingua_reader.core import (
    ConfigurationError,
    FolderDeletePolicy,
    StorageFullError,
    StorageQuotaExceededError,
)
from lingua_reader.io import LibraryRepository, SqliteStorage
from lingua_reader.services import (
    GeminiTranslationService,
    InMemoryTranslationCache,
    SettingsManager,
    TranslationRequest,
    difficulty_label,
)

logger = logging.getLogger(__name__)

DATA_DIR_ENV_VAR = "LINGUA_READER_HOME"
DATABASE_FILE_NAME = "library.db"


@dataclass
class Application:
    """Every long-lived component, wired once by build_app."""

    storage: SqliteStorage
    repository: LibraryRepository
    settings_manager: SettingsManager
    translation_service: GeminiTranslationService
    library: LibraryCoordinator
    reading: ReadingCoordinator

    def close(self) -> None:
        self.storage.close()


def default_data_dir() -> Path:
    configured = os.getenv(DATA_DIR_ENV_VAR)
    return Path(configured) if configured else Path.home() / ".lingua_reader"


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_app(data_dir: Optional[Path] = None, max_bytes: Optional[int] = None) -> Application:
    """
    Bootstrap the application following the Composition Root pattern.
    This is the only place that knows how to instantiate and wire all components.
    """
    data_dir = Path(data_dir) if data_dir is not None else default_data_dir()
    data_dir.mkdir(parents=True, exist_ok=True)
    logger.debug("Using library data directory %s", data_dir)

    # 1. Infrastructure
    storage = SqliteStorage(data_dir / DATABASE_FILE_NAME, max_bytes=max_bytes)
    storage.ensure_schema()
    repository = LibraryRepository(storage)

    # 2. Services
    settings_manager = SettingsManager(repository)
    translation_service = GeminiTranslationService()

    # 3. Coordinators
    library = LibraryCoordinator(repository)
    reading = ReadingCoordinator(
        library_coordinator=library,
        translation_cache=InMemoryTranslationCache(),
        translation_service=translation_service,
        settings_manager=settings_manager,
    )
    return Application(
        storage=storage,
        repository=repository,
        settings_manager=settings_manager,
        translation_service=translation_service,
        library=library,
        reading=reading,
    )


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="lingua-reader",
        description="Manage a reading library and personal English dictionary.",
    )
    ap.add_argument("--data-dir", type=Path, default=None, help="Directory holding the library database.")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    ap.add_argument(
        "--storage-quota",
        type=int,
        default=None,
        metavar="BYTES",
        help="Reject writes once the library would exceed this many bytes.",
    )
    sub = ap.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="Add .txt files as books.")
    add.add_argument("paths", nargs="+", type=Path)
    add.add_argument("--folder", default=None, help="Folder id to place the books in.")

    ls = sub.add_parser("list", help="List books with their difficulty.")
    ls.add_argument("--folder", default=None)
    ls.add_argument("--search", default="")

    split = sub.add_parser("split", help="Split a book into parts inside a new folder.")
    split.add_argument("book_id")
    split.add_argument("--size", type=int, default=None, help="Target characters per part.")
    split.add_argument("--keep-original", action="store_true")

    rm_folder = sub.add_parser("delete-folder", help="Delete a folder.")
    rm_folder.add_argument("folder_id")
    rm_folder.add_argument(
        "--books",
        choices=[policy.value for policy in FolderDeletePolicy],
        required=True,
        help="orphan moves books to the root, cascade deletes them.",
    )

    imp = sub.add_parser("import-dictionary", help="Import known words from .txt files.")
    imp.add_argument("paths", nargs="+", type=Path)

    known = sub.add_parser("know", help="Mark words as known.")
    known.add_argument("words", nargs="+")

    exp = sub.add_parser("export-dictionary", help="Write the dictionary as text.")
    exp.add_argument("-o", "--output", type=Path, default=None)

    sub.add_parser("stats", help="Show library statistics.")

    tr = sub.add_parser("translate", help="Translate a sentence, or a word within it.")
    tr.add_argument("sentence")
    tr.add_argument("--word", default=None)
    return ap


def run(args: argparse.Namespace, app: Application) -> int:
    library = app.library

    if args.command == "add":
        for book in library.upload_files(args.paths, folder_id=args.folder):
            print(f"{book.id}  {book.title}  ({book.difficulty_percentage}% unknown)")
    elif args.command == "list":
        for book in library.list_books(folder_id=args.folder, query=args.search):
            label = difficulty_label(book.difficulty_percentage)
            print(f"{book.id}  {book.title}  {book.char_count} chars  {label}")
        if args.folder is None and not args.search:
            for folder in library.list_folders():
                print(f"{folder.id}  [{folder.name}]  {library.folder_book_count(folder.id)} books")
    elif args.command == "split":
        size = args.size or app.settings_manager.settings.split_char_count
        result = library.split_book(args.book_id, size, keep_original=args.keep_original)
        print(f"Created folder '{result.folder.name}' with {len(result.parts)} parts")
    elif args.command == "delete-folder":
        library.delete_folder(args.folder_id, FolderDeletePolicy(args.books))
    elif args.command == "import-dictionary":
        added = library.import_dictionary_files(args.paths)
        print(f"Imported {added} new words")
    elif args.command == "know":
        for word in args.words:
            library.set_word_known(word, is_known=True)
    elif args.command == "export-dictionary":
        text = library.export_dictionary()
        if args.output is None:
            print(text)
        else:
            args.output.write_text(text, encoding="utf-8")
    elif args.command == "stats":
        stats = library.library_statistics()
        print(f"Books: {stats.total_books}")
        print(f"Unique words: {stats.total_unique_words}")
        print(f"Known words: {stats.known_dictionary_words} of {stats.dictionary_size}")
        print(f"Average difficulty: {stats.average_difficulty}% ({stats.library_label()})")
    elif args.command == "translate":
        language = app.settings_manager.settings.translation_language
        if args.word:
            request = TranslationRequest.for_word(args.word, args.sentence, language=language)
        else:
            request = TranslationRequest.for_sentence(args.sentence, language=language)
        result = app.translation_service.translate(request, app.settings_manager.get_api_key() or "")
        if result.is_error:
            print(result.error, file=sys.stderr)
            return 1
        print(result.text)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    app = build_app(args.data_dir, max_bytes=args.storage_quota)
    try:
        return run(args, app)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    except (StorageFullError, StorageQuotaExceededError) as e:
        print(f"Storage full: {e}", file=sys.stderr)
        return 3
    except (KeyError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        app.close()


if __name__ == "__main__":
    sys.exit(main())
