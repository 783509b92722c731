"""Application entry point for the QuizRooms server."""

from __future__ import annotations

import argparse
from pathlib import Path

from quiz_rooms.config import Settings, load_settings
from quiz_rooms.core.document_store import (
    ROOMS_COLLECTION,
    DocumentStore,
    InMemoryDocumentStore,
    JsonFileDocumentStore,
)
from quiz_rooms.core.room_exporter import collect_rooms, save_rooms_to_file
from quiz_rooms.core.room_importer import load_rooms_from_file, seed_store
from quiz_rooms.server.api_server import create_api_app, run_api_server
from quiz_rooms.utils.logging_config import configure_logging


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve the quiz room page.")
    parser.add_argument("--host", help="Interface to bind (default from QUIZ_ROOMS_HOST).")
    parser.add_argument("--port", type=int, help="Port to bind (default from QUIZ_ROOMS_PORT).")
    parser.add_argument("--data-file", type=Path, help="JSON file backing the document store.")
    parser.add_argument("--seed-file", type=Path, help="Room definitions loaded into an empty store.")
    parser.add_argument("--log-level", help="Logging level, e.g. INFO or DEBUG.")
    parser.add_argument("--export-file", type=Path, help="Write the stored rooms to this file and exit.")
    return parser.parse_args(argv)


def build_store(settings: Settings) -> DocumentStore:
    """Open the configured store and seed it when it has no rooms yet."""
    if settings.data_file is not None:
        store: DocumentStore = JsonFileDocumentStore(settings.data_file)
    else:
        store = InMemoryDocumentStore()
    if settings.seed_file is not None and not store.get_documents(ROOMS_COLLECTION):
        seed_store(store, load_rooms_from_file(settings.seed_file))
    return store


def main(argv: list[str] | None = None) -> None:
    """Load settings, initialize logging and the store, then serve the API."""
    args = _parse_args(argv)
    settings = load_settings(
        host=args.host,
        port=args.port,
        data_file=args.data_file,
        seed_file=args.seed_file,
        log_level=args.log_level,
    )
    logger = configure_logging(settings.log_level)
    logger.info("Starting QuizRooms server…")

    store = build_store(settings)
    if args.export_file is not None:
        rooms = collect_rooms(store)
        save_rooms_to_file(args.export_file, rooms)
        logger.info("Exported %d room(s) to %s", len(rooms), args.export_file)
        return

    app = create_api_app(store, settings)
    logger.info("Room page available at http://%s:%d/", settings.host, settings.port)
    run_api_server(app, settings)


if __name__ == "__main__":
    main()
