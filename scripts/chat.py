#!/usr/bin/env python3
"""
Console chat — talk to the pipeline as a cleaner would over WhatsApp.

Usage (from project root):
    python scripts/chat.py +420777123456                    # interactive
    python scripts/chat.py +420777123456 "Začínám úklid 302"  # one message
    python scripts/chat.py seed "Nikolajka 302"             # add a property

Environment variables:
    TENANT_ID           - tenant to act as (required)
    DB_PATH             - SQLite database path (default: data/cleanstay.db)
    LLM_PROVIDER        - anthropic | openai | simulator | none
    CLASSIFIER_TIMEOUT  - seconds to wait for the model (default: 10)
"""

import asyncio
import logging
import os
import sys
import uuid

# Allow running as `python scripts/chat.py` from project root.
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from cleanstay.adapters.factory import create_language_model
from cleanstay.adapters.sqlite_catalog import SqlitePropertyCatalog
from cleanstay.adapters.sqlite_events import SqliteEventLog
from cleanstay.adapters.sqlite_sessions import SqliteSessionStore
from cleanstay.classifier import DEFAULT_TIMEOUT, MessageClassifier
from cleanstay.controller import SessionController
from cleanstay.domain.catalog import Property
from cleanstay.pipeline import Pipeline

logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s  %(levelname)-7s  %(message)s",
    datefmt="%H:%M:%S",
)


def _require_env(name: str) -> str:
    value = os.environ.get(name)
    if not value:
        print(f"ERROR: environment variable {name!r} is not set.", file=sys.stderr)
        sys.exit(1)
    return value


def _db_path() -> str:
    db_path = os.environ.get("DB_PATH", "data/cleanstay.db")
    if os.path.dirname(db_path):
        os.makedirs(os.path.dirname(db_path), exist_ok=True)
    return db_path


def build_pipeline(db_path: str) -> Pipeline:
    classifier = MessageClassifier(
        create_language_model(),
        timeout=float(os.environ.get("CLASSIFIER_TIMEOUT", str(DEFAULT_TIMEOUT))),
    )
    controller = SessionController(
        catalog=SqlitePropertyCatalog(db_path),
        sessions=SqliteSessionStore(db_path),
        events=SqliteEventLog(db_path),
    )
    return Pipeline(classifier, controller)


async def send(pipeline: Pipeline, tenant_id: str, worker_id: str, text: str) -> None:
    result = await pipeline.process_message(tenant_id, worker_id, text)
    print(f"  [{result.action}] {result.reply}")


async def interactive(pipeline: Pipeline, tenant_id: str, worker_id: str) -> None:
    print(f"Chatting as {worker_id} (tenant {tenant_id}). Empty line to quit.")
    while True:
        try:
            text = input("> ").strip()
        except EOFError:
            break
        if not text:
            break
        await send(pipeline, tenant_id, worker_id, text)


async def main() -> None:
    if len(sys.argv) < 2:
        print(__doc__)
        return

    tenant_id = _require_env("TENANT_ID")
    db_path = _db_path()

    if sys.argv[1] == "seed" and len(sys.argv) >= 3:
        name = " ".join(sys.argv[2:])
        SqlitePropertyCatalog(db_path).add(
            Property(property_id=str(uuid.uuid4()), tenant_id=tenant_id, name=name)
        )
        print(f"Property {name!r} added to tenant {tenant_id}.")
        return

    pipeline = build_pipeline(db_path)
    worker_id = sys.argv[1]
    if len(sys.argv) >= 3:
        await send(pipeline, tenant_id, worker_id, " ".join(sys.argv[2:]))
    else:
        await interactive(pipeline, tenant_id, worker_id)


if __name__ == "__main__":
    asyncio.run(main())
