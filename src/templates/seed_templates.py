from __future__ import annotations

import argparse
import asyncio

from src.templates.sqlite_template_store import SQLiteTemplateStore
from src.utils.logging import setup_logging
from src.workflow.workflow import TemplateWorkflow


def seed(db: str, force: bool = False) -> int:
    workflow = TemplateWorkflow(SQLiteTemplateStore(db), setup_logging())
    return asyncio.run(workflow.ensure_seeded(force=force))


def main(argv=None):
    parser = argparse.ArgumentParser()
    parser.add_argument("--db", required=True, help="Path to sqlite db file, e.g. data/template_talk.db")
    parser.add_argument("--force", action="store_true", help="Upsert the defaults even if the library is not empty")
    args = parser.parse_args(argv)

    n = seed(args.db, force=args.force)
    print(f"Seeded {n} templates into {args.db}")


if __name__ == "__main__":
    main()
