#!/usr/bin/env python3
"""
FinModel command line

Usage:
    finmodel create-tables        # create tables on the configured engine
    finmodel seed                 # create tables, then load demo data
    finmodel serve --port 3000    # run the API with uvicorn
    finmodel score metrics.json   # print the health score of a JSON metric list
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from finmodel.core.config import settings
from finmodel.db.adapter import create_adapter
from finmodel.db.schema import init_schema
from finmodel.db.seed import seed
from finmodel.health_scoring import coerce_metrics, compute_health_score

logger = logging.getLogger("finmodel.cli")


async def _create_tables() -> None:
    db = create_adapter(settings)
    try:
        await init_schema(db)
    finally:
        db.close()


async def _seed() -> None:
    db = create_adapter(settings)
    try:
        await init_schema(db)
        await seed(db)
    finally:
        db.close()


def _score(path: Path) -> dict:
    with open(path) as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON array of monthly metrics")
    return compute_health_score(coerce_metrics(data)).model_dump()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="finmodel", description="FinModel backend tools")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("create-tables", help="Create database tables")
    subparsers.add_parser("seed", help="Create tables and load demo data")

    serve = subparsers.add_parser("serve", help="Run the API server")
    serve.add_argument("--host", default=settings.SERVER_HOST)
    serve.add_argument("--port", type=int, default=settings.PORT)
    serve.add_argument("--reload", action="store_true", help="Reload on code changes")

    score = subparsers.add_parser("score", help="Compute the health score of a JSON metrics file")
    score.add_argument("file", type=Path)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    args = build_parser().parse_args(argv)

    try:
        if args.command == "create-tables":
            asyncio.run(_create_tables())
            print("Tables created successfully.")
        elif args.command == "seed":
            asyncio.run(_seed())
            print("Database seeded successfully.")
        elif args.command == "serve":
            import uvicorn

            uvicorn.run("finmodel.main:app", host=args.host, port=args.port, reload=args.reload)
        elif args.command == "score":
            print(json.dumps(_score(args.file), indent=2))
    except Exception as e:
        logger.error(f"❌ {args.command} failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
