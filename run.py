#!/usr/bin/env python3
"""Run the Challenge Management API.

Usage:
    python run.py [--host HOST] [--port PORT] [--reload] [--workers N]

Examples:
    python run.py                      # Run with defaults (localhost:8000)
    python run.py --port 8080          # Run on port 8080
    python run.py --reload             # Run with auto-reload for development
    python run.py --seed               # Seed the phase catalog tables
"""

import argparse
import asyncio

import uvicorn


async def seed() -> int:
    """Insert the built-in phase catalog into the configured database."""
    from challenge_api.infrastructure.database.session import close_db, get_db_session
    from challenge_api.phases.repository import seed_catalog

    try:
        async with get_db_session() as session:
            added = await seed_catalog(session)
            await session.commit()
    finally:
        await close_db()
    return added


def main():
    parser = argparse.ArgumentParser(
        description="Run the Challenge Management API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind to (default: 8000)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload on code changes (development mode)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of worker processes (default: 1)",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error", "critical"],
        default="info",
        help="Logging level (default: info)",
    )
    parser.add_argument(
        "--seed",
        action="store_true",
        help="Seed the phase catalog tables and exit",
    )

    args = parser.parse_args()

    if args.seed:
        print(f"Seeded {asyncio.run(seed())} phase catalog rows")
        return

    print(f"Challenge Management API at http://{args.host}:{args.port} (docs: /docs)")

    uvicorn.run(
        "challenge_api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        workers=args.workers if not args.reload else 1,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
