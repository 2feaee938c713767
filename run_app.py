#!/usr/bin/env python3
"""
Wishlist Backend Runner
=======================

Usage:
    python run_app.py                    # Development mode with auto-reload
    python run_app.py --mode prod        # Production mode, no reload
    python run_app.py --port 5001        # Custom port
    python run_app.py --host 127.0.0.1   # Custom host
    python run_app.py --init-db          # Create tables and exit
"""

import argparse
import asyncio
import sys

def init_db():
    """Create every table for the configured database"""
    from wishlist_app.core.config import get_settings
    from wishlist_app.core.database import Database

    async def _create():
        database = Database(get_settings())
        try:
            await database.create_all()
        finally:
            await database.close()

    asyncio.run(_create())
    print("Database tables created")

def run_server(host: str, port: int, reload: bool, log_level: str):
    import uvicorn

    print(f"Starting Wishlist API on {host}:{port}")
    print(f"API Docs: http://localhost:{port}/api/docs")

    uvicorn.run(
        "wishlist_app.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=log_level
    )

def main():
    from wishlist_app.core.config import get_settings

    settings = get_settings()

    parser = argparse.ArgumentParser(description="Wishlist Backend Runner")
    parser.add_argument(
        "--mode",
        choices=["dev", "prod"],
        default="dev",
        help="Server mode (default: dev)"
    )
    parser.add_argument(
        "--host",
        default=settings.HOST,
        help=f"Host to bind to (default: {settings.HOST})"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.PORT,
        help=f"Port to bind to (default: {settings.PORT})"
    )
    parser.add_argument(
        "--init-db",
        action="store_true",
        help="Create database tables and exit"
    )

    args = parser.parse_args()

    if args.init_db:
        init_db()
        return 0

    run_server(
        args.host,
        args.port,
        reload=args.mode == "dev",
        log_level=settings.LOG_LEVEL.lower()
    )
    return 0

if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nServer stopped by user")
        sys.exit(0)
