#!/usr/bin/env python3
"""
Velvet Crumbs Backend Runner
============================

Usage:
    python run_app.py                    # Run the API (development, auto-reload)
    python run_app.py serve --mode prod  # Production mode
    python run_app.py serve --port 8001  # Custom port
    python run_app.py init-db            # Create tables
    python run_app.py seed               # Admin account + starter catalog
    python run_app.py seed --admin-only  # Admin account only
"""

import argparse
import asyncio
import logging
import os
import sys

def print_banner():
    """Print application banner"""
    banner = """
╔═══════════════════════════════════════════════════════╗
║                    Velvet Crumbs                      ║
║                 Bakery Storefront API                 ║
╚═══════════════════════════════════════════════════════╝
    """
    print(banner)

def check_environment():
    """Report on the local environment before starting"""
    print("\n🔍 Checking environment...")

    if os.path.exists(".env"):
        print("✅ .env file found")
    else:
        print("⚠️  .env file not found, using defaults")

    from app.core.config import settings
    print(f"✅ Database: {settings.DATABASE_URL}")
    print(f"✅ Email backend: {settings.EMAIL_BACKEND}")
    if settings.SECRET_KEY == "change-me-in-production" and settings.is_production:
        print("❌ SECRET_KEY must be set in production")
        return False
    return True

def run_server(host="0.0.0.0", port=8000, reload=True, workers=1):
    """Run the FastAPI application"""
    print(f"\n🚀 Starting API on {host}:{port}")
    print(f"📖 API Docs: http://localhost:{port}/docs")
    print("\n" + "=" * 50)

    import uvicorn
    try:
        uvicorn.run(
            "app.main:app",
            host=host,
            port=port,
            reload=reload,
            workers=1 if reload else workers,
            log_level="info"
        )
    except KeyboardInterrupt:
        print("\n👋 Server stopped by user")

def run_init_db():
    from app.core.database import init_db

    asyncio.run(init_db())
    print("✅ Database tables created")

def run_seed(admin_only=False):
    from app.core.config import settings
    from app.utils.seed import seed_database

    asyncio.run(seed_database(with_catalog=not admin_only))
    print(f"✅ Seed complete (admin: {settings.ADMIN_EMAIL})")

def main():
    parser = argparse.ArgumentParser(
        description="Velvet Crumbs Backend Runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser("serve", help="Run the API server (default)")
    serve.add_argument(
        "--mode",
        choices=["dev", "prod"],
        default="dev",
        help="Server mode (default: dev)"
    )
    serve.add_argument("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
    serve.add_argument("--port", type=int, default=8000, help="Port to bind to (default: 8000)")
    serve.add_argument("--workers", type=int, default=1, help="Worker processes in prod mode")
    serve.add_argument("--no-reload", action="store_true", help="Disable auto-reload")

    subparsers.add_parser("init-db", help="Create database tables")

    seed = subparsers.add_parser("seed", help="Create the admin account and starter catalog")
    seed.add_argument("--admin-only", action="store_true", help="Skip the starter catalog")

    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(levelname)s [%(name)s] %(message)s")

    print_banner()

    if args.command == "init-db":
        run_init_db()
        return 0

    if args.command == "seed":
        run_seed(admin_only=args.admin_only)
        return 0

    if not check_environment():
        return 1

    if args.command is None:
        run_server()
        return 0

    reload = not args.no_reload and args.mode != "prod"
    run_server(args.host, args.port, reload, args.workers)
    return 0

if __name__ == "__main__":
    try:
        exit_code = main()
        sys.exit(exit_code)
    except KeyboardInterrupt:
        print("\n👋 Goodbye!")
        sys.exit(0)
    except Exception as e:
        print(f"\n❌ Unexpected error: {e}")
        sys.exit(1)
