#!/usr/bin/env python3
"""
Application startup script with environment configuration support.
"""

import os
import sys
import argparse


def seed_database() -> None:
    """Create tables and load the static corpus and synonym groups."""
    from quoteday.core.db import init_db, db_session
    from quoteday.services.seed import seed_all

    init_db()
    counts = seed_all(db_session)
    print(f"✓ Seeded {counts['quotes']} quotes and {counts['synonym_groups']} synonym groups")


def main():
    """Main startup function with environment configuration"""
    parser = argparse.ArgumentParser(description="Quote of the Day Backend Server")
    parser.add_argument(
        "--env",
        choices=["development", "staging", "production", "testing"],
        default=None,
        help="Environment to run (default: from ENVIRONMENT env var or development)"
    )
    parser.add_argument("--host", default=None, help="Host to bind to (overrides config)")
    parser.add_argument("--port", type=int, default=None, help="Port to bind to (overrides config)")
    parser.add_argument("--workers", type=int, default=None, help="Number of worker processes (overrides config)")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload (overrides config)")
    parser.add_argument("--debug", action="store_true", help="Enable debug mode (overrides config)")
    parser.add_argument(
        "--list-envs",
        action="store_true",
        help="List available environment configurations"
    )
    parser.add_argument(
        "--sample-env",
        metavar="ENV",
        default=None,
        help="Write a sample .env file for the given environment and exit"
    )
    parser.add_argument(
        "--seed",
        action="store_true",
        help="Seed the database with the static corpus and exit"
    )

    args = parser.parse_args()

    if args.env:
        # Settings are built on first import and pick their files from ENVIRONMENT
        os.environ["ENVIRONMENT"] = args.env

    from quoteday.config.loader import ConfigLoader, load_config_for_environment

    if args.list_envs:
        envs = ConfigLoader.get_available_environments()
        print("Available environment configurations:")
        for env in envs:
            print(f"  - {env}")
        return

    if args.sample_env:
        path = ConfigLoader.create_sample_env_file(args.sample_env)
        print(f"✓ Wrote {path}")
        return

    try:
        settings = load_config_for_environment(args.env)
        print(f"✓ Loaded configuration for environment: {settings.environment.value}")
    except Exception as e:
        print(f"✗ Failed to load configuration: {e}")
        sys.exit(1)

    if args.seed:
        seed_database()
        return

    # Apply command line overrides
    if args.host:
        settings.host = args.host
    if args.port:
        settings.port = args.port
    if args.workers:
        settings.workers = args.workers
    if args.reload:
        settings.reload = True
    if args.debug:
        settings.debug = True

    print(f"🚀 Starting {settings.app_name} v{settings.app_version}")
    print(f"   Environment: {settings.environment.value}")
    print(f"   Host: {settings.host}")
    print(f"   Port: {settings.port}")
    print(f"   Workers: {settings.workers}")
    print(f"   Log Level: {settings.log_level.value}")

    import uvicorn

    uvicorn.run(
        "quoteday.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        workers=settings.workers if not settings.reload else 1,
        log_level=settings.log_level.value.lower(),
        access_log=True,
    )


if __name__ == "__main__":
    main()
