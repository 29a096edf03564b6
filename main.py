#!/usr/bin/env python3
"""
Disabled Items Monitor - Main Entry Point

Starts the scrape loop together with the status/login web UI.

Usage:
    python main.py [--host 0.0.0.0] [--port 3000] [--no-headless]
"""

import argparse
import dataclasses


def main():
    parser = argparse.ArgumentParser(description="Disabled Items Monitor")

    parser.add_argument("--host", default="0.0.0.0", help="Web UI host")
    parser.add_argument("--port", type=int, default=None, help="Web UI port (default: PORT env or 3000)")
    parser.add_argument("--no-headless", action="store_true", help="Show the browser window")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    from config.settings import Settings
    from services.monitoring_daemon import main as run_daemon

    settings = Settings.from_env()
    if args.no_headless:
        settings = dataclasses.replace(settings, headless=False)

    print("🚀 Starting Disabled Items Monitor...")
    print(f"📍 Dashboard at: http://{args.host}:{args.port or settings.port}")
    run_daemon(host=args.host, port=args.port, settings=settings, debug=args.debug)


if __name__ == "__main__":
    main()
