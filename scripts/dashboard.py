#!/usr/bin/env python3
"""
Launch the BotDash Streamlit dashboard.

This is a convenience CLI wrapper around streamlit run.

Usage:
    python scripts/dashboard.py [--config PATH] [--port PORT]

    Or directly with Streamlit:
    streamlit run src/botdash/dashboard/app.py

Examples:
    # Launch with default settings (configs/dashboard/default.yaml, port 8501)
    python scripts/dashboard.py

    # Custom config
    python scripts/dashboard.py --config configs/dashboard/live.yaml

    # Force simulated data against a custom API URL
    BOTDASH_API_URL=http://bot:8000 python scripts/dashboard.py --port 8080
"""

import argparse
import os
import subprocess
import sys
from pathlib import Path

from loguru import logger

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from botdash.polling import ConfigError, DashboardConfig
from botdash.utils import setup_logging


def main():
    """Launch Streamlit dashboard."""
    parser = argparse.ArgumentParser(
        description="Launch BotDash Dashboard",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "--config",
        type=str,
        default="configs/dashboard/default.yaml",
        help="Path to dashboard config (default: configs/dashboard/default.yaml)",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=8501,
        help="Port to run dashboard on (default: 8501)",
    )

    parser.add_argument(
        "--host",
        type=str,
        default="localhost",
        help="Host to bind to (default: localhost)",
    )

    parser.add_argument(
        "--no-browser",
        action="store_true",
        help="Don't auto-open browser",
    )

    args = parser.parse_args()

    setup_logging()

    # Validate config up front so errors surface in the terminal
    try:
        config = DashboardConfig.from_yaml(args.config)
    except (FileNotFoundError, ConfigError) as e:
        logger.error(f"Invalid dashboard config: {e}")
        sys.exit(1)

    # Locate app.py
    project_root = Path(__file__).parent.parent
    app_path = project_root / "src" / "botdash" / "dashboard" / "app.py"

    if not app_path.exists():
        logger.error(f"Dashboard app not found at {app_path}")
        sys.exit(1)

    # Check if streamlit is installed
    try:
        subprocess.run(
            ["streamlit", "--version"],
            check=True,
            capture_output=True,
        )
    except (subprocess.CalledProcessError, FileNotFoundError):
        logger.error("Streamlit not installed. Install with: pip install -e .")
        sys.exit(1)

    # Build streamlit command
    cmd = [
        "streamlit",
        "run",
        str(app_path),
        "--server.port",
        str(args.port),
        "--server.address",
        args.host,
        "--server.headless",
        "true" if args.no_browser else "false",
    ]

    # Theme
    cmd.extend([
        "--theme.primaryColor", "#2563eb",
        "--theme.backgroundColor", "#ffffff",
        "--theme.secondaryBackgroundColor", "#f0f2f6",
        "--theme.textColor", "#262730",
    ])

    env = dict(os.environ, BOTDASH_CONFIG=str(Path(args.config).resolve()))

    logger.info("=" * 60)
    logger.info("🚀 Launching BotDash Dashboard")
    logger.info("=" * 60)
    logger.info(f"⚙️  Config: {args.config}")
    logger.info(f"📡 Data mode: {config.data_mode} ({config.api_base_url})")
    logger.info(f"🌐 URL: http://{args.host}:{args.port}")
    logger.info(f"🔄 Refresh interval: {config.refresh_interval_seconds:.0f}s")
    logger.info("=" * 60)

    # Launch streamlit
    try:
        subprocess.run(cmd, check=True, env=env)
    except KeyboardInterrupt:
        logger.info("👋 Dashboard stopped by user")
        sys.exit(0)
    except subprocess.CalledProcessError as e:
        logger.error(f"Error launching dashboard: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
