#!/usr/bin/env python3
"""Launch the TeamPulse API server, optionally seeding Redis first.

Usage:
    # From the backend/ directory with the venv activated:
    python scripts/run_server.py
    python scripts/run_server.py --seed      # reload DATA_DIR into Redis first

    # Or from the repo root:
    python backend/scripts/run_server.py
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Ensure backend/ is on sys.path so `from teampulse.…` imports work
_backend_dir = Path(__file__).resolve().parent.parent
if str(_backend_dir) not in sys.path:
    sys.path.insert(0, str(_backend_dir))

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-7s  %(name)-22s  %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("run_server")


def main():
    from teampulse.config.settings import DATA_DIR, SERVER_HOST, SERVER_PORT

    parser = argparse.ArgumentParser(description="Run the TeamPulse API server")
    parser.add_argument("--seed", action="store_true", help="load DATA_DIR into Redis before starting")
    parser.add_argument("--host", default=SERVER_HOST)
    parser.add_argument("--port", type=int, default=SERVER_PORT)
    args = parser.parse_args()

    if args.seed:
        from teampulse.scripts.seed_demo import seed
        counts = seed()
        logger.info("Seeded %s from %s", counts, DATA_DIR)

    logger.info("=" * 60)
    logger.info("  TEAMPULSE — Motivation tracking for student teams")
    logger.info("  API server  →  http://%s:%d", args.host, args.port)
    logger.info("=" * 60)

    import uvicorn
    uvicorn.run(
        "teampulse.server:app",
        host=args.host,
        port=args.port,
        log_level="info",
        reload=False,
    )


if __name__ == "__main__":
    main()
