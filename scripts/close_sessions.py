#!/usr/bin/env python3
"""Close prompt sessions and freeze their results for historical display.

Usage:
    python scripts/close_sessions.py t3_abc t3_def

Run it when a post's guessing window ends (e.g. from crontab):
    0 0 * * * /path/to/venv/bin/python /path/to/scripts/close_sessions.py t3_abc

Requires REDIS_URL; the in-memory store does not outlive the process.
"""

import argparse
import sys
from pathlib import Path

_SCRIPT_DIR = Path(__file__).resolve().parent
_BACKEND_DIR = _SCRIPT_DIR.parent / "backend"


def main() -> int:
    parser = argparse.ArgumentParser(description="Close prompt sessions and freeze results.")
    parser.add_argument("post_ids", nargs="+", help="Post ids whose active session to close")
    parser.add_argument(
        "--redis-url",
        default=None,
        help="Redis URL (default: REDIS_URL from the environment)",
    )
    args = parser.parse_args()

    sys.path.insert(0, str(_BACKEND_DIR))
    from crowdguess import config, service  # noqa: PLC0415
    from crowdguess.store import create_store  # noqa: PLC0415

    redis_url = args.redis_url or config.REDIS_URL
    if not redis_url:
        parser.error("REDIS_URL is not set and --redis-url was not given")
    store = create_store(redis_url)

    for post_id in args.post_ids:
        snapshot = service.close_prompt(store, post_id)
        if snapshot is None:
            print(f"[close] {post_id}: no active session")
            continue
        print(
            f"[close] {post_id}: froze {snapshot.total_players} players, "
            f"{snapshot.total_guesses} guesses"
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
