#!/usr/bin/env python3
"""Check that a running wall service answers its health endpoint."""
from __future__ import annotations

import argparse
import logging
import sys

from wallboard.utils.api_health import check_api_health


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "base_url",
        nargs="?",
        default="http://localhost:8000",
        help="Root URL of the service (default: http://localhost:8000)",
    )
    parser.add_argument("--timeout", type=float, default=5.0, help="Request timeout in seconds")
    parser.add_argument("--expect-version", default=None, help="Fail unless the service reports this version")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run the probe and return a process exit code."""

    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
    args = parse_args(argv)
    result = check_api_health(args.base_url, timeout=args.timeout, expected_version=args.expect_version)

    if result.ok:
        latency = f"{result.latency_ms:.2f}" if result.latency_ms is not None else "unknown"
        print(f"The Wall is up: version={result.version} latency_ms={latency}")
        return 0

    print("Health check failed:", result.detail, file=sys.stderr)
    if result.status_code is not None:
        print(f"Status code: {result.status_code}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
