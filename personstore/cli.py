"""Command line entry for personstore."""

from __future__ import annotations

import asyncio
import sys

from personstore.demo import main as run_demo_main


def main() -> None:
    sys.exit(asyncio.run(run_demo_main()))


if __name__ == "__main__":
    main()
