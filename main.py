"""Entrypoint: send one broadcast message."""

from __future__ import annotations

from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

from broadcast_sender.cli import main


if __name__ == "__main__":
    sys.exit(main())
