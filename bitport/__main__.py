"""Allow ``python -m bitport``."""

from __future__ import annotations

from bitport.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
