"""Allow ``python -m cherrypick_interactive``."""

from __future__ import annotations

from cherrypick_interactive.cli import main

if __name__ == "__main__":
    main()
