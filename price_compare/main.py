from __future__ import annotations

import sys
from typing import List, Optional

from .ui.cli import run_cli


def main(argv: Optional[List[str]] = None) -> int:
    # Console-script entry point: delegate to the CLI layer.
    return run_cli(sys.argv[1:] if argv is None else argv)


if __name__ == "__main__":
    raise SystemExit(main())
