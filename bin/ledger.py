"""Score rounds and settle stored sessions from the command line.

Usage:
    uv run python bin/ledger.py settle <session_id>
    uv run python bin/ledger.py stats <member>
    uv run python bin/ledger.py round --scores 32000 28000 24000 16000

Storage and default rules come from LEDGER_* environment variables.
"""

import sys
from pathlib import Path

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "backend"))

from ledger.cli.app import main

if __name__ == "__main__":
    sys.exit(main())
