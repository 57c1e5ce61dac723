"""
Command-line launcher for the Finance Ledger

Run from the repository root:

    python app/main.py --data-file data.json

Installed packages get the same thing as the `finance-ledger` command.
"""

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from finance_ledger.cli import main


if __name__ == "__main__":
    sys.exit(main())
