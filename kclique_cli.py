#!/usr/bin/env python3
"""
k-clique solver CLI - Minimal entry point.

Usage:
    python3 kclique_cli.py -i instance.txt
    python3 kclique_cli.py --config examples/genetic_run.yaml
    python3 kclique_cli.py --help

Examples:
    # Hybrid genetic algorithm with default settings
    python3 kclique_cli.py -i examples/tiny_instance.txt

    # Exact enumeration of every optimal selection
    python3 kclique_cli.py -i examples/tiny_instance.txt --strategy exact
"""

import sys
from pathlib import Path

# Add project root to path if needed
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from kclique.cli import main


if __name__ == '__main__':
    sys.exit(main())
