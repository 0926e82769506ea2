"""Main entry point for running openide as a module.

Usage:
    python -m openide [workspace_root]
"""

from openide.repl import main

main()
