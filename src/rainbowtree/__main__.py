"""Entry point for running rainbowtree as a module.

This allows running: python -m rainbowtree
"""

from .cli import main

if __name__ == "__main__":
    # No try/except here: main() is the CLI boundary and already reports
    # startup errors and returns the exit code.
    raise SystemExit(main())
