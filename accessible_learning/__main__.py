"""Package entry point for ``python -m accessible_learning``.

Delegates to the CLI's main() function.
"""

from accessible_learning.cli import main

if __name__ == "__main__":
    main()
