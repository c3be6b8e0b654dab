"""CLI entry point - wrapper for running from a source checkout

    python cli.py [--debug] [--bundle PATH]
"""

from cli.main import main

if __name__ == "__main__":
    main()
