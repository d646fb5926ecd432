"""Main entry point for the deals package."""

from deals.cli.commands import main

if __name__ == '__main__':
    main()
