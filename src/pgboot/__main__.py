"""Main entry point for pgboot package."""

from pgboot.cli.commands import main

if __name__ == '__main__':
    main()
