"""Entry point for 'python -m gatehouse' command."""

from gatehouse.cli import main

if __name__ == "__main__":
    main()
