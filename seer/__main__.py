"""Module entrypoint for ``python -m seer``."""

from .cli import main


if __name__ == "__main__":
    main()
