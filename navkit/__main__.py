"""Entrypoint for `python -m navkit`."""

from .cli import main


if __name__ == "__main__":
    main()
