"""Entry point for `python -m cli` and `sqlrouter` console script."""

from __future__ import annotations

from cli.app import app


def main() -> None:
    app(prog_name="sqlrouter")


if __name__ == "__main__":
    main()
