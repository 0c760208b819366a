from __future__ import annotations

from check_source_formatting.cli import app


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
