from .cli import main

if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
