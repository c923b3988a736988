"""Allow ``python -m tweec``."""

from tweec.main import main

if __name__ == "__main__":
    raise SystemExit(main())
