"""Allow running as ``python -m downscaler``."""

from downscaler.cli import main

if __name__ == "__main__":
    main()
