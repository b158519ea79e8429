"""Package entry point for ``python -m caption_exporter``."""

from caption_exporter.cli import main

if __name__ == "__main__":
    main()
