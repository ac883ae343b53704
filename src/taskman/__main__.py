"""Allow running taskman as ``python -m taskman``."""

from taskman.cli import main

if __name__ == "__main__":
    main(prog_name="taskman")
