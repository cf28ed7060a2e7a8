"""Main entry point: ``python -m todolist``."""
from todolist.cli import main

if __name__ == "__main__":
    main(prog_name="todo")
