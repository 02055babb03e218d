"""Main entry point for the task tracker.

Each invocation runs exactly one command against the task file and exits.
"""
from cli import cli


def main():
    cli(prog_name="taskman")

if __name__ == "__main__":
    main()
