"""Main entry point for Yearbook."""

from yearbook.cli import app


def main():
    """
    Run the Yearbook command line interface.
    """
    app()


if __name__ == "__main__":
    main()
