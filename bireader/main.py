"""Main entry point for Bilingual Reader application."""

import sys

from bireader.ui.application import create_application


def main():
    """
    Run the Bilingual Reader application.
    """
    app, _window = create_application()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
