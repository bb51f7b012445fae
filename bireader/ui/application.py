import sys

from PySide6.QtCore import QCoreApplication
from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import QApplication

from bireader import __version__
from bireader.db import SessionLocal, create_tables
from bireader.services.history import HistoryService
from bireader.services.logs import configure_logging, get_logger
from bireader.services.session import ViewerSession
from bireader.settings import ViewerSettings

from .main_window import MainWindow

logger = get_logger(__name__)


def create_application() -> tuple[QApplication, MainWindow]:
    """
    Create the application.

    - Configure logging and create the history tables
    - Create the application and the main window
    - Seed the demo history and open the bundled article

    Returns:
        The application and its main window

    """
    QCoreApplication.setOrganizationName("Bilingual Reader")
    QCoreApplication.setApplicationName("Bilingual Reader")
    configure_logging(ViewerSettings.load())
    create_tables()

    app = QApplication(sys.argv)
    app.setApplicationName("Bilingual Reader")
    app.setApplicationVersion(__version__)
    QGuiApplication.setApplicationDisplayName("Bilingual Reader")

    history = HistoryService(SessionLocal())
    history.seed_demos()
    session = ViewerSession(history=history)
    window = MainWindow(session)
    session.open_sample()
    window.show()
    logger.info("application started", version=__version__)
    return app, window
