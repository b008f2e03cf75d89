"""Application bootstrap for the Forget-Me-Knots desktop app."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from PyQt5.QtCore import QCoreApplication, Qt
from PyQt5.QtGui import QIcon
from PyQt5.QtWidgets import QApplication

from forgetmeknots.app.config import (
    APP_NAME,
    ORGANIZATION,
    database_path,
    ensure_database,
    resource_path,
)
from forgetmeknots.storage.project_store import open_store
from forgetmeknots.ui.main_window import MainWindow

log = logging.getLogger(__name__)

# Ensure HiDPI scaling is enabled before the QApplication is instantiated
os.environ.setdefault("QT_AUTO_SCREEN_SCALE_FACTOR", "1")
os.environ.setdefault("QT_ENABLE_HIGHDPI_SCALING", "1")


class ForgetMeKnotsLauncher:
    """Create the Qt application, open the database and show the main window."""

    def __init__(self, db_path: str | None = None) -> None:
        QCoreApplication.setAttribute(Qt.AA_EnableHighDpiScaling, True)
        QCoreApplication.setAttribute(Qt.AA_UseHighDpiPixmaps, True)
        QCoreApplication.setOrganizationName(ORGANIZATION)
        QCoreApplication.setApplicationName(APP_NAME)

        self.app = QApplication(sys.argv)
        self._apply_branding()

        path = Path(db_path) if db_path else ensure_database(database_path())
        self.store = open_store(path)
        self.window = MainWindow(self.store)

    # ------------------------------------------------------------------
    def _apply_branding(self) -> None:
        """Apply the platform-specific application icon if one is bundled."""

        if sys.platform.startswith("win"):
            icon_name = "MyIcon.ico"
        elif sys.platform == "darwin":
            icon_name = "MyIcon.icns"
        else:
            icon_name = "MyIcon.png"

        candidate = resource_path(icon_name)
        if candidate.exists():
            self.app.setWindowIcon(QIcon(str(candidate)))
        else:
            log.debug("No application icon at %s", candidate)

    # ------------------------------------------------------------------
    def run(self) -> int:
        self.window.show()
        try:
            return self.app.exec_()
        finally:
            self.store.close()
            log.info("Database closed")
