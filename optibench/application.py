"""Application factory — headless Qt core application and logging setup."""

import logging
import sys

from PyQt6.QtCore import QCoreApplication, QtMsgType, qInstallMessageHandler

from optibench.constants import APP_NAME, APP_ORGANIZATION, APP_VERSION


def _qt_message_handler(msg_type, context, message):
    """Forward Qt warnings and errors to stderr, drop debug chatter."""
    if msg_type in (
        QtMsgType.QtWarningMsg, QtMsgType.QtCriticalMsg, QtMsgType.QtFatalMsg,
    ):
        print(message, file=sys.stderr)


def setup_logging(verbose: bool = False) -> None:
    """Configure root logging for command-line runs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def create_application(argv: list[str]) -> QCoreApplication:
    """Create and configure the QCoreApplication instance."""
    qInstallMessageHandler(_qt_message_handler)

    app = QCoreApplication.instance() or QCoreApplication(argv)
    app.setApplicationName(APP_NAME)
    app.setOrganizationName(APP_ORGANIZATION)
    app.setApplicationVersion(APP_VERSION)
    return app
