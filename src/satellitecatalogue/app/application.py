from PySide6.QtCore import QCoreApplication, QSettings

import sys

ORG_ID = "satellite-catalogue"
APP_ID = "catalogue"
ORG_DOMAIN = "satellite-catalogue.local"


def create_app(argv: list[str] | None = None) -> QCoreApplication:
    """Create (or reuse) the application instance and configure settings storage."""
    QCoreApplication.setOrganizationName(ORG_ID)
    QCoreApplication.setOrganizationDomain(ORG_DOMAIN)
    QCoreApplication.setApplicationName(APP_ID)
    # Edits are stored in a plain INI file rather than the platform registry
    QSettings.setDefaultFormat(QSettings.Format.IniFormat)

    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication(argv if argv is not None else sys.argv)
    return app


def create_settings() -> QSettings:
    """User-scope settings for the configured organization/application."""
    return QSettings(
        QSettings.Format.IniFormat, QSettings.Scope.UserScope, ORG_ID, APP_ID
    )
