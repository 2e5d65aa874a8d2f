"""gvc - Gradle Version Catalog updater."""

__version__ = "0.1.0"
