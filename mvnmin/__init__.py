"""mvnmin — build only the Maven projects a change actually touches."""

__version__ = "0.1.0"
