"""Personal finance tracker backend with local-to-cloud data migration."""

__version__ = "0.1.0"
