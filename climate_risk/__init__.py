"""Climate risk scoring and satellite ingestion service."""

__version__ = "0.1.0"
