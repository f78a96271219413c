"""BradOS document store: defensive decoding and repositories."""

__version__ = "0.1.0"
