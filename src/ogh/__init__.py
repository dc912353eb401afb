"""GitHub development helper: pull-request review queue and build listings."""

__version__ = "0.1.0"
