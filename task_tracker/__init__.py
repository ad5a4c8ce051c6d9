"""Personal task tracker: search, create, edit, complete and tag tasks."""

__version__ = "1.0.0"
