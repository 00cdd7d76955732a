"""folio: content model and linter for Hugo academic sites."""

__version__ = "0.1.0"
