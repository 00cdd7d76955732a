"""Author profiles and author reference resolution."""

from folio.authors.registry import AuthorRegistry, urlize

__all__ = ["AuthorRegistry", "urlize"]
