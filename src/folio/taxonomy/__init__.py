"""Tag and category hygiene."""
