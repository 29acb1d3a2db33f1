"""Concrete adapters for the interfaces in ``protege.interfaces``."""
