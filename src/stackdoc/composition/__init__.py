"""Guideline loading, ordering and document rendering."""
