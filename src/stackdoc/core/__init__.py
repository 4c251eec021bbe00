"""Core types, errors and helpers shared across stackdoc."""
