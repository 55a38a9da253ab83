"""Core infrastructure: logging and event dispatch."""
