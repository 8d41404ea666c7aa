"""Core data types and exceptions."""
