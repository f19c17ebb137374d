"""Local mirror of a remote task list, kept fresh by background polling."""

__version__ = "0.1.0"
