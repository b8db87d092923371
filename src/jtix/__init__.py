"""jtix - terminal client for Jira issues."""

__version__ = "0.1.0"
