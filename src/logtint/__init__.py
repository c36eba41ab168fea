"""logtint: filter and highlight log lines for terminal viewing."""

__version__ = "0.1.0"
