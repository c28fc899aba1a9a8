"""Mission Control API: agent status, context pressure and activity tracking."""

__version__ = "0.1.0"
