"""Context Pack - measure and trim what an AI assistant reads from a project."""

__version__ = "1.0.0"
