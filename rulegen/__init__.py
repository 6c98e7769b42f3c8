"""Convention classification and routing for code-review comments."""

__version__ = "0.1.0"
