"""Rule-based formatting checker for JavaScript, CSS and HTML sources."""

__version__ = "0.1.0"
