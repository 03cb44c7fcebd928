"""Azure integration documentation generator for GitHub Actions."""

__version__ = "0.1.0"
