"""Security health checks that score a repository's practices from 0 to 10."""

__version__ = "0.1.0"