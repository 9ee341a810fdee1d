"""github-release - manage GitHub releases, tags and release assets."""

__version__ = "0.7.2"
