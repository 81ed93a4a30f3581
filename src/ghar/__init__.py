"""manage-ghar - run a GitHub Actions runner like a SysV init script."""

__version__ = "0.1.0"
