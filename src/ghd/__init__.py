"""ghd - Print the commit message of a repository's latest successful deployment."""

__version__ = "0.3.0"
__app_name__ = "ghd"
