"""recent-track — keeps a recency list of files, directories and hosts touched from the shell."""

__version__ = "0.1.0"
