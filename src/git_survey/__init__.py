"""git-survey: status summaries for every git repository under a directory."""

__version__ = "0.3.0"
