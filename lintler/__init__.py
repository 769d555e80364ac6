"""lintler: first-error syntax checks for XML, JSON and CSV files."""

__version__ = "0.1.0"
