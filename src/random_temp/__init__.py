"""Run a program with TMP/TEMP pointed at a fresh unique directory, retrying on failure."""

__version__ = "0.1.0"
