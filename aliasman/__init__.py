"""aliasman - manage shell aliases in your rc file, with groups and usage counts"""

__version__ = "0.1.0"
