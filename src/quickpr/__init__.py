"""quickpr - commit, push and open GitHub pull requests with a change analysis."""

__version__ = "1.0.0"
