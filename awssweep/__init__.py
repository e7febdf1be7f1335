"""AWS Sweeper - leftover test resource cleanup tool."""

__version__ = "0.1.0"
