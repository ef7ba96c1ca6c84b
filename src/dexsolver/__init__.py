"""Swap quoting against 0x, 1inch and Balancer with executable contract calls."""

__version__ = "0.1.0"
