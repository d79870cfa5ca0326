"""Asynchronous client and frame builders for the SLMP 4E binary protocol used by Mitsubishi PLCs."""

__version__ = "0.1.15"