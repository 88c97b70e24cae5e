"""Shamir's Secret Sharing over GF(256).

Splits a byte secret into N shares such that any K of them reconstruct it
exactly while fewer than K reveal nothing about it.
"""

__version__ = "0.1.0"
