"""
poolwatch: live decoding and reserve tracking for a Uniswap V2 style pool
and its router.
"""

__version__ = "0.1.0"
