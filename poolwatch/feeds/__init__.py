"""
Chain feed: polls a node and hands raw records to a pool's processor.
"""

from .errors import ErrorHandler
from .web3_feed import FeedConfig, Web3PollingFeed

__all__ = ["ErrorHandler", "FeedConfig", "Web3PollingFeed"]
