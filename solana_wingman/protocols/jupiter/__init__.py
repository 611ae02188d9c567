"""
Jupiter aggregator
"""

from .api import JupiterAPI

__all__ = ["JupiterAPI"]
