"""
Event Stats Dashboard API

Backend for recording event and partner statistics, with hashtag
usage reporting, stable per-hashtag report links and content asset
reference tracking.
"""

__version__ = "1.0.0"
