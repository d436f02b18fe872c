"""
Synthetic Stock Dashboard Engine

Generates simulated intraday price series for a fixed basket of stocks and
computes descriptive statistics and cross-stock correlation matrices.
"""

__version__ = "0.1.0"
