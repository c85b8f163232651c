"""
Blood pressure interpretation and statistics engine.

Classifies readings into clinical categories, aggregates statistics over
time windows, builds rolling-average trend series and renders PDF/CSV
exports and interactive trend charts.
"""

__version__ = "1.0.0"
