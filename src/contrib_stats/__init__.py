"""contrib-stats: aggregate organization contributors under different concurrency strategies."""

__version__ = "0.1.0"
