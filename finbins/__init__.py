"""FinBins personal-finance dashboard backend and client layer."""
__version__ = "0.1.0"
