from .slip import SlipScanModel

__all__ = [
    "SlipScanModel",
]
