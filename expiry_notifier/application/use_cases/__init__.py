"""Application use cases."""

from .run_expiry_scan import RunExpiryScan, ScanResult

__all__ = ["RunExpiryScan", "ScanResult"]
