from dataclasses import dataclass


@dataclass(frozen=True)
class SourceFingerprint:
    """Last observed state of the backing CSV file"""
    path: str
    mtime_ns: int
    size: int
