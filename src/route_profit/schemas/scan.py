"""
Scan configuration schema.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ScanConfig:
    """
    Configuration for one analysis run.

    Attributes:
        request_interval_seconds: Minimum spacing between route quote fetches.
        progress_every: Report progress every N processed destinations.
        top_n: Routes kept per base after ranking.
        destination_cap: Only consider the first N reference airports (None = all).
        load_factor: Assumed passenger load (1.0 = full).
        verbose: Log every scored pair at INFO instead of DEBUG.
    """

    request_interval_seconds: float = 0.15
    progress_every: int = 50
    top_n: int = 10
    destination_cap: Optional[int] = None
    load_factor: float = 1.0
    verbose: bool = False

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.request_interval_seconds < 0:
            raise ValueError(
                f"request_interval_seconds must be >= 0, got {self.request_interval_seconds}"
            )
        if self.progress_every < 1:
            raise ValueError(f"progress_every must be >= 1, got {self.progress_every}")
        if self.top_n < 1:
            raise ValueError(f"top_n must be >= 1, got {self.top_n}")
        if self.destination_cap is not None and self.destination_cap < 0:
            raise ValueError(f"destination_cap must be >= 0, got {self.destination_cap}")
        if not 0.0 <= self.load_factor <= 1.0:
            raise ValueError(f"load_factor must be within [0, 1], got {self.load_factor}")
