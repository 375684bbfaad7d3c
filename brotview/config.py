from dataclasses import dataclass, replace
from typing import Optional

from .compute import DEFAULT_MAX_ITERATIONS, INTERIOR_BLACK, INTERIOR_FULL

INTERIOR_POLICIES = {
    "black": INTERIOR_BLACK,
    "full": INTERIOR_FULL,
}


@dataclass(frozen=True)
class ViewerSettings:
    """Settings for one viewer session."""

    width: int = 800
    height: int = 600
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    threads: Optional[int] = None
    interior: str = "black"
    zoom_magnification: float = 2.0

    @property
    def interior_policy(self) -> int:
        return INTERIOR_POLICIES[self.interior]

    def validate(self) -> "ViewerSettings":
        if self.width <= 0 or self.height <= 0:
            raise ValueError("width/height must be positive.")
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be >= 1.")
        if self.threads is not None and self.threads < 1:
            raise ValueError("threads must be >= 1 when given.")
        if self.interior not in INTERIOR_POLICIES:
            raise ValueError(f"interior must be one of: {', '.join(INTERIOR_POLICIES)}")
        if not self.zoom_magnification > 1.0:
            raise ValueError("zoom_magnification must be > 1.")
        return self

    def with_overrides(self, **overrides) -> "ViewerSettings":
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)
