from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ApiResponse:
    """Already-shaped data with an explicit status; bypasses content detection."""

    data: Any = None
    status_code: int = 200
