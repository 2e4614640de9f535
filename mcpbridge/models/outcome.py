"""Per-call upstream outcome."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class APIOutcome:
    """Processed upstream HTTP response, created and consumed within one tool call."""
    status_code: int
    body: str  # raw response text
    headers: Dict[str, str] = field(default_factory=dict)  # first value per header name
    data: Optional[Any] = None  # parsed JSON payload, when the response was JSON
