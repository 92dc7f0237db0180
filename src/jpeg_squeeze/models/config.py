"""Run configuration shared by the oracle and the search."""

import os
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MAX_RATING = 1.1
DEFAULT_COMPARATOR = "compare_pngs"


class SqueezeConfig(BaseModel):
    """Settings for one find-quality run. Built once from CLI input, never mutated."""

    model_config = ConfigDict(frozen=True)

    max_rating: float = Field(DEFAULT_MAX_RATING, gt=0, description="Maximum deviation score accepted")
    width: int = Field(0, ge=0, description="Resize width, 0 keeps proportion")
    height: int = Field(0, ge=0, description="Resize height, 0 keeps proportion")
    cores: int = Field(default_factory=lambda: os.cpu_count() or 2, ge=1, description="Concurrent probes per search level")
    comparator: List[str] = Field(default_factory=lambda: [DEFAULT_COMPARATOR], min_length=1, description="Comparator command")
    timeout: Optional[float] = Field(None, gt=0, description="Seconds allowed per comparator call")
