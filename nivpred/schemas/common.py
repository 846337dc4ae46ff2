"""Common schema utilities for nivpred."""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

# Numeric fields arrive as free-form scalars ("0,40", "40", 7.2); the
# normalizer is the only place that turns them into numbers.
RawValue = Optional[Union[str, int, float]]


class StrictModel(BaseModel):
    """Base model forbidding unexpected fields."""

    model_config = ConfigDict(extra="forbid", frozen=True)
