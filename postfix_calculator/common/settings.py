"""Calculator configuration."""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CalculatorSettings(BaseModel):
    """
    Settings shared by the shell, the batch runner and the evaluator.

    Immutable once built, so a single instance can be handed to any number of
    evaluations.
    """

    model_config = ConfigDict(frozen=True)

    strict_terminal: bool = Field(
        default=True,
        description="Reject pify/frac/prime/factor calls that are not the last operation",
    )
    max_denominator: int = Field(
        default=1_000_000_000, ge=1, description="Largest denominator used by frac and pify"
    )
    max_workers: Optional[int] = Field(
        default=None, ge=1, description="Batch worker processes, defaults to the CPU count"
    )
