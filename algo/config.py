from __future__ import annotations

from pydantic import BaseModel, Field


class GenerationConfig(BaseModel):
    """Hyperparameters of a genetic maze search."""

    population_size: int = Field(default=100, gt=1)
    max_evolutions: int = Field(default=5000, gt=0)
    mutation_probability: float = Field(
        default=0.6,
        ge=0.0,
        le=1.0,
        description="Chance that an offspring gets a window of its genome shuffled",
    )
    seed: int | None = Field(
        default=None,
        ge=0,
        description="Seed for the shared RandomState (None = nondeterministic)",
    )
