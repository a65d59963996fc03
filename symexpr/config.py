"""Runtime settings, read from ``SYMEXPR_*`` environment variables."""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Tunables for the equivalence witness search."""

    # Random bindings tried by find_witnesses
    witness_trials: int = Field(default=128, ge=1, alias="SYMEXPR_WITNESS_TRIALS")
    # Bindings are drawn from the integers in [-bound, bound]
    witness_bound: int = Field(default=5, ge=1, alias="SYMEXPR_WITNESS_BOUND")
    witness_seed: Optional[int] = Field(default=None, alias="SYMEXPR_WITNESS_SEED")

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def reset_settings() -> Settings:
    get_settings.cache_clear()
    return get_settings()
