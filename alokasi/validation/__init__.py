"""Persisted state validation package."""

from alokasi.validation.state_loader import (
    StateLoader,
    current_period,
    default_state,
)

__all__ = ["StateLoader", "current_period", "default_state"]
