"""Configuration package for the interview reporting core."""
from .registry import SCORER_KEY, bind_model, get_model, is_bound, unbind_model
from .settings import Settings, settings

__all__ = [
    "SCORER_KEY",
    "bind_model",
    "get_model",
    "is_bound",
    "unbind_model",
    "Settings",
    "settings",
]
