"""In-memory registry of pluggable strategy callables, keyed by name."""
from typing import Any, Callable, Dict

_REGISTRY: Dict[str, Callable[..., Any]] = {}

SCORER_KEY = "models.interview_scorer"


def bind_model(key: str, fn: Callable[..., Any]) -> None:
    """Register ``fn`` under ``key``, replacing any earlier binding."""
    _REGISTRY[key] = fn


def unbind_model(key: str) -> None:
    """Drop the binding for ``key`` so callers use their built-in default."""
    _REGISTRY.pop(key, None)


def is_bound(key: str) -> bool:
    return key in _REGISTRY


def get_model(key: str) -> Callable[..., Any]:
    """Look up the callable bound to ``key``.

    Raises:
        KeyError: If nothing is bound under ``key``.
    """

    try:
        return _REGISTRY[key]
    except KeyError:
        raise KeyError(f"No strategy bound for key: {key}") from None
