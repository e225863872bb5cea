"""
Gemini model selection.

Calls are spread across several Gemini models so a single model's free-tier
quota isn't exhausted first. The rotation index is process-wide and guarded
by a lock.
"""
import threading
from typing import Dict, Tuple

GEMINI_MODELS: Tuple[str, ...] = (
    "gemini-2.5-flash-lite",
    "gemini-3-flash-preview",
    "gemini-2.5-flash",
)

MODEL_ALIASES: Dict[str, str] = {
    "flash-lite": "gemini-2.5-flash-lite",
    "flash-3": "gemini-3-flash-preview",
    "flash-2.5": "gemini-2.5-flash",
}

_lock = threading.Lock()
_model_index = 0


def get_next_model() -> str:
    """Return the next model in round-robin order."""
    global _model_index
    with _lock:
        model = GEMINI_MODELS[_model_index]
        _model_index = (_model_index + 1) % len(GEMINI_MODELS)
    return model


def get_model(name: str) -> str:
    """Resolve a short alias ("flash-lite", "flash-3", "flash-2.5") to a model name."""
    try:
        return MODEL_ALIASES[name]
    except KeyError:
        raise ValueError(
            f"Unknown model alias {name!r}; expected one of {', '.join(MODEL_ALIASES)}"
        ) from None


def reset_rotation() -> None:
    global _model_index
    with _lock:
        _model_index = 0
