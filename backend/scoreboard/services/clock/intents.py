from typing import Any, Dict, Optional

from .state import TEAMS


class IntentError(ValueError):
    """Raised when an intent or its parameters cannot be applied."""


# Intent name -> required parameters, in the order callers pass them
INTENT_PARAMS = {
    'toggle_game_clock': (),
    'reset_shot_clock': (),
    'call_timeout': ('team',),
    'adjust_score': ('team', 'delta'),
    'add_penalty': ('team', 'duration'),
    'adjust_game_time': ('seconds',),
}


def _coerce_team(value: Any) -> str:
    team = str(value or '').strip().lower()
    if team not in TEAMS:
        raise IntentError(f"team must be one of {', '.join(TEAMS)}")
    return team


def _coerce_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise IntentError(f"{name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise IntentError(f"{name} must be an integer") from None


def parse_intent(name: Optional[str], params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Validate raw client input for ``name`` and return typed keyword args."""
    if name not in INTENT_PARAMS:
        raise IntentError(f"unknown intent: {name!r}")
    params = params or {}
    kwargs = {}
    for key in INTENT_PARAMS[name]:
        if params.get(key) is None:
            raise IntentError(f"{key} is required")
        if key == 'team':
            kwargs[key] = _coerce_team(params[key])
        else:
            kwargs[key] = _coerce_int(key, params[key])
    if name == 'add_penalty' and kwargs['duration'] <= 0:
        raise IntentError('duration must be positive')
    return kwargs
