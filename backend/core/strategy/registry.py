"""Registry of the built-in strategy rules.

Rules are stateless, so each one is instantiated once when its module
registers it and the same instance serves every cycle.
"""

from __future__ import annotations

import logging

from core.strategy.protocol import Strategy

logger = logging.getLogger(__name__)

# strategy name -> shared rule instance
_REGISTRY: dict[str, Strategy] = {}


def register_strategy(name: str):
    """Class decorator registering one instance of a rule under ``name``.

    Raises:
        ValueError: If the name is taken, or the class's own ``name``
            disagrees with it.
        TypeError: If instances do not satisfy the Strategy protocol.
    """

    def decorator(cls):
        if name in _REGISTRY:
            raise ValueError(
                f"Strategy '{name}' is already registered by {type(_REGISTRY[name]).__name__}"
            )
        rule = cls()
        if not isinstance(rule, Strategy):
            raise TypeError(f"{cls.__name__} does not implement the Strategy protocol")
        if rule.name != name:
            raise ValueError(f"{cls.__name__} reports name '{rule.name}', registered as '{name}'")

        _REGISTRY[name] = rule
        logger.debug("Registered strategy: %s -> %s", name, cls.__name__)
        return cls

    return decorator


def get_strategy(name: str) -> Strategy:
    """Shared instance of a registered rule.

    Raises:
        KeyError: If no strategy is registered under the given name.
    """
    try:
        return _REGISTRY[name]
    except KeyError:
        available = ", ".join(sorted(_REGISTRY)) or "(none)"
        raise KeyError(f"Unknown strategy '{name}'. Available: {available}") from None
