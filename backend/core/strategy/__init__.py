"""Strategy plugin system.

Public API:
- Strategy: Protocol that all strategy rules must implement
- StrategyContext: Read-only inputs shared by all rules
- register_strategy: Decorator to register a strategy class
- get_strategy: Shared instance of a registered rule by name
- evaluate_strategies: Run the rules and collect applicable signals

Importing this package auto-registers all built-in rules.
"""

from core.strategy.protocol import Strategy, StrategyContext
from core.strategy.registry import get_strategy, register_strategy

# Import built-in rules to trigger auto-registration
import core.strategy.rules  # noqa: F401
from core.strategy.evaluator import (
    STRATEGY_ORDER,
    default_strategies,
    evaluate_strategies,
)

__all__ = [
    "Strategy",
    "StrategyContext",
    "register_strategy",
    "get_strategy",
    "STRATEGY_ORDER",
    "default_strategies",
    "evaluate_strategies",
]
