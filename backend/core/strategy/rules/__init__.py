"""Built-in strategy rules.

Importing this package triggers registration via the
@register_strategy decorator on each rule class.
"""

from core.strategy.rules.sentiment_extremes import (
    SENTIMENT_EXTREMES,
    SentimentExtremesStrategy,
)
from core.strategy.rules.peak_sentiment import (
    PEAK_SENTIMENT_COMBO,
    PeakSentimentComboStrategy,
)
from core.strategy.rules.money_supply import MONEY_SUPPLY_LEAD, MoneySupplyLeadStrategy
from core.strategy.rules.confluence import SCORE_CONFLUENCE, ScoreConfluenceStrategy
from core.strategy.rules.smart_dca import SMART_DCA, SmartDcaStrategy

__all__ = [
    "SENTIMENT_EXTREMES",
    "SentimentExtremesStrategy",
    "PEAK_SENTIMENT_COMBO",
    "PeakSentimentComboStrategy",
    "MONEY_SUPPLY_LEAD",
    "MoneySupplyLeadStrategy",
    "SCORE_CONFLUENCE",
    "ScoreConfluenceStrategy",
    "SMART_DCA",
    "SmartDcaStrategy",
]
