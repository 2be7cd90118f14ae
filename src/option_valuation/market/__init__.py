"""Market inputs: quotes, term structures, calendars, and the process."""

from .calendar import Actual365Fixed, EvaluationClock, TradingCalendar
from .process import BlackScholesMertonProcess, MarketQuotes, ProcessSnapshot
from .quotes import BlackConstantVol, FlatForward, SimpleQuote

__all__ = [
    "Actual365Fixed",
    "EvaluationClock",
    "TradingCalendar",
    "SimpleQuote",
    "FlatForward",
    "BlackConstantVol",
    "MarketQuotes",
    "ProcessSnapshot",
    "BlackScholesMertonProcess",
]
