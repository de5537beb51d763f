from techwriter.timers.engine import LEGAL_TRANSITIONS, StopResult, TimerEngine
from techwriter.timers.ticker import Ticker

__all__ = ["LEGAL_TRANSITIONS", "StopResult", "Ticker", "TimerEngine"]
