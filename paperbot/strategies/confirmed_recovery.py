"""
Confirmed Recovery Strategy
===========================
Buy only after a downward interval is followed by a confirmed dip and then a
confirmed rise, each observed after a delay.

The check is a state machine carried on the bot as a ``RecoveryConfirmation``:

    AWAITING_FIRST_CONFIRMATION -> AWAITING_SECOND_CONFIRMATION -> CONFIRMED
                 |                              |
                 +-----------> REJECTED <-------+

Each transition happens on a separate evaluation, once ``now_ms`` reaches the
pending check's due time. The runner schedules those evaluations.

``RecoveryMode.SIMULATED`` replaces the delayed observations with a jittered
proxy of the current price drawn from an injected ``random.Random``, deciding
in a single call.
"""

import logging
import random
from enum import Enum
from typing import Optional, Tuple

from ..core.constants import StrategyDefaults
from ..data.models import PriceSeries
from .bot_state import RecoveryConfirmation, RecoveryState, TradingBot
from .decision import Decision
from .momentum import is_last_interval_downward
from .settings import ConfirmedRecoveryParams, TradingMethod
from .trend_reversal import TrendReversalStrategy

logger = logging.getLogger("paperbot.strategies.recovery")


class RecoveryMode(Enum):
    """How the delayed price checks are observed"""
    LIVE = "LIVE"
    SIMULATED = "SIMULATED"

    @classmethod
    def from_string(cls, value: Optional[str]) -> "RecoveryMode":
        if isinstance(value, str) and value.upper().strip() == "SIMULATED":
            return cls.SIMULATED
        return cls.LIVE


# ============================================================================
# State transitions
# ============================================================================

def start_confirmation(
    current_price: float,
    now_ms: int,
    first_delay_seconds: int,
) -> RecoveryConfirmation:
    """Open a check anchored at the current price"""
    return RecoveryConfirmation(
        state=RecoveryState.AWAITING_FIRST_CONFIRMATION,
        anchor_price=current_price,
        started_at=now_ms,
        check_due_at=now_ms + first_delay_seconds * 1000,
    )


def advance_confirmation(
    confirmation: RecoveryConfirmation,
    current_price: float,
    now_ms: int,
    second_delay_seconds: int,
) -> RecoveryConfirmation:
    """
    Apply one delayed observation.

    Returns the confirmation unchanged when it is terminal or not yet due.
    """
    if confirmation.is_terminal or now_ms < confirmation.check_due_at:
        return confirmation

    if confirmation.state == RecoveryState.AWAITING_FIRST_CONFIRMATION:
        if current_price > confirmation.anchor_price:
            return RecoveryConfirmation(
                state=RecoveryState.REJECTED,
                anchor_price=confirmation.anchor_price,
                started_at=confirmation.started_at,
                check_due_at=confirmation.check_due_at,
            )
        return RecoveryConfirmation(
            state=RecoveryState.AWAITING_SECOND_CONFIRMATION,
            anchor_price=confirmation.anchor_price,
            started_at=confirmation.started_at,
            check_due_at=now_ms + second_delay_seconds * 1000,
            first_price=current_price,
        )

    # Awaiting second
    state = (
        RecoveryState.CONFIRMED
        if current_price > confirmation.first_price
        else RecoveryState.REJECTED
    )
    return RecoveryConfirmation(
        state=state,
        anchor_price=confirmation.anchor_price,
        started_at=confirmation.started_at,
        check_due_at=confirmation.check_due_at,
        first_price=confirmation.first_price,
    )


def simulate_price_check(
    reference_price: float,
    rng: random.Random,
    jitter_pct: float = StrategyDefaults.RECOVERY_JITTER_PCT,
) -> Tuple[float, bool]:
    """Jitter ``reference_price`` by up to +/- jitter/2; report whether it rose"""
    change = (rng.random() - 0.5) * jitter_pct
    price = reference_price * (1 + change)
    return price, price > reference_price


# ============================================================================
# Strategy
# ============================================================================

class ConfirmedRecoveryStrategy(TrendReversalStrategy):
    """
    Confirmed-recovery buys, trend-reversal sells.

    Usage:
        strategy = ConfirmedRecoveryStrategy(ConfirmedRecoveryParams())
        decision = strategy.analyze(bot, series, current_price, now_ms)
        # decision.update_recovery carries the next state for the ledger
    """

    method = TradingMethod.CONFIRMED_RECOVERY

    def __init__(
        self,
        params: Optional[ConfirmedRecoveryParams] = None,
        mode: RecoveryMode = RecoveryMode.LIVE,
        rng: Optional[random.Random] = None,
    ):
        if not isinstance(params, ConfirmedRecoveryParams):
            params = ConfirmedRecoveryParams()
        super().__init__(params)
        self.mode = mode
        self.rng = rng

    @property
    def first_delay(self) -> int:
        return self.params.first_delay_seconds

    @property
    def second_delay(self) -> int:
        return self.params.second_delay_seconds

    def evaluate_buy(
        self,
        bot: TradingBot,
        series: PriceSeries,
        current_price: float,
        now_ms: int,
    ) -> Decision:
        if self.mode == RecoveryMode.SIMULATED:
            return self._evaluate_simulated(series, current_price)

        pending = bot.recovery if bot.recovery is not None and bot.recovery.is_pending else None
        if pending is None:
            return self._start(series, current_price, now_ms)

        if now_ms < pending.check_due_at:
            stage = (
                "first"
                if pending.state == RecoveryState.AWAITING_FIRST_CONFIRMATION
                else "second"
            )
            remaining = (pending.check_due_at - now_ms) / 1000
            return self._hold(
                f"Waiting for {stage} recovery confirmation ({remaining:.0f}s remaining)"
            )

        advanced = advance_confirmation(pending, current_price, now_ms, self.second_delay)
        logger.debug(
            f"Recovery check {pending.state.value} -> {advanced.state.value} "
            f"at {current_price:.2f}"
        )

        if advanced.state == RecoveryState.CONFIRMED:
            return self._buy(self._confirmed_reason(), update_recovery=advanced)

        if advanced.state == RecoveryState.AWAITING_SECOND_CONFIRMATION:
            return self._hold(
                f"Downtrend confirmed after {self.first_delay}s at {current_price:.2f}; "
                f"checking for upward movement in {self.second_delay}s",
                update_recovery=advanced,
            )

        if pending.state == RecoveryState.AWAITING_FIRST_CONFIRMATION:
            reason = f"After {self.first_delay}s delay, price went up instead of continuing down"
        else:
            reason = (
                f"After {self.second_delay}s delay, price is still not showing upward movement"
            )
        return self._hold(reason, update_recovery=advanced)

    def _start(self, series: PriceSeries, current_price: float, now_ms: int) -> Decision:
        if not self.has_enough_data(series):
            return self._hold("Insufficient data for confirmed recovery")
        if not is_last_interval_downward(series):
            return self._hold("Last interval is not in downward direction")

        confirmation = start_confirmation(current_price, now_ms, self.first_delay)
        return self._hold(
            f"Downward interval detected at {current_price:.2f}; "
            f"confirming downtrend in {self.first_delay}s",
            update_recovery=confirmation,
        )

    def _evaluate_simulated(self, series: PriceSeries, current_price: float) -> Decision:
        if not self.has_enough_data(series):
            return self._hold("Insufficient data for confirmed recovery")
        if not is_last_interval_downward(series):
            return self._hold("Last interval is not in downward direction")

        rng = self.rng if self.rng is not None else random.Random(0)

        first_price, first_up = simulate_price_check(current_price, rng)
        if first_up:
            return self._hold(
                f"After {self.first_delay}s delay, price went up instead of continuing down"
            )

        _second_price, second_up = simulate_price_check(first_price, rng)
        if not second_up:
            return self._hold(
                f"After {self.second_delay}s delay, price is still not showing upward movement"
            )

        return self._buy(self._confirmed_reason())

    def _confirmed_reason(self) -> str:
        return (
            f"Confirmed recovery: downtrend confirmed after {self.first_delay}s, "
            f"upward movement confirmed after {self.second_delay}s"
        )
