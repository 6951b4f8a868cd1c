"""Key levels from the options chain and entry/stop/target derivation per setup type"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from ..config.defaults import ClassifierParams
from ..data.models import StrikeQuote
from ..options.aggregates import calculate_max_pain, usable_strikes
from .models import KeyLevels, SetupInputs, SetupType


@dataclass(frozen=True)
class SetupLevels:
    entry_price: float
    stop_loss: float
    target_price: float
    risk_reward_ratio: float


def find_key_levels(chain: Sequence[StrikeQuote], spot: float,
                    min_oi: float = 1000.0, min_gamma: float = 0.05) -> KeyLevels:
    """
    Nearest significant strikes around spot

    Resistance is the first strike above spot whose call side carries open
    interest above ``min_oi`` or gamma above ``min_gamma``; support is the
    first such strike below spot on the put side. Rows without a positive
    finite strike never become a level.
    """
    ordered = usable_strikes(chain)

    resistance = next(
        (q.strike for q in ordered
         if q.strike > spot and (q.call.open_interest > min_oi or q.call.gamma > min_gamma)),
        None
    )
    support = next(
        (q.strike for q in reversed(ordered)
         if q.strike < spot and (q.put.open_interest > min_oi or q.put.gamma > min_gamma)),
        None
    )

    return KeyLevels(
        next_resistance=resistance,
        next_support=support,
        max_pain=calculate_max_pain(ordered),
    )


def _ratio(reward: float, risk: float) -> float:
    # Stop on the wrong side of entry has no meaningful ratio
    if risk <= 0:
        return 0.0
    return reward / risk


def derive_levels(setup_type: SetupType, inputs: SetupInputs, key_levels: Optional[KeyLevels],
                  params: ClassifierParams) -> SetupLevels:
    """
    Entry, stop, target and risk/reward for a classified setup

    Entry is always the latest close.

    Bullish setups target the next resistance (else +fallback_target_pct)
    with a stop just below EMA20. Bearish setups mirror that with the next
    support and a stop just above EMA20. Neutral setups target max pain and
    place the stop outside the expected move over the neutral horizon, on
    the side away from the target.
    """
    key_levels = key_levels or KeyLevels()
    entry = inputs.close

    if setup_type == SetupType.BULLISH:
        target = key_levels.next_resistance or entry * (1 + params.fallback_target_pct)
        stop = inputs.ema20 * params.bullish_stop_factor
        ratio = _ratio(target - entry, entry - stop)

    elif setup_type == SetupType.BEARISH:
        target = key_levels.next_support or entry * (1 - params.fallback_target_pct)
        stop = inputs.ema20 * params.bearish_stop_factor
        ratio = _ratio(entry - target, stop - entry)

    else:
        move = entry * inputs.iv_percentile * 0.01 * math.sqrt(params.neutral_horizon_days / 365)
        target = key_levels.max_pain or inputs.max_pain or entry
        if entry > target:
            stop = (entry + move) * (1 + params.neutral_stop_buffer)
        else:
            stop = (entry - move) * (1 - params.neutral_stop_buffer)
        ratio = _ratio(abs(target - entry), abs(stop - entry))

    return SetupLevels(
        entry_price=entry,
        stop_loss=stop,
        target_price=target,
        risk_reward_ratio=ratio,
    )
