"""Best-effort side effects attached to a scheduling operation"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .schemas import EffectOutcome

logger = logging.getLogger(__name__)


@dataclass
class Effect:
    """A named side effect to attempt after (or around) the primary write"""

    name: str
    action: Callable[[], Any]


class EffectRunner:
    """
    Runs effects in order. A failing effect is logged and recorded,
    never raised; later effects still run.
    """

    def __init__(self, on_failure: Optional[Callable[[], None]] = None):
        # Called after a failure, e.g. to roll back the shared session
        self.on_failure = on_failure

    def run(self, effects: list[Effect]) -> list[EffectOutcome]:
        outcomes = []
        for effect in effects:
            try:
                effect.action()
                outcomes.append(EffectOutcome(name=effect.name, ok=True))
            except Exception as e:
                logger.warning(f"⚠️ Side effect '{effect.name}' failed: {e}")
                if self.on_failure:
                    try:
                        self.on_failure()
                    except Exception as rollback_error:
                        logger.error(f"❌ Cleanup after '{effect.name}' failed: {rollback_error}")
                outcomes.append(EffectOutcome(name=effect.name, ok=False, error=str(e)))
        return outcomes
