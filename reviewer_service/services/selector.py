# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Reviewer selection — pure computation, no side effects.
"""

import random
from typing import Optional, Sequence

from reviewer_service.models.domain import User


def select_reviewers(
    candidates: Sequence[User],
    max_count: int,
    rng: Optional[random.Random] = None,
) -> list[str]:
    """
    Pick up to ``max_count`` distinct user ids from ``candidates``.

    When the pool fits, every candidate is returned; otherwise a uniform
    sample without replacement is drawn. Callers must treat the result as
    a set. Each call uses its own ``random.Random`` unless ``rng`` is given.
    Pure function — no I/O, no metrics, no logging.
    """
    user_ids = list(dict.fromkeys(c.user_id for c in candidates))
    if not user_ids or max_count <= 0:
        return []
    if len(user_ids) <= max_count:
        return user_ids
    rng = rng or random.Random()
    return rng.sample(user_ids, max_count)
