"""Generated identifiers for string-keyed option kinds.

Identifiers look like ``SCHEME_OPT_20250724120830123_4821093``: the kind's
prefix, the creation time at millisecond precision with every separator
removed, and a random suffix. Uniqueness is probabilistic; the primary key
constraint remains the authority.
"""

from __future__ import annotations

import random
import re
from datetime import UTC, datetime
from typing import Callable

# Suffix bounds; the upper bound is exclusive (1..9_999_999).
SUFFIX_MIN = 1
SUFFIX_MAX = 10_000_000

_NON_ALNUM_RE = re.compile(r"[^a-zA-Z0-9]")
_system_random = random.SystemRandom()

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


def compact_timestamp(moment: datetime) -> str:
    """Format ``moment`` as yyyyMMddHHmmssSSS with non-alphanumerics stripped."""
    stamp = moment.strftime("%Y%m%d%H%M%S") + f"{moment.microsecond // 1000:03d}"
    return _NON_ALNUM_RE.sub("", stamp)


def generate_option_id(
    prefix: str,
    clock: Clock | None = None,
    rng: random.Random | None = None,
) -> str:
    """
    Build a new option identifier.

    Args:
        prefix: Kind prefix such as ``SCHEME_OPT``; used verbatim.
        clock: Returns the creation time. Defaults to the current UTC time.
        rng: Source of the random suffix. Defaults to ``random.SystemRandom``.
    """
    moment = (clock or utc_now)()
    suffix = (rng or _system_random).randrange(SUFFIX_MIN, SUFFIX_MAX)
    return f"{prefix}_{compact_timestamp(moment)}_{suffix}"
