"""Energy Point token allocation rules.

Pure functions over token snapshots: no database, no I/O.  The service
layer (ep_token_service) loads tokens, runs one of the transitions below and
writes the result back.

A transition always returns a state for every token it was given, in the same
order and with the same ids.  Only ``active`` and ``holder`` ever change.
"""

from dataclasses import dataclass, replace
from typing import Iterable, Sequence


@dataclass(frozen=True)
class TokenState:
    id: int
    active: bool
    holder: str


def ship_holder_id(ship_id: int) -> str:
    """Holder value meaning "in the ship pool"."""
    return f"ship:{ship_id}"


def crew_holder_id(crew_id: int) -> str:
    return f"crew:{crew_id}"


def validate_count(value: int, name: str = "count") -> int:
    """Return value if it is a non-negative int, else raise ValueError."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")
    return value


# ---------------------------------------------------------------------------
# Queries (only active tokens are ever counted)
# ---------------------------------------------------------------------------

def active_tokens(tokens: Iterable[TokenState]) -> list[TokenState]:
    return [t for t in tokens if t.active]


def holder_count(tokens: Iterable[TokenState], holder: str) -> int:
    return sum(1 for t in tokens if t.active and t.holder == holder)


def ship_token_count(tokens: Iterable[TokenState], ship_holder: str) -> int:
    """Number of active tokens sitting in the ship pool."""
    return holder_count(tokens, ship_holder)


def crew_token_count(tokens: Iterable[TokenState], crew_holder: str) -> int:
    return holder_count(tokens, crew_holder)


def crew_holds_any(tokens: Iterable[TokenState], ship_holder: str) -> bool:
    """True if any active token is held by someone other than the ship."""
    return any(t.active and t.holder != ship_holder for t in tokens)


def counts_by_holder(tokens: Iterable[TokenState]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for t in tokens:
        if t.active:
            counts[t.holder] = counts.get(t.holder, 0) + 1
    return counts


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------

def reset_active(
    tokens: Sequence[TokenState], ship_holder: str, active_count: int
) -> list[TokenState]:
    """Return every token to the ship, then activate the first active_count.

    Tokens held by crew lose their holder even if they stay active.  If
    active_count exceeds len(tokens) every token ends up active; no tokens
    are minted.
    """
    validate_count(active_count, "active_count")
    return [
        TokenState(id=t.id, active=index < active_count, holder=ship_holder)
        for index, t in enumerate(tokens)
    ]


def allocate_to_crew(
    tokens: Sequence[TokenState],
    ship_holder: str,
    crew_holder: str,
    requested: int,
) -> list[TokenState]:
    """Give crew_holder up to ``requested`` active tokens from the ship pool.

    Two phases: every active token the crew member holds goes back to the
    ship, then the first ship-held active tokens are handed over.  When the
    pool is short the crew member gets whatever is left.  Inactive tokens and
    tokens held by other crew members are returned unchanged.
    """
    validate_count(requested, "requested")
    reclaimed = [
        replace(t, holder=ship_holder) if t.active and t.holder == crew_holder else t
        for t in tokens
    ]

    remaining = min(requested, ship_token_count(reclaimed, ship_holder))
    result: list[TokenState] = []
    for t in reclaimed:
        if remaining and t.active and t.holder == ship_holder:
            t = replace(t, holder=crew_holder)
            remaining -= 1
        result.append(t)
    return result


def return_holder_to_ship(
    tokens: Sequence[TokenState], ship_holder: str, holder: str
) -> list[TokenState]:
    """Hand every active token held by ``holder`` back to the ship pool."""
    return allocate_to_crew(tokens, ship_holder, holder, 0)


def changed_tokens(
    before: Sequence[TokenState], after: Sequence[TokenState]
) -> list[TokenState]:
    """Tokens in ``after`` whose state differs from the same-id token in ``before``."""
    previous = {t.id: t for t in before}
    return [t for t in after if previous.get(t.id) != t]
