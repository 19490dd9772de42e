from datetime import date, datetime, timezone

from correlation_bot.models import OwnerState


def today() -> date:
    return datetime.now(timezone.utc).date()


def consume_post_quota(state: OwnerState, day: date, limit: int) -> bool:
    """Count one channel post against the owner's daily quota.

    Returns ``False`` without counting when the quota is used up. A limit of
    zero or less disables the check.
    """
    if state.posts_day != day:
        state.posts_day = day
        state.posts_today = 0
    if limit > 0 and state.posts_today >= limit:
        return False
    state.posts_today += 1
    return True


def release_post_quota(state: OwnerState, day: date) -> None:
    """Give back a slot taken by a post that never reached the channel."""
    if state.posts_day == day and state.posts_today > 0:
        state.posts_today -= 1
