"""Shared error handling for registry entry points.

Every registry operation except `load_named_profile` contains its failures
at its own boundary by routing them here.
"""

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


def error_handling(
    error: BaseException,
    profile_name: str | None = None,
    message: str | None = None,
    notify: Callable[[str], None] | None = None,
) -> None:
    """Log an error and surface it to the user. Never raises.

    Args:
        error: The exception being handled
        profile_name: Profile the failing operation concerned (optional)
        message: Context message; defaults to the error's own text
        notify: User-facing notifier, e.g. a prompter's show_error (optional)
    """
    text = message or str(error) or error.__class__.__name__
    if profile_name:
        logger.error(f"[{profile_name}] {text}: {error!r}")
    else:
        logger.error(f"{text}: {error!r}")

    if notify is None:
        return

    try:
        notify(f"{text} (profile: {profile_name})" if profile_name else text)
    except Exception as e:
        logger.warning(f"Failed to notify user of error: {e}")
