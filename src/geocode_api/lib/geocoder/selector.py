"""Uniform random selection of an upstream provider endpoint."""

import secrets
from collections.abc import Sequence

from loguru import logger

from geocode_api.lib.geocoder.base import RandomSourceError


def pick_endpoint(endpoints: Sequence[str]) -> str:
    """Choose one endpoint template uniformly at random.

    Uses the OS entropy source so the upstream choice is not predictable.

    Args:
        endpoints: Non-empty sequence of URL templates.

    Returns:
        The selected template.

    Raises:
        ValueError: If ``endpoints`` is empty.
        RandomSourceError: If the entropy source is unavailable.
    """
    if not endpoints:
        msg = "At least one provider endpoint must be configured"
        raise ValueError(msg)

    try:
        index = secrets.randbelow(len(endpoints))
    except (OSError, NotImplementedError) as e:
        logger.critical(f"Failed to generate random number: {e}")
        raise RandomSourceError(f"Entropy source unavailable: {e}") from e
    return endpoints[index]
