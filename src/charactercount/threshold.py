"""Threshold evaluation for count feedback visibility."""


def is_visible(count: int, limit: int, threshold: int) -> bool:
    """
    Decide whether count feedback should be shown.

    Args:
        count: Current count
        limit: Configured limit (only called when a limit exists)
        threshold: Percentage of the limit at which feedback appears;
            0 means always visible

    Returns:
        True when count has reached threshold percent of limit (inclusive)
    """
    if threshold == 0:
        return True
    # Integer comparison avoids float rounding at the boundary
    return count * 100 >= limit * threshold
