"""
Scores table locator
Finds the front/back scores table wherever the submitted form nested it
(AJAX rebuilds wrap it at varying depths).
"""

import logging

from coercion import MAPPING, SEQUENCE, hole_index, raw_items, raw_value

logger = logging.getLogger(__name__)

TABLE_KEY = 'scores_table'
SIDES = ('front', 'back')
FORM_CHANNELS = ('score', 'putts', 'fir', 'updown', 'sandsave', 'penalty')


def _has_numeric_key(channel):
    return any(hole_index(key) is not None for key, _ in raw_items(channel))


def looks_like_scores_table(node, require_both_sides=False):
    """
    Check whether a node has the shape of a sided channel table.

    Nine-hole rounds only submit one side, so by default front-only or back-only
    tables are accepted. require_both_sides=True restores the older strict check.
    """
    node = raw_value(node)
    if node.kind != MAPPING:
        return False

    present = [side for side in SIDES if side in node.value]
    if not present:
        return False
    if require_both_sides and len(present) != len(SIDES):
        return False

    sides = [raw_value(node.value[side]) for side in present]
    if any(side.kind != MAPPING for side in sides):
        return False

    for side in sides:
        for channel_name in FORM_CHANNELS:
            if channel_name not in side.value:
                continue
            channel = raw_value(side.value[channel_name])
            if channel.kind in (MAPPING, SEQUENCE) and _has_numeric_key(channel):
                return True

    return False


def find_scores_table(data, require_both_sides=False):
    """Depth-first search for the first node that looks like a scores table"""
    node = raw_value(data)
    if node.kind not in (MAPPING, SEQUENCE):
        return None

    if node.kind == MAPPING:
        candidate = node.value.get(TABLE_KEY)
        if candidate is not None and looks_like_scores_table(candidate, require_both_sides):
            return candidate
        if looks_like_scores_table(node, require_both_sides):
            return node.value

    for _, child in raw_items(node):
        if raw_value(child).kind in (MAPPING, SEQUENCE):
            found = find_scores_table(child, require_both_sides)
            if found is not None:
                return found

    return None


def get_scores_table_from_any_input(values, raw_request=None, require_both_sides=False):
    """
    Locate the scores table in processed form values, falling back to the raw request.

    Args:
        values: Processed form values (any nesting)
        raw_request: Unprocessed submitted payload, or a callable returning it
        require_both_sides: Use the strict front-and-back predicate

    Returns:
        The scores table mapping, or None when neither source has one
    """
    table = find_scores_table(values, require_both_sides)
    if table is not None:
        return table

    if raw_request is None:
        return None

    if callable(raw_request):
        try:
            raw_request = raw_request()
        except Exception as e:
            logger.warning("Raw request fallback unavailable: %s", e)
            return None

    table = find_scores_table(raw_request, require_both_sides)
    if table is None:
        logger.info("No scores table found in form values or raw request")
    return table
