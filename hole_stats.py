"""
Per-hole field normalizer
Turns the sided form table into six hole-indexed channels:
gross, putts, fir, upDown, sandSave and penalty ({hole_number: value}).
"""

import logging

from coercion import (
    MAPPING,
    SEQUENCE,
    hole_index,
    raw_items,
    raw_value,
    sanitize_fir_enum,
    to_checked_int1_or_null,
    to_nullable_int,
)
from scores_table import get_scores_table_from_any_input

logger = logging.getLogger(__name__)

STAT_CHANNELS = ('gross', 'putts', 'fir', 'upDown', 'sandSave', 'penalty')

# stat channel -> (form channel name, coercion)
CHANNEL_RULES = {
    'gross': ('score', to_nullable_int),
    'putts': ('putts', to_nullable_int),
    'fir': ('fir', sanitize_fir_enum),
    'upDown': ('updown', to_checked_int1_or_null),
    'sandSave': ('sandsave', to_checked_int1_or_null),
    'penalty': ('penalty', to_nullable_int),
}

# Back nine is stored as index + 9
SIDE_OFFSETS = (('front', 0), ('back', 9))


def empty_hole_stats():
    return {channel: {} for channel in STAT_CHANNELS}


def extract_channel_by_hole(table, form_channel, coerce):
    """
    Read one channel from both sides of the table.

    Keys that are not numeric or fall outside 1..9 are skipped. Values that fail
    coercion are left out rather than stored as None.
    """
    by_hole = {}
    table = raw_value(table)
    if table.kind != MAPPING:
        return by_hole

    for side_name, offset in SIDE_OFFSETS:
        side = raw_value(table.value.get(side_name))
        if side.kind != MAPPING:
            continue
        channel = raw_value(side.value.get(form_channel))
        if channel.kind not in (MAPPING, SEQUENCE):
            continue

        for key, value in raw_items(channel):
            index = hole_index(key)
            if index is None or index < 1 or index > 9:
                continue
            coerced = coerce(value)
            if coerced is not None:
                by_hole[index + offset] = coerced

    return by_hole


def hole_stats_from_table(table):
    """All six channels from an already located table; None gives empty channels"""
    if table is None:
        return empty_hole_stats()

    stats = {}
    for channel, (form_channel, coerce) in CHANNEL_RULES.items():
        stats[channel] = extract_channel_by_hole(table, form_channel, coerce)
    return stats


def extract_hole_stats(values, raw_request=None):
    """Locate the scores table in the submitted values and normalize every channel"""
    table = get_scores_table_from_any_input(values, raw_request)
    stats = hole_stats_from_table(table)
    logger.debug(
        "Extracted hole stats: %s",
        {channel: sorted(by_hole) for channel, by_hole in stats.items()},
    )
    return stats
