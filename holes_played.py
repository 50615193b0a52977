"""
Holes-played resolver
Turns the declared holes mode into the list of holes for the round and can
self-heal an "18" declaration when only nine holes were actually entered.
"""

import logging

from coercion import is_numeric, scalar_text, to_nullable_int

logger = logging.getLogger(__name__)

FRONT_NINE = 'front9'
BACK_NINE = 'back9'
EIGHTEEN = '18'
HOLES_MODES = (EIGHTEEN, FRONT_NINE, BACK_NINE)

HOLES_MODE_ENUMS = {
    FRONT_NINE: 'FrontNine',
    BACK_NINE: 'BackNine',
    EIGHTEEN: 'EighteenHoles',
}

# Secondary fields that only show up on holes somebody actually played
PLAYED_SIGNALS = ('fir_code', 'penalties_raw', 'pen_raw', 'penalties', 'sand_count')


def normalize_holes_mode(holes_mode):
    """Known mode token, anything unrecognised becomes '18'"""
    token = scalar_text(holes_mode)
    return token if token in HOLES_MODES else EIGHTEEN


def holes_list_from_mode(holes_mode):
    token = normalize_holes_mode(holes_mode)
    if token == FRONT_NINE:
        return list(range(1, 10))
    if token == BACK_NINE:
        return list(range(10, 19))
    return list(range(1, 19))


def holes_mode_to_enum(holes_mode):
    return HOLES_MODE_ENUMS[normalize_holes_mode(holes_mode)]


def _positive_number(value):
    if not is_numeric(scalar_text(value)):
        return False
    number = to_nullable_int(value)
    return number is not None and number > 0


def hole_looks_played(hole_data):
    """A hole counts as played if it has a positive score or putts, or any secondary signal"""
    if not hole_data:
        return False
    if _positive_number(hole_data.get('score')):
        return True
    if _positive_number(hole_data.get('putts')):
        return True

    for key in PLAYED_SIGNALS:
        text = scalar_text(hole_data.get(key))
        if text not in ('', '0'):
            return True

    return False


def infer_holes_mode_from_scores(scores):
    """
    Guess which holes were played from the per-hole data.

    Args:
        scores: Dict of hole number -> raw hole dict (score, putts, fir_code, ...)

    Returns:
        'front9', 'back9' or '18'
    """
    played = []
    for hole in range(1, 19):
        hole_data = scores.get(hole) or scores.get(str(hole))
        if isinstance(hole_data, dict) and hole_looks_played(hole_data):
            played.append(hole)

    logger.debug("Played holes=%s count=%d", played, len(played))

    # Nothing to go on, or too many holes for a half round
    if not played or len(played) > 11:
        return EIGHTEEN

    front = len([hole for hole in played if hole <= 9])
    back = len(played) - front

    if back == 0:
        return FRONT_NINE
    if front == 0:
        return BACK_NINE
    if len(played) <= 10:
        return FRONT_NINE if front >= back else BACK_NINE

    return EIGHTEEN


def resolve_holes_played(holes_mode, scores=None):
    """
    Resolve the holes for a round.

    Inference only runs when the declared mode is 18 and per-hole data is given;
    an explicit front9/back9 declaration is always kept.

    Returns:
        Tuple of (hole_list, holes_played_enum, mode_token)
    """
    token = normalize_holes_mode(holes_mode)

    if token == EIGHTEEN and scores:
        inferred = infer_holes_mode_from_scores(scores)
        if inferred != EIGHTEEN:
            logger.info("Holes mode overridden by inference: from=18 to=%s", inferred)
            token = inferred

    return holes_list_from_mode(token), HOLES_MODE_ENUMS[token], token
