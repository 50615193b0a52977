"""
Golf Canada post-score payload assembly
Merges the normalized hole channels, the resolved hole list and the round
metadata into the destination's exact schema.
"""

import logging
from datetime import date, datetime
from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from coercion import is_filled, scalar_text, to_nullable_int
from hole_stats import STAT_CHANNELS, extract_hole_stats
from holes_played import resolve_holes_played

logger = logging.getLogger(__name__)

FirValue = Literal['Hit', 'MissedRight', 'MissedLeft', 'MissedShort', 'MissedLong', 'MissedUnspecified']


class HoleScore(BaseModel):
    # Field names are the destination's; upDown/sandSave must be 1 or null, never bool
    model_config = ConfigDict(frozen=True)

    number: float
    gross: Optional[int] = None
    putts: Optional[int] = None
    puttLength: Optional[float] = None
    club: Optional[str] = None
    drive: Optional[float] = None
    fir: Optional[FirValue] = None
    upDown: Optional[Literal[1]] = None
    sandSave: Optional[Literal[1]] = None
    penalty: Optional[int] = None
    max: Optional[int] = None


class PostScorePayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: Optional[int] = None
    individualId: Optional[int] = None
    date: str = ''
    courseId: Optional[int] = None
    teeId: Optional[int] = None
    holesPlayed: Literal['FrontNine', 'BackNine', 'EighteenHoles'] = 'EighteenHoles'
    formatPlayed: Literal['StrokePlay', 'MatchPlay'] = 'StrokePlay'
    esc: Optional[int] = None
    holeScores: Tuple[HoleScore, ...] = ()
    isHoleByHole: bool = True
    isHoleByHoleRequired: bool = False
    isTrackingStats: bool = True
    isTournament: bool = False
    isPenalty: bool = False
    attestor: Optional[str] = None
    isPlayedAlone: bool = False
    facilityId: Optional[int] = None

    def as_dict(self):
        """Plain dict ready for json.dumps"""
        data = self.model_dump()
        data['holeScores'] = list(data['holeScores'])
        return data


def date_to_iso_no_ms(played_date):
    """Bare date to "YYYY-MM-DDT00:00:00"; no timezone handling, '' stays ''"""
    if isinstance(played_date, datetime):
        played_date = played_date.date()
    if isinstance(played_date, date):
        return played_date.isoformat() + 'T00:00:00'
    played_date = scalar_text(played_date)
    if played_date == '':
        return ''
    return played_date + 'T00:00:00'


def format_to_enum(round_format):
    return 'MatchPlay' if scalar_text(round_format) == 'match' else 'StrokePlay'


def clean_attestor(attestor):
    attestor = scalar_text(attestor)
    return attestor or None


def _id_or_none(value):
    # 0, blank and junk all mean "not provided"
    number = to_nullable_int(value)
    return number or None


def sum_gross(gross_by_hole, hole_list):
    """Total gross over the resolved holes; None when no hole has a score"""
    present = [gross_by_hole[hole] for hole in hole_list if gross_by_hole.get(hole) is not None]
    if not present:
        return None
    return sum(present)


def build_hole_scores(hole_list, stats):
    """One HoleScore per resolved hole, ascending; missing channels stay None"""
    hole_scores = []
    for hole in sorted(hole_list):
        hole_scores.append(HoleScore(
            number=float(hole),
            gross=stats.get('gross', {}).get(hole),
            putts=stats.get('putts', {}).get(hole),
            fir=stats.get('fir', {}).get(hole),
            upDown=stats.get('upDown', {}).get(hole),
            sandSave=stats.get('sandSave', {}).get(hole),
            penalty=stats.get('penalty', {}).get(hole),
        ))
    return tuple(hole_scores)


def round_metadata(values):
    """Pick the round metadata out of flat form values"""
    played_date = values.get('played_date')
    if played_date is None:
        played_date = values.get('scorecard_date', '')

    return {
        'individual_id': _id_or_none(values.get('gc_id')),
        'facility_id': _id_or_none(values.get('gc_facility_id')),
        'course_id': _id_or_none(values.get('gc_course_id')),
        'tee_id': _id_or_none(values.get('gc_tee_id')),
        'played_date': played_date,
        'format': values.get('format', 'stroke'),
        'is_tournament': is_filled(values.get('tournament_score')),
        'is_played_alone': scalar_text(values.get('played_alone', 'no')) == 'yes',
        'attestor': values.get('attestor', ''),
    }


def assemble_payload(hole_list, holes_played, stats, metadata):
    """
    Build the outbound payload.

    Args:
        hole_list: Resolved hole numbers
        holes_played: Destination holes enum (FrontNine, BackNine, EighteenHoles)
        stats: Dict of channel -> {hole_number: value}
        metadata: Output of round_metadata (or the same keys from another source)

    Returns:
        Frozen PostScorePayload
    """
    hole_scores = build_hole_scores(hole_list, stats)
    esc = sum_gross(stats.get('gross', {}), hole_list)

    payload = PostScorePayload(
        individualId=metadata.get('individual_id'),
        date=date_to_iso_no_ms(metadata.get('played_date')),
        courseId=metadata.get('course_id'),
        teeId=metadata.get('tee_id'),
        holesPlayed=holes_played,
        formatPlayed=format_to_enum(metadata.get('format')),
        esc=esc,
        holeScores=hole_scores,
        # The destination turns on stats tracking whenever holeScores is sent,
        # whatever the channels contain, so this is not computed per field.
        isTrackingStats=True,
        isTournament=bool(metadata.get('is_tournament')),
        attestor=clean_attestor(metadata.get('attestor')),
        isPlayedAlone=bool(metadata.get('is_played_alone')),
        facilityId=metadata.get('facility_id'),
    )

    logger.info(
        "Assembled payload: holesPlayed=%s holes=%d esc=%s",
        holes_played, len(hole_scores), esc,
    )
    return payload


def build_post_score_payload(values, raw_request=None):
    """
    Form path end to end: locate the table, normalize, resolve holes, assemble.

    Args:
        values: Submitted form values, any nesting
        raw_request: Unprocessed request payload (or callable) used when the
            scores table is not in values
    """
    stats = extract_hole_stats(values, raw_request)
    hole_list, holes_played, _ = resolve_holes_played(values.get('holes_mode', '18'))
    return assemble_payload(hole_list, holes_played, stats, round_metadata(values))


def hole_stats_from_payload(payload):
    """Re-derive the channel mappings from a payload (dict or PostScorePayload)"""
    if isinstance(payload, PostScorePayload):
        payload = payload.as_dict()

    stats = {channel: {} for channel in STAT_CHANNELS}
    for hole_score in payload.get('holeScores', []):
        hole = int(hole_score['number'])
        for channel in STAT_CHANNELS:
            if hole_score.get(channel) is not None:
                stats[channel][hole] = hole_score[channel]
    return stats
