"""
Scorecard builder for rounds imported from TheGrint
Resolves which holes were played, joins the scraped holes with the tee's
par/yardage/handicap tables and produces the review scorecard and payload.
"""

import logging

from coercion import hole_index, is_numeric, scalar_text, to_nullable_int
from grint_parser import (
    fir_code_to_enum,
    hole_value,
    infer_up_down,
    penalties_raw_for_hole,
    penalties_raw_to_count,
    sand_count_for_hole,
    scores_to_hole_stats,
)
from holes_played import BACK_NINE, FRONT_NINE, resolve_holes_played
from payload_builder import assemble_payload, round_metadata

logger = logging.getLogger(__name__)

# Display symbols for the fairway select
FIR_SYMBOLS = {
    '': '-',
    'Hit': '◎',
    'MissedRight': '▶',
    'MissedLeft': '◀',
    'MissedShort': '▼',
    'MissedLong': '▲',
}


def find_course_tee_names(courses, course_id, tee_id):
    """Course and tee display names from the destination's course list"""
    names = {'course': '', 'tee': ''}
    for course in courses or []:
        if to_nullable_int(course.get('id')) != course_id:
            continue
        names['course'] = scalar_text(course.get('name'))
        for tee in course.get('tees') or []:
            if to_nullable_int(tee.get('id')) == tee_id:
                names['tee'] = scalar_text(tee.get('name'))
                break
        break
    return names


def _sum_numeric(values):
    # "1e400" looks numeric but has no int value
    numbers = (to_nullable_int(value) for value in values if is_numeric(scalar_text(value)))
    return sum(number for number in numbers if number is not None)


def int_keyed_scores(scores):
    """Scraped holes keyed by int hole number; JSON round trips leave string keys"""
    keyed = {}
    for key, hole_data in (scores or {}).items():
        hole = hole_index(key)
        if hole is None or not isinstance(hole_data, dict):
            continue
        keyed.setdefault(hole, hole_data)
    return keyed


def calculate_totals(scores, pars, hole_list):
    """Gross, putts and par over the resolved holes (blank holes count as nothing)"""
    gross = _sum_numeric((scores.get(hole) or {}).get('score') for hole in hole_list)
    putts = _sum_numeric((scores.get(hole) or {}).get('putts') for hole in hole_list)
    par = _sum_numeric(hole_value(pars, hole) for hole in hole_list)
    return {
        'gross': gross,
        'putts': putts,
        'par': par,
    }


class ScorecardBuilder:
    def __init__(self, reference_provider=None):
        """
        Args:
            reference_provider: Object with get_courses(facility_id, member_id),
                get_tee_hole_arrays(facility_id, member_id, course_id, tee_id) and
                get_course_handicap(member_id, facility_id, course_id, tee_name).
                Every call is optional; failures only blank out reference data.
        """
        self.reference_provider = reference_provider

    def load_reference_data(self, meta, tee_name=''):
        """Course list, tee hole arrays and course handicap, with blank defaults"""
        reference = {
            'courses': [],
            'pars': [''] * 18,
            'yards': [''] * 18,
            'hdcp': [''] * 18,
            'par_out': '',
            'par_in': '',
            'par_total': '',
            'yards_out': '',
            'yards_in': '',
            'yards_total': '',
            'course_name': '',
            'tee_name': '',
            'course_handicap': None,
        }

        member_id = to_nullable_int(meta.get('gc_id')) or 0
        facility_id = to_nullable_int(meta.get('gc_facility_id')) or 0
        course_id = to_nullable_int(meta.get('gc_course_id')) or 0
        tee_id = to_nullable_int(meta.get('gc_tee_id')) or 0
        provider = self.reference_provider

        if provider is None:
            logger.info("No reference provider; scorecard has no par/yardage data")
            return reference

        if member_id > 0 and facility_id > 0:
            try:
                reference['courses'] = provider.get_courses(facility_id, member_id) or []
            except Exception as e:
                logger.warning("getCourses failed (non-fatal): %s", e)

        if not (member_id > 0 and facility_id > 0 and course_id > 0 and tee_id > 0):
            logger.info(
                "Ids missing; cannot load tee holes. member=%s facility=%s course=%s tee=%s",
                member_id, facility_id, course_id, tee_id,
            )
            return reference

        try:
            names = find_course_tee_names(reference['courses'], course_id, tee_id)
            reference['course_name'] = names['course']
            reference['tee_name'] = names['tee']
        except Exception as e:
            logger.warning("Course/tee name lookup failed (non-fatal): %s", e)

        try:
            hole_arrays = provider.get_tee_hole_arrays(facility_id, member_id, course_id, tee_id) or {}
            for key in ('pars', 'yards', 'hdcp', 'par_out', 'par_in', 'par_total',
                        'yards_out', 'yards_in', 'yards_total'):
                if hole_arrays.get(key) is not None:
                    reference[key] = hole_arrays[key]

            course_handicap = provider.get_course_handicap(
                member_id, facility_id, course_id, reference['tee_name'] or tee_name,
            )
            if is_numeric(course_handicap):
                reference['course_handicap'] = int(float(course_handicap))
        except Exception as e:
            logger.warning("Tee hole load / course handicap failed: %s", e)

        return reference

    def _hole_row(self, hole, hole_data, reference):
        par = hole_value(reference['pars'], hole)
        score = scalar_text(hole_data.get('score'))
        putts = scalar_text(hole_data.get('putts'))
        up_down = infer_up_down(par, score, putts)
        logger.debug("UD hole %s: par=%s gross=%s putts=%s => ud=%d", hole, par, score, putts, up_down)

        par_three = is_numeric(scalar_text(par)) and to_nullable_int(par) == 3
        fir = fir_code_to_enum(hole_data.get('fir_code'))

        return {
            'hole': hole,
            'yards': hole_value(reference['yards'], hole) or '',
            'hdcp': hole_value(reference['hdcp'], hole) or '',
            'par': par if par is not None else '',
            'score': score,
            'putts': putts,
            # Par 3s have no fairway to hit
            'show_fir': not par_three,
            'fir': None if par_three else fir,
            'fir_symbol': '—' if par_three else FIR_SYMBOLS.get(fir or '', '-'),
            'penalty': penalties_raw_to_count(penalties_raw_for_hole(hole_data)),
            'updown': up_down,
            'sandsave': sand_count_for_hole(hole_data) > 0,
        }

    def build(self, scores, meta=None):
        """Scorecard and payload together, loading reference data once"""
        meta = meta or {}
        reference = self.load_reference_data(meta, tee_name=scalar_text(meta.get('tee_color')))
        return (
            self.build_scorecard(scores, meta, reference=reference),
            self.build_payload(scores, meta, reference=reference),
        )

    def build_scorecard(self, scores, meta=None, reference=None):
        """
        Build the review scorecard for a scraped round.

        Args:
            scores: Raw per-hole data from parse_round_score_html
            meta: Round metadata: holes_mode, course_name, tee_color and gc_* ids
            reference: Already loaded reference data, loaded here when omitted

        Returns:
            Dict with hole list, per-side rows, out/in/total par and yardage,
            totals and the normalized stat channels
        """
        meta = meta or {}
        scores = int_keyed_scores(scores)
        hole_list, holes_played, holes_mode = resolve_holes_played(meta.get('holes_mode', '18'), scores)

        grint_course_name = scalar_text(meta.get('course_name'))
        grint_tee_color = scalar_text(meta.get('tee_color'))
        if reference is None:
            reference = self.load_reference_data(meta, tee_name=grint_tee_color)

        par_out, par_in, par_total = reference['par_out'], reference['par_in'], reference['par_total']
        yards_out, yards_in, yards_total = reference['yards_out'], reference['yards_in'], reference['yards_total']

        if holes_mode in (FRONT_NINE, BACK_NINE):
            par_total = str(_sum_numeric(hole_value(reference['pars'], hole) for hole in hole_list))
            yards_total = str(_sum_numeric(hole_value(reference['yards'], hole) for hole in hole_list))
            if holes_mode == FRONT_NINE:
                par_out, yards_out, par_in, yards_in = par_total, yards_total, '', ''
            else:
                par_in, yards_in, par_out, yards_out = par_total, yards_total, '', ''

        front_rows = [self._hole_row(hole, scores.get(hole) or {}, reference)
                      for hole in hole_list if hole <= 9]
        back_rows = [self._hole_row(hole, scores.get(hole) or {}, reference)
                     for hole in hole_list if hole >= 10]

        totals = calculate_totals(scores, reference['pars'], hole_list)
        totals['yards'] = _sum_numeric(hole_value(reference['yards'], hole) for hole in hole_list)

        return {
            'holes_mode': holes_mode,
            'holes_played': holes_played,
            'hole_list': hole_list,
            'course_name': reference['course_name'] or grint_course_name,
            'tee_name': reference['tee_name'] or grint_tee_color,
            'course_handicap': reference['course_handicap'],
            'front': front_rows if holes_mode != BACK_NINE else None,
            'back': back_rows if holes_mode != FRONT_NINE else None,
            'par_out': par_out,
            'par_in': par_in,
            'par_total': par_total,
            'yards_out': yards_out,
            'yards_in': yards_in,
            'yards_total': yards_total,
            'totals': totals,
            'stats': scores_to_hole_stats(scores, reference['pars'], hole_list),
        }

    def build_payload(self, scores, meta=None, reference=None):
        """Outbound post-score payload straight from scraped holes"""
        meta = meta or {}
        scores = int_keyed_scores(scores)
        hole_list, holes_played, _ = resolve_holes_played(meta.get('holes_mode', '18'), scores)
        if reference is None:
            reference = self.load_reference_data(meta, tee_name=scalar_text(meta.get('tee_color')))
        stats = scores_to_hole_stats(scores, reference['pars'], hole_list)
        return assemble_payload(hole_list, holes_played, stats, round_metadata(meta))
