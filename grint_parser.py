"""
TheGrint scorecard HTML parsing
Extracts hole-by-hole scores, putts, penalties and fairway codes from the
review_score page, plus round metadata and course reference tables.
"""

import logging
import re

from bs4 import BeautifulSoup

from coercion import is_numeric, scalar_text, to_nullable_int
from hole_stats import empty_hole_stats

logger = logging.getLogger(__name__)

SCORE_INPUTS = 'table[class*="user-input score"] input[class*="input-score-field"]'
PUTTS_INPUTS = (
    'table[class*="user-input optional"] tr[class*="input-putts"] '
    'input[class*="input-score-field"]'
)
PENALTY_INPUTS = 'table[class*="user-input optional"] tr[class*="input-penalties"] input[data-hole]'
FIR_INPUTS = (
    'table[class*="user-input optional"] tr[class*="input-facc"] '
    'input[type="hidden"][name^="fH"]'
)

COURSE_ID_QUERIES = [
    'input[name="course_id"]',
    'input[id="course_id"]',
    'input[name*="course"][name*="id"]',
]
TEE_QUERIES = [
    'input[name="tee"]',
    'input[id="tee"]',
    'select[name="tee"] option[selected]',
    'select[id="tee"] option[selected]',
]
COURSE_NAME_QUERIES = [
    '[class*="course-name"]',
    'h1',
    'h2',
    '[id="course_name"]',
    '[id="courseName"]',
]

# Grint tee accuracy codes (5 is "no fairway" on par 3s, so no value)
FIR_CODES = {
    '1': 'MissedLeft',
    '2': 'MissedRight',
    '3': 'Hit',
    '4': 'MissedShort',
    '6': 'MissedLong',
}

_FIR_NAME_RE = re.compile(r'^fH(\d{1,2})$')
_COURSE_ID_PREFIX_RE = re.compile(r'^\((\d+)\)')


def make_soup(html):
    """html.parser never raises on broken markup, it just recovers what it can"""
    return BeautifulSoup(html or '', 'html.parser')


def _hole_number(element):
    hole = to_nullable_int(element.get('data-hole'))
    if hole is None or hole < 1 or hole > 18:
        return None
    return hole


def _hole_entry(scores, hole):
    if hole not in scores:
        scores[hole] = {'hole': str(hole)}
    return scores[hole]


def parse_round_score_html(html):
    """
    Parse the review_score page into raw per-hole data.

    Returns:
        Dict of hole number -> {'hole', 'score', 'putts', 'penalties_raw',
        'sand_count', 'fir_code'}, only the keys found on the page
    """
    soup = make_soup(html)
    scores = {}

    for field in soup.select(SCORE_INPUTS):
        hole = _hole_number(field)
        if hole is None:
            continue
        _hole_entry(scores, hole)['score'] = field.get('data-value', '')

    for field in soup.select(PUTTS_INPUTS):
        hole = _hole_number(field)
        if hole is None:
            continue
        _hole_entry(scores, hole)['putts'] = field.get('value', '')

    for field in soup.select(PENALTY_INPUTS):
        hole = _hole_number(field)
        if hole is None:
            continue
        raw = (field.get('value') or '').strip()
        entry = _hole_entry(scores, hole)
        entry['penalties_raw'] = raw
        entry['sand_count'] = sand_count_from_raw(raw)

    for field in soup.select(FIR_INPUTS):
        match = _FIR_NAME_RE.match(field.get('name') or '')
        if not match:
            continue
        hole = int(match.group(1))
        if hole < 1 or hole > 18:
            continue
        _hole_entry(scores, hole)['fir_code'] = (field.get('value') or '').strip()

    logger.debug("Parsed %d holes from review_score HTML", len(scores))
    return scores


def fir_code_to_enum(code):
    """Grint fairway code to fairway enum, None for anything unknown"""
    return FIR_CODES.get(scalar_text(code))


def penalties_raw_to_count(raw):
    """
    Count penalty letters in the raw penalty text.
    Lowercase 's' is noise and dropped; an empty result or zero letters gives None.
    """
    raw = scalar_text(raw)
    if raw == '':
        return None
    cleaned = raw.replace('s', '').strip().upper()
    count = len(re.findall(r'[A-Z]', cleaned))
    return count if count > 0 else None


def sand_count_from_raw(raw):
    return scalar_text(raw).upper().count('S')


def infer_up_down(par, gross, putts):
    """One putt for par counts as an up-and-down; missing data infers nothing"""
    par = to_nullable_int(par)
    gross = to_nullable_int(gross)
    putts = to_nullable_int(putts)
    if par is None or gross is None or putts is None:
        return False
    return putts == 1 and gross == par


def penalties_raw_for_hole(hole_data):
    for key in ('penalties_raw', 'pen_raw', 'penalties'):
        if hole_data.get(key) is not None:
            return scalar_text(hole_data[key])
    return ''


def sand_count_for_hole(hole_data):
    """Larger of the explicit sand count and the S markers in the penalty text"""
    explicit = 0
    if is_numeric(hole_data.get('sand_count')):
        explicit = to_nullable_int(hole_data['sand_count']) or 0
    return max(explicit, sand_count_from_raw(penalties_raw_for_hole(hole_data)))


def hole_value(values, hole):
    """Entry for a hole from an array indexed by hole - 1, None when missing"""
    if not values or hole < 1 or hole - 1 >= len(values):
        return None
    return values[hole - 1]


def scores_to_hole_stats(scores, pars=None, hole_list=None):
    """
    Convert raw parsed holes into the six stat channels used by the payload.

    Args:
        scores: Output of parse_round_score_html
        pars: Per-hole pars indexed by hole - 1 (needed for up/down inference)
        hole_list: Holes to convert, all 18 by default

    Returns:
        Dict of channel -> {hole_number: value}
    """
    stats = empty_hole_stats()
    holes = hole_list if hole_list is not None else range(1, 19)

    for hole in holes:
        hole_data = scores.get(hole)
        if not hole_data:
            continue

        gross = to_nullable_int(hole_data.get('score'))
        putts = to_nullable_int(hole_data.get('putts'))
        if gross is not None:
            stats['gross'][hole] = gross
        if putts is not None:
            stats['putts'][hole] = putts

        fir = fir_code_to_enum(hole_data.get('fir_code'))
        if fir is not None:
            stats['fir'][hole] = fir

        penalty = penalties_raw_to_count(penalties_raw_for_hole(hole_data))
        if penalty is not None:
            stats['penalty'][hole] = penalty

        if sand_count_for_hole(hole_data) > 0:
            stats['sandSave'][hole] = 1

        par = hole_value(pars, hole)
        up_down = infer_up_down(par, gross, putts)
        logger.debug("UD hole %s: par=%s gross=%s putts=%s => ud=%d", hole, par, gross, putts, up_down)
        if up_down:
            stats['upDown'][hole] = 1

    return stats


def first_attribute_value(soup, queries, attribute='value'):
    """Value of the first match of the first query that yields a non-empty value"""
    for query in queries:
        node = soup.select_one(query)
        if node is None:
            continue
        value = (node.get(attribute) or '').strip()
        if value:
            return value
    return ''


def first_text(soup, queries):
    for query in queries:
        node = soup.select_one(query)
        if node is None:
            continue
        text = node.get_text().strip()
        if text:
            return text
    return ''


def get_course_id_from_string(course_name):
    """Grint course labels look like "(12345) Some Golf Club"; returns the id or None"""
    match = _COURSE_ID_PREFIX_RE.match(course_name or '')
    if match:
        return int(match.group(1))
    return None


def extract_round_meta_html(html, course_id_lookup=None):
    """
    Pull course id, tee and course name from a round page.

    Args:
        html: review_score page markup
        course_id_lookup: Optional callable deriving a course id from a course name,
            defaults to the "(id) name" prefix convention

    Returns:
        Dict with 'course_id', 'tee_color', 'course_name' (strings, '' when unknown)
    """
    soup = make_soup(html)
    meta = {
        'course_id': first_attribute_value(soup, COURSE_ID_QUERIES),
        'tee_color': first_attribute_value(soup, TEE_QUERIES),
        'course_name': first_text(soup, COURSE_NAME_QUERIES),
    }

    if meta['course_id'] == '' and meta['course_name'] != '':
        lookup = course_id_lookup or get_course_id_from_string
        course_id = lookup(meta['course_name'])
        if course_id:
            meta['course_id'] = str(course_id)

    logger.info(
        "Round meta raw: course_id=%s tee=%s course_name=%s",
        meta['course_id'], meta['tee_color'], meta['course_name'],
    )
    return meta


def _cell_values(soup, query):
    return [cell.get_text().strip() for cell in soup.select(query)]


def _single_value(soup, query):
    cell = soup.select_one(query)
    return cell.get_text().strip() if cell is not None else None


def _section_values(soup):
    out_values = _cell_values(soup, 'td[class*="data-entry"][class*="section-out"]')
    in_values = _cell_values(soup, 'td[class*="data-entry"][class*="section-in"]')
    return out_values + in_values


def parse_handicap_html(handicap_html):
    soup = make_soup(handicap_html)
    return {'hole_handicap': _section_values(soup)}


def parse_yardage_html(yardage_html):
    soup = make_soup(yardage_html)
    return {
        'hole_yardage': _section_values(soup),
        'front_yardage': _single_value(soup, 'td[class*="subtotal"][class*="section-out"]'),
        'back_yardage': _single_value(soup, 'td[class*="subtotal"][class*="section-in"]'),
        'total_yardage': _single_value(soup, 'td[class*="total"][class*="yardage"]'),
    }


def parse_par_html(par_html):
    soup = make_soup(par_html)
    return {
        'hole_par': _section_values(soup),
        'front_par': _single_value(soup, 'td[class*="subtotal"][class*="section-out"]'),
        'back_par': _single_value(soup, 'td[class*="subtotal"][class*="section-in"]'),
        'total_par': _single_value(soup, 'td[class*="total"][class*="course-par"]'),
    }


def process_course_data(course_data):
    """Course data from get_course_data holds HTML fragments for handicap, yardage and par"""
    course_data = course_data or {}
    return {
        'handicap': parse_handicap_html(course_data.get('handicap')),
        'yardage': parse_yardage_html(course_data.get('yardage')),
        'par': parse_par_html(course_data.get('par')),
    }
