"""
Thin HTTP wrapper around TheGrint pages used by the uploader
Logging in and keeping the session alive is the caller's job: pass in an
authenticated requests.Session.
"""

import logging

import requests

from grint_parser import (
    extract_round_meta_html,
    get_course_id_from_string,
    parse_round_score_html,
    process_course_data,
)
from scorecard_config import get_grint_config

logger = logging.getLogger(__name__)


class GrintTransportError(Exception):
    pass


class GrintClient:
    def __init__(self, session=None, base_url=None, timeout=None):
        config = get_grint_config()
        self.session = session or requests.Session()
        self.base_url = (base_url or config['base_url']).rstrip('/')
        self.timeout = timeout or config['timeout']

    def _url(self, uri):
        return f"{self.base_url}/{uri.lstrip('/')}"

    def get_request(self, uri):
        """Fetch a page and return its body text"""
        try:
            response = self.session.get(self._url(uri), timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise GrintTransportError(f"GET {uri} failed: {e}") from e
        return response.text

    def post_request(self, uri, payload=None):
        """POST form fields and decode the JSON response"""
        try:
            response = self.session.post(self._url(uri), data=payload, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            raise GrintTransportError(f"POST {uri} failed: {e}") from e
        except ValueError as e:
            raise GrintTransportError(f"POST {uri} returned invalid JSON: {e}") from e

    def get_round_score(self, round_id):
        """
        Raw per-hole data for a round.
        Nine-hole rounds are only rendered on the /9 variant of the page, so that is
        tried when the full page has no holes.
        """
        round_id = int(round_id or 0)
        if round_id <= 0:
            return {}

        scores = parse_round_score_html(self.get_request(f'/score/review_score/{round_id}'))
        if scores:
            return scores

        logger.info("No holes on review_score/%s, trying the 9 hole page", round_id)
        return parse_round_score_html(self.get_request(f'/score/review_score/{round_id}/9'))

    def extract_round_meta(self, round_id):
        html = self.get_request(f'/score/review_score/{int(round_id)}')
        logger.info("Fetched review_score HTML length=%d for roundId=%s", len(html), round_id)
        return extract_round_meta_html(html, course_id_lookup=get_course_id_from_string)

    def get_course_data(self, course_id, tee_color, round_holes=18):
        """Par, yardage and handicap tables for a course and tee"""
        payload = {
            'course_id': course_id,
            'tee': tee_color,
            'round': round_holes,
        }
        return process_course_data(self.post_request('/ajax/get_course_data/0/0/0', payload))
