"""
AWS Lambda Function for Golf Canada score uploads
Turns a submitted scorecard form, or a scraped TheGrint round page, into the
post-score payload Golf Canada expects.
"""

import json
import logging

from coercion import to_nullable_int
from grint_client import GrintClient, GrintTransportError
from grint_parser import extract_round_meta_html, parse_round_score_html
from payload_builder import build_post_score_payload
from scorecard_builder import ScorecardBuilder
from scorecard_config import configure_logging, get_auth_token

configure_logging()
logger = logging.getLogger(__name__)

JSON_HEADERS = {
    'Content-Type': 'application/json',
    'Access-Control-Allow-Origin': '*'
}


def _response(status_code, body):
    return {
        'statusCode': status_code,
        'headers': JSON_HEADERS,
        'body': json.dumps(body)
    }


def _provided_token(event):
    headers = event.get('headers') or {}
    token = (
        headers.get('x-auth-token') or
        headers.get('X-Auth-Token') or
        headers.get('authorization') or
        headers.get('Authorization')
    )
    if token and token.startswith('Bearer '):
        token = token[7:]
    return token


def parse_body(event):
    """
    Request body from a Function URL (JSON string), API Gateway (dict) or direct invoke
    """
    body = event.get('body')
    if isinstance(body, str):
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError as e:
            logger.warning("Body is not JSON: %s", e)
            return {}
        return parsed if isinstance(parsed, dict) else {}
    if isinstance(body, dict):
        return body
    return event


def handle_post_score(body):
    values = body.get('values')
    if not isinstance(values, dict):
        return _response(400, {'error': 'values is required'})

    payload = build_post_score_payload(values, raw_request=body.get('raw_request'))
    return _response(200, {'payload': payload.as_dict()})


def _scorecard_response(scores, meta):
    scorecard, payload = ScorecardBuilder().build(scores, meta)
    return _response(200, {
        'scorecard': scorecard,
        'payload': payload.as_dict(),
    })


def handle_scorecard(body):
    html = body.get('html')
    if not html:
        return _response(400, {'error': 'html is required'})

    meta = extract_round_meta_html(html)
    meta.update(body.get('meta') or {})
    return _scorecard_response(parse_round_score_html(html), meta)


def handle_round(body, client=None):
    round_id = to_nullable_int(body.get('round_id'))
    if round_id is None or round_id <= 0:
        return _response(400, {'error': 'round_id is required'})

    if client is None:
        client = GrintClient()
        cookies = body.get('cookies')
        if isinstance(cookies, dict):
            client.session.cookies.update(cookies)

    try:
        scores = client.get_round_score(round_id)
        meta = client.extract_round_meta(round_id)
    except GrintTransportError as e:
        logger.warning("TheGrint fetch failed for round %s: %s", round_id, e)
        return _response(502, {'error': str(e), 'error_type': type(e).__name__})

    meta.update(body.get('meta') or {})
    return _scorecard_response(scores, meta)


ACTIONS = {
    'post_score': handle_post_score,
    'scorecard': handle_scorecard,
    'round': handle_round,
}


def lambda_handler(event, context):
    """
    Lambda handler with token authentication
    Expected event body:
    {
        "action": "post_score",
        "values": {...form values...},
        "raw_request": {...optional unprocessed post...}
    }
    OR
    {
        "action": "scorecard",
        "html": "<html>...review_score page...</html>",
        "meta": {"holes_mode": "18", "gc_id": 123, ...}
    }
    OR
    {
        "action": "round",
        "round_id": 123456,
        "cookies": {...TheGrint session cookies...},
        "meta": {...optional overrides...}
    }
    """
    if not isinstance(event, dict):
        return _response(400, {'error': 'Event must be a JSON object'})

    expected_token = get_auth_token()
    if not expected_token or _provided_token(event) != expected_token:
        logger.warning("Authentication failed - invalid or missing token")
        return _response(401, {'error': 'Unauthorized - Invalid or missing authentication token'})

    body = parse_body(event)
    action = body.get('action')
    if not action:
        if body.get('html'):
            action = 'scorecard'
        elif body.get('round_id'):
            action = 'round'
        else:
            action = 'post_score'
    logger.info("Action: %s", action)

    handler = ACTIONS.get(action)
    if handler is None:
        return _response(400, {'error': f'Unknown action: {action}'})

    try:
        return handler(body)
    except Exception as e:
        logger.exception("Request failed")
        return _response(500, {
            'error': str(e),
            'error_type': type(e).__name__
        })
