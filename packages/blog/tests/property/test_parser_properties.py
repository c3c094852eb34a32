"""Property tests for turning raw response text into envelopes.

Property 1: Any body text and status yields an envelope, never an exception.
Property 2: A success envelope under a 2xx status keeps its data unchanged.
Property 3: Text that is not JSON becomes INVALID_JSON with a bounded excerpt.
Property 4: A failure envelope body keeps its code and message.
Property 5: An empty body is success under 2xx and EMPTY_ERROR_BODY otherwise.
"""

from __future__ import annotations

import json

from hypothesis import given, settings
from hypothesis import strategies as st

from blog_api.integration.api_error import EMPTY_ERROR_BODY, INVALID_JSON, UPSTREAM_JSON_ERROR
from blog_api.integration.response_parser import RAW_EXCERPT_LIMIT, parse_response_text
from blog_api.models.envelope import ApiFailure, ApiSuccess


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

ok_statuses = st.integers(min_value=200, max_value=299)
error_statuses = st.integers(min_value=400, max_value=599)
any_statuses = st.integers(min_value=100, max_value=599)
urls = st.from_regex(r"https://[a-z]{3,10}\.[a-z]{2,4}/api/[a-z]{1,10}", fullmatch=True)
error_codes = st.from_regex(r"[A-Z][A-Z_]{2,20}", fullmatch=True)
json_values = st.recursive(
    st.none() | st.booleans() | st.integers() | st.text(max_size=20),
    lambda children: st.lists(children, max_size=4)
    | st.dictionaries(st.text(max_size=8), children, max_size=4),
    max_leaves=10,
)
not_json = st.text(max_size=400).map(lambda s: "<html>" + s)


@settings(max_examples=100)
@given(text=st.text(max_size=300), status=any_statuses)
def test_parsing_never_raises(text: str, status: int) -> None:
    envelope = parse_response_text(text, status_code=status)

    assert isinstance(envelope, (ApiSuccess, ApiFailure))


@settings(max_examples=100)
@given(data=json_values, status=ok_statuses)
def test_success_data_survives_parsing(data, status: int) -> None:
    envelope = parse_response_text(json.dumps({"success": True, "data": data}), status_code=status)

    assert isinstance(envelope, ApiSuccess)
    assert envelope.data == data


@settings(max_examples=100)
@given(text=not_json, status=any_statuses, url=urls)
def test_non_json_is_invalid_json_with_excerpt(text: str, status: int, url: str) -> None:
    envelope = parse_response_text(text, status_code=status, url=url)

    assert isinstance(envelope, ApiFailure)
    assert envelope.error.code == INVALID_JSON
    assert envelope.status_code == status
    assert envelope.error.details == {"url": url, "raw": text[:RAW_EXCERPT_LIMIT]}
    assert len(envelope.error.details["raw"]) <= RAW_EXCERPT_LIMIT


@settings(max_examples=100)
@given(code=error_codes, message=st.text(min_size=1, max_size=50), status=error_statuses)
def test_failure_envelope_keeps_code_and_message(code: str, message: str, status: int) -> None:
    body = {
        "success": False,
        "statusCode": status,
        "error": {"code": code, "message": message},
    }

    envelope = parse_response_text(json.dumps(body), status_code=status)

    assert isinstance(envelope, ApiFailure)
    assert envelope.error.code == code
    assert envelope.error.message == message
    assert envelope.status_code == status


@settings(max_examples=100)
@given(data=json_values, status=any_statuses)
def test_json_without_envelope_tag_is_upstream_json_error(data, status: int) -> None:
    envelope = parse_response_text(json.dumps({"payload": data}), status_code=status)

    assert isinstance(envelope, ApiFailure)
    assert envelope.error.code == UPSTREAM_JSON_ERROR
    assert envelope.error.details["body"] == {"payload": data}


@settings(max_examples=100)
@given(status=any_statuses)
def test_empty_body_depends_on_status(status: int) -> None:
    envelope = parse_response_text("", status_code=status)

    if 200 <= status < 300:
        assert isinstance(envelope, ApiSuccess)
        assert envelope.data is None
    else:
        assert isinstance(envelope, ApiFailure)
        assert envelope.error.code == EMPTY_ERROR_BODY
