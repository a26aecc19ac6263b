"""Pytest configuration.

Puts the repository root on ``sys.path`` so ``postmark_mail`` and the
``scripts/`` entry point import the same way they do when run directly.
"""

from __future__ import annotations

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]

if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from postmark_mail.models import Message  # noqa: E402


@pytest.fixture
def message() -> Message:
    return Message(
        from_={"alice@example.com": None},
        to={"bob@example.com": "Bob, Jr."},
        subject="Hi",
        content_type="text/plain",
        body="hello",
    )


@pytest.fixture
def make_response():
    def _make(status_code: int = 200, json_body=None, text: str = ""):
        response = MagicMock()
        response.status_code = status_code
        response.text = text
        if json_body is None:
            response.json.side_effect = ValueError("No JSON object could be decoded")
        else:
            response.json.return_value = json_body
        return response

    return _make


@pytest.fixture
def session(make_response):
    session = MagicMock()
    session.post.return_value = make_response(json_body={"MessageID": "abc-123"})
    return session
