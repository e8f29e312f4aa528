"""Pytest fixtures for adsbatch tests."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pytest

from adsbatch import AdsUser, AdsConfig, RetryConfig, FeatureUsageRegistry, Operation


NAMESPACE = 'https://adwords.google.com/api/adwords/cm/v201509'


@dataclass
class RecordedRequest:
    """A request captured by FakeSession."""
    method: str
    url: str
    data: Optional[bytes] = None
    headers: Dict[str, str] = field(default_factory=dict)


class FakeResponse:
    """Scripted aiohttp response usable as an async context manager."""

    def __init__(self, status: int = 200, body: str = '', headers: Optional[Dict[str, str]] = None):
        self.status = status
        self.body = body
        self.headers = headers or {}

    async def text(self, encoding: Optional[str] = None) -> str:
        return self.body

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False


class FakeSession:
    """
    Stand-in for aiohttp.ClientSession.

    Returns the scripted responses in order (an exception in the script is
    raised instead) and records every request.
    """

    def __init__(self, responses: Optional[List[Any]] = None):
        self.responses = list(responses or [])
        self.requests: List[RecordedRequest] = []
        self.closed = False

    def request(self, method: str, url: str, **kwargs):
        self.requests.append(RecordedRequest(
            method=method,
            url=url,
            data=kwargs.get('data'),
            headers=dict(kwargs.get('headers') or {})
        ))
        if not self.responses:
            raise AssertionError(f"Unexpected request: {method} {url}")
        item = self.responses.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    async def close(self):
        self.closed = True


@pytest.fixture
def config():
    """Configuration with instant retries."""
    return AdsConfig(retry=RetryConfig(max_retries=2, base_delay=0.0))


@pytest.fixture
def registry():
    return FeatureUsageRegistry()


@pytest.fixture
def make_user(config, registry):
    """Build an AdsUser around a FakeSession scripted with responses."""
    def _make(*responses):
        session = FakeSession(responses)
        return AdsUser(config=config, usage_registry=registry, session=session), session
    return _make


@pytest.fixture
def operations():
    """Two campaign operations in a fixed order."""
    return [
        Operation(
            operator='ADD',
            operand={
                'name': 'Summer sale',
                'status': 'PAUSED',
                'budget': {'budgetId': '1001'},
            },
            xsi_type='CampaignOperation'
        ),
        Operation(
            operator='SET',
            operand={'id': '42', 'status': 'ENABLED'},
            xsi_type='CampaignOperation'
        ),
    ]


@pytest.fixture
def response_xml():
    """A result document as stored in cloud storage."""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<mutateResponse xmlns="{NAMESPACE}" '
        'xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">'
        '<rval>'
        '<result><Campaign><id>9001</id><name>Summer sale</name></Campaign></result>'
        '<index>0</index>'
        '</rval>'
        '<rval>'
        '<errorList>'
        '<errors xsi:type="EntityNotFound">'
        '<fieldPath>operations[1].operand.id</fieldPath>'
        '<trigger>42</trigger>'
        '<errorString>EntityNotFound.INVALID_ID</errorString>'
        '<reason>INVALID_ID</reason>'
        '</errors>'
        '</errorList>'
        '<index>1</index>'
        '</rval>'
        '</mutateResponse>'
    )


@pytest.fixture
def respond():
    """Factory for scripted responses."""
    return FakeResponse


@pytest.fixture
def fake_session():
    """Factory for FakeSession instances."""
    return FakeSession
