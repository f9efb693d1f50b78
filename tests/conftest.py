from unittest.mock import MagicMock

import pytest

from nova_poshta.client import NovaPoshtaClient
from nova_poshta.config import ClientConfig, Language


def make_response(payload=None, status_code=200, content=b""):
    """A stand-in for requests.Response."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 400
    resp.reason = "OK" if resp.ok else "Error"
    resp.content = content
    resp.__enter__.return_value = resp
    if isinstance(payload, Exception):
        resp.json.side_effect = payload
    else:
        resp.json.return_value = payload
    return resp


def ok(*rows):
    return make_response({"success": True, "data": list(rows), "errors": []})


def rejected(*errors):
    return make_response({"success": False, "data": [], "errors": list(errors)})


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def client(session):
    return NovaPoshtaClient(ClientConfig(api_key="test-key", limit=20, language=Language.UA), session)


def sent_envelope(session, call_index=0):
    """The JSON envelope passed to session.post on the given call."""
    return session.post.call_args_list[call_index].kwargs["json"]
