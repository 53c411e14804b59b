import pytest
import requests

from src.absence_dashboard.absence_dashboard.api.client import ApiClient, ApiConfig
from src.absence_dashboard.absence_dashboard.core.exceptions import ApiError


class StubResponse:
    def __init__(self, status_code=200, payload=None, raw=False):
        self.status_code = status_code
        self._payload = payload
        self._raw = raw

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._raw:
            raise ValueError("not json")
        return self._payload


class StubSession:
    def __init__(self, response=None, error=None):
        self.response = response or StubResponse()
        self.error = error
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.error:
            raise self.error
        return self.response


CONFIG = ApiConfig(base_url="http://api.test/", timeout=3)


def test_get_builds_url_params_and_timeout():
    session = StubSession(StubResponse(payload=[{"id": 1}]))
    client = ApiClient(CONFIG, session=session)

    assert client.get("/api/eventos", params={"status": "pendente", "grupo_id": None}) == [{"id": 1}]

    method, url, kwargs = session.calls[0]
    assert method == "GET"
    assert url == "http://api.test/api/eventos"
    assert kwargs["params"] == {"status": "pendente"}
    assert kwargs["timeout"] == 3
    assert "Authorization" not in kwargs["headers"]


def test_with_token_sends_bearer_and_shares_session():
    session = StubSession()
    client = ApiClient(CONFIG, session=session).with_token("abc")

    client.post("/api/eventos", {"x": 1})

    _, _, kwargs = session.calls[0]
    assert kwargs["headers"]["Authorization"] == "Bearer abc"
    assert kwargs["json"] == {"x": 1}
    assert client.access_token == "abc"


def test_error_response_carries_message_and_status():
    session = StubSession(StubResponse(status_code=403, payload={"erro": "Sem permissao"}))
    with pytest.raises(ApiError) as exc:
        ApiClient(CONFIG, session=session).delete("/api/eventos/1")
    assert exc.value.status_code == 403
    assert str(exc.value) == "Sem permissao"


def test_non_json_error_body_uses_generic_message():
    session = StubSession(StubResponse(status_code=500, raw=True))
    with pytest.raises(ApiError) as exc:
        ApiClient(CONFIG, session=session).get("/api/ufs")
    assert exc.value.status_code == 500
    assert str(exc.value) == "Request failed"


def test_network_failure_becomes_api_error():
    session = StubSession(error=requests.ConnectionError("refused"))
    with pytest.raises(ApiError) as exc:
        ApiClient(CONFIG, session=session).get("/api/ufs")
    assert exc.value.status_code is None
