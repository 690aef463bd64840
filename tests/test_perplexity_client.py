from unittest.mock import MagicMock, Mock

import pytest
import requests

from config.exceptions import InferenceProtocolError, InferenceUnavailableError
from services.llm.perplexity_client import PerplexityClient

API_URL = "https://oracle.test/chat/completions"


def _response(status_code=200, payload=None, text=""):
    response = Mock()
    response.status_code = status_code
    response.text = text
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response


def _completion(content):
    return {
        "choices": [{"message": {"role": "assistant", "content": content}}],
        "usage": {"prompt_tokens": 50, "completion_tokens": 2, "total_tokens": 52},
    }


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(session):
    return PerplexityClient(
        "secret-key", API_URL, "sonar", timeout=5, max_retries=2, backoff=0, session=session
    )


def test_send_returns_raw_first_choice(client, session):
    session.post.return_value = _response(payload=_completion("  Sushi\n"))

    answer = client.send("system instruction", "quero comer sushi")

    assert answer == "  Sushi\n"
    session.post.assert_called_once()
    args, kwargs = session.post.call_args
    assert args[0] == API_URL
    assert kwargs["timeout"] == 5
    assert kwargs["headers"]["Authorization"] == "Bearer secret-key"
    assert kwargs["json"] == {
        "model": "sonar",
        "messages": [
            {"role": "system", "content": "system instruction"},
            {"role": "user", "content": "quero comer sushi"},
        ],
    }


def test_client_error_is_not_retried(client, session):
    session.post.return_value = _response(status_code=401, text="invalid key")

    with pytest.raises(InferenceUnavailableError) as exc_info:
        client.send("s", "u")

    assert exc_info.value.status_code == 401
    assert not exc_info.value.timed_out
    assert session.post.call_count == 1


def test_server_error_is_retried_then_raised(client, session):
    session.post.return_value = _response(status_code=503, text="overloaded")

    with pytest.raises(InferenceUnavailableError) as exc_info:
        client.send("s", "u")

    assert exc_info.value.status_code == 503
    assert session.post.call_count == 3  # first attempt + 2 retries


def test_transient_failure_recovers(client, session):
    session.post.side_effect = [
        requests.ConnectionError("connection reset"),
        _response(status_code=429, text="slow down"),
        _response(payload=_completion("Taco")),
    ]

    assert client.send("s", "hoje queria um taco") == "Taco"
    assert session.post.call_count == 3


def test_timeout_is_distinguishable(session):
    client = PerplexityClient("k", API_URL, timeout=0.1, max_retries=0, backoff=0, session=session)
    session.post.side_effect = requests.Timeout("read timed out")

    with pytest.raises(InferenceUnavailableError) as exc_info:
        client.send("s", "u")

    assert exc_info.value.timed_out
    assert exc_info.value.status_code is None


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"choices": []},
        {"choices": [{}]},
        {"choices": [{"message": {}}]},
        {"choices": [{"message": {"content": None}}]},
        ["not", "an", "object"],
    ],
)
def test_missing_completion_text_is_protocol_error(client, session, payload):
    session.post.return_value = _response(payload=payload)

    with pytest.raises(InferenceProtocolError):
        client.send("s", "u")
    assert session.post.call_count == 1


@pytest.mark.parametrize("usage", [5, ["tokens"], "52", None])
def test_odd_usage_block_is_ignored(client, session, usage):
    session.post.return_value = _response(
        payload={"choices": [{"message": {"content": "Sushi"}}], "usage": usage}
    )

    assert client.send("s", "u") == "Sushi"


def test_undecodable_body_is_protocol_error(client, session):
    session.post.return_value = _response(payload=ValueError("Expecting value"))

    with pytest.raises(InferenceProtocolError):
        client.send("s", "u")


def test_from_env(monkeypatch):
    monkeypatch.setenv("PERPLEXITY_API_KEY", "env-key")
    monkeypatch.setenv("PERPLEXITY_MODEL", "sonar-pro")
    monkeypatch.setenv("INFERENCE_TIMEOUT", "12.5")
    monkeypatch.setenv("INFERENCE_MAX_RETRIES", "4")

    client = PerplexityClient.from_env()

    assert client is not None
    assert client.api_key == "env-key"
    assert client.model == "sonar-pro"
    assert client.timeout == 12.5
    assert client.max_retries == 4


def test_from_env_without_key(monkeypatch):
    monkeypatch.setattr("services.llm.perplexity_client.load_dotenv", lambda: None)
    monkeypatch.delenv("PERPLEXITY_API_KEY", raising=False)
    assert PerplexityClient.from_env() is None
