# tests/test_ollama_client.py
import pytest
import requests

from ollama_novelist.errors import ServiceError, TransportError
from ollama_novelist.llm.ollama_client import GenerationClient, ollama_url, strip_reasoning


class FakeResponse:
    def __init__(self, status=200, payload=None, bad_json=False):
        self.status_code = status
        self.ok = 200 <= status < 300
        self._payload = payload
        self._bad_json = bad_json

    def json(self):
        if self._bad_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.exc:
            raise self.exc
        return self.response


def _client(session, **kw):
    return GenerationClient(model="llama3", base_url="http://ollama:11434/", session=session, **kw)


def test_strip_reasoning_removes_every_block_in_order():
    raw = "<think>first</think>Once upon<think>\nsecond\n</think> a time.  "
    split = strip_reasoning(raw)
    assert split.text == "Once upon a time."
    assert split.segments == ["first", "\nsecond\n"]


def test_strip_reasoning_without_blocks_only_trims():
    assert strip_reasoning("  plain text \n").text == "plain text"
    assert strip_reasoning("plain").segments == []


def test_strip_reasoning_is_idempotent():
    once = strip_reasoning("a<think>x</think>b<think>y</think>c").text
    assert once == "abc"
    assert strip_reasoning(once).text == once


def test_generate_posts_non_streaming_request_and_cleans_reply():
    session = FakeSession(FakeResponse(payload={"response": "<think>hmm</think>\nThe title"}))
    out = _client(session).generate("Name the book")

    assert out == "The title"
    url, kwargs = session.calls[0]
    assert url == "http://ollama:11434/api/generate"
    assert kwargs["json"] == {"model": "llama3", "prompt": "Name the book", "stream": False}
    assert kwargs["timeout"] is None


def test_generate_prefixes_language_and_honours_model_override():
    session = FakeSession(FakeResponse(payload={"response": "ok"}))
    _client(session, language="French").generate("Write", model="mistral")

    body = session.calls[0][1]["json"]
    assert body["prompt"] == "Respond in the language French. Write"
    assert body["model"] == "mistral"


def test_non_success_status_is_transport_error():
    session = FakeSession(FakeResponse(status=500, payload={"error": "boom"}))
    with pytest.raises(TransportError) as ei:
        _client(session).generate("x")
    assert ei.value.status == 500


def test_unreachable_service_is_transport_error():
    session = FakeSession(exc=requests.ConnectionError("refused"))
    with pytest.raises(TransportError):
        _client(session).generate("x")


@pytest.mark.parametrize("resp", [
    FakeResponse(bad_json=True),
    FakeResponse(payload={"done": True}),
    FakeResponse(payload=["not", "a", "dict"]),
])
def test_undecodable_body_is_service_error(resp):
    with pytest.raises(ServiceError):
        _client(FakeSession(resp)).generate("x")


def test_empty_model_rejected():
    with pytest.raises(ValueError):
        GenerationClient(model="")


@pytest.mark.parametrize("host,url", [
    ("127.0.0.1:11434", "http://127.0.0.1:11434"),
    ("0.0.0.0:11434", "http://127.0.0.1:11434"),
    ("localhost", "http://localhost:11434"),
    ("https://ollama.example.com/", "https://ollama.example.com:443"),
    ("http://box:8080/proxy/", "http://box:8080/proxy"),
])
def test_ollama_url_accepts_ollama_host_values(host, url):
    assert ollama_url(host) == url


def test_client_with_bare_host_port_posts_to_full_url():
    session = FakeSession(FakeResponse(payload={"response": "ok"}))
    GenerationClient(model="llama3", base_url="127.0.0.1:11434", session=session).generate("x")
    assert session.calls[0][0] == "http://127.0.0.1:11434/api/generate"


def test_reasoning_is_logged_at_info(caplog):
    session = FakeSession(FakeResponse(payload={"response": "<think>weighing endings</think>Done"}))
    with caplog.at_level("INFO", logger="ollama_novelist.llm.ollama_client"):
        _client(session).generate("x")
    assert "Model thinking: weighing endings" in caplog.text
