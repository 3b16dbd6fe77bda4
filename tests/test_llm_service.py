from types import SimpleNamespace
from unittest.mock import MagicMock

from volumechat.services.llm import LLMService


def _chunk(*choices):
    return SimpleNamespace(choices=list(choices))


def _choice(delta):
    return SimpleNamespace(delta=delta)


def test_stream_chat_yields_only_text_deltas():
    client = MagicMock()
    client.chat.completions.create.return_value = iter([
        _chunk(),
        _chunk(_choice(None)),
        _chunk(_choice(SimpleNamespace(content=None))),
        _chunk(_choice(SimpleNamespace(content=""))),
        _chunk(_choice(SimpleNamespace(content="Hi"))),
    ])
    svc = LLMService(client=client, model="test-model", temperature=0.3)
    messages = [{"role": "user", "content": "hello"}]

    assert list(svc.stream_chat(messages)) == ["Hi"]
    client.chat.completions.create.assert_called_once_with(
        model="test-model",
        messages=messages,
        temperature=0.3,
        stream=True,
    )


def test_stream_chat_concatenates_in_order():
    client = MagicMock()
    client.chat.completions.create.return_value = iter([
        _chunk(_choice(SimpleNamespace(content="Hel"))),
        _chunk(_choice(SimpleNamespace(content="lo"))),
    ])
    svc = LLMService(client=client)

    assert "".join(svc.stream_chat([{"role": "user", "content": "hi"}])) == "Hello"


def test_client_is_not_built_until_streaming(monkeypatch):
    together = MagicMock()
    monkeypatch.setattr("volumechat.services.llm.Together", together)

    svc = LLMService()
    together.assert_not_called()

    together.return_value.chat.completions.create.return_value = iter([])
    assert list(svc.stream_chat([])) == []
    together.assert_called_once()
