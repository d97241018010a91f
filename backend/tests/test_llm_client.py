from types import SimpleNamespace

import pytest

from app.services.llm_client import LLMClient


class _Completions:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error:
            raise self.error
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=self.reply))])


class _Messages:
    def __init__(self, reply):
        self.reply = reply
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        return SimpleNamespace(content=[SimpleNamespace(text=self.reply)])


def _client(openai=None, anthropic=None) -> LLMClient:
    client = LLMClient()
    if openai is not None:
        client._openai = SimpleNamespace(chat=SimpleNamespace(completions=openai))
    if anthropic is not None:
        client._anthropic = SimpleNamespace(messages=anthropic)
    return client


async def test_no_provider_configured():
    client = LLMClient()

    assert not client.configured
    with pytest.raises(RuntimeError, match="No LLM provider"):
        await client.complete("system", "user")


async def test_openai_primary():
    completions = _Completions(reply="  Add the room number.  ")
    client = _client(openai=completions)

    assert await client.complete("coach", "report", max_tokens=50) == "Add the room number."
    assert completions.kwargs["messages"][0] == {"role": "system", "content": "coach"}
    assert completions.kwargs["max_tokens"] == 50


async def test_falls_back_to_anthropic():
    messages = _Messages(" Mention the ladder height. ")
    client = _client(openai=_Completions(error=RuntimeError("rate limited")), anthropic=messages)

    assert await client.complete("coach", "report") == "Mention the ladder height."
    assert messages.kwargs["system"] == "coach"


async def test_all_providers_failing():
    client = _client(openai=_Completions(error=RuntimeError("rate limited")))

    with pytest.raises(RuntimeError, match="All LLM providers failed"):
        await client.complete("coach", "report")
