import json

import pytest

from meditrans.storage import ConversationStore, MemoryBackend


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self._body = body
        self.text = text if text is not None else json.dumps(body)

    def json(self):
        if self._body is None:
            raise ValueError("No JSON body")
        return self._body


def completion(content):
    return FakeResponse(200, {"choices": [{"message": {"role": "assistant", "content": content}}]})


class FakeTranslator:
    def __init__(self, result=None):
        self.calls = []
        self.result = result

    def translate(self, text, target_lang):
        self.calls.append((text, target_lang))
        if self.result is not None:
            return self.result
        return {"translatedText": f"[{target_lang}] {text}", "detectedLang": target_lang}


class FakeSummarizer:
    def __init__(self, *results):
        self.calls = []
        self.results = list(results) or ["## Summary"]

    def summarize(self, transcript):
        self.calls.append(transcript)
        if len(self.results) > 1:
            return self.results.pop(0)
        return self.results[0]


@pytest.fixture
def store():
    return ConversationStore(MemoryBackend())


@pytest.fixture
def translator():
    return FakeTranslator()
