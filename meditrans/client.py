"""
HTTP client for the MediTrans API.

Exposes the same ``translate``/``summarize`` calls as ``AIService`` so the
session can talk to either one.
"""

import logging

import requests

from meditrans import config
from meditrans.ai import SUMMARY_FAILED, UNKNOWN_LANG

logger = logging.getLogger(__name__)

CONNECTION_ERROR = "Connection Error"


class ApiClient:
    def __init__(self, base_url=None, timeout=None):
        self.base_url = (base_url or config.API_URL).rstrip("/")
        self.timeout = config.LLM_TIMEOUT if timeout is None else timeout

    def _post(self, path: str, payload: dict) -> dict:
        resp = requests.post(f"{self.base_url}{path}", json=payload, timeout=self.timeout)
        data = resp.json()
        if not isinstance(data, dict):
            raise ValueError(f"Unexpected response from {path}")
        return data

    def translate(self, text: str, target_lang: str) -> dict:
        try:
            data = self._post("/api/translate", {"text": text, "targetLang": target_lang})
        except (requests.RequestException, ValueError) as e:
            logger.error("Translation request failed: %s", e)
            return {"translatedText": CONNECTION_ERROR, "detectedLang": UNKNOWN_LANG}

        if data.get("translatedText"):
            return {
                "translatedText": data["translatedText"],
                "detectedLang": data.get("detectedLang", UNKNOWN_LANG),
            }
        error = data.get("error") or "Unknown Error"
        return {"translatedText": f"Error: {error}", "detectedLang": UNKNOWN_LANG}

    def summarize(self, transcript: str) -> str:
        try:
            data = self._post("/api/summary", {"text": transcript})
        except (requests.RequestException, ValueError) as e:
            logger.error("Summary request failed: %s", e)
            return SUMMARY_FAILED
        return data.get("summary") or SUMMARY_FAILED
