"""
Translation and summary calls against the chat completions API.

Both public calls fail closed: any problem (missing key, network error,
non-2xx status, unparseable body) comes back as readable text instead of an
exception.
"""

import json
import logging

import requests

from meditrans import config
from meditrans.prompts.system_prompt import SUMMARY_PROMPT, build_translation_prompt

logger = logging.getLogger(__name__)

UNKNOWN_LANG = "unknown"
SUMMARY_FAILED = "Failed to generate summary."


class GatewayError(Exception):
    """Raised by the request helper; never leaves ``AIService``'s public calls."""


class AIService:
    def __init__(
        self,
        api_key=None,
        api_url=None,
        model=None,
        timeout=None,
        translate_temperature=None,
        summary_temperature=None,
    ):
        self.api_key = config.GROQ_API_KEY if api_key is None else api_key
        self.api_url = api_url or config.GROQ_API_URL
        self.model = model or config.MODEL_ID
        self.timeout = config.LLM_TIMEOUT if timeout is None else timeout
        self.translate_temperature = (
            config.TRANSLATE_TEMPERATURE if translate_temperature is None else translate_temperature
        )
        self.summary_temperature = (
            config.SUMMARY_TEMPERATURE if summary_temperature is None else summary_temperature
        )

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _complete(self, system_prompt: str, user_text: str, temperature: float, json_mode: bool = False) -> str:
        """Send one chat completion and return the first choice's content."""
        if not self.api_key:
            raise GatewayError("GROQ_API_KEY is not set")

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_text},
            ],
            "temperature": temperature,
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            resp = requests.post(self.api_url, headers=headers, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise GatewayError(f"Request failed: {e}") from e

        if not resp.ok:
            logger.error("Completion failed (%s): %s", resp.status_code, resp.text)
            raise GatewayError(f"Groq API Error: {resp.text}")

        try:
            content = resp.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise GatewayError(f"Malformed completion response: {e}") from e
        if not isinstance(content, str):
            raise GatewayError("Malformed completion response: content is not text")

        logger.debug("Groq raw response: %s", content)
        return content

    def translate(self, text: str, target_lang: str) -> dict:
        """
        Translate ``text`` into Spanish when ``target_lang`` is "es", English otherwise.

        Returns ``{"translatedText": ..., "detectedLang": ...}``. On failure the
        text is ``"Error: <cause>"`` and the language is ``"unknown"``.
        """
        try:
            content = self._complete(
                build_translation_prompt(target_lang),
                text,
                self.translate_temperature,
                json_mode=True,
            )
            try:
                data = json.loads(content)
            except ValueError as e:
                raise GatewayError(f"Invalid JSON from model: {e}") from e
            if not isinstance(data, dict) or not isinstance(data.get("translatedText"), str):
                raise GatewayError("Model response is missing translatedText")
            return {
                "translatedText": data["translatedText"],
                "detectedLang": data.get("detectedLanguage") or target_lang,
            }
        except GatewayError as e:
            logger.error("Translation error: %s", e)
            return {"translatedText": f"Error: {e}", "detectedLang": UNKNOWN_LANG}

    def summarize(self, transcript: str) -> str:
        """Return a Markdown visit summary, or ``SUMMARY_FAILED``."""
        try:
            return self._complete(SUMMARY_PROMPT, transcript, self.summary_temperature)
        except GatewayError as e:
            logger.error("Summary error: %s", e)
            return SUMMARY_FAILED
