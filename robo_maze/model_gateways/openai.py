import logging
import os
from typing import Optional

import requests
from openai import OpenAI, OpenAIError

from .base import ModelAdapter, OracleError

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM = 'Reply with movement arrows only (↑↓←→), no explanation.'


class OpenAIAdapter(ModelAdapter):
    def __init__(self, model: str = 'gpt-4o-mini', api_base: str = 'https://api.openai.com/v1', api_key: str | None = None, api_key_env: str | None = None, use_sdk: bool | None = None, temperature: float = 0.0, timeout: float = 30):
        self._model = model
        self.api_base = os.getenv('OPENAI_API_BASE', api_base)
        # Resolve API key: explicit > env name > default OPENAI_API_KEY
        if api_key is not None:
            self.api_key = api_key
        elif api_key_env:
            self.api_key = os.getenv(api_key_env, '')
        else:
            self.api_key = os.getenv('OPENAI_API_KEY', '')
        self.use_sdk = True if use_sdk is None else bool(use_sdk)
        self.temperature = temperature
        self.timeout = timeout

    def name(self) -> str:
        return f'openai:{self._model}'

    def _via_sdk(self, messages) -> Optional[str]:
        try:
            client = OpenAI(api_key=self.api_key, base_url=self.api_base, timeout=self.timeout)
            completion = client.chat.completions.create(model=self._model, messages=messages, temperature=self.temperature)
        except OpenAIError as e:
            logger.warning(f"OpenAI SDK call failed ({e}), retrying over HTTP")
            return None
        if not completion.choices:
            raise OracleError('OpenAI response contained no choices')
        return completion.choices[0].message.content or ''

    def generate(self, prompt: str, system: Optional[str] = None) -> str:
        messages = [
            {'role': 'system', 'content': system or DEFAULT_SYSTEM},
            {'role': 'user', 'content': prompt}
        ]
        if self.use_sdk:
            text = self._via_sdk(messages)
            if text is not None:
                return text
        url = f"{self.api_base}/chat/completions"
        headers = {
            'Authorization': f'Bearer {self.api_key}',
            'Content-Type': 'application/json'
        }
        data = {'model': self._model, 'messages': messages, 'temperature': self.temperature}
        try:
            resp = requests.post(url, headers=headers, json=data, timeout=self.timeout)
            resp.raise_for_status()
            j = resp.json()
        except requests.RequestException as e:
            raise OracleError(f'OpenAI API error: {e}') from e
        choices = j.get('choices') or []
        if not choices:
            raise OracleError('OpenAI response contained no choices')
        return choices[0]['message']['content'] or ''
