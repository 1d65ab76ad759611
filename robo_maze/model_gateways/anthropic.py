import logging
import os
from typing import Optional

import requests

from .base import ModelAdapter, OracleError
from .openai import DEFAULT_SYSTEM

logger = logging.getLogger(__name__)


class AnthropicAdapter(ModelAdapter):
    def __init__(self, model: str = 'claude-3-5-sonnet-20241022', api_base: str = 'https://api.anthropic.com/v1', api_key: str | None = None, max_tokens: int = 512, timeout: float = 30):
        self._model = model
        self.api_base = api_base
        self.api_key = api_key if api_key is not None else os.getenv('ANTHROPIC_API_KEY', '')
        self.max_tokens = max_tokens
        self.timeout = timeout

    def name(self) -> str:
        return f'anthropic:{self._model}'

    def generate(self, prompt: str, system: Optional[str] = None) -> str:
        url = f"{self.api_base}/messages"
        headers = {
            'x-api-key': self.api_key,
            'anthropic-version': '2023-06-01',
            'content-type': 'application/json'
        }
        data = {
            'model': self._model,
            'max_tokens': self.max_tokens,
            'system': system or DEFAULT_SYSTEM,
            'messages': [{'role': 'user', 'content': prompt}],
            'temperature': 0.0
        }
        try:
            resp = requests.post(url, headers=headers, json=data, timeout=self.timeout)
            resp.raise_for_status()
            j = resp.json()
        except requests.RequestException as e:
            raise OracleError(f'Anthropic API error: {e}') from e
        # Claude returns content list
        blocks = [b.get('text', '') for b in j.get('content') or [] if b.get('type', 'text') == 'text']
        return ''.join(blocks)
