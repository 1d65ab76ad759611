import logging
import os
from typing import Any, Dict, Optional

from robo_maze.maze_gen.map_loader import MapSpec
from robo_maze.model_gateways.anthropic import AnthropicAdapter
from robo_maze.model_gateways.base import ModelAdapter
from robo_maze.model_gateways.mock import MockAdapter
from robo_maze.model_gateways.openai import OpenAIAdapter

logger = logging.getLogger(__name__)

_TRUE = ('1', 'true', 'True', 'yes')


def _resolve_openai_key(cfg: Dict[str, Any]) -> str:
    if cfg.get('OPENAI_API_KEY'):
        return str(cfg.get('OPENAI_API_KEY'))
    env_name = cfg.get('OPENAI_API_KEY_ENV') or os.getenv('OPENAI_API_KEY_ENV')
    if env_name:
        # Prefer environment variable value; fallback to config entry with that name
        return os.getenv(env_name) or str(cfg.get(env_name) or '')
    return os.getenv('OPENAI_API_KEY') or ''


def make_adapter_from_cfg(cfg: Dict[str, Any], map_spec: Optional[MapSpec] = None) -> ModelAdapter:
    """Pick an oracle adapter. Falls back to the mock when no key is configured."""
    model = str(cfg.get('model') or 'mock')
    provider = str(cfg.get('PROVIDER') or '').lower()
    # Heuristics: explicit provider > model prefix
    if not provider:
        if model.startswith('mock'):
            provider = 'mock'
        elif model.startswith('claude') or model.startswith('anthropic:'):
            provider = 'anthropic'
        else:
            provider = 'openai'
    if ':' in model and model.split(':', 1)[0] in ('openai', 'anthropic', 'mock'):
        model = model.split(':', 1)[1]

    if provider == 'mock':
        return MockAdapter(model=model, map_spec=map_spec)

    timeout = float(cfg.get('request_timeout') or 30)
    if provider == 'anthropic':
        key = cfg.get('ANTHROPIC_API_KEY') or os.getenv('ANTHROPIC_API_KEY') or ''
        if not key:
            logger.warning(f"No ANTHROPIC_API_KEY configured, using the mock oracle instead of {model}")
            return MockAdapter(model='mock-'+model, map_spec=map_spec)
        return AnthropicAdapter(model=model, api_key=str(key), timeout=timeout)

    if provider != 'openai':
        raise ValueError(f"Unknown provider: {provider}")
    key = _resolve_openai_key(cfg)
    if not key:
        logger.warning(f"No OpenAI API key configured, using the mock oracle instead of {model}")
        return MockAdapter(model='mock-'+model, map_spec=map_spec)
    use_sdk = cfg.get('USE_OPENAI_SDK')
    return OpenAIAdapter(
        model=model,
        api_key=key,
        api_base=cfg.get('OPENAI_API_BASE') or os.getenv('OPENAI_API_BASE') or 'https://api.openai.com/v1',
        use_sdk=True if use_sdk is None else str(use_sdk) in _TRUE,
        timeout=timeout,
    )
