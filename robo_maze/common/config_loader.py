from pathlib import Path
from typing import Dict, Optional
import logging
import os
import yaml

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

ENV_KEYS = [
    'OPENAI_API_KEY', 'ANTHROPIC_API_KEY', 'model', 'output_dir', 'OPENAI_API_BASE', 'OPENAI_API_KEY_ENV', 'USE_OPENAI_SDK',
    # Provider selector
    'PROVIDER',
    'LOG_LEVEL', 'LOG_FILE',
]


def load_config(config_dir: Optional[str] = None) -> Dict:
    """config/config.yaml, then config/local.yaml, then environment overrides."""
    base_dir = Path(config_dir or 'config')
    base = base_dir / 'config.yaml'
    local = base_dir / 'local.yaml'
    cfg: Dict = {}
    if base.exists():
        cfg.update(yaml.safe_load(base.read_text(encoding='utf-8')) or {})
    if local.exists():
        loc = yaml.safe_load(local.read_text(encoding='utf-8')) or {}
        cfg.update(loc)
    # Pull overrides from environment
    for k in ENV_KEYS:
        if os.getenv(k) is not None:
            cfg[k] = os.getenv(k)
    return cfg


def apply_env_keys(cfg: Dict):
    keys = ['OPENAI_API_KEY', 'ANTHROPIC_API_KEY', 'OPENAI_API_BASE', 'OPENAI_API_KEY_ENV', 'USE_OPENAI_SDK', 'PROVIDER']
    for k in keys:
        v = cfg.get(k)
        if v is not None:
            os.environ[k] = str(v)


def setup_logging(level: str = 'INFO', file: Optional[str] = None, fmt: str = DEFAULT_FORMAT) -> None:
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if file:
        log_path = Path(file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(file, encoding='utf-8'))
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO), format=fmt, handlers=handlers, force=True)
    # Reduce noise from third-party libraries
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('openai').setLevel(logging.WARNING)
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logger.debug(f"Logging configured at level {level}")


def setup_logging_from_cfg(cfg: Dict) -> None:
    log_cfg = cfg.get('logging') or {}
    setup_logging(
        level=cfg.get('LOG_LEVEL') or log_cfg.get('level') or 'INFO',
        file=cfg.get('LOG_FILE') or log_cfg.get('file'),
        fmt=log_cfg.get('format') or DEFAULT_FORMAT,
    )
