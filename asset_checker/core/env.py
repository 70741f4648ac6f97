"""asset-tool settings from a project .env file.

The file is --env-file when given, else the nearest .env at or above the
current directory that does not cross a .git boundary (dir or worktree file).

Only ASSET_TOOL_* keys are applied, and never over a variable already set in
the OS environment:

  ASSET_TOOL_CONFIG   JSON config file; a relative path is taken relative to
                      the directory holding the .env
  ASSET_TOOL_WORKERS  worker thread count for per-file scanning

Other keys in the file are ignored. Malformed lines are logged and skipped.
"""

import logging
import os
import re
from collections.abc import Mapping
from pathlib import Path

from asset_checker.core.config import CONFIG_ENV

logger = logging.getLogger('asset_checker.env')

ENV_PREFIX = 'ASSET_TOOL_'

_ASSIGNMENT = re.compile(r'^(?:export\s+)?([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*)$')


def find_dotenv(start: Path) -> Path | None:
    start = start.resolve()
    for directory in (start, *start.parents):
        if (directory / '.env').is_file():
            return directory / '.env'
        if (directory / '.git').exists():
            return None
    return None


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in '"\'':
        return value[1:-1]
    return value.split(' #', 1)[0].rstrip()


def parse_dotenv(path: Path) -> dict[str, str]:
    """KEY=value pairs of a .env file, in file order. A later key wins."""
    result: dict[str, str] = {}
    for number, line in enumerate(path.read_text(encoding='utf-8').splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith('#'):
            continue
        m = _ASSIGNMENT.match(line)
        if m is None:
            logger.warning('%s:%d: not a KEY=value line, ignored', path, number)
            continue
        result[m.group(1)] = _unquote(m.group(2).strip())
    return result


def apply_env(values: Mapping[str, str], base: Path) -> list[str]:
    """Set the ASSET_TOOL_* keys not already in os.environ. Returns the keys set."""
    applied = []
    for key, value in values.items():
        if not key.startswith(ENV_PREFIX):
            logger.debug('ignoring %s: not an asset-tool variable', key)
            continue
        if key in os.environ:
            continue
        if key == CONFIG_ENV and value and not Path(value).is_absolute():
            value = str(base / value)
        os.environ[key] = value
        applied.append(key)
    return applied


def load_env(env_file: str | None = None) -> Path | None:
    """Apply the project .env. Returns its path, or None if no file was used."""
    path = Path(env_file) if env_file else find_dotenv(Path.cwd())
    if path is None or not path.is_file():
        return None
    applied = apply_env(parse_dotenv(path), path.resolve().parent)
    logger.debug('%s: applied %s', path, ', '.join(applied) or 'nothing')
    return path
