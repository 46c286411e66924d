import json
import os
import sys
from pathlib import Path

from learnvid.errors import ConfigurationError

API_KEY_ENV = "REKA_API_KEY"
API_KEY_CONFIG_ENTRY = "reka_api_key"
CONFIG_PATH = Path(os.environ.get("LEARNVID_CONFIG", Path.home() / ".config" / "learnvid" / "config.json"))
DUMP_DIR = Path(os.environ["LEARNVID_DUMP_DIR"]) if os.environ.get("LEARNVID_DUMP_DIR") else None


def load_config(path: Path | None = None) -> dict:
    p = path or CONFIG_PATH
    if not p.exists():
        return {}
    try:
        data = json.loads(p.read_text())
    except (OSError, ValueError) as exc:
        raise ConfigurationError(f"Could not read config file {p}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {p} must contain a JSON object")
    return data


def api_key(config_path: Path | None = None) -> str:
    key = os.environ.get(API_KEY_ENV, "").strip()
    if key:
        return key
    key = str(load_config(config_path).get(API_KEY_CONFIG_ENTRY) or "").strip()
    if key:
        return key
    raise ConfigurationError(
        f"Reka API key is required. Set the {API_KEY_ENV} environment variable "
        f"or '{API_KEY_CONFIG_ENTRY}' in {config_path or CONFIG_PATH}"
    )


def check(needs_api_key: bool = False, config_path: Path | None = None) -> list[str]:
    errors = []

    if needs_api_key:
        try:
            api_key(config_path)
        except ConfigurationError as exc:
            errors.append(str(exc))

    return errors


def require(needs_api_key: bool = False, config_path: Path | None = None):
    errors = check(needs_api_key=needs_api_key, config_path=config_path)
    if errors:
        print("Missing requirements:", file=sys.stderr)
        for e in errors:
            print(f"  - {e}", file=sys.stderr)
        sys.exit(1)
