from __future__ import annotations
from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Any, Mapping
import os, yaml


class SettingsError(RuntimeError):
    pass


REPLY_KEYS = ("greeting", "not_understood", "too_long", "unclear")

# environment variable -> settings attribute
_ENV_OVERRIDES = {
    "SLACK_ACCESS_TOKEN": "slack_bot_token",
    "SLACK_APP_TOKEN": "slack_app_token",
    "WIT_AI_ACCESS_TOKEN": "wit_token",
    "WOLFRAM_APP_ID": "wolfram_app_id",
    "WOLFYBOT_LOG_LEVEL": "log_level",
}

_SECRETS = ("slack_bot_token", "slack_app_token", "wit_token", "wolfram_app_id")


def _default_base_dir() -> Path:
    env = os.environ.get("WOLFYBOT_BASE_DIR")
    if env:
        return Path(env).expanduser()
    return Path.home() / ".wolfybot"


def settings_path() -> Path:
    env = os.environ.get("WOLFYBOT_CONFIG")
    if env:
        return Path(env).expanduser()
    return _default_base_dir() / "bot.yaml"


@dataclass
class BotSettings:
    slack_bot_token: str | None = None
    slack_app_token: str | None = None
    wit_token: str | None = None
    wit_api_version: str = "20240304"
    wolfram_app_id: str | None = None
    wolfram_units: str = "metric"
    wolfram_answer_timeout: int = 1000
    http_timeout: float = 15.0
    log_level: str = "INFO"
    replies: dict[str, str] = field(default_factory=dict)

    def require(self, *names: str) -> None:
        missing = [n for n in names if not getattr(self, n, None)]
        if missing:
            env_names = {attr: env for env, attr in _ENV_OVERRIDES.items()}
            hint = ", ".join(env_names.get(n, n) for n in missing)
            raise SettingsError(f"missing required settings: {hint}")

    def masked(self) -> dict[str, Any]:
        data = asdict(self)
        for key in _SECRETS:
            value = data.get(key)
            if isinstance(value, str) and value:
                data[key] = "***" + value[-4:] if len(value) > 4 else "***"
        return data


def _str_or_none(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _positive(value: Any, default: float, cast: type) -> Any:
    try:
        number = cast(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def _normalize_replies(raw: Any) -> dict[str, str]:
    if not isinstance(raw, Mapping):
        return {}
    return {k: v for k, v in raw.items() if k in REPLY_KEYS and isinstance(v, str) and v}


def _from_mapping(data: Mapping[str, Any]) -> BotSettings:
    defaults = BotSettings()
    slack = data.get("slack") if isinstance(data.get("slack"), Mapping) else {}
    wit = data.get("wit") if isinstance(data.get("wit"), Mapping) else {}
    wolfram = data.get("wolfram") if isinstance(data.get("wolfram"), Mapping) else {}
    return BotSettings(
        slack_bot_token=_str_or_none(slack.get("bot_token")),
        slack_app_token=_str_or_none(slack.get("app_token")),
        wit_token=_str_or_none(wit.get("token")),
        wit_api_version=_str_or_none(wit.get("api_version")) or defaults.wit_api_version,
        wolfram_app_id=_str_or_none(wolfram.get("app_id")),
        wolfram_units=_str_or_none(wolfram.get("units")) or defaults.wolfram_units,
        wolfram_answer_timeout=_positive(wolfram.get("answer_timeout"), defaults.wolfram_answer_timeout, int),
        http_timeout=_positive(data.get("http_timeout"), defaults.http_timeout, float),
        log_level=(_str_or_none(data.get("log_level")) or defaults.log_level).upper(),
        replies=_normalize_replies(data.get("replies")),
    )


def _to_mapping(settings: BotSettings) -> dict[str, Any]:
    return {
        "slack": {"bot_token": settings.slack_bot_token, "app_token": settings.slack_app_token},
        "wit": {"token": settings.wit_token, "api_version": settings.wit_api_version},
        "wolfram": {
            "app_id": settings.wolfram_app_id,
            "units": settings.wolfram_units,
            "answer_timeout": settings.wolfram_answer_timeout,
        },
        "http_timeout": settings.http_timeout,
        "log_level": settings.log_level,
        "replies": dict(settings.replies),
    }


def load_settings(path: Path | None = None, *, environ: Mapping[str, str] | None = None) -> BotSettings:
    """
    Read the YAML settings file (when present) and apply environment overrides.

    Environment variables always win over the file so deployments can keep
    credentials out of it entirely.
    """
    path = path or settings_path()
    env = os.environ if environ is None else environ
    data: Any = {}
    if path.exists():
        try:
            raw = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SettingsError(f"cannot read {path}: {exc}") from exc
        try:
            data = yaml.safe_load(raw) or {}
        except yaml.YAMLError as exc:
            raise SettingsError(f"cannot parse {path}: {exc}") from exc
    if not isinstance(data, Mapping):
        raise SettingsError(f"{path} must contain a mapping at the top level")
    settings = _from_mapping(data)
    for env_name, attr in _ENV_OVERRIDES.items():
        value = _str_or_none(env.get(env_name))
        if value:
            setattr(settings, attr, value.upper() if attr == "log_level" else value)
    return settings


def save_settings(settings: BotSettings, path: Path | None = None) -> Path:
    path = path or settings_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(_to_mapping(settings), allow_unicode=True, sort_keys=False), encoding="utf-8")
    return path


__all__ = ["BotSettings", "SettingsError", "REPLY_KEYS", "load_settings", "save_settings", "settings_path"]
