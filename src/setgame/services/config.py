from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from setgame.engine.game import GameConfig


class ConfigError(RuntimeError):
    def __init__(self, message: str, problems: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.problems = problems


def _read_rules_file(path: Path) -> object:
    if not path.is_file():
        raise ConfigError(f"Missing config file: {path}")
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path} (line {e.lineno}): {e.msg}") from e


def schema_problems(instance: object, schema: object) -> tuple[str, ...]:
    """`path: message` for each violation, ordered by path."""
    validator = Draft202012Validator(schema)
    found = []
    for err in validator.iter_errors(instance):
        loc = "/".join(str(p) for p in err.absolute_path) or "<root>"
        found.append(f"{loc}: {err.message}")
    return tuple(sorted(found))


def validate_json(instance: object, schema: object, *, context: str) -> None:
    problems = schema_problems(instance, schema)
    if problems:
        shown = "\n".join(f"- {p}" for p in problems[:10])
        raise ConfigError(f"Schema validation failed for {context}:\n{shown}", problems)


def _require_section(obj: Mapping[str, object], key: str) -> Mapping[str, object]:
    v = obj.get(key)
    if not isinstance(v, dict):
        raise ConfigError(f"Expected object for {key}")
    return v


def _require_int(obj: Mapping[str, object], key: str) -> int:
    v = obj.get(key)
    if not isinstance(v, int) or isinstance(v, bool):
        raise ConfigError(f"Expected int for {key}")
    return v


@dataclass(frozen=True)
class SessionDefaults:
    visible_slots: int = 24


class ConfigService:
    def __init__(self, data_dir: Path, schema_dir: Path, filename: str = "game.json") -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir
        self._filename = filename

    def _load_validated(self) -> Mapping[str, object]:
        path = self._data_dir / self._filename
        raw = _read_rules_file(path)
        schema = _read_rules_file(self._schema_dir / "game.schema.json")
        validate_json(raw, schema, context=str(path))
        if not isinstance(raw, dict):
            raise ConfigError(f"{self._filename} must be an object")
        return raw

    def load_game_config(self) -> GameConfig:
        raw = self._load_validated()
        scoring = _require_section(raw, "scoring")
        dealing = _require_section(raw, "dealing")
        try:
            return GameConfig(
                match_reward=_require_int(scoring, "match_reward"),
                mismatch_penalty=_require_int(scoring, "mismatch_penalty"),
                initial_deal=_require_int(dealing, "initial_deal"),
                deal_amount=_require_int(dealing, "deal_amount"),
            )
        except ValueError as e:
            raise ConfigError(f"Invalid game config: {e}") from e

    def load_session_defaults(self) -> SessionDefaults:
        raw = self._load_validated()
        session = raw.get("session", {})
        if not isinstance(session, dict) or "visible_slots" not in session:
            return SessionDefaults()
        return SessionDefaults(visible_slots=_require_int(session, "visible_slots"))

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        _ = self.load_game_config()
        _ = self.load_session_defaults()
