from typing import Dict, Optional, Tuple, Any
from dataclasses import dataclass, fields, asdict
from pathlib import Path
import json

KEY_FIELDS = ('reveal_keys', 'advance_keys', 'quit_keys')


@dataclass
class QuizConfig:
    """Settings for parsing a bank and running a quiz session"""
    name: str = "default"
    shuffle_options: bool = True         # relabel multiple-choice options per presentation
    require_reason: bool = False         # True: every answer needs reason text, even multiple-choice
    seed: Optional[int] = None           # fixed seed for reproducible rounds
    max_options: int = 26                # one per letter A-Z
    reveal_keys: Tuple[str, ...] = (" ",)
    advance_keys: Tuple[str, ...] = ("\n", "\r")
    quit_keys: Tuple[str, ...] = ("\x04",)   # Ctrl-D; arrow keys start with Esc

    def __post_init__(self):
        if not isinstance(self.name, str):
            raise ValueError(f"name must be a string, got {self.name!r}")
        for flag in ('shuffle_options', 'require_reason'):
            if not isinstance(getattr(self, flag), bool):
                raise ValueError(f"{flag} must be true or false, got {getattr(self, flag)!r}")
        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int)):
            raise ValueError(f"seed must be an integer or null, got {self.seed!r}")
        if isinstance(self.max_options, bool) or not isinstance(self.max_options, int):
            raise ValueError(f"max_options must be an integer, got {self.max_options!r}")
        if not 1 <= self.max_options <= 26:
            raise ValueError(f"max_options must be between 1 and 26, got {self.max_options}")
        for key_field in KEY_FIELDS:
            keys = getattr(self, key_field)
            if isinstance(keys, str) or not isinstance(keys, (list, tuple)):
                raise ValueError(f"{key_field} must be a list of single characters, got {keys!r}")
            for key in keys:
                if not isinstance(key, str) or len(key) != 1:
                    raise ValueError(f"{key_field} entries must be single characters, got {key!r}")
            setattr(self, key_field, tuple(keys))

    def to_dict(self) -> dict:
        data = asdict(self)
        for key_field in KEY_FIELDS:
            data[key_field] = list(data[key_field])
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'QuizConfig':
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**data)

    def with_overrides(self, **overrides: Any) -> 'QuizConfig':
        """Copy with the non-None overrides applied (CLI flags win over file values)"""
        data = self.to_dict()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return QuizConfig.from_dict(data)


DEFAULT_CONFIG = QuizConfig()

# Older bank variants demand reason text for every item
STRICT_CONFIG = QuizConfig(name="strict", require_reason=True)


def load_config(filepath) -> QuizConfig:
    """Load a QuizConfig from a JSON file"""
    with open(Path(filepath), 'r', encoding='utf-8') as f:
        data: Dict[str, Any] = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Config file {filepath} must contain a JSON object")
    return QuizConfig.from_dict(data)
