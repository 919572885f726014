import os
from dataclasses import dataclass, fields
from typing import Optional, Tuple


class CatacombError(Exception):
    """Base class for errors raised by the catacomb package."""


class ConfigError(CatacombError, ValueError):
    """Raised when a DungeonConfig cannot produce a legal layout."""


@dataclass
class DungeonConfig:
    size: int = 32
    max_rooms: int = 8
    min_room_size: int = 4
    max_room_size: int = 8
    small_room_area: int = 16
    max_doors: int = 3
    corridor_widths: Tuple[int, ...] = (2, 3)
    branch_min_path: int = 10
    branch_min_length: int = 3
    branch_max_length: int = 6
    portal_depth: int = 3
    max_attempts: int = 6
    max_settle_rounds: int = 32
    seed: Optional[int] = None
    enable_metrics: bool = True

    def validate(self) -> "DungeonConfig":
        if self.min_room_size < 4:
            raise ConfigError(f"min_room_size must be >= 4 (got {self.min_room_size})")
        if self.max_room_size < self.min_room_size:
            raise ConfigError("max_room_size must be >= min_room_size")
        # one room plus its margin and the outer ring must fit
        if self.size < self.min_room_size + 4:
            raise ConfigError(f"size {self.size} too small for a {self.min_room_size}x{self.min_room_size} room")
        if self.max_room_size + 4 > self.size:
            raise ConfigError(f"max_room_size {self.max_room_size} does not fit a {self.size} grid")
        if not self.corridor_widths or min(self.corridor_widths) < 2:
            raise ConfigError("corridor widths must be >= 2")
        if not 1 <= self.branch_min_length <= self.branch_max_length:
            raise ConfigError("branch stub lengths must satisfy 1 <= min <= max")
        if self.portal_depth < 2 or self.portal_depth * 2 >= self.size:
            raise ConfigError(f"portal_depth {self.portal_depth} invalid for size {self.size}")
        if self.max_attempts < 1 or self.max_settle_rounds < 1:
            raise ConfigError("max_attempts and max_settle_rounds must be positive")
        if self.max_doors < 1:
            raise ConfigError("max_doors must be positive")
        return self

    @classmethod
    def from_env(cls, **overrides) -> "DungeonConfig":
        """Build a config from ``CATACOMB_<FIELD>`` environment variables.

        Explicit keyword overrides win over the environment.
        """
        values = {}
        for f in fields(cls):
            raw = os.environ.get(f"CATACOMB_{f.name.upper()}")
            if raw is None or raw == "":
                continue
            if f.name == "corridor_widths":
                values[f.name] = tuple(int(p) for p in raw.split(",") if p.strip())
            elif f.name == "enable_metrics":
                values[f.name] = raw.lower() not in {"0", "false", "no", "off"}
            else:
                try:
                    values[f.name] = int(raw)
                except ValueError:
                    raise ConfigError(f"CATACOMB_{f.name.upper()} must be an integer (got {raw!r})") from None
        values.update(overrides)
        return cls(**values).validate()


__all__ = ["DungeonConfig", "CatacombError", "ConfigError"]
