import pytest

from catacomb.dungeon.config import CatacombError, ConfigError, DungeonConfig
from catacomb.dungeon.pipeline import DungeonGenerator


def test_defaults_validate():
    cfg = DungeonConfig().validate()
    assert cfg.size == 32
    assert cfg.min_room_size == 4
    assert cfg.corridor_widths == (2, 3)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"min_room_size": 3},
        {"min_room_size": 6, "max_room_size": 5},
        {"size": 7},
        {"size": 16, "max_room_size": 14},
        {"corridor_widths": (1, 2)},
        {"corridor_widths": ()},
        {"branch_min_length": 5, "branch_max_length": 4},
        {"portal_depth": 1},
        {"max_attempts": 0},
        {"max_doors": 0},
    ],
)
def test_invalid_configs_raise(kwargs):
    with pytest.raises(ConfigError):
        DungeonConfig(**kwargs).validate()


def test_config_error_hierarchy():
    assert issubclass(ConfigError, ValueError)
    assert issubclass(ConfigError, CatacombError)


def test_generator_validates_config():
    with pytest.raises(ValueError):
        DungeonGenerator(DungeonConfig(min_room_size=2))


def test_from_env(monkeypatch):
    monkeypatch.setenv("CATACOMB_SIZE", "48")
    monkeypatch.setenv("CATACOMB_CORRIDOR_WIDTHS", "2,4")
    monkeypatch.setenv("CATACOMB_ENABLE_METRICS", "off")
    monkeypatch.setenv("CATACOMB_SEED", "")
    cfg = DungeonConfig.from_env()
    assert cfg.size == 48
    assert cfg.corridor_widths == (2, 4)
    assert cfg.enable_metrics is False
    assert cfg.seed is None


def test_from_env_overrides_win(monkeypatch):
    monkeypatch.setenv("CATACOMB_SIZE", "48")
    assert DungeonConfig.from_env(size=40).size == 40


def test_from_env_bad_integer(monkeypatch):
    monkeypatch.setenv("CATACOMB_MAX_ROOMS", "lots")
    with pytest.raises(ConfigError):
        DungeonConfig.from_env()


def test_generator_picks_seed_when_missing():
    gen = DungeonGenerator(DungeonConfig())
    assert isinstance(gen.seed, int)
    assert DungeonGenerator(DungeonConfig(), seed=12).seed == 12
