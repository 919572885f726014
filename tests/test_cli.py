import importlib
import json
import os
import re
import sys

import pytest

# We import run.py as a module and exercise parse_args + main with the
# explorer patched out so no terminal UI starts.


@pytest.fixture()
def run_module():
    if "run" in sys.modules:
        del sys.modules["run"]
    return importlib.import_module("run")


def test_version_flag_outputs_version(run_module, capsys):
    with pytest.raises(SystemExit) as exc:
        run_module.parse_args(["--version"])
    assert exc.value.code == 0
    out = capsys.readouterr().out
    assert "Catacomb" in out
    assert run_module.__version__ in out


def test_default_command_is_generate(run_module):
    assert run_module.parse_args([]).command == "generate"


def test_generate_prints_grid(run_module, capsys):
    code = run_module.main(["generate", "--size", "32", "--seed", "4", "--letters"])
    out = capsys.readouterr().out
    rows = [line for line in out.splitlines() if len(line) == 32 and set(line) <= set("WRHD")]
    assert len(rows) == 32
    assert code == 0


def test_generate_chunk_with_metrics(run_module, capsys):
    code = run_module.main(["generate", "--seed", "4", "--chunk", "1", "-2", "--metrics"])
    out = capsys.readouterr().out
    assert "Chunk:" in out and "1,-2" in out
    payload = out[out.index("{"):]
    metrics = json.loads(payload)
    assert "phase_ms" in metrics
    assert code == 0


def test_validate_sweep(run_module, capsys):
    code = run_module.main(["validate", "--start", "10", "--count", "3"])
    out = capsys.readouterr().out
    assert "Invalid:" in out
    assert code == 0


def test_explore_invokes_explorer(monkeypatch, run_module):
    calls = {}

    def fake_run_explorer(config=None, seed=None):
        calls["seed"] = seed
        calls["size"] = config.size

    import catacomb.explorer_tui as tui

    monkeypatch.setattr(tui, "run_explorer", fake_run_explorer)
    assert run_module.main(["explore", "--seed", "77"]) == 0
    assert calls == {"seed": 77, "size": 32}


def test_env_file_argument(tmp_path, run_module, capsys):
    env_file = tmp_path / ".env"
    env_file.write_text("CATACOMB_SIZE=40\n")
    try:
        run_module.main(["--env-file", str(env_file), "generate", "--seed", "1", "--letters"])
    finally:
        # load_dotenv writes straight into os.environ
        os.environ.pop("CATACOMB_SIZE", None)
    out = capsys.readouterr().out
    rows = [line for line in out.splitlines() if len(line) == 40 and set(line) <= set("WRHD")]
    assert len(rows) == 40


def test_generate_reports_seed_it_used(run_module, capsys):
    run_module.main(["generate", "--size", "32", "--letters"])
    out = capsys.readouterr().out
    assert "random" not in out
    m = re.search(r"Seed:\s+(\d+)", out)
    assert m, out
    grid = [line for line in out.splitlines() if len(line) == 32 and set(line) <= set("WRHD")]
    run_module.main(["generate", "--size", "32", "--letters", "--seed", m.group(1)])
    again = [line for line in capsys.readouterr().out.splitlines() if len(line) == 32 and set(line) <= set("WRHD")]
    assert grid == again


def test_env_file_applies_json_logging(tmp_path, monkeypatch, run_module, capsys):
    from catacomb import logging_utils

    monkeypatch.setattr(logging_utils, "JSON_MODE", False)
    monkeypatch.setattr(logging_utils, "CURRENT_LEVEL", logging_utils.LEVELS["warn"])
    env_file = tmp_path / ".env"
    env_file.write_text("CATACOMB_LOG_JSON=1\nCATACOMB_LOG_LEVEL=debug\n")
    try:
        run_module.main(["--env-file", str(env_file), "generate", "--seed", "2"])
    finally:
        os.environ.pop("CATACOMB_LOG_JSON", None)
        os.environ.pop("CATACOMB_LOG_LEVEL", None)
    assert logging_utils.JSON_MODE is True
    assert logging_utils.CURRENT_LEVEL == logging_utils.LEVELS["debug"]
