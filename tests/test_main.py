import json

from renderfarm.main import main

from conftest import build_config


def write_config(path, **overrides):
    path.write_text(build_config(**overrides).model_dump_json())


def test_invalid_config_exits_without_simulating(tmp_path, capsys):
    path = tmp_path / "farm.json"
    data = json.loads(build_config().model_dump_json())
    data["cpu_count"] = 0
    path.write_text(json.dumps(data))

    assert main(["--config", str(path), "--no-plot"]) == 1
    assert "Simulation Results" not in capsys.readouterr().out


def test_invalid_override_exits(tmp_path):
    path = tmp_path / "farm.json"
    write_config(path)
    assert main(["--config", str(path), "--repetitions", "0", "--no-plot"]) == 1


def test_run_prints_results_and_writes_plot(tmp_path, capsys):
    path = tmp_path / "farm.json"
    plot = tmp_path / "farm.png"
    write_config(path, repetitions=2)

    assert main(["--config", str(path), "--plot", str(plot), "--seed", "3"]) == 0

    out = capsys.readouterr().out
    assert "Repetition 0:" in out
    assert "Repetition 1:" in out
    assert "Drained 2/2 repetitions" in out
    assert out.count("Mean utilization:") == 3
    assert plot.exists()


def test_missing_config_is_bootstrapped(tmp_path):
    path = tmp_path / "farm.json"
    assert main(["--config", str(path), "--repetitions", "1", "--no-plot"]) == 0
    assert path.exists()
