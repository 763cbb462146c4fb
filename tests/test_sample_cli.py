import io

import pandas as pd
import pytest
import yaml
from typer.testing import CliRunner

from ssm_rvs.cli.sample import app, get_run_config_from_yaml

runner = CliRunner()


@pytest.fixture
def run_config(tmp_path):
    path = tmp_path / "run.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "N": 200,
                "dp": True,
                "seed": 11,
                "params": {"mean_v": [2.0, 1.0], "sd_v": 0.5, "A": 0.5, "b": 1.0},
            }
        )
    )
    return path


def test_get_run_config_defaults():
    rc = get_run_config_from_yaml(None)
    assert rc.n == 1000
    assert rc.dp is False
    assert rc.nthread == 32
    assert rc.backend == "numba"
    assert rc.params == {}


def test_get_run_config_keeps_parameter_case():
    rc = get_run_config_from_yaml(io.StringIO("params:\n  A: [0.5, 0.5]\n  B: [1, 1]\n"))
    assert set(rc.params) == {"A", "B"}


def test_get_run_config_unknown_key():
    with pytest.raises(Exception, match="Unknown keys"):
        get_run_config_from_yaml(io.StringIO("n_samples: 10\n"))


def test_sample_writes_files(tmp_path, run_config):
    out = tmp_path / "draws"
    result = runner.invoke(
        app,
        ["sample", "rlba", "--output", str(out), "--config", str(run_config), "-k", "2"],
    )
    assert result.exit_code == 0, result.output
    files = sorted(out.glob("*.csv"))
    assert [f.name for f in files] == ["rlba_0000.csv", "rlba_0001.csv"]

    first = pd.read_csv(files[0])
    second = pd.read_csv(files[1])
    assert first.columns.tolist() == ["RT", "R"]
    assert len(first) == 200
    assert set(first["R"].unique()) <= {1, 2}
    # every file draws a fresh seed from the run's generator
    assert not first.equals(second)


def test_sample_is_reproducible(tmp_path, run_config):
    frames = []
    for sub in ("a", "b"):
        out = tmp_path / sub
        result = runner.invoke(
            app,
            ["sample", "rlba", "--output", str(out), "--config", str(run_config)],
        )
        assert result.exit_code == 0, result.output
        frames.append(pd.read_csv(out / "rlba_0000.csv"))
    pd.testing.assert_frame_equal(frames[0], frames[1])


def test_sample_distribution_column(tmp_path):
    out = tmp_path / "draws"
    result = runner.invoke(
        app, ["sample", "runif", "--output", str(out), "--n", "50", "--seed", "3"]
    )
    assert result.exit_code == 0, result.output
    df = pd.read_csv(out / "runif_0000.csv")
    assert df.columns.tolist() == ["values"]
    assert len(df) == 50
    assert df["values"].between(0.0, 1.0).all()


def test_sample_command_line_overrides_file(tmp_path, run_config):
    out = tmp_path / "draws"
    result = runner.invoke(
        app,
        [
            "sample",
            "rlba",
            "--output",
            str(out),
            "--config",
            str(run_config),
            "--n",
            "7",
        ],
    )
    assert result.exit_code == 0, result.output
    assert len(pd.read_csv(out / "rlba_0000.csv")) == 7


def test_sample_unknown_sampler(tmp_path):
    result = runner.invoke(app, ["sample", "rddm", "--output", str(tmp_path)])
    assert result.exit_code == 2


def test_sample_invalid_parameters(tmp_path):
    path = tmp_path / "run.yaml"
    path.write_text("params:\n  sd: -1.0\n")
    result = runner.invoke(
        app, ["sample", "rnorm", "--output", str(tmp_path), "--config", str(path)]
    )
    assert result.exit_code == 2
    assert not list(tmp_path.glob("*.csv"))


def test_sample_unknown_backend(tmp_path):
    result = runner.invoke(
        app, ["sample", "runif", "--output", str(tmp_path), "--backend", "opencl"]
    )
    assert result.exit_code == 2


def test_list_shows_builtin_samplers():
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 0
    lines = result.output.strip().splitlines()
    names = [line.split(":")[0] for line in lines]
    assert "rlba" in names
    assert "rplba3" in names
    assert any(line.startswith("runif: min=0.0, max=1.0") for line in lines)


def test_devices_lists_numba():
    result = runner.invoke(app, ["devices"])
    assert result.exit_code == 0
    assert "numba\t0\tcpu:0" in result.output
