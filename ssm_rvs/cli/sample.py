import logging
from collections import namedtuple
from pathlib import Path
from pprint import pformat

import numpy as np
import pandas as pd
import tqdm
import typer
import yaml

from ssm_rvs.basic_samplers import Sampler
from ssm_rvs.config import BACKENDS, get_default_engine_config, get_sampler_registry
from ssm_rvs.engines import get_device_info
from ssm_rvs.exceptions import DeviceError, ParameterError, SamplingError

app = typer.Typer(add_completion=False)

logger = logging.getLogger(__name__)

DEFAULT_N = 1000


def parse_dict_as_namedtuple(d: dict, to_lowercase: bool = True):
    """Convert a dictionary to a named tuple (top-level keys only)."""
    d = {k.lower() if to_lowercase else k: v for k, v in d.items()}
    return namedtuple("Config", d.keys())(**d)


def get_run_config_from_yaml(yaml_config_path: str | Path | None = None):
    """Read a run file and fill in engine defaults.

    The file may hold ``n``, the engine keys (``dp``, ``nthread``,
    ``gpuid``, ``backend``), a ``seed`` and a ``params`` mapping of sampler
    parameters. Parameter names keep their case (``A``, ``B``, ``C``).
    """
    loaded = {}
    if yaml_config_path is not None:
        if hasattr(yaml_config_path, "read"):
            loaded = yaml.safe_load(yaml_config_path) or {}
        else:
            with open(yaml_config_path, "rb") as f:
                loaded = yaml.safe_load(f) or {}
    if not isinstance(loaded, dict):
        raise typer.BadParameter(f"{yaml_config_path} must contain a mapping")

    run_config = {"n": DEFAULT_N, "seed": None, "params": {}}
    run_config.update(get_default_engine_config())
    loaded = {k.lower(): v for k, v in loaded.items()}
    unknown = sorted(set(loaded) - set(run_config))
    if unknown:
        raise typer.BadParameter(f"Unknown keys in {yaml_config_path}: {unknown}")
    run_config.update(loaded)
    return parse_dict_as_namedtuple(run_config)


def _to_frame(result) -> pd.DataFrame:
    if isinstance(result, pd.DataFrame):
        return result
    return pd.DataFrame({"values": np.asarray(result)})


log_level_option = typer.Option(
    "WARNING",
    "--log-level",
    "-l",
    help="Set the logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).",
    case_sensitive=False,
    show_default=True,
    rich_help_panel="Logging",
    metavar="LEVEL",
    autocompletion=lambda: ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
)

epilog = (
    "Example: `ssm-rvs sample rlba --n 5000 --config params.yaml "
    "--output ./draws --n-files 4 --seed 1`"
)


@app.command("sample", epilog=epilog)
def sample_command(
    sampler: str = typer.Argument(..., help="Name of the sampler, see `ssm-rvs list`."),
    output: Path = typer.Option(..., help="Path to the output directory."),
    n: int = typer.Option(None, "--n", help="Number of draws per file.", min=0),
    config_path: Path = typer.Option(
        None, "--config", help="YAML file with parameters and engine settings."
    ),
    n_files: int = typer.Option(
        1,
        "--n-files",
        "-k",
        help="Number of files to generate.",
        min=1,
        show_default=True,
    ),
    dp: bool = typer.Option(None, "--dp/--sp", help="Double or single precision."),
    nthread: int = typer.Option(None, "--nthread", help="Draws per work block."),
    gpuid: int = typer.Option(None, "--gpuid", help="Device index."),
    backend: str = typer.Option(None, "--backend", help=f"One of {BACKENDS}."),
    seed: int = typer.Option(None, "--seed", help="Seed for reproducible files."),
    log_level: str = log_level_option,
):
    """
    Draw samples and write them as CSV files.
    """
    logging.basicConfig(
        level=log_level.upper(), format="%(asctime)s - %(levelname)s - %(message)s"
    )

    rc = get_run_config_from_yaml(config_path)
    settings = {
        "n": rc.n if n is None else n,
        "dp": rc.dp if dp is None else dp,
        "nthread": rc.nthread if nthread is None else nthread,
        "gpuid": rc.gpuid if gpuid is None else gpuid,
        "backend": rc.backend if backend is None else backend,
        "seed": rc.seed if seed is None else seed,
    }
    logger.debug("RUN CONFIG")
    logger.debug(pformat(settings))
    logger.debug("PARAMETERS")
    params = rc.params or {}
    logger.debug(pformat(params))

    try:
        engine_sampler = Sampler(
            dp=settings["dp"],
            backend=settings["backend"],
            nthread=settings["nthread"],
            gpuid=settings["gpuid"],
            random_state=settings["seed"],
        )
    except (TypeError, ValueError, ImportError) as e:
        logger.error("%s", e)
        raise typer.Exit(code=2) from e

    output.mkdir(parents=True, exist_ok=True)
    written = []
    for i in tqdm.tqdm(range(n_files), desc=f"Sampling {sampler}", unit="file"):
        try:
            result = engine_sampler.sample(sampler, settings["n"], **params)
        except KeyError as e:
            logger.error("%s", e.args[0])
            raise typer.Exit(code=2) from e
        except (ParameterError, DeviceError) as e:
            logger.error("%s", e)
            raise typer.Exit(code=2) from e
        except SamplingError as e:
            logger.error("%s", e)
            raise typer.Exit(code=1) from e

        path = output / f"{sampler}_{i:04d}.csv"
        _to_frame(result).to_csv(path, index=False)
        written.append(path)

    logger.info("Wrote %d files to %s", len(written), output)


@app.command("list")
def list_samplers(log_level: str = log_level_option):
    """
    List the available samplers with their parameters and defaults.
    """
    logging.basicConfig(level=log_level.upper())
    registry = get_sampler_registry()
    for name in registry.list_samplers():
        config = registry.get(name)
        defaults = ", ".join(
            f"{key}={value}" for key, value in config["default_params"].items()
        )
        typer.echo(f"{name}: {defaults}")


@app.command("devices")
def devices(log_level: str = log_level_option):
    """
    Show the devices visible to each installed backend.
    """
    logging.basicConfig(level=log_level.upper())
    for backend_name, names in get_device_info().items():
        for gpuid, device in enumerate(names):
            typer.echo(f"{backend_name}\t{gpuid}\t{device}")


if __name__ == "__main__":
    app()
