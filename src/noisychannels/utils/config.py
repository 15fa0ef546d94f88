# src/noisychannels/utils/config.py
import hashlib
from pathlib import Path
from typing import Union

import yaml
from schema import Optional, Or, Schema, SchemaError

from ..exceptions import InvalidParameterError
from .logging import message

SECTION_NAME = "noisy_channels"

_value = Or(int, float, bool, str, list, dict, None)

parameters_schema = Schema(Or({SECTION_NAME: {str: _value}, Optional(str): object}, {str: _value}))


def load_parameters(config_file: Union[str, Path]) -> dict:
    """Load parameter overrides from a YAML file.

    The overrides are either the whole top-level mapping or nested under a
    ``noisy_channels:`` section, so the detector's settings can live inside a
    larger pipeline configuration file.

    Parameters
    ----------
    config_file : str or Path
        The path to the YAML file.

    Returns
    -------
    overrides : dict
        Mapping of parameter name to value, ready for ``resolve_parameters``.
        Names are checked later, during resolution.
    """
    message("info", f"Loading parameters: {config_file}")

    with open(config_file) as f:
        config = yaml.safe_load(f)

    if config is None:
        message("warning", f"Empty parameter file: {config_file}")
        return {}

    try:
        config = parameters_schema.validate(config)
    except SchemaError as e:
        message("error", f"Malformed parameter file {config_file}: {e}")
        raise InvalidParameterError(str(config_file), str(e)) from e

    if isinstance(config.get(SECTION_NAME), dict):
        return dict(config[SECTION_NAME])
    return dict(config)


def hash_parameters(parameters: dict) -> str:
    """Return the sha256 of the canonical YAML dump of ``parameters``.

    numpy arrays and scalars are converted to plain Python values first so
    that resolved parameter sets hash the same as hand-written ones.
    """
    canonical_yaml = yaml.safe_dump(_to_builtin(parameters), sort_keys=True)
    return hashlib.sha256(canonical_yaml.encode("utf-8")).hexdigest()


def _to_builtin(value):
    if isinstance(value, dict):
        return {str(k): _to_builtin(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_builtin(v) for v in value]
    if hasattr(value, "tolist"):
        return value.tolist()
    return value
