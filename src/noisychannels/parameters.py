"""Parameter registry and resolver for noisy channel detection.

Every parameter is described by a :class:`ParameterDescriptor` holding its
default, type classes, constraint attributes and a description. The registry
depends on the recording (channel count, positions), so it is rebuilt for
each call by :func:`get_default_parameters`.

Caller overrides may use the snake_case names or the camelCase names used by
the original PREP pipeline (``robustDeviationThreshold`` and friends).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

import numpy as np
from schema import And, Or, Schema, SchemaError, Use

from .exceptions import InvalidParameterError
from .utils.logging import message

#: Seed of the generator used to draw RANSAC channel subsets.
RANSAC_SEED = 435656


@dataclass(frozen=True)
class ParameterDescriptor:
    """One entry of the parameter registry."""

    name: str
    alias: str
    default: Any
    classes: Tuple[str, ...]
    attributes: Tuple[Any, ...]
    description: str
    validator: Schema = field(compare=False, repr=False)

    def validate(self, value: Any) -> Any:
        """Return ``value`` converted to its canonical type, or raise."""
        try:
            return self.validator.validate(value)
        except SchemaError as e:
            message("error", f"Parameter {self.name} rejected: {value!r}")
            raise InvalidParameterError(self.name, e.code) from e


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, np.integer, np.floating)) and not isinstance(
        value, (bool, np.bool_)
    )


def _build_validator(classes: Tuple[str, ...], attributes: Tuple[Any, ...]) -> Schema:
    """Translate a class/attribute description into a ``schema`` validator."""
    if "logical" in classes:
        return Schema(And(Or(bool, np.bool_), Use(bool)), error="must be a logical value")

    if "mapping" in classes:
        return Schema(Or(None, dict), error="must be a mapping or None")

    if "locations" in classes:
        n_channels = attributes[attributes.index("channels") + 1]
        return Schema(
            Or(
                None,
                And(
                    Use(lambda v: np.asarray(v, dtype=float)),
                    lambda a: a.shape == (n_channels, 3),
                ),
            ),
            error=f"must be a {n_channels} x 3 array of positions or None",
        )

    bound = attributes[attributes.index("<=") + 1] if "<=" in attributes else None

    if "row" in attributes:
        checks = [
            Use(np.asarray, error="must be array-like"),
            Schema(lambda a: (a.ndim <= 1 or (a.ndim == 2 and a.shape[0] == 1)) and a.size > 0,
                   error="must be a non-empty row of numbers"),
            Schema(lambda a: np.issubdtype(a.dtype, np.number) and a.dtype != bool,
                   error="must be numeric"),
        ]
        if "positive" in attributes:
            checks.append(Schema(lambda a: np.all(a > 0), error="values must be positive"))
        if "integer" in attributes:
            checks.append(Schema(lambda a: np.all(np.mod(a, 1) == 0), error="values must be integers"))
        if bound is not None:
            checks.append(Schema(lambda a: np.all(a <= bound), error=f"values must be <= {bound}"))
        checks.append(Use(lambda a: np.ravel(a).astype(int)))
        return Schema(And(*checks))

    checks = [
        Schema(_is_number, error="must be a numeric scalar"),
        Schema(lambda v: np.isfinite(v), error="must be finite"),
    ]
    if "positive" in attributes:
        checks.append(Schema(lambda v: v > 0, error="must be positive"))
    if bound is not None:
        checks.append(Schema(lambda v: v <= bound, error=f"must be <= {bound}"))
    if "integer" in attributes:
        checks.append(Schema(lambda v: float(v).is_integer(), error="must be an integer"))
        checks.append(Use(int))
    else:
        checks.append(Use(float))
    return Schema(And(*checks))


def _rule(name, alias, default, classes, attributes, description):
    return ParameterDescriptor(
        name=name,
        alias=alias,
        default=default,
        classes=tuple(classes),
        attributes=tuple(attributes),
        description=description,
        validator=_build_validator(tuple(classes), tuple(attributes)),
    )


def get_default_parameters(recording) -> Dict[str, ParameterDescriptor]:
    """Return the parameter registry for ``recording``, keyed by snake_case name."""
    n_channels = recording.n_channels
    # Recording positions are checked by the RANSAC criterion, only when it runs
    locations = recording.channel_locations

    rules = [
        _rule("robust_deviation_threshold", "robustDeviationThreshold", 5.0,
              ["numeric"], ["positive", "scalar"],
              "Z-score cutoff for robust channel deviation."),
        _rule("high_frequency_noise_threshold", "highFrequencyNoiseThreshold", 5.0,
              ["numeric"], ["positive", "scalar"],
              "Z-score cutoff for SNR (signal above 50 Hz)."),
        _rule("correlation_window_seconds", "correlationWindowSeconds", 1.0,
              ["numeric"], ["positive", "scalar"],
              "Correlation window size in seconds."),
        _rule("correlation_threshold", "correlationThreshold", 0.4,
              ["numeric"], ["positive", "scalar", "<=", 1],
              "Max correlation threshold for channel being bad in a window."),
        _rule("bad_time_threshold", "badTimeThreshold", 0.01,
              ["numeric"], ["positive", "scalar"],
              "Threshold fraction of bad correlation windows for designating a channel bad."),
        _rule("ransac_off", "ransacOff", False,
              ["logical"], [],
              "If true, ransac is not used for bad channel detection (useful for small headsets)."),
        _rule("ransac_sample_size", "ransacSampleSize", 50,
              ["numeric"], ["positive", "scalar", "integer"],
              "Number of random channel subsets drawn for ransac."),
        _rule("ransac_channel_fraction", "ransacChannelFraction", 0.25,
              ["numeric"], ["positive", "scalar", "<=", 1],
              "Fraction of channels used for each ransac reconstruction."),
        _rule("ransac_correlation_threshold", "ransacCorrelationThreshold", 0.75,
              ["numeric"], ["positive", "scalar", "<=", 1],
              "Cutoff correlation for unpredictability by neighbors."),
        _rule("ransac_unbroken_time", "ransacUnbrokenTime", 0.4,
              ["numeric"], ["positive", "scalar", "<=", 1],
              "Cutoff fraction of time (seconds if >= 1) a channel can have poor ransac predictability."),
        _rule("ransac_window_seconds", "ransacWindowSeconds", 5.0,
              ["numeric"], ["positive", "scalar"],
              "Correlation window size in seconds for ransac."),
        _rule("reference_channels", "referenceChannels", np.arange(1, n_channels + 1),
              ["numeric"], ["row", "positive", "integer", "<=", n_channels],
              "Vector of channel numbers of the channels to test for noisiness."),
        _rule("channel_locations", "channelLocations", locations,
              ["locations"], ["channels", n_channels],
              "Channels x 3 array of sensor positions."),
        _rule("channel_information", "channelInformation", recording.channel_information,
              ["mapping"], [],
              "Channel information, particularly nose direction."),
    ]
    return {rule.name: rule for rule in rules}


def normalize_channels(channels: Sequence[int], n_channels: int) -> np.ndarray:
    """Return ``channels`` sorted ascending without duplicates.

    Raises
    ------
    InvalidParameterError
        If any channel number is outside ``1..n_channels``.
    """
    channels = np.unique(np.asarray(channels, dtype=int).ravel())
    if channels.size == 0 or channels[0] < 1 or channels[-1] > n_channels:
        raise InvalidParameterError(
            "reference_channels", f"channel numbers must lie in 1..{n_channels}"
        )
    return channels


def resolve_parameters(overrides: Optional[Mapping[str, Any]], recording) -> Dict[str, Any]:
    """Merge caller overrides with the defaults for ``recording``.

    Parameters
    ----------
    overrides : mapping or None
        Parameter name (snake_case or camelCase alias) to value. ``None``
        values fall back to the default.
    recording : Recording
        Source of the recording-dependent defaults.

    Returns
    -------
    parameters : dict
        A value for every registry entry, keyed by snake_case name.

    Raises
    ------
    InvalidParameterError
        If a supplied value fails its type or constraint check.
    """
    registry = get_default_parameters(recording)
    aliases = {descriptor.alias: name for name, descriptor in registry.items()}
    overrides = dict(overrides or {})

    unknown = [key for key in overrides if key not in registry and key not in aliases]
    if unknown:
        message("warning", f"Ignoring unknown parameters: {unknown}")

    resolved = {}
    for name, descriptor in registry.items():
        value = overrides.get(name)
        if value is None:
            value = overrides.get(descriptor.alias)
        if value is None:
            resolved[name] = descriptor.default
        else:
            resolved[name] = descriptor.validate(value)

    resolved["reference_channels"] = normalize_channels(
        resolved["reference_channels"], recording.n_channels
    )

    message("values", f"Resolved parameters: {resolved}")
    return resolved
