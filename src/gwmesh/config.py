"""
Configuration & Numerical Constants
===================================
This module serves as the central registry for the numerical constants used
by the geometry and point-location code.

Every constant can be overridden from the environment with a variable named
``GWMESH_<CONSTANT>``, e.g. ``GWMESH_PERTURBATION_AMPLITUDE=1e-5``. Overrides
are read once, at import.

Exports:
    PERTURBATION_AMPLITUDE (float): Half-width of the uniform nudge applied to a
        point that failed to map, in the point's physical units.
    MAX_MAPPING_RETRIES (int): Number of perturbed retries after the first attempt.
    NEWTON_TOLERANCE (float): Step-size tolerance of the Q1 inverse mapping.
    NEWTON_MAX_ITERATIONS (int): Iteration cap of the Q1 inverse mapping.
    UNIT_CELL_TOLERANCE (float): How far outside [0, 1]**dim a pulled-back point
        may lie and still count as inside.
    JACOBIAN_EPSILON (float): Smallest |det(J)| accepted during inversion.
    AREA_EPSILON (float): True face areas at or below this are degenerate.
"""
import logging
import os

logger = logging.getLogger(__name__)

ENV_PREFIX = "GWMESH_"


def _env_override(name: str, default: float, cast: type = float) -> float:
    """
    Read ``GWMESH_<name>`` from the environment, falling back to `default`.

    Args:
        name: Constant name without the prefix.
        default: Value used when the variable is unset or unparsable.
        cast: Type the raw string is converted to.

    Returns:
        The overridden or default value.
    """
    raw = os.environ.get(ENV_PREFIX + name)
    if raw is None:
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning(f"Ignoring {ENV_PREFIX + name}={raw!r}: not a valid {cast.__name__}.")
        return default


# Global Constants
PERTURBATION_AMPLITUDE: float = _env_override("PERTURBATION_AMPLITUDE", 1e-4)
MAX_MAPPING_RETRIES: int = _env_override("MAX_MAPPING_RETRIES", 20, int)

NEWTON_TOLERANCE: float = _env_override("NEWTON_TOLERANCE", 1e-12)
NEWTON_MAX_ITERATIONS: int = _env_override("NEWTON_MAX_ITERATIONS", 50, int)
UNIT_CELL_TOLERANCE: float = _env_override("UNIT_CELL_TOLERANCE", 1e-10)
JACOBIAN_EPSILON: float = _env_override("JACOBIAN_EPSILON", 1e-14)

AREA_EPSILON: float = _env_override("AREA_EPSILON", 0.0)
