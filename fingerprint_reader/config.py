"""
Client configuration.

Settings are resolved from the environment, falling back to safe defaults
when a variable is missing or malformed:

    FPRINT_BUS            system (default) or session
    FPRINT_BUS_NAME       well-known name of the daemon
    FPRINT_CALL_TIMEOUT   seconds to wait for each method reply
"""

import logging
import os
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from .constants import BusNames, Defaults

logger = logging.getLogger(__name__)

T = TypeVar('T')

BUS_TYPES = ("system", "session")


def _env_override(
    env_var: str,
    default: T,
    converter: Callable[[str], T] = str,
    validator: Optional[Callable[[T], bool]] = None,
) -> T:
    """Get a configuration value with environment variable override.

    Args:
        env_var: Environment variable name (will be prefixed with FPRINT_)
        default: Default value if env var not set
        converter: Function to convert string to target type
        validator: Optional validation function

    Returns:
        Configured value (from env var if valid, otherwise default)
    """
    full_env_var = f"FPRINT_{env_var}"
    env_value = os.environ.get(full_env_var)

    if env_value is None or not env_value.strip():
        return default

    try:
        converted = converter(env_value.strip())
    except (ValueError, TypeError) as e:
        logger.warning(f"Invalid value for {full_env_var}: {e}, using default")
        return default

    if validator is not None and not validator(converted):
        logger.warning(f"{full_env_var}={env_value} failed validation, using default")
        return default

    logger.debug(f"Using {full_env_var}={converted} (override)")
    return converted


@dataclass
class ClientConfig:
    """Connection settings shared by Manager and Device."""
    bus_type: str = Defaults.BUS_TYPE
    bus_name: str = BusNames.FPRINT
    call_timeout: float = Defaults.CALL_TIMEOUT

    def __post_init__(self):
        if self.bus_type not in BUS_TYPES:
            raise ValueError(
                f"bus_type must be one of {', '.join(BUS_TYPES)}, got {self.bus_type!r}"
            )
        if self.call_timeout <= 0:
            raise ValueError(f"call_timeout must be positive, got {self.call_timeout}")

    @classmethod
    def from_environment(cls) -> 'ClientConfig':
        """Build a config from FPRINT_* environment variables."""
        return cls(
            bus_type=_env_override(
                'BUS', Defaults.BUS_TYPE,
                converter=str.lower,
                validator=lambda v: v in BUS_TYPES,
            ),
            bus_name=_env_override('BUS_NAME', BusNames.FPRINT),
            call_timeout=_env_override(
                'CALL_TIMEOUT', Defaults.CALL_TIMEOUT,
                converter=float,
                validator=lambda v: v > 0,
            ),
        )


__all__ = [
    'BUS_TYPES',
    'ClientConfig',
]
