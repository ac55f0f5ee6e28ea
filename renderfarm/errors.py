# renderfarm/errors.py


class FarmError(Exception):
    """Precondition violation in the farm core."""


class InvalidChunkSize(FarmError):
    """A job was built with chunk_size < 1, so its task count is undefined."""


class DegenerateCapacity(FarmError):
    """A farm was built with fewer than one CPU slot."""


class ConfigError(Exception):
    """A config file parsed but failed its sanity checks."""
