"""Common imports and classes across the ECH generator modules."""

from echgen.config import DEBUG

import logging
logger = logging.getLogger('echgen')

if DEBUG:
    logger.setLevel(logging.DEBUG)
else:
    logger.setLevel(logging.WARNING)

class EchError(RuntimeError):
    pass

class InputError(EchError):
    """Caller supplied an id, key or name that cannot go in an ECHConfig."""
    pass

class KeyGenError(EchError):
    pass

class EncodingError(EchError):
    """An encoded structure violated its own framing; indicates a bug."""
    pass
