"""Settings for the ECH generator."""

DEBUG = False

# Cap on inner server-name length advertised to clients for padding.
DEFAULT_MAXIMUM_NAME_LENGTH = 32

OUTPUT_SUFFIX = '.pem.ech'
OUTPUT_MODE = 0o644

ECHCONFIG_LABEL = 'ECHCONFIG'
