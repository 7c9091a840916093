"""
HiveBridge Constants

This module consolidates the protocol constants of the bridge core and the
environment configuration read once at import. Constants are organized by
category for easy reference and maintenance.
"""
import ast
from dotenv import dotenv_values

# =============================================================================
# ENVIRONMENT CONFIGURATION
# =============================================================================
# Load environment variables once at module import
_config = dotenv_values(".env")

LOGGER_DEFAULTS = {
    'LOG_LEVEL':                       'INFO',
    'LOG_FORMAT':                      '%(asctime)s - %(levelname)s - %(name)s - %(message)s',
    'LOG_DATE_FORMAT':                 '%Y-%m-%dT%H:%M:%S',
    'LOG_CONSOLE_HIGHLIGHTING':        'True',
    'LOG_FILE_OUTPUT':                 'False',
}

LOG_MAX_FILE_SIZE = 10 * 1024 * 1024 # 10MB
LOG_BACKUP_COUNT = 5


# WARNING: THE VALUES BELOW ARE PART OF THE SIGNED MESSAGE FORMAT. CHANGING ANY OF THEM
# INVALIDATES EVERY SIGNATURE PRODUCED BY THE OPERATOR COMMITTEE.

# ==================================================================================
# TOKEN DEFAULTS
# ==================================================================================
TOKEN_NAME = 'Wrapped HIVE'
TOKEN_SYMBOL = 'WHIVE'
TOKEN_DECIMALS = 3  # HIVE uses 3 decimal places


# ==================================================================================
# SIGNED MESSAGE FORMAT
# ==================================================================================
FIELD_DELIMITER = ';'

OP_WRAP = 'wrap'
OP_ADD_SIGNER = 'addSigner'
OP_REMOVE_SIGNER = 'removeSigner'
OP_UPDATE_THRESHOLD = 'updateMultisigThreshold'
OP_PAUSE = 'pause'
OP_UNPAUSE = 'unpause'

SIGNATURE_LENGTH = 65  # r (32) || s (32) || v (1)
DIGEST_LENGTH = 32


# ==================================================================================
# VALIDATION LIMITS
# ==================================================================================
# Hive account names are 3 to 16 characters
MIN_USERNAME_LENGTH = 3
MAX_USERNAME_LENGTH = 16

INITIAL_THRESHOLD = 1

UINT8_MAX = 2**8 - 1
UINT32_MAX = 2**32 - 1
UINT256_MAX = 2**256 - 1

ZERO_ADDRESS = '0x0000000000000000000000000000000000000000'


# ==================================================================================
# CONFIGURATION WRAPPERS
# ==================================================================================
class ConfigString(str):
    """
    String subclass that stores a default value.
    """
    def __new__(cls, value, default):
        obj = str.__new__(cls, value)
        obj._default = default
        return obj

    def default(self):
        return self._default

class ConfigBool(int):
    """
    Int subclass acting as a boolean that stores a default value.
    """
    def __new__(cls, value, default):
        obj = int.__new__(cls, bool(value))
        obj._default = default
        return obj

    def default(self):
        return self._default

    def __repr__(self):
        return str(bool(self))

    def __str__(self):
        return str(bool(self))

    def __eq__(self, other):
        return bool(self) == other

    def __hash__(self):
        return hash(bool(self))


# ==================================================================================
# DYNAMIC CONFIGURATION LOADING
# ==================================================================================
DEFAULTS = dict(LOGGER_DEFAULTS)
namespace = globals()

def parse_bool(v):
    """
    Convert "True"/"False" (any casing, with surrounding whitespace) into bool.
    Avoids exceptions by only calling ast.literal_eval for known literals.
    """
    if not isinstance(v, str):
        return v
    s = v.strip()
    if not s:
        return v
    if s.casefold() in {"true", "false"}:
        # ast.literal_eval expects "True"/"False"
        return ast.literal_eval(s.title())
    return v

for key, default_raw in DEFAULTS.items():
    # dotenv_values returns strings or None. None is treated as missing.
    raw = _config.get(key)
    value_raw = default_raw if raw is None else raw

    value = parse_bool(value_raw)
    default_val = parse_bool(default_raw)

    if isinstance(value, bool):
        namespace[key] = ConfigBool(value, default_val)
    else:
        namespace[key] = ConfigString(value_raw, default_val)
