from enum import Enum


class EnumEnvironment(str, Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class EnumLogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


# Device-type ids below this value are utility/system classifications
# (Root Node, Power Source, OTA Requestor, ...).
SYSTEM_DEVICE_TYPE_LIMIT = 256

# Endpoint 0 always hosts the Root Node.
ROOT_ENDPOINT_ID = 0
