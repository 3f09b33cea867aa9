from healthcheck.checkers.mongo import (
    DEFAULT_DIAL_TIMEOUT,
    MongoAuthConfig,
    MongoChecker,
    MongoConfig,
    MongoCredentials,
    normalize_mongo_uri,
    validate_mongo_config,
)

__all__ = [
    "DEFAULT_DIAL_TIMEOUT",
    "MongoAuthConfig",
    "MongoChecker",
    "MongoConfig",
    "MongoCredentials",
    "normalize_mongo_uri",
    "validate_mongo_config",
]
