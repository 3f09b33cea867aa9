"""
MongoDB checker.

Verifies that a MongoDB deployment is reachable (``ping``) and, optionally,
that a collection exists inside a given database. At least one of the two
check methods must be enabled; both may be.
"""

import asyncio
import re
import time
from dataclasses import dataclass, field
from typing import Any, Self, TypeAlias

from pymongo import ReadPreference
from pymongo.asynchronous.mongo_client import AsyncMongoClient
from pymongo.errors import ConfigurationError as PyMongoConfigurationError
from pymongo.errors import InvalidURI, PyMongoError
from pymongo.uri_parser import parse_uri

from healthcheck.base import Checker
from healthcheck.exceptions import (
    CheckerConnectionError,
    ConfigurationError,
    PingFailedError,
    QueryFailedError,
    ReleaseError,
    ResourceNotFoundError,
)
from healthcheck.logging import logger
from healthcheck.models import CheckResult, HealthStatus
from healthcheck.settings import Settings

MongoDocument: TypeAlias = dict[str, Any]
DBClient: TypeAlias = AsyncMongoClient[MongoDocument]

DEFAULT_DIAL_TIMEOUT = 1.0

MONGODB_SCHEME = "mongodb://"
MONGODB_SRV_SCHEME = "mongodb+srv://"
MONGO_SCHEME = "mongo://"

_USERINFO = re.compile(r"//[^@/]*@")
_SRV_ONLY_OPTIONS = frozenset({"srvservicename", "srvmaxhosts"})


@dataclass
class MongoCredentials:
    username: str = ""
    password: str = ""
    auth_source: str = ""
    auth_mechanism: str = ""

    def is_set(self) -> bool:
        return bool(self.username or self.password or self.auth_source)


@dataclass
class MongoAuthConfig:
    """Connection target and credentials.

    ``url`` may be ``localhost:27017``, ``mongo://localhost:27017`` or any
    ``mongodb://`` / ``mongodb+srv://`` connection string.
    """

    url: str = ""
    credentials: MongoCredentials = field(default_factory=MongoCredentials)


@dataclass
class MongoConfig:
    """Configuration for the MongoDB checker.

    ``auth`` is required. ``ping`` runs a trivial ping command against the
    primary. ``collection`` enables the existence check and requires ``db``.
    ``dial_timeout`` (seconds) bounds connect, a whole ``status()`` call and
    disconnect; it falls back to ``DEFAULT_DIAL_TIMEOUT`` when unset or non-positive.
    """

    auth: MongoAuthConfig | None = None
    collection: str = ""
    db: str = ""
    ping: bool = False
    dial_timeout: float = 0.0

    @classmethod
    def from_settings(cls, settings: Settings) -> Self | None:
        """Build a config from settings, or None when no MongoDB URL is configured."""
        if not settings.MONGODB_URL:
            return None
        return cls(
            auth=MongoAuthConfig(
                url=settings.MONGODB_URL,
                credentials=MongoCredentials(
                    username=settings.MONGODB_USERNAME,
                    password=settings.MONGODB_PASSWORD,
                    auth_source=settings.MONGODB_AUTH_SOURCE,
                    auth_mechanism=settings.MONGODB_AUTH_MECHANISM,
                ),
            ),
            collection=settings.MONGODB_COLLECTION,
            db=settings.MONGODB_DATABASE,
            ping=settings.MONGODB_PING,
            dial_timeout=settings.MONGODB_DIAL_TIMEOUT,
        )


def validate_mongo_config(cfg: MongoConfig | None) -> None:
    """Reject unusable configuration before any network I/O.

    A non-positive dial timeout is replaced with the default in place.

    Raises:
        ConfigurationError: describing the first problem found.
    """
    if cfg is None:
        raise ConfigurationError("main config cannot be None")

    if cfg.auth is None:
        raise ConfigurationError("auth config cannot be None")

    if not cfg.auth.url or not cfg.auth.url.strip():
        raise ConfigurationError("url string must be set in auth config")

    try:
        _parse_mongo_uri(normalize_mongo_uri(cfg.auth.url))
    except (InvalidURI, PyMongoConfigurationError, ValueError) as e:
        raise ConfigurationError(f"unable to parse URL: {e}", cause=e) from e

    if not cfg.ping and not cfg.collection:
        raise ConfigurationError("at minimum, either ping or collection must be enabled")

    if cfg.dial_timeout is None or cfg.dial_timeout <= 0:
        cfg.dial_timeout = DEFAULT_DIAL_TIMEOUT


def normalize_mongo_uri(url: str) -> str:
    """Map every accepted target form onto a scheme the driver understands."""
    us = url.strip()
    if us.startswith(MONGODB_SCHEME) or us.startswith(MONGODB_SRV_SCHEME):
        return us
    if us.startswith(MONGO_SCHEME):
        return MONGODB_SCHEME + us.removeprefix(MONGO_SCHEME)
    # Bare host[:port]
    return MONGODB_SCHEME + us


def _parse_mongo_uri(uri: str) -> dict[str, Any]:
    # Parsing an SRV URI resolves DNS records; check the seed list shape instead
    if uri.startswith(MONGODB_SRV_SCHEME):
        uri = _srv_as_seed_list(uri)
    return parse_uri(uri)


def _srv_as_seed_list(uri: str) -> str:
    """Rewrite an SRV URI as the equivalent ``mongodb://`` URI without SRV-only options.

    Raises:
        InvalidURI: If the SRV target names more than one host or a port.
    """
    rest = uri.removeprefix(MONGODB_SRV_SCHEME)
    netloc, sep, path = rest.partition("/")
    host = netloc.rpartition("@")[2]
    if "," in host:
        raise InvalidURI(f"{MONGODB_SRV_SCHEME} URIs must contain exactly one hostname")
    if ":" in host:
        raise InvalidURI(f"{MONGODB_SRV_SCHEME} URIs must not include a port number")

    db_part, qsep, query = path.partition("?")
    if qsep:
        options = [
            opt for opt in re.split(r"[&;]", query)
            if opt and opt.split("=", 1)[0].lower() not in _SRV_ONLY_OPTIONS
        ]
        path = db_part + ("?" + "&".join(options) if options else "")
    return MONGODB_SCHEME + netloc + sep + path


def _redact(uri: str) -> str:
    return _USERINFO.sub("//", uri)


def _error_text(error: BaseException) -> str:
    return str(error) or type(error).__name__


class MongoChecker(Checker):
    """Checker bound to one ``AsyncMongoClient``.

    Build instances with ``await MongoChecker.create(config)``.
    """

    def __init__(self, config: MongoConfig, client: DBClient, name: str = "mongodb") -> None:
        self.name = name
        self.config = config
        self.client = client
        self.target = _redact(normalize_mongo_uri(config.auth.url)) if config.auth else ""
        self._closed = False

    @classmethod
    async def create(cls, config: MongoConfig | None, name: str = "mongodb") -> Self:
        """
        Validate ``config``, connect and run one initial ping.

        Raises:
            ConfigurationError: If the configuration is invalid.
            CheckerConnectionError: If the server cannot be reached in time.
        """
        try:
            validate_mongo_config(config)
        except ConfigurationError as e:
            raise ConfigurationError(f"unable to validate mongodb config: {e}", cause=e) from e

        uri = normalize_mongo_uri(config.auth.url)
        target = _redact(uri)
        dial_timeout = config.dial_timeout
        timeout_ms = max(1, int(dial_timeout * 1000))

        options: dict[str, Any] = {
            "connectTimeoutMS": timeout_ms,
            "serverSelectionTimeoutMS": timeout_ms,
        }
        credentials = config.auth.credentials
        if credentials.is_set():
            if credentials.username:
                options["username"] = credentials.username
            if credentials.password:
                options["password"] = credentials.password
            if credentials.auth_source:
                options["authSource"] = credentials.auth_source
            if credentials.auth_mechanism:
                options["authMechanism"] = credentials.auth_mechanism

        logger.info(f"Connecting to MongoDB at {target}")

        try:
            client: DBClient = AsyncMongoClient(uri, **options)
        except PyMongoError as e:
            raise CheckerConnectionError(f"unable to create mongodb client for {target}: {e}", cause=e) from e

        connected = False
        try:
            await asyncio.wait_for(
                client.admin.command("ping", read_preference=ReadPreference.PRIMARY),
                timeout=dial_timeout,
            )
            connected = True
        except (PyMongoError, asyncio.TimeoutError) as e:
            logger.error(f"Failed to connect to MongoDB at {target}: {_error_text(e)}")
            raise CheckerConnectionError(
                f"unable to establish initial connection to mongodb at {target}: {_error_text(e)}",
                cause=e,
            ) from e
        finally:
            if not connected:
                await _release_after_failed_connect(client, target, dial_timeout)

        logger.info(f"Successfully connected to MongoDB at {target}")
        return cls(config, client, name=name)

    def _dial_timeout(self) -> float:
        dial_timeout = self.config.dial_timeout
        if dial_timeout is None or dial_timeout <= 0:
            return DEFAULT_DIAL_TIMEOUT
        return dial_timeout

    async def status(self) -> CheckResult:
        # One budget covers every enabled check
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._dial_timeout()

        start_time = time.monotonic()
        checks: list[str] = []

        if self.config.ping:
            try:
                await asyncio.wait_for(
                    self.client.admin.command("ping", read_preference=ReadPreference.PRIMARY),
                    timeout=max(deadline - loop.time(), 0),
                )
            except (PyMongoError, asyncio.TimeoutError) as e:
                raise PingFailedError(f"ping failed on {self.target}: {_error_text(e)}", cause=e) from e
            checks.append("ping")

        if self.config.collection:
            await self._check_collection(max(deadline - loop.time(), 0))
            checks.append("collection")

        duration_ms = (time.monotonic() - start_time) * 1000
        logger.debug(f"MongoDB checks {checks} passed in {duration_ms:.1f}ms")

        details: dict[str, Any] = {"target": self.target, "checks": checks}
        if self.config.collection:
            details["database"] = self.config.db
            details["collection"] = self.config.collection

        return CheckResult(
            name=self.name,
            status=HealthStatus.HEALTHY,
            message="MongoDB is healthy",
            details=details,
            duration_ms=duration_ms,
        )

    async def _check_collection(self, timeout: float) -> None:
        db_name = self.config.db
        collection = self.config.collection
        if not db_name:
            raise ConfigurationError("db name must be set when checking collection existence")

        try:
            names = await asyncio.wait_for(
                self.client[db_name].list_collection_names(filter={"name": collection}),
                timeout=timeout,
            )
        except (PyMongoError, asyncio.TimeoutError) as e:
            raise QueryFailedError(
                f"unable to list collections in mongo db {db_name!r} on {self.target}: {_error_text(e)}",
                cause=e,
            ) from e

        if collection not in names:
            raise ResourceNotFoundError(f"mongo db {db_name!r} collection {collection!r} not found")

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True

        logger.info(f"Closing MongoDB connection to {self.target}")
        try:
            await asyncio.wait_for(self.client.close(), timeout=self._dial_timeout())
        except Exception as e:
            raise ReleaseError(
                f"unable to close mongodb connection to {self.target}: {_error_text(e)}",
                cause=e,
            ) from e


async def _release_after_failed_connect(client: DBClient, target: str, timeout: float) -> None:
    # The connect error is what the caller sees; a failed release is only logged
    try:
        await asyncio.wait_for(client.close(), timeout=timeout)
    except Exception as e:
        logger.warning(f"Error closing MongoDB client for {target} after failed connect: {_error_text(e)}")
