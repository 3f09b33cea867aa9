import os
import uuid
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from pymongo.asynchronous.mongo_client import AsyncMongoClient

from healthcheck.checkers.mongo import MongoAuthConfig, MongoChecker, MongoConfig
from healthcheck.exceptions import CheckerConnectionError


@pytest.fixture(scope="session")
def mongodb_url() -> str:
    return os.environ.get("MONGODB_URL", "mongodb://localhost:27017")


@pytest_asyncio.fixture
async def mongo_client(mongodb_url: str) -> AsyncGenerator[AsyncMongoClient, None]:
    """Raw client for fixture data; skips the test when no server answers."""
    try:
        probe = await MongoChecker.create(MongoConfig(auth=MongoAuthConfig(url=mongodb_url), ping=True))
    except CheckerConnectionError as e:
        pytest.skip(f"MongoDB not reachable at {mongodb_url}: {e}")
    await probe.close()

    client: AsyncMongoClient = AsyncMongoClient(mongodb_url, serverSelectionTimeoutMS=2000)
    try:
        yield client
    finally:
        await client.close()


@pytest_asyncio.fixture
async def scratch_db(mongo_client: AsyncMongoClient) -> AsyncGenerator[str, None]:
    name = f"healthcheck_test_{uuid.uuid4().hex[:8]}"
    try:
        yield name
    finally:
        await mongo_client.drop_database(name)
