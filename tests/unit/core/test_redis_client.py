"""Tests for the Redis blocklist client."""

import pytest

from notestream.core.redis_client import RedisClient


class BrokenRedis:
    async def ping(self):
        raise ConnectionError("down")

    async def setex(self, *args):
        raise ConnectionError("down")

    async def exists(self, *args):
        raise ConnectionError("down")


@pytest.fixture
def client():
    return RedisClient()


async def test_disabled_client_is_a_no_op(client):
    client.settings = client.settings.model_copy(update={"redis_url": ""})

    await client.connect()

    assert client.enabled is False
    assert client.is_connected is False
    assert await client.add_to_blacklist("jti") is False
    assert await client.is_token_blacklisted("jti") is False
    assert await client.ping() is False


async def test_blacklist_round_trip(client, fake_redis):
    # the fixture patches the shared client; use the same fake here
    client.redis = fake_redis

    assert await client.add_to_blacklist("abc", expire=30) is True
    assert fake_redis.expiry["blacklist:abc"] == 30
    assert await client.is_token_blacklisted("abc") is True
    assert await client.is_token_blacklisted("other") is False


async def test_errors_are_logged_not_raised(client):
    client.redis = BrokenRedis()

    assert await client.ping() is False
    assert await client.add_to_blacklist("abc") is False
    assert await client.is_token_blacklisted("abc") is False


async def test_disconnect_clears_connection(client, fake_redis):
    client.redis = fake_redis

    await client.disconnect()

    assert client.is_connected is False
