"""Shared fakes and fixtures for the bridge tests."""

import asyncio
from collections import deque

import pytest

from udp2keyer.session import KeyerConfig, Session


class FakeKeyer:
    """Stands in for KeyerPort: records writes, replays scripted status bytes."""

    def __init__(self, status=()):
        self.writes = []
        self.status = deque(status)
        self.reads = 0
        self.initialized_with = None
        self.closed = 0

    def write_bytes(self, data):
        self.writes.append(bytes(data))
        return len(data)

    def read_byte(self, timeout):
        self.reads += 1
        if self.status:
            return self.status.popleft()
        return None

    def initialize(self, config):
        self.initialized_with = config

    def close(self):
        self.closed += 1


class FakeEndpoint:
    """Stands in for UdpEndpoint: replays datagrams, records sends."""

    def __init__(self, datagrams=()):
        self.inbox = deque(datagrams)
        self.sent = []
        self.hang = set()
        self.fail = set()
        self.closed = False

    async def recv_datagram(self, timeout):
        if self.inbox:
            return self.inbox.popleft()
        return None

    async def send_to(self, data, addr):
        if addr in self.hang:
            await asyncio.sleep(3600)
        if addr in self.fail:
            raise OSError("network unreachable")
        self.sent.append((data, addr))
        return len(data)

    def close(self):
        self.closed = True


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def config():
    return KeyerConfig(speed=24, min_speed=20, max_speed=40, echo=True)


@pytest.fixture
def session(config):
    return Session.from_config(config)


@pytest.fixture
def port():
    return FakeKeyer()


@pytest.fixture
def endpoint():
    return FakeEndpoint()


@pytest.fixture
def clock():
    return FakeClock()
