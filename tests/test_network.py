"""Tests for the UDP endpoint over a real loopback socket."""

import asyncio
import socket

from udp2keyer.network import open_endpoint


def test_receive_and_reply():
    async def exchange():
        endpoint = open_endpoint("127.0.0.1", 0)
        client = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        client.settimeout(2)
        try:
            client.sendto(b"\x1b230", endpoint.address)
            received = await endpoint.recv_datagram(2.0)
            assert received is not None
            data, addr = received
            assert data == b"\x1b230"
            await endpoint.send_to(b"K", addr)
            return client.recvfrom(16)[0]
        finally:
            client.close()
            endpoint.close()

    assert asyncio.run(exchange()) == b"K"


def test_receive_times_out():
    async def wait():
        endpoint = open_endpoint("127.0.0.1", 0)
        try:
            return await endpoint.recv_datagram(0.05)
        finally:
            endpoint.close()

    assert asyncio.run(wait()) is None


def test_long_datagram_is_not_truncated():
    payload = b"CQ TEST " * 250

    async def exchange():
        endpoint = open_endpoint("127.0.0.1", 0)
        client = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            client.sendto(payload, endpoint.address)
            return await endpoint.recv_datagram(2.0)
        finally:
            client.close()
            endpoint.close()

    data, _ = asyncio.run(exchange())
    assert len(data) == 2000
    assert data == payload
