"""Tests for echo broadcasting to client peers."""

import asyncio
import logging

from udp2keyer.echo import broadcast

ALPHA = ("10.0.0.1", 6000)
BRAVO = ("10.0.0.2", 6001)
CHARLIE = ("10.0.0.3", 6002)


def test_no_peers_sends_nothing(session, endpoint):
    assert asyncio.run(broadcast(session, endpoint, ord("E"))) == 0
    assert endpoint.sent == []


def test_one_datagram_per_peer(session, endpoint):
    session.add_peer(ALPHA)
    session.add_peer(BRAVO)
    sent = asyncio.run(broadcast(session, endpoint, ord("E")))
    assert sent == 2
    assert endpoint.sent == [(b"E", ALPHA), (b"E", BRAVO)]


def test_hung_peer_times_out_and_others_still_receive(session, endpoint, caplog):
    for addr in (ALPHA, BRAVO, CHARLIE):
        session.add_peer(addr)
    endpoint.hang.add(BRAVO)
    with caplog.at_level(logging.WARNING):
        sent = asyncio.run(broadcast(session, endpoint, ord("T"), timeout=0.05))
    assert sent == 2
    assert endpoint.sent == [(b"T", ALPHA), (b"T", CHARLIE)]
    assert "timed out" in caplog.text


def test_failed_peer_does_not_stop_broadcast(session, endpoint, caplog):
    session.add_peer(ALPHA)
    session.add_peer(BRAVO)
    endpoint.fail.add(ALPHA)
    with caplog.at_level(logging.WARNING):
        sent = asyncio.run(broadcast(session, endpoint, ord("T")))
    assert sent == 1
    assert endpoint.sent == [(b"T", BRAVO)]
    assert "failed" in caplog.text


def test_peers_are_remembered_once(session):
    assert session.add_peer(ALPHA) is True
    assert session.add_peer(ALPHA) is False
    assert session.add_peer(BRAVO) is True
    assert list(session.peers) == [ALPHA, BRAVO]
