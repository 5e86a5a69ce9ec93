"""Answers to raw UDP probes sent by server browsers and LAN scans."""

from __future__ import annotations

import json
from typing import Optional

from spadecore.model import PROTOCOL_VERSION, Server

_HELLO = b"HELLO"
_HELLO_LAN = b"HELLOLAN"
_HELLO_REPLY = b"HI"


def _matches(data: bytes, word: bytes) -> bool:
    """Compare like a bounded C string comparison over ``len(data)`` bytes."""
    for got, want in zip(data, word + b"\0"):
        if got != want:
            return False
        if got == 0:
            return True
    return True


def lan_info_json(server: Server) -> str:
    """Describe the server as a JSON object for LAN discovery."""
    info = {
        "name": server.server_name,
        "players_current": server.num_users,
        "players_max": server.max_players,
        "map": server.map_name,
        "game_mode": server.gamemode_name,
        "game_version": PROTOCOL_VERSION,
    }
    members = ", ".join(
        f"{json.dumps(key)}: {json.dumps(value, ensure_ascii=False)}"
        for key, value in info.items()
    )
    return "{ " + members + " }"


def handle_raw_udp(data: bytes, server: Server) -> Optional[bytes]:
    """Handle a raw datagram.

    Returns ``None`` when the datagram is not a probe, otherwise the reply
    to send back, which is empty when the probe is answered with silence
    (a LAN probe while no map is loaded).
    """
    if _matches(data, _HELLO):
        return _HELLO_REPLY
    if _matches(data, _HELLO_LAN):
        if not server.map_name:
            return b""
        return lan_info_json(server).encode("utf-8")
    return None