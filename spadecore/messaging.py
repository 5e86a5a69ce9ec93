"""Server notices and the choice of which players receive a packet."""

from __future__ import annotations

from typing import List

from spadecore.checks import (
    is_past_join_screen,
    is_past_state_data,
    player_to_player_visible,
)
from spadecore.datastream import DataStream
from spadecore.model import Player, Server, Team

CHAT_MESSAGE_PACKET = 17
CHAT_TYPE_SYSTEM = 2
BROADCAST_ID = 33
MESSAGE_LIMIT = 1023
STAFF_PERMISSION_MASK = 0xFFFFFFFE


def chat_notice_packet(player_id: int, message: str) -> bytes:
    """Build a system chat packet carrying ``message`` for ``player_id``.

    The encoded message is cut to 1023 bytes.
    """
    text = message.encode("utf-8")[:MESSAGE_LIMIT]
    stream = DataStream(3 + len(text))
    stream.write_u8(CHAT_MESSAGE_PACKET)
    stream.write_u8(player_id)
    stream.write_u8(CHAT_TYPE_SYSTEM)
    stream.write_bytes(text)
    return stream.getvalue()


def is_staff(player: Player) -> bool:
    """Whether the player holds any role above the lowest one."""
    return bool(player.permissions & STAFF_PERMISSION_MASK)


def staff_recipients(server: Server) -> List[Player]:
    """Players in the game who should receive staff messages."""
    return [
        player
        for player in server.players.values()
        if is_past_join_screen(player) and is_staff(player)
    ]


def notice_recipients(server: Server) -> List[Player]:
    """Players in the game who receive broadcast notices."""
    return [player for player in server.players.values() if is_past_join_screen(player)]


def recipients_except_sender(server: Server, sender: Player) -> List[Player]:
    """Players past the state data, other than ``sender``."""
    return [
        player
        for player in server.players.values()
        if player.id != sender.id and is_past_state_data(player)
    ]


def recipients_except_sender_dist(server: Server, sender: Player) -> List[Player]:
    """Like :func:`recipients_except_sender`, limited to those in sight of ``sender``.

    Spectators always receive the packet.
    """
    return [
        player
        for player in recipients_except_sender(server, sender)
        if player_to_player_visible(sender, player) or player.team == Team.SPECTATOR
    ]


def recipients_dist(server: Server, player: Player) -> List[Player]:
    """Players past the state data who can see ``player``, including itself.

    Spectators always receive the packet.
    """
    return [
        receiver
        for receiver in server.players.values()
        if is_past_state_data(receiver)
        and (player_to_player_visible(player, receiver) or receiver.team == Team.SPECTATOR)
    ]