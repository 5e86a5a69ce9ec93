"""Checks on player states, distances and map positions."""

from __future__ import annotations

import math
from typing import Any

from spadecore.model import Player, PlayerState, Team, VoxelMap

VISIBILITY_RANGE = 132

_PAST_STATE_DATA = frozenset(
    {
        PlayerState.PICK_SCREEN,
        PlayerState.SPAWNING,
        PlayerState.WAITING_FOR_RESPAWN,
        PlayerState.READY,
    }
)
_PAST_JOIN_SCREEN = frozenset(
    {PlayerState.SPAWNING, PlayerState.WAITING_FOR_RESPAWN, PlayerState.READY}
)


def player_to_player_visible(player: Player, other: Player) -> bool:
    """Whether ``other`` is within sight range of ``player`` (spectators see all)."""
    if player.team == Team.SPECTATOR:
        return True
    a, b = player.movement.position, other.movement.position
    distance = math.hypot(a.x - b.x, a.y - b.y)
    return distance < VISIBILITY_RANGE


def is_past_state_data(player: Player) -> bool:
    return player.state in _PAST_STATE_DATA


def is_past_join_screen(player: Player) -> bool:
    return player.state in _PAST_JOIN_SCREEN


def distance_in_3d(a: Any, b: Any) -> int:
    """Euclidean distance between two points, truncated to an integer."""
    return int(math.sqrt((a.x - b.x) ** 2 + (a.y - b.y) ** 2 + (a.z - b.z) ** 2))


def distance_in_2d(a: Any, b: Any) -> int:
    """Horizontal distance between two points, truncated to an integer."""
    return int(math.sqrt((a.x - b.x) ** 2 + (a.y - b.y) ** 2))


def collision_3d(a: Any, b: Any, distance: float) -> bool:
    """False when the points lie within ``distance`` on both x and y, else True.

    The z axis does not take part in the check.
    """
    close = abs(a.x - b.x) < distance and abs(a.y - b.y) < distance
    return not close


def valid_pos(game_map: VoxelMap, x: float, y: float, z: float) -> bool:
    """Whether the point lies inside the map."""
    return (
        0 <= x < game_map.size_x
        and 0 <= y < game_map.size_y
        and 0 <= z < game_map.size_z
    )


def valid_pos_below_z(game_map: VoxelMap, x: float, y: float, z: float) -> bool:
    """Like :func:`valid_pos` but allows z down to -4 above the map."""
    return (
        0 <= x < game_map.size_x
        and 0 <= y < game_map.size_y
        and -4 <= z < game_map.size_z
    )


def valid_player_pos(
    game_map: VoxelMap, player: Player, x: float, y: float, z: float
) -> bool:
    """Whether a player standing at the given eye position fits in the map."""
    bx, by = int(x), int(y)
    bz = int(z) + 1 if z < 0.0 else int(z) + 2
    crouching, jumping = player.crouching, player.jumping

    in_range = (
        0 <= bx < game_map.size_x
        and 0 <= by < game_map.size_y
        and (bz < game_map.size_z or (bz == 64 and crouching))
        and (bz >= 0 or bz == -1 or (bz == -2 and jumping))
    )
    if not in_range:
        return False

    def solid(level: int) -> bool:
        return game_map.is_solid(bx, by, level)

    feet_ok = (
        not solid(bz)
        or bz == 63
        or bz == -1
        or (bz == -2 and jumping)
        or (bz == 64 and crouching)
        or jumping
        or (solid(bz) and crouching)
    )
    body_ok = (
        not solid(bz - 1)
        or -2 < bz <= 1
        or (bz == -2 and jumping)
        or (bz - 1 == 63 and crouching)
    )
    head_ok = not solid(bz - 2) or -2 < bz <= 2 or (bz == -2 and jumping)
    return feet_ok and body_ok and head_ok