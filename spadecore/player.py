"""Player lifecycle: id allocation, reset, respawning, unsticking and weapon timers."""

from __future__ import annotations

import random
import time
from typing import Optional

from spadecore.checks import valid_player_pos
from spadecore.model import Player, PlayerState, Server, Team, Vector3, Weapon
from spadecore.timing import diff_is_older

NANO_IN_MILLI = 1_000_000
SPAWN_HEIGHT_OFFSET = 2.36

_ROLES = (("manager", 4), ("admin", 3), ("mod", 2), ("guard", 1), ("trusted", 0))
_FIRE_DELAY_MS = {Weapon.RIFLE: 500, Weapon.SMG: 100, Weapon.SHOTGUN: 1000}
_MAGAZINE_RELOAD_MS = 2500
_SHELL_RELOAD_MS = 500


class ServerFullError(Exception):
    """Raised when a player connects while every slot is taken."""


def next_free_player_id(server: Server) -> int:
    """Reserve a slot and return the lowest player id not yet in use.

    Raises :class:`ServerFullError` when the server already holds its
    maximum number of players.
    """
    if server.num_players == server.max_players:
        raise ServerFullError(f"server is full ({server.max_players} players)")
    player_id = next(
        (pid for pid in range(server.max_players) if pid not in server.players),
        server.max_players,
    )
    server.num_players += 1
    return player_id


def init_player(
    server: Server, player: Player, reset: bool = False, disconnect: bool = False
) -> None:
    """Put ``player`` back into its starting condition.

    A full initialisation (neither ``reset`` nor ``disconnect``) also marks
    the player disconnected, clears its permissions and assigns the role
    list built from the server's role passwords. A ``reset`` keeps the
    state and permissions but drops any grenades in flight.
    """
    if not reset:
        player.state = PlayerState.DISCONNECTED

    movement = player.movement
    player.ups = 60
    player.input = 0
    movement.eye_pos = Vector3()
    movement.forward_orientation = Vector3(1.0, 0.0, 0.0)
    movement.strafe_orientation = Vector3(0.0, 1.0, 0.0)
    movement.height_orientation = Vector3(0.0, 0.0, 1.0)
    movement.position = Vector3()
    movement.velocity = Vector3()

    if not reset and not disconnect:
        player.role_list = [
            (name, server.role_passwords.get(name, ""), level) for name, level in _ROLES
        ]
        player.grenade_list = []

    player.airborne = False
    player.wade = False
    player.lastclimb = 0.0
    player.move_backwards = False
    player.move_forward = False
    player.move_left = False
    player.move_right = False
    player.jumping = False
    player.crouching = False
    player.sneaking = False
    player.sprinting = False
    player.primary_fire = False
    player.secondary_fire = False
    player.can_build = True
    player.allow_killing = True
    player.allow_team_killing = False
    player.muted = False
    player.told_to_master = False
    player.since_last_base_enter = 0
    player.since_last_base_enter_restock = 0
    player.since_last_3block_dest = 0
    player.since_last_block_dest = 0
    player.since_last_block_plac = 0
    player.since_last_grenade_thrown = 0
    player.since_last_shot = 0
    player.time_since_last_wu = 0
    player.since_last_weapon_input = 0
    player.hp = 100
    player.blocks = 50
    player.grenades = 3
    player.has_intel = False
    player.reloading = False
    player.client = " "
    player.version_minor = 0
    player.version_major = 0
    player.version_revision = 0
    player.periodic_delay_index = 0
    player.welcome_sent = False

    if not reset:
        player.permissions = 0
    else:
        player.grenade_list.clear()

    player.is_invisible = False
    player.kills = 0
    player.deaths = 0
    player.name = ""
    player.os_info = ""


def _around(centre: float):
    value = centre - 1
    while value <= centre + 1:
        yield value
        value += 1


def get_player_unstuck(server: Server, player: Player) -> bool:
    """Move the player to a free spot next to its last legitimate position.

    Levels from one above to one below are tried in turn; on each, the
    column itself first and then its 3x3 neighbourhood. Returns whether a
    free spot was found.
    """
    legit = player.movement.prev_legit_pos
    for z in _around(legit.z):
        if valid_player_pos(server.map, player, legit.x, legit.y, z):
            legit.z = z
            player.movement.position = legit.copy()
            return True
        for x in _around(legit.x):
            for y in _around(legit.y):
                if valid_player_pos(server.map, player, x, y, z):
                    legit.x, legit.y, legit.z = x, y, z
                    player.movement.position = legit.copy()
                    return True
    return False


def set_player_respawn_point(
    server: Server, player: Player, rng: Optional[random.Random] = None
) -> None:
    """Place the player at a random point of its team's spawn area.

    The player stands on top of the highest block of the chosen column and
    faces no particular direction. Spectators are left where they are.
    """
    if player.team == Team.SPECTATOR:
        return
    source = rng if rng is not None else random
    start, end = server.spawns[player.team]
    position = player.movement.position
    position.x = start.x + (end.x - start.x) * source.random()
    position.y = start.y + (end.y - start.y) * source.random()
    position.z = server.map.find_top_block(position.x, position.y) - SPAWN_HEIGHT_OFFSET
    player.movement.forward_orientation = Vector3(0.0, 0.0, 0.0)


def respawn_ready(player: Player, now: Optional[int] = None) -> bool:
    """Move a waiting player to spawning once its respawn time has passed.

    ``now`` is in seconds and defaults to the current time. Returns whether
    the player was moved on.
    """
    if player.state != PlayerState.WAITING_FOR_RESPAWN:
        return False
    current = int(time.time()) if now is None else now
    if current - player.start_of_respawn_wait >= player.respawn_time:
        player.state = PlayerState.SPAWNING
        return True
    return False


def tick_weapon(player: Player, now: int) -> bool:
    """Advance firing and reloading of the player's weapon to ``now`` (nanoseconds).

    While firing, one round leaves the clip per fire interval. While
    reloading, rifles and SMGs refill the whole clip after 2.5 seconds and
    shotguns load one shell every half second. Returns whether the reload
    progressed, so that the client should be told of the new ammunition.
    """
    if player.primary_fire and not player.reloading:
        if player.weapon_clip > 0:
            delay = NANO_IN_MILLI * _FIRE_DELAY_MS.get(player.weapon, 0)
            if diff_is_older(now, player.since_last_weapon_input, delay):
                player.since_last_weapon_input = now
                player.weapon_clip -= 1
        return False

    if player.primary_fire or not player.reloading:
        return False

    if player.weapon in (Weapon.RIFLE, Weapon.SMG):
        if not diff_is_older(now, player.since_reload_start, NANO_IN_MILLI * _MAGAZINE_RELOAD_MS):
            return False
        player.since_reload_start = now
        new_reserve = max(
            0, player.weapon_reserve - (player.weapon.default_clip - player.weapon_clip)
        )
        player.weapon_clip += player.weapon_reserve - new_reserve
        player.weapon_reserve = new_reserve
        player.reloading = False
        return True

    if player.weapon == Weapon.SHOTGUN:
        if not diff_is_older(now, player.since_reload_start, NANO_IN_MILLI * _SHELL_RELOAD_MS):
            return False
        player.since_reload_start = now
        full = Weapon.SHOTGUN.default_clip
        if player.weapon_reserve == 0 or player.weapon_clip == full:
            player.reloading = False
            return False
        player.weapon_clip += 1
        player.weapon_reserve -= 1
        if player.weapon_clip == full:
            player.reloading = False
        return True

    return False