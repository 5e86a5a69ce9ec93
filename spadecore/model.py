"""Core game objects: vectors, players, grenades, the voxel map and the server."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum, IntEnum, auto
from typing import Dict, Iterator, List, Optional, Set, Tuple

from spadecore.datastream import Color

DEFAULT_SERVER_PORT = 32887
VERSION = "Beta 2.0"
PROTOCOL_VERSION = "0.75"


@dataclass
class Vector3:
    """A mutable three-component float vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def copy(self) -> "Vector3":
        return dataclasses.replace(self)


class PlayerState(Enum):
    """Connection stage of a player, in the order a client goes through them."""

    DISCONNECTED = auto()
    STARTING_MAP = auto()
    LOADING_CHUNKS = auto()
    JOINING = auto()
    PICK_SCREEN = auto()
    SPAWNING = auto()
    WAITING_FOR_RESPAWN = auto()
    READY = auto()


class Team(IntEnum):
    A = 0
    B = 1
    SPECTATOR = 255


class Weapon(IntEnum):
    RIFLE = 0
    SMG = 1
    SHOTGUN = 2

    @property
    def default_clip(self) -> int:
        """Rounds in a full magazine of this weapon."""
        return _DEFAULT_CLIPS[self]


_DEFAULT_CLIPS = {Weapon.RIFLE: 10, Weapon.SMG: 30, Weapon.SHOTGUN: 6}


class DamageIndex(IntEnum):
    """Body part a hit landed on."""

    TORSO = 0
    HEAD = 1
    ARMS = 2
    LEGS = 3
    MELEE = 4


@dataclass
class Movement:
    """Position, velocity and orientation of a player."""

    position: Vector3 = field(default_factory=Vector3)
    prev_legit_pos: Vector3 = field(default_factory=Vector3)
    eye_pos: Vector3 = field(default_factory=Vector3)
    velocity: Vector3 = field(default_factory=Vector3)
    forward_orientation: Vector3 = field(default_factory=lambda: Vector3(1.0, 0.0, 0.0))
    strafe_orientation: Vector3 = field(default_factory=lambda: Vector3(0.0, 1.0, 0.0))
    height_orientation: Vector3 = field(default_factory=lambda: Vector3(0.0, 0.0, 1.0))


@dataclass
class Grenade:
    """A thrown grenade in flight."""

    position: Vector3 = field(default_factory=Vector3)
    velocity: Vector3 = field(default_factory=Vector3)
    fuse: float = 0.0
    sent: bool = False
    time_since_sent: int = 0


@dataclass
class Player:
    """Everything the server tracks about one connected player."""

    id: int = 0
    name: str = ""
    state: PlayerState = PlayerState.DISCONNECTED
    team: Team = Team.SPECTATOR
    movement: Movement = field(default_factory=Movement)
    color: Color = field(default_factory=Color)

    hp: int = 100
    blocks: int = 50
    grenades: int = 3
    item: int = 2
    weapon: Weapon = Weapon.RIFLE
    weapon_clip: int = 0
    weapon_reserve: int = 0
    reloading: bool = False
    alive: bool = False
    has_intel: bool = False
    kills: int = 0
    deaths: int = 0

    input: int = 0
    move_forward: bool = False
    move_backwards: bool = False
    move_left: bool = False
    move_right: bool = False
    jumping: bool = False
    crouching: bool = False
    sneaking: bool = False
    sprinting: bool = False
    primary_fire: bool = False
    secondary_fire: bool = False
    airborne: bool = False
    wade: bool = False
    lastclimb: float = 0.0

    can_build: bool = True
    allow_killing: bool = True
    allow_team_killing: bool = False
    muted: bool = False
    is_invisible: bool = False
    told_to_master: bool = False
    welcome_sent: bool = False
    permissions: int = 0
    role_list: List[Tuple[str, str, int]] = field(default_factory=list)

    ups: int = 60
    client: str = " "
    version_major: int = 0
    version_minor: int = 0
    version_revision: int = 0
    os_info: str = ""

    respawn_time: int = 0
    start_of_respawn_wait: int = 0
    since_last_weapon_input: int = 0
    since_reload_start: int = 0
    since_periodic_message: int = 0
    since_last_base_enter: int = 0
    since_last_base_enter_restock: int = 0
    since_last_3block_dest: int = 0
    since_last_block_dest: int = 0
    since_last_block_plac: int = 0
    since_last_grenade_thrown: int = 0
    since_last_shot: int = 0
    time_since_last_wu: int = 0
    periodic_delay_index: int = 0

    grenade_list: List[Grenade] = field(default_factory=list)
    block_buffer: List[object] = field(default_factory=list)


class VoxelMap:
    """A block map: x and y grow across, z grows downwards from the sky."""

    def __init__(self, size_x: int = 512, size_y: int = 512, size_z: int = 64) -> None:
        if size_x <= 0 or size_y <= 0 or size_z <= 0:
            raise ValueError("map dimensions must be positive")
        self.size_x = size_x
        self.size_y = size_y
        self.size_z = size_z
        self._solid: Set[Tuple[int, int, int]] = set()

    def _in_bounds(self, x: int, y: int, z: int) -> bool:
        return 0 <= x < self.size_x and 0 <= y < self.size_y and 0 <= z < self.size_z

    def is_solid(self, x: int, y: int, z: int) -> bool:
        """Whether the block is solid; above the map is air, below it is solid."""
        if z < 0:
            return False
        if z >= self.size_z:
            return True
        if not (0 <= x < self.size_x and 0 <= y < self.size_y):
            return False
        return (x, y, z) in self._solid

    def set_solid(self, x: int, y: int, z: int, solid: bool = True) -> None:
        if not self._in_bounds(x, y, z):
            raise IndexError(f"block ({x}, {y}, {z}) is outside the map")
        if solid:
            self._solid.add((x, y, z))
        else:
            self._solid.discard((x, y, z))

    def find_top_block(self, x: float, y: float) -> int:
        """The highest solid block of a column, or ``size_z`` when it is empty."""
        ix, iy = int(x), int(y)
        if not (0 <= ix < self.size_x and 0 <= iy < self.size_y):
            raise IndexError(f"column ({ix}, {iy}) is outside the map")
        return next(
            (z for z in range(self.size_z) if (ix, iy, z) in self._solid),
            self.size_z,
        )


def _default_spawns() -> Dict[Team, Tuple[Vector3, Vector3]]:
    return {
        Team.A: (Vector3(), Vector3()),
        Team.B: (Vector3(), Vector3()),
    }


@dataclass
class Server:
    """Shared server state: the players, the map and the settings."""

    server_name: str = "Server"
    map_name: str = ""
    gamemode_name: str = ""
    max_players: int = 32
    num_players: int = 0
    num_users: int = 0
    players: Dict[int, Player] = field(default_factory=dict)
    map: VoxelMap = field(default_factory=VoxelMap)
    spawns: Dict[Team, Tuple[Vector3, Vector3]] = field(default_factory=_default_spawns)
    periodic_messages: List[str] = field(default_factory=list)
    periodic_delays: List[int] = field(default_factory=lambda: [1, 5, 10, 30, 60])
    role_passwords: Dict[str, str] = field(default_factory=dict)
    master_enabled: bool = False
    port: int = DEFAULT_SERVER_PORT

    def find_player(self, player_id: int) -> Optional[Player]:
        return self.players.get(player_id)