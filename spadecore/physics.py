"""Player, grenade and line-of-sight physics on a voxel map."""

from __future__ import annotations

import math
from typing import Optional, Tuple

from spadecore.model import Grenade, Player, Vector3, VoxelMap

DIAGONAL_SCALE = 0.70710678
FALL_SLOW_DOWN = 0.24
FALL_DAMAGE_VELOCITY = 0.58
FALL_DAMAGE_SCALAR = 4096
BOUNCE_SOUND_THRESHOLD = 1.1
MAX_SIGHT_STEPS = 32

Block = Tuple[int, int, int]


def _divide(numerator: float, denominator: float) -> float:
    """Floating-point division that yields inf or nan instead of raising."""
    if denominator != 0:
        return numerator / denominator
    if numerator == 0 or math.isnan(numerator):
        return math.nan
    sign = math.copysign(1.0, numerator) * math.copysign(1.0, denominator)
    return math.copysign(math.inf, sign)


def _orientation_basis(forward: Vector3) -> Tuple[Vector3, Vector3, Vector3]:
    """Forward, strafe and height vectors for a forward orientation."""
    length = math.sqrt(forward.x * forward.x + forward.y * forward.y)
    strafe = Vector3(_divide(-forward.y, length), _divide(forward.x, length), 0.0)
    height = Vector3(
        -forward.z * strafe.y,
        forward.z * strafe.x,
        forward.x * strafe.y - forward.y * strafe.x,
    )
    return forward.copy(), strafe, height


def distance_3d(x1: float, y1: float, z1: float, x2: float, y2: float, z2: float) -> float:
    """Euclidean distance between two points."""
    return math.sqrt((x2 - x1) ** 2 + (y2 - y1) ** 2 + (z2 - z1) ** 2)


def validate_hit(
    shooter: Vector3, orientation: Vector3, other: Vector3, tolerance: float
) -> bool:
    """Whether ``other`` lies inside the aim cone of a shooter looking along ``orientation``."""
    forward, strafe, height = _orientation_basis(orientation)
    ox, oy, oz = other.x - shooter.x, other.y - shooter.y, other.z - shooter.z
    cz = ox * forward.x + oy * forward.y + oz * forward.z
    r = _divide(1.0, cz)
    cx = ox * strafe.x + oy * strafe.y + oz * strafe.z
    x = cx * r
    cy = ox * height.x + oy * height.y + oz * height.z
    y = cy * r
    r *= tolerance
    return x - r < 0 and x + r > 0 and y - r < 0 and y + r > 0


def reorient_player(player: Player, orientation: Vector3) -> None:
    """Point the player along ``orientation`` and update its strafe and height vectors."""
    movement = player.movement
    movement.forward_orientation = orientation.copy()
    length = math.sqrt(orientation.x * orientation.x + orientation.y * orientation.y)
    strafe = movement.strafe_orientation
    height = movement.height_orientation
    strafe.x = _divide(-orientation.y, length)
    strafe.y = _divide(orientation.x, length)
    height.x = -orientation.z * strafe.y
    height.y = orientation.z * strafe.x
    height.z = orientation.x * strafe.y - orientation.y * strafe.x


class Physics:
    """Physics simulation bound to one map, with the current clock and tick length."""

    def __init__(self, game_map: VoxelMap) -> None:
        self.game_map = game_map
        self.total_time = 0.0
        self.tick = 0.0

    def set_globals(self, time: float, dt: float) -> None:
        """Set the time since start and the length of the current tick, in seconds."""
        self.total_time = time
        self.tick = dt

    # -- map queries -----------------------------------------------------

    def _clipbox(self, x: float, y: float, z: float) -> bool:
        """Solidity where water is empty and horizontal out-of-bounds is solid."""
        m = self.game_map
        if x < 0 or x >= m.size_x or y < 0 or y >= m.size_y:
            return True
        if z < 0:
            return False
        sz = int(z)
        if sz == m.size_z - 1:
            sz = m.size_z - 2
        elif sz >= m.size_z:
            return True
        return m.is_solid(int(x), int(y), sz)

    def _solid_wrap(self, x: int, y: int, z: int) -> bool:
        """Solidity with x and y wrapped around the map edges."""
        m = self.game_map
        if z < 0:
            return False
        if z >= m.size_z:
            return True
        return m.is_solid(x & (m.size_x - 1), y & (m.size_y - 1), z)

    def _clipworld(self, x: int, y: int, z: int) -> bool:
        """Solidity where water and horizontal out-of-bounds are empty."""
        m = self.game_map
        if x < 0 or x >= m.size_x or y < 0 or y >= m.size_y:
            return False
        if z < 0:
            return False
        sz = int(z)
        if sz == m.size_z - 1:
            sz = m.size_z - 2
        elif sz >= m.size_z - 1:
            return True
        return m.is_solid(int(x), int(y), sz)

    def _trace(
        self,
        x0: float,
        y0: float,
        z0: float,
        x1: float,
        y1: float,
        z1: float,
        limit: float,
    ) -> Optional[Block]:
        """Walk the voxels from one point to another; return the first solid one."""
        start = [x0, y0, z0]
        end = [x1, y1, z1]
        a = [int(v - 0.5) for v in start]
        c = [int(v - 0.5) for v in end]
        d = [0, 0, 0]
        f = [0.0, 0.0, 0.0]
        g = [0.0, 0.0, 0.0]
        count = 0
        for axis, (s, e) in enumerate(zip(start, end)):
            if c[axis] < a[axis]:
                d[axis] = -1
                f[axis] = s - a[axis]
                g[axis] = (s - e) * 1024
                count += a[axis] - c[axis]
            elif c[axis] != a[axis]:
                d[axis] = 1
                f[axis] = a[axis] + 1 - s
                g[axis] = (e - s) * 1024
                count += c[axis] - a[axis]

        px = int(f[0] * g[2] - f[2] * g[0])
        py = int(f[1] * g[2] - f[2] * g[1])
        pz = int(f[1] * g[0] - f[0] * g[1])
        ix, iy, iz = int(g[0]), int(g[1]), int(g[2])

        if count > limit:
            count = int(limit)
        ax, ay, az = a
        while count:
            if (px | py) >= 0 and az != c[2]:
                az += d[2]
                px -= ix
                py -= iy
            elif pz >= 0 and ax != c[0]:
                ax += d[0]
                px += iz
                pz -= iy
            else:
                ay += d[1]
                py += iz
                pz += ix
            if self._solid_wrap(ax, ay, az):
                return ax, ay, az
            count -= 1
        return None

    def can_see(
        self, x0: float, y0: float, z0: float, x1: float, y1: float, z1: float
    ) -> bool:
        """Whether no solid block lies between two points (checked up to 32 steps)."""
        return self._trace(x0, y0, z0, x1, y1, z1, MAX_SIGHT_STEPS) is None

    def cast_ray(
        self,
        x0: float,
        y0: float,
        z0: float,
        x1: float,
        y1: float,
        z1: float,
        length: float,
    ) -> Optional[Block]:
        """The first solid block along direction ``(x1, y1, z1)``, or None."""
        return self._trace(
            x0, y0, z0, x0 + x1 * length, y0 + y1 * length, z0 + z1 * length, length
        )

    # -- player movement -------------------------------------------------

    def _reposition(self, player: Player) -> None:
        movement = player.movement
        movement.eye_pos = movement.position.copy()
        since_climb = player.lastclimb - self.total_time
        if since_climb > -0.25:
            movement.eye_pos.z += (since_climb + 0.25) / 0.25

    def try_uncrouch(self, player: Player) -> bool:
        """Stand the player up if there is room; return whether that worked."""
        pos = player.movement.position
        x1, x2 = pos.x + 0.45, pos.x - 0.45
        y1, y2 = pos.y + 0.45, pos.y - 0.45
        z1, z2 = pos.z + 2.25, pos.z - 1.35
        corners = ((x1, y1), (x1, y2), (x2, y1), (x2, y2))

        if player.airborne and not any(self._clipbox(x, y, z1) for x, y in corners):
            return True
        if not any(self._clipbox(x, y, z2) for x, y in corners):
            pos.z -= 0.9
            player.movement.eye_pos.z -= 0.9
            return True
        return False

    def _column_clear(self, xs: Tuple[float, float], ys: Tuple[float, float], base: float, top: float, bottom: float) -> float:
        z = top
        while z >= bottom and not any(
            self._clipbox(x, y, base + z) for x, y in zip(xs, ys)
        ):
            z -= 0.9
        return z

    def box_clip_move(self, player: Player) -> None:
        """Move the player by its velocity, colliding with blocks and climbing steps."""
        movement = player.movement
        pos, vel = movement.position, movement.velocity
        climb = False

        scale = self.tick * 32.0
        nx = scale * vel.x + pos.x
        ny = scale * vel.y + pos.y

        if player.crouching:
            offset, m = 0.45, 0.9
        else:
            offset, m = 0.9, 1.35
        nz = pos.z + offset

        can_step = (
            not player.crouching
            and movement.forward_orientation.z < 0.5
            and not player.sprinting
        )

        side = -0.45 if vel.x < 0 else 0.45
        xs = (nx + side, nx + side)
        ys = (pos.y - 0.45, pos.y + 0.45)
        if self._column_clear(xs, ys, nz, m, -1.36) < -1.36:
            pos.x = nx
        elif can_step:
            if self._column_clear(xs, ys, nz, 0.35, -2.36) < -2.36:
                pos.x = nx
                climb = True
            else:
                vel.x = 0.0
        else:
            vel.x = 0.0

        side = -0.45 if vel.y < 0 else 0.45
        xs = (pos.x - 0.45, pos.x + 0.45)
        ys = (ny + side, ny + side)
        if self._column_clear(xs, ys, nz, m, -1.36) < -1.36:
            pos.y = ny
        elif can_step and not climb:
            if self._column_clear(xs, ys, nz, 0.35, -2.36) < -2.36:
                pos.y = ny
                climb = True
            else:
                vel.y = 0.0
        elif not climb:
            vel.y = 0.0

        if climb:
            vel.x *= 0.5
            vel.y *= 0.5
            player.lastclimb = self.total_time
            nz -= 1
            m = -1.35
        else:
            if vel.z < 0:
                m = -m
            nz += vel.z * self.tick * 32.0

        player.airborne = True
        feet = (
            (pos.x - 0.45, pos.y - 0.45),
            (pos.x - 0.45, pos.y + 0.45),
            (pos.x + 0.45, pos.y - 0.45),
            (pos.x + 0.45, pos.y + 0.45),
        )
        if any(self._clipbox(x, y, nz + m) for x, y in feet):
            if vel.z >= 0:
                player.wade = pos.z > 61
                player.airborne = False
            vel.z = 0.0
        else:
            pos.z = nz - offset

        self._reposition(player)

    def move_player(self, player: Player) -> int:
        """Advance the player one tick.

        Returns the fall damage taken, ``-1`` for a hard landing without
        damage, or ``0`` otherwise.
        """
        movement = player.movement
        vel = movement.velocity

        if player.jumping:
            player.jumping = False
            vel.z = -0.36

        accel = self.tick
        if player.airborne:
            accel *= 0.1
        elif player.crouching:
            accel *= 0.3
        elif (player.secondary_fire and player.item == 2) or player.sneaking:
            accel *= 0.5
        elif player.sprinting:
            accel *= 1.3

        if (player.move_forward or player.move_backwards) and (
            player.move_left or player.move_right
        ):
            accel *= DIAGONAL_SCALE

        forward, strafe = movement.forward_orientation, movement.strafe_orientation
        if player.move_forward:
            vel.x += forward.x * accel
            vel.y += forward.y * accel
        elif player.move_backwards:
            vel.x -= forward.x * accel
            vel.y -= forward.y * accel
        if player.move_left:
            vel.x -= strafe.x * accel
            vel.y -= strafe.y * accel
        elif player.move_right:
            vel.x += strafe.x * accel
            vel.y += strafe.y * accel

        friction = self.tick + 1
        vel.z += self.tick
        vel.z /= friction
        if player.wade:
            friction = self.tick * 6.0 + 1
        elif not player.airborne:
            friction = self.tick * 4.0 + 1
        vel.x /= friction
        vel.y /= friction

        fall_speed = vel.z
        self.box_clip_move(player)
        vel = movement.velocity

        if vel.z == 0 and fall_speed > FALL_SLOW_DOWN:
            vel.x *= 0.5
            vel.y *= 0.5
            if fall_speed > FALL_DAMAGE_VELOCITY:
                excess = fall_speed - FALL_DAMAGE_VELOCITY
                return int(excess * excess * FALL_DAMAGE_SCALAR)
            return -1
        return 0

    def move_grenade(self, grenade: Grenade) -> int:
        """Advance a grenade one tick.

        Returns ``0`` when it flew freely, ``1`` when it bounced and ``2``
        when it bounced hard enough to make a sound.
        """
        old = grenade.position.copy()
        pos, vel = grenade.position, grenade.velocity
        scale = self.tick * 32
        vel.z += self.tick
        pos.x += vel.x * scale
        pos.y += vel.y * scale
        pos.z += vel.z * scale

        lx, ly, lz = (math.floor(v) for v in (pos.x, pos.y, pos.z))
        if not self._clipworld(lx, ly, lz):
            return 0

        result = 1
        if any(abs(v) > BOUNCE_SOUND_THRESHOLD for v in (vel.x, vel.y, vel.z)):
            result = 2

        ox, oy, oz = (math.floor(v) for v in (old.x, old.y, old.z))
        if lz != oz and ((lx == ox and ly == oy) or not self._clipworld(lx, ly, oz)):
            vel.z = -vel.z
        elif lx != ox and ((ly == oy and lz == oz) or not self._clipworld(ox, ly, lz)):
            vel.x = -vel.x
        elif ly != oy and ((lx == ox and lz == oz) or not self._clipworld(lx, oy, lz)):
            vel.y = -vel.y
        grenade.position = old
        vel.x *= 0.36
        vel.y *= 0.36
        vel.z *= 0.36
        return result