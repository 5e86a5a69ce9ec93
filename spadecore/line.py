"""Block positions along a straight line between two blocks."""

from __future__ import annotations

from typing import Any, List, Tuple

from spadecore.model import VoxelMap

TMAX_ALT_VALUE = 0x3FFFFFFF // 1024
MAX_LINE_LENGTH = 50

Block = Tuple[int, int, int]


def _as_block(point: Any) -> Block:
    if all(hasattr(point, name) for name in ("x", "y", "z")):
        return int(point.x), int(point.y), int(point.z)
    x, y, z = point
    return int(x), int(y), int(z)


def _tmax(major: int, minor: int) -> int:
    return major * 512 // minor if minor != 0 else TMAX_ALT_VALUE


def line_get_blocks(start: Any, end: Any, game_map: VoxelMap) -> List[Block]:
    """Blocks from ``start`` towards ``end``, one axis step at a time.

    At most 50 blocks are returned; the walk also stops when it would step
    past the far edge of the map on any axis.
    """
    x, y, z = _as_block(start)
    ex, ey, ez = _as_block(end)
    dx, dy, dz = ex - x, ey - y, ez - z
    sx, sy, sz = (-1 if d < 0 else 1 for d in (dx, dy, dz))
    ax, ay, az = abs(dx), abs(dy), abs(dz)

    if ax >= ay and ax >= az:
        tx, ty, tz = 512, _tmax(ax, ay), _tmax(ax, az)
    elif ay >= az:
        tx, ty, tz = _tmax(ay, ax), 512, _tmax(ay, az)
    else:
        tx, ty, tz = _tmax(az, ax), _tmax(az, ay), 512
    delta_x, delta_y, delta_z = tx * 2, ty * 2, tz * 2

    blocks: List[Block] = []
    while True:
        blocks.append((x, y, z))
        if len(blocks) >= MAX_LINE_LENGTH or (x, y, z) == (ex, ey, ez):
            break
        if tz <= tx and tz <= ty:
            z += sz
            if z >= game_map.size_z:
                break
            tz += delta_z
        elif tx < ty:
            x += sx
            if x >= game_map.size_x:
                break
            tx += delta_x
        else:
            y += sy
            if y >= game_map.size_y:
                break
            ty += delta_y
    return blocks