import math

import pytest

from spadecore.model import Grenade, Player, Vector3, VoxelMap
from spadecore.physics import (
    Physics,
    distance_3d,
    reorient_player,
    validate_hit,
)


def _floor_map(levels, span=range(8, 13)):
    game_map = VoxelMap(64, 64, 64)
    for z in levels:
        for x in span:
            for y in span:
                game_map.set_solid(x, y, z)
    return game_map


def _wall_map():
    game_map = VoxelMap(64, 64, 64)
    game_map.set_solid(15, 10, 30)
    return game_map


def test_distance_3d_matches_math_dist():
    assert distance_3d(1, 2, 3, 4, 6, 8) == pytest.approx(math.dist((1, 2, 3), (4, 6, 8)))


def test_distance_3d_symmetric_and_zero():
    assert distance_3d(1, 2, 3, 1, 2, 3) == 0
    assert distance_3d(0, 0, 0, 5, -1, 2) == pytest.approx(distance_3d(5, -1, 2, 0, 0, 0))


def test_validate_hit_straight_ahead():
    assert validate_hit(Vector3(0, 0, 0), Vector3(1, 0, 0), Vector3(10, 0, 0), 0.5) is True


def test_validate_hit_misses_to_the_side_and_behind():
    shooter, aim = Vector3(0, 0, 0), Vector3(1, 0, 0)
    assert validate_hit(shooter, aim, Vector3(10, 5, 0), 0.5) is False
    assert validate_hit(shooter, aim, Vector3(-10, 0, 0), 0.5) is False


def test_validate_hit_vertical_aim_never_hits():
    assert validate_hit(Vector3(0, 0, 0), Vector3(0, 0, 1), Vector3(0, 0, 10), 0.5) is False


def test_reorient_player_builds_orthogonal_basis():
    player = Player()
    orientation = Vector3(0.6, 0.8, 0.0)
    reorient_player(player, orientation)
    movement = player.movement
    assert movement.forward_orientation == orientation
    assert movement.forward_orientation is not orientation
    forward, strafe, height = (
        movement.forward_orientation,
        movement.strafe_orientation,
        movement.height_orientation,
    )
    dot_fs = forward.x * strafe.x + forward.y * strafe.y + forward.z * strafe.z
    dot_sh = strafe.x * height.x + strafe.y * height.y + strafe.z * height.z
    assert dot_fs == pytest.approx(0.0)
    assert dot_sh == pytest.approx(0.0)
    assert math.hypot(strafe.x, strafe.y) == pytest.approx(1.0)


def test_can_see_in_empty_map():
    physics = Physics(VoxelMap(64, 64, 64))
    assert physics.can_see(10.5, 10.5, 30.5, 20.5, 10.5, 30.5) is True


def test_can_see_blocked_by_wall():
    physics = Physics(_wall_map())
    assert physics.can_see(10.5, 10.5, 30.5, 20.5, 10.5, 30.5) is False


def test_cast_ray_hits_wall_block():
    physics = Physics(_wall_map())
    assert physics.cast_ray(10.5, 10.5, 30.5, 1, 0, 0, 20) == (15, 10, 30)


def test_cast_ray_misses_in_empty_map():
    physics = Physics(VoxelMap(64, 64, 64))
    assert physics.cast_ray(10.5, 10.5, 30.5, 1, 0, 0, 20) is None


def test_cast_ray_too_short_to_reach_wall():
    physics = Physics(_wall_map())
    assert physics.cast_ray(10.5, 10.5, 30.5, 1, 0, 0, 3) is None


def test_try_uncrouch_in_open_space_raises_player():
    physics = Physics(VoxelMap(64, 64, 64))
    player = Player()
    player.movement.position = Vector3(10.5, 10.5, 40.0)
    player.movement.eye_pos = Vector3(10.5, 10.5, 40.0)
    assert physics.try_uncrouch(player) is True
    assert player.movement.position.z < 40.0
    assert player.movement.eye_pos.z == pytest.approx(player.movement.position.z)


def test_try_uncrouch_blocked_by_ceiling():
    physics = Physics(_floor_map([38]))
    player = Player()
    player.movement.position = Vector3(10.5, 10.5, 40.0)
    assert physics.try_uncrouch(player) is False
    assert player.movement.position.z == 40.0


def test_try_uncrouch_airborne_keeps_position():
    physics = Physics(VoxelMap(64, 64, 64))
    player = Player(airborne=True)
    player.movement.position = Vector3(10.5, 10.5, 40.0)
    assert physics.try_uncrouch(player) is True
    assert player.movement.position.z == 40.0


def test_move_player_falls_in_empty_space():
    physics = Physics(VoxelMap(64, 64, 64))
    physics.set_globals(100.0, 0.05)
    player = Player()
    player.movement.position = Vector3(10.5, 10.5, 10.0)
    assert physics.move_player(player) == 0
    assert player.airborne is True
    assert player.movement.position.z > 10.0
    assert player.movement.velocity.z > 0


def _lander(speed):
    player = Player()
    player.movement.position = Vector3(10.5, 10.5, 40.0)
    player.movement.velocity = Vector3(0.0, 0.0, speed)
    return player


def test_move_player_hard_landing_deals_damage():
    physics = Physics(_floor_map([43]))
    physics.set_globals(100.0, 0.05)
    player = _lander(1.0)
    damage = physics.move_player(player)
    assert damage > 0
    assert player.movement.velocity.z == 0
    assert player.airborne is False
    assert player.movement.position.z == 40.0
    assert player.movement.eye_pos == player.movement.position


def test_move_player_soft_landing_plays_sound_only():
    physics = Physics(_floor_map([43]))
    physics.set_globals(100.0, 0.05)
    player = _lander(0.5)
    assert physics.move_player(player) == -1
    assert player.airborne is False


def test_jump_sets_upward_velocity():
    physics = Physics(VoxelMap(64, 64, 64))
    physics.set_globals(100.0, 0.05)
    player = Player(jumping=True)
    player.movement.position = Vector3(10.5, 10.5, 20.0)
    physics.move_player(player)
    assert player.jumping is False
    assert player.movement.velocity.z < 0
    assert player.movement.position.z < 20.0


def test_move_grenade_free_flight():
    physics = Physics(VoxelMap(64, 64, 64))
    physics.set_globals(0.0, 0.05)
    grenade = Grenade(position=Vector3(10.5, 10.5, 20.0), velocity=Vector3(1.0, 0.0, 0.0))
    assert physics.move_grenade(grenade) == 0
    assert grenade.position.x > 10.5
    assert grenade.position.z > 20.0


def test_move_grenade_hard_bounce_off_floor():
    physics = Physics(_floor_map(range(43, 51)))
    physics.set_globals(0.0, 0.05)
    grenade = Grenade(position=Vector3(10.5, 10.5, 42.0), velocity=Vector3(0.0, 0.0, 2.0))
    assert physics.move_grenade(grenade) == 2
    assert grenade.position == Vector3(10.5, 10.5, 42.0)
    assert grenade.velocity.z < 0
    assert abs(grenade.velocity.z) < 2.0


def test_move_grenade_soft_bounce():
    physics = Physics(_floor_map(range(43, 51)))
    physics.set_globals(0.0, 0.05)
    grenade = Grenade(position=Vector3(10.5, 10.5, 42.6), velocity=Vector3(0.0, 0.0, 0.5))
    assert physics.move_grenade(grenade) == 1
    assert grenade.position == Vector3(10.5, 10.5, 42.6)
    assert grenade.velocity.z < 0