# spadecore

Building blocks for the server of a voxel-based first person shooter. The
package uses only the standard library.

## Modules

- `spadecore.datastream`: `DataStream` is a fixed-size buffer with a cursor. It
  reads and writes little-endian `u8`, `u16`, `u32`, floats, vectors
  (`write_vector3f`), raw bytes and colours (`Color`, stored on the wire as
  b, g, r[, a]). A stream is built from bytes or from a length, which gives a
  zero-filled buffer. A read or write that would go past the end raises
  `StreamError`. `getvalue()` returns the whole buffer.
- `spadecore.compress`: `compress_chunks(data, chunk_size=8192)` deflates data
  with zlib at level 5 and splits the output into chunks of `chunk_size` bytes,
  with the last chunk possibly shorter. If the output fills the last chunk
  exactly, an empty chunk is appended.
- `spadecore.timing`: `get_nanos()` returns wall-clock nanoseconds.
  `diff_is_older(now, before, diff)` compares unsigned 64-bit differences.
  `Cooldown.elapsed(now, interval)` reports whether an interval has passed and,
  if it has, restarts from `now`.
- `spadecore.log`: coloured console logging. `log_debug`, `log_info`,
  `log_status` and `log_warning` write to standard output with a `dd/mm HH:MM:SS`
  timestamp (see `format_timestamp`). `log_error` writes to standard error.
- `spadecore.model`: the data model. It has `Vector3`, `Movement`, `Player`,
  `Grenade` and `Server`, and the enums `PlayerState`, `Team`, `Weapon` (with
  `default_clip`) and `DamageIndex`. `VoxelMap` is an in-memory block map in
  which z grows downwards. It provides `is_solid`, `set_solid` and
  `find_top_block`.
- `spadecore.checks`: checks on players and positions. These cover player
  visibility (a range of 132), the connection stage (`is_past_state_data`,
  `is_past_join_screen`), distances, `collision_3d`, map bounds (`valid_pos`,
  `valid_pos_below_z`) and `valid_player_pos`.
- `spadecore.line`: `line_get_blocks(start, end, game_map)` returns the blocks
  along a build line. It returns at most 50 blocks.
- `spadecore.physics`: provides `distance_3d`, `validate_hit` and
  `reorient_player`. A `Physics` object is bound to a map. Its methods are:
  - `set_globals(time, dt)`
  - `can_see`
  - `cast_ray`, which returns the block hit or `None`
  - `try_uncrouch`
  - `box_clip_move`
  - `move_player`, which returns the fall damage, `-1` or `0`
  - `move_grenade`, which returns `0`, `1` or `2`
- `spadecore.player`: provides the following:
  - `next_free_player_id`, which raises `ServerFullError` when the server is full
  - `init_player`
  - `get_player_unstuck`
  - `set_player_respawn_point`, which takes an optional `random.Random`
  - `respawn_ready`, which takes the time in seconds
  - `tick_weapon`, which takes the time in nanoseconds and handles firing and
    reloading
- `spadecore.messaging`: `chat_notice_packet(player_id, message)` builds a
  system chat packet. `is_staff` checks a player's staff status. The functions
  `staff_recipients`, `notice_recipients`, `recipients_except_sender`,
  `recipients_except_sender_dist` and `recipients_dist` choose which players
  should receive a packet.
- `spadecore.ping`: `handle_raw_udp(data, server)` answers raw probes. For
  `HELLO` it replies `b"HI"`. For `HELLOLAN` it replies with the JSON from
  `lan_info_json`, or with empty bytes if no map is loaded. For anything else it
  returns `None`.

## Example

```python
from spadecore.compress import compress_chunks
from spadecore.datastream import DataStream

stream = DataStream(7)
stream.write_u8(17)
stream.write_u16(513)
stream.write_float(1.5)
print(stream.getvalue())

chunks = compress_chunks(b"\x00" * 100_000, 8192)
print(len(chunks))
```

## What it does not do

The package provides no runnable server and no command. It does not open
sockets or send packets: it builds packet bytes and picks recipients, and the
caller sends them. It neither loads nor saves map files; a `VoxelMap` exists
only in memory. Ban lists, master-server announcements, chat commands and game
modes are not included.

## Testing

```
pip install .[test]
pytest
```