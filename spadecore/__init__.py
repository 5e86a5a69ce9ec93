"""Building blocks for a voxel shooter game server: packet streams, compression, physics, player state and messaging."""

__version__ = "0.1.0"