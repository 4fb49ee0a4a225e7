"""
VoxelSpace: how many uniform items fit in a box, shown as an inspectable 3D grid.
"""

from .grid import Dimensions, GridCounts, Mode, PackingResult, compute
from .indexer import decode, encode, grid_start, instance_positions, world_position
from .visibility import VisibilityStore
from .render_mode import DEFAULT_FALLBACK_THRESHOLD, RenderMode, fallback_block, select
from .renderer import Renderer, nearest_box_hit, ray_box_hits
from .picking import PickController, VoxelInfo, describe_voxel
from .config import Config, load_config, dump_config, normalize_config
from .context import PackingContext, parse_dimension, summary_lines

__version__ = "0.1.0"

__all__ = [
    "Dimensions", "GridCounts", "Mode", "PackingResult", "compute",
    "decode", "encode", "grid_start", "instance_positions", "world_position",
    "VisibilityStore",
    "DEFAULT_FALLBACK_THRESHOLD", "RenderMode", "fallback_block", "select",
    "Renderer", "nearest_box_hit", "ray_box_hits",
    "PickController", "VoxelInfo", "describe_voxel",
    "Config", "load_config", "dump_config", "normalize_config",
    "PackingContext", "parse_dimension", "summary_lines",
]
