"""
Command-line entry point: load config, print the packing summary, optionally
write a report, and open the interactive 3D view.
"""

from typing import Optional
import argparse
import sys

from .config import (Config, CONTAINER_PRESETS, ITEM_PRESETS, dump_config, guess_default_config,
                     load_config, normalize_config, write_mapping)
from .context import summary_lines
from .grid import Mode, PackingResult, compute
from .render_mode import RenderMode, select


# ------------------ Report ------------------
def build_report(cfg: Config, result: PackingResult, render_mode: RenderMode) -> dict:
    """
Plain mapping of inputs and results, suitable for YAML/JSON.
    """

    c = result.counts
    return {
        "container": {"width": cfg.container[0], "height": cfg.container[1], "depth": cfg.container[2]},
        "item": {"width": cfg.item[0], "height": cfg.item[1], "depth": cfg.item[2]},
        "mode": result.mode.value,
        "counts": {"x": c.x, "y": c.y, "z": c.z},
        "total": result.total,
        "container_volume": round(result.container_volume, 6),
        "item_volume": round(result.item_volume, 6),
        "total_item_volume": round(result.total_item_volume, 6),
        "efficiency_percent": round(result.efficiency_percent, 3),
        "render_mode": render_mode.value,
        "fallback_threshold": cfg.fallback_threshold,
    }


# ------------------ Startup summary ------------------
def print_startup_summary(config_path: Optional[str], cfg: Config, result: PackingResult,
                          render_mode: RenderMode):
    """
Print a human-readable summary of the current run.
    """

    print("----- VoxelSpace -----")
    print(f"config:        {config_path or '(built-in defaults)'}")
    print("container:     {:.3f} x {:.3f} x {:.3f} m".format(*cfg.container))
    print("item:          {:.3f} x {:.3f} x {:.3f} m{}".format(*cfg.item, "  (locked cube)" if cfg.aspect_lock else ""))
    print(f"mode:          {cfg.mode}")
    for line in summary_lines(result, render_mode, cfg.fallback_threshold):
        print(f"  {line}")
    print("----------------------")


# ------------------ CLI ------------------
def parse_args(argv=None):
    """
Define/parse command-line arguments.
    """

    p = argparse.ArgumentParser(description="Container/item packing calculator with interactive 3D voxel view")
    p.add_argument("--config", type=str, default=None, help="Path to YAML/JSON config (optional)")
    p.add_argument("--dump-config", type=str, default=None, help="Write effective config to file (YAML/JSON)")
    p.add_argument("--container", type=float, nargs=3, metavar=("W", "H", "D"), default=None,
                   help="Container width/height/depth in metres")
    p.add_argument("--item", type=float, nargs=3, metavar=("W", "H", "D"), default=None,
                   help="Item (voxel) width/height/depth in metres")
    p.add_argument("--container-preset", choices=sorted(CONTAINER_PRESETS), default=None)
    p.add_argument("--item-preset", choices=sorted(ITEM_PRESETS), default=None)
    p.add_argument("--mode", choices=[m.value for m in Mode], default=None,
                   help="packing = whole items inside (floor), coverage = items needed to cover (ceil)")
    p.add_argument("--threshold", type=int, default=None,
                   help="Above this many cells draw a single block instead of individual voxels")
    p.add_argument("--lock", action="store_true", help="Lock the item to a cube of its width")
    p.add_argument("--report", type=str, default=None, help="Write packing results to file (YAML/JSON)")
    p.add_argument("--export-mesh", type=str, default=None,
                   help="Save visible voxel geometry (.vtp/.ply/.obj/.stl)")
    p.add_argument("--screenshot", type=str, default=None, help="Path to save a screenshot (PNG)")
    p.add_argument("--no-show", action="store_true", help="Do not open an interactive window")
    return p.parse_args(argv)


def apply_overrides(cfg: Config, args) -> Config:
    """Command-line values win over the config file."""
    if args.container is not None:
        cfg.container = list(args.container)
        cfg.container_preset = None
    if args.item is not None:
        cfg.item = list(args.item)
        cfg.item_preset = None
    if args.container_preset:
        cfg.container_preset = args.container_preset
    if args.item_preset:
        cfg.item_preset = args.item_preset
    if args.mode:
        cfg.mode = args.mode
    if args.threshold is not None:
        cfg.fallback_threshold = args.threshold
    if args.lock:
        cfg.aspect_lock = True
    return cfg


def run_viewer(cfg: Config, export_mesh: Optional[str], screenshot: Optional[str], no_show: bool):
    """
Build the PyVista scene around a PackingContext and show/export it.
    """

    from .context import PackingContext
    from .pyvista_renderer import PyVistaRenderer

    renderer = PyVistaRenderer(cfg, off_screen=no_show)
    context = PackingContext.from_config(cfg, renderer)
    renderer.reset_camera()
    if not no_show:
        renderer.bind(context)

    if export_mesh:
        if renderer.save_mesh(export_mesh):
            print(f"mesh written to {export_mesh}")

    if screenshot or not no_show:
        renderer.show(screenshot=screenshot)
    return context


def main(argv=None):
    """
Entry point wiring: config, overrides, normalization, summary, report, view.
    """

    args = parse_args(argv)

    config_path = args.config or guess_default_config()
    try:
        cfg = load_config(config_path) if config_path else Config()
        apply_overrides(cfg, args)
        normalize_config(cfg)
    except (OSError, ValueError, TypeError) as e:
        print(f"config error: {e}", file=sys.stderr)
        sys.exit(2)

    if args.dump_config:
        dump_config(cfg, args.dump_config)
        print(f"config written to {args.dump_config}")

    result = compute(cfg.container_dims(), cfg.item_dims(), cfg.mode)
    render_mode = select(result.total, cfg.fallback_threshold)
    print_startup_summary(config_path, cfg, result, render_mode)

    if args.report:
        write_mapping(build_report(cfg, result, render_mode), args.report)
        print(f"report written to {args.report}")

    if args.no_show and not args.screenshot and not args.export_mesh:
        return 0

    run_viewer(cfg, export_mesh=args.export_mesh, screenshot=args.screenshot, no_show=args.no_show)
    return 0


if __name__ == "__main__":
    main()
