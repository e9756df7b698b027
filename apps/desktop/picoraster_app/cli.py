"""CLI entrypoints for the PicoRaster desktop app, headless render, and sketch checks."""

from __future__ import annotations

import argparse
import json
from dataclasses import asdict
from importlib import metadata
from pathlib import Path

from picoraster_core import PerformanceMonitor, PerformanceTargets, configure_logging, load_config
from picoraster_core.config import AppConfig, config_path
from picoraster_engine import (
    CompileError,
    ImageSurface,
    InputState,
    SteppedTask,
    build_capabilities,
    compile_source,
    run,
)


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def installed_version() -> str:
    try:
        return metadata.version("picoraster")
    except Exception:
        return "0.1.0"


def _read_sketch(path: str) -> str:
    return Path(path).expanduser().read_text(encoding="utf-8")


def performance_targets(cfg: AppConfig) -> PerformanceTargets:
    return PerformanceTargets(
        interval_ms=cfg.render.interval_ms,
        cpu_percent_max=cfg.performance.cpu_percent_max,
        rss_mb_max=cfg.performance.rss_mb_max,
        frame_budget_factor=cfg.performance.frame_budget_factor,
    )


def cmd_run(args: argparse.Namespace) -> int:
    from .app import run_gui

    return run_gui(sketch=args.sketch)


def cmd_check(args: argparse.Namespace) -> int:
    cfg = load_config()
    result = compile_source(_read_sketch(args.sketch), build_capabilities(cfg.render.legacy_atanh))
    if isinstance(result, CompileError):
        _print_json({"ok": False, "error": result.message})
        return 1

    _source, namespace = result.value
    _print_json({"ok": True, "width": namespace.width, "height": namespace.height, "loop": namespace.loop})
    return 0


def cmd_render(args: argparse.Namespace) -> int:
    cfg = load_config()

    surface = ImageSurface()
    input_state = InputState()
    if args.mouse:
        input_state.move(args.mouse[0], args.mouse[1])
    if args.mouse_down:
        input_state.press()

    monitor = PerformanceMonitor(performance_targets(cfg))
    tasks: list[SteppedTask] = []
    errors: list[str] = []
    running: list[bool] = []

    def make_task() -> SteppedTask:
        task = SteppedTask(realtime=args.realtime)
        tasks.append(task)
        return task

    run(
        _read_sketch(args.sketch),
        running.append,
        errors.append,
        lambda _handle: None,
        surface=surface,
        input_state=input_state,
        task_factory=make_task,
        interval_ms=cfg.render.interval_ms,
        capabilities=build_capabilities(cfg.render.legacy_atanh),
        on_frame=monitor.record,
    )
    for task in tasks:
        task.run(args.frames)
        task.cancel()

    status = monitor.sample()
    payload: dict[str, object] = {
        "success": not errors,
        "frames": status.frames,
        "avg_frame_ms": round(status.avg_frame_s * 1000, 3),
        "fps": round(status.fps, 2),
        "error": errors[-1] if errors else None,
    }
    if surface.paint_count and not errors:
        scale = max(1, args.scale)
        out = surface.save(Path(args.out).expanduser().resolve(), scale=scale)
        payload["output"] = str(out)
        payload["size"] = [surface.width * scale, surface.height * scale]

    _print_json(payload)
    return 0 if not errors else 1


def cmd_settings(_args: argparse.Namespace) -> int:
    cfg = load_config()
    _print_json({"path": str(config_path()), "version": installed_version(), "settings": asdict(cfg)})
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="picoraster", description="Live per-pixel sketch renderer")
    sub = parser.add_subparsers(dest="command", required=True)

    run_cmd = sub.add_parser("run", help="Open the desktop editor")
    run_cmd.add_argument("--sketch", default=None, help="Sketch file to load into the editor")
    run_cmd.set_defaults(func=cmd_run)

    check_cmd = sub.add_parser("check", help="Compile a sketch and print its settings")
    check_cmd.add_argument("sketch")
    check_cmd.set_defaults(func=cmd_check)

    render_cmd = sub.add_parser("render", help="Render a sketch headless to PNG")
    render_cmd.add_argument("sketch")
    render_cmd.add_argument("--out", required=True, help="PNG output path")
    render_cmd.add_argument("--frames", type=int, default=1, help="Frames to render for looping sketches")
    render_cmd.add_argument("--mouse", type=int, nargs=2, metavar=("X", "Y"), default=None)
    render_cmd.add_argument("--mouse-down", action="store_true")
    render_cmd.add_argument("--scale", type=int, default=1, help="Nearest-neighbor upscale factor")
    render_cmd.add_argument("--realtime", action="store_true", help="Sleep for the cadence between frames")
    render_cmd.set_defaults(func=cmd_render)

    settings_cmd = sub.add_parser("settings", help="Print effective settings")
    settings_cmd.set_defaults(func=cmd_settings)

    return parser


def main(argv: list[str] | None = None) -> int:
    configure_logging(console=False)
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
