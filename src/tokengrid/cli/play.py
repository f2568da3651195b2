from __future__ import annotations

import argparse
import dataclasses
import sys
from typing import Sequence

from tokengrid.cli.pygame_viewer import _env_flag_enabled, run_pygame_viewer
from tokengrid.cli.viewer import run_demo
from tokengrid.content.config import DEFAULT_CONFIG_PATH, GameConfig, load_game_config_json
from tokengrid.content.io import DEFAULT_SAVE_DIR, JsonFileBlobStore
from tokengrid.sim.overrides import MalformedPersistedState, OverrideStore


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="python play.py", description="Tokengrid launcher.")
    parser.add_argument("--seed", type=int, help="World seed; defaults to the config seed.")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Path to game config JSON.")
    parser.add_argument("--save-dir", default=DEFAULT_SAVE_DIR, help="Directory holding persisted override blobs.")
    parser.add_argument("--reset", action="store_true", help="Discard persisted overrides before starting.")
    parser.add_argument("--headless", action="store_true", help="Run startup path in headless mode.")
    parser.add_argument("--ascii", action="store_true", help="Play in the terminal instead of the pygame window.")
    return parser


def _load_config(path: str, seed: int | None) -> GameConfig:
    config = load_game_config_json(path)
    if seed is not None:
        config = dataclasses.replace(config, seed=seed)
    return config


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    config = _load_config(args.config, args.seed)
    if not args.ascii:
        headless = args.headless or _env_flag_enabled("TOKENGRID_HEADLESS")
        return run_pygame_viewer(config, save_dir=args.save_dir, headless=headless, reset=args.reset)

    blob_store = JsonFileBlobStore(args.save_dir)
    if args.reset:
        OverrideStore(blob_store).clear()
        print(f"[tokengrid.play] reset overrides save_dir={args.save_dir}")
    try:
        run_demo(config, blob_store)
    except MalformedPersistedState as exc:
        print(f"[tokengrid.play] refusing to start: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
