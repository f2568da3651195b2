from __future__ import annotations

import argparse
import dataclasses
import importlib.metadata
import math
import os
import platform
import sys
from typing import Any

from tokengrid.content.config import DEFAULT_CONFIG_PATH, GameConfig, load_game_config_json
from tokengrid.content.io import DEFAULT_SAVE_DIR, JsonFileBlobStore
from tokengrid.sim.hash import overrides_hash
from tokengrid.sim.interaction import outcome_message
from tokengrid.sim.movement import Direction
from tokengrid.sim.overrides import MalformedPersistedState, OverrideStore
from tokengrid.sim.session import GameSession
from tokengrid.sim.viewport import Region, region_around
from tokengrid.sim.world import CellCoord, CellState, Occupied

CELL_SIZE = 32
WINDOW_SIZE = (1024, 704)
HUD_HEIGHT = 64
FRAME_RATE = 30

BACKGROUND_COLOR = (22, 24, 30)
EMPTY_CELL_COLOR = (204, 204, 204)
TOKEN_CELL_COLOR = (136, 136, 255)
OVERRIDE_OUTLINE_COLOR = (255, 190, 90)
GRID_LINE_COLOR = (60, 64, 78)
PLAYER_COLOR = (235, 70, 70)
RADIUS_COLOR = (255, 0, 0)
HUD_TEXT_COLOR = (240, 240, 240)
TOKEN_TEXT_COLOR = (20, 20, 40)

pygame: Any | None = None


def _viewport_size() -> tuple[int, int]:
    return (WINDOW_SIZE[0], WINDOW_SIZE[1] - HUD_HEIGHT)


def _viewport_center() -> tuple[float, float]:
    width, height = _viewport_size()
    return (width / 2.0, height / 2.0)


def grid_to_pixel(i: float, j: float, view_center: tuple[float, float]) -> tuple[float, float]:
    """North-up: larger i is higher on screen, larger j is further right."""
    center_x, center_y = _viewport_center()
    return (center_x + (j - view_center[1]) * CELL_SIZE, center_y - (i - view_center[0]) * CELL_SIZE)


def pixel_to_cell(pixel_x: float, pixel_y: float, view_center: tuple[float, float]) -> CellCoord:
    """Cells span [i, i + 1] x [j, j + 1] in grid space, so clicks floor."""
    center_x, center_y = _viewport_center()
    i = view_center[0] + (center_y - pixel_y) / CELL_SIZE
    j = view_center[1] + (pixel_x - center_x) / CELL_SIZE
    return CellCoord(math.floor(i), math.floor(j))


def screen_region(view_center: tuple[float, float]) -> Region:
    width, height = _viewport_size()
    half_height = height / 2.0 / CELL_SIZE + 1.0
    half_width = width / 2.0 / CELL_SIZE + 1.0
    return region_around(view_center, half_height, half_width)


def cell_color(state: CellState) -> tuple[int, int, int]:
    return TOKEN_CELL_COLOR if isinstance(state, Occupied) else EMPTY_CELL_COLOR


def key_direction(key: int) -> Direction | None:
    bindings = {
        pygame.K_UP: Direction.NORTH,
        pygame.K_w: Direction.NORTH,
        pygame.K_DOWN: Direction.SOUTH,
        pygame.K_s: Direction.SOUTH,
        pygame.K_LEFT: Direction.WEST,
        pygame.K_a: Direction.WEST,
        pygame.K_RIGHT: Direction.EAST,
        pygame.K_d: Direction.EAST,
    }
    return bindings.get(key)


def hud_lines(session: GameSession, status_message: str | None) -> list[str]:
    holding = session.player.holding if session.player.holding is not None else "nothing"
    player_cell = session.player_cell()
    first = (
        f"Mode: {session.mode.value}  Holding: {holding}  "
        f"Player: ({player_cell.i},{player_cell.j})  Target: {session.target_value}"
    )
    second = "Arrows/WASD to move - Tab to toggle mode - click a cell to pick up or craft"
    if status_message:
        second = f"{status_message}    |    {second}"
    return [first, second]


def _draw_world(screen: Any, session: GameSession, font: Any, view_center: tuple[float, float]) -> None:
    for coord, state in session.visible_cells(screen_region(view_center)):
        left, top = grid_to_pixel(coord.i + 1, coord.j, view_center)
        rect = pygame.Rect(int(left), int(top), CELL_SIZE, CELL_SIZE)
        pygame.draw.rect(screen, cell_color(state), rect)
        outline = OVERRIDE_OUTLINE_COLOR if session.resolver.is_overridden(coord) else GRID_LINE_COLOR
        pygame.draw.rect(screen, outline, rect, 1)
        if isinstance(state, Occupied):
            label = font.render(str(state.value), True, TOKEN_TEXT_COLOR)
            screen.blit(label, label.get_rect(center=rect.center))


def _draw_player(screen: Any, session: GameSession, view_center: tuple[float, float]) -> None:
    player_i, player_j = session.projection.latlng_to_grid(session.player.lat, session.player.lng)
    pixel_x, pixel_y = grid_to_pixel(player_i, player_j, view_center)
    pygame.draw.circle(screen, PLAYER_COLOR, (int(pixel_x), int(pixel_y)), CELL_SIZE // 3)

    radius = session.interaction_radius
    player_cell = session.player_cell()
    left, top = grid_to_pixel(player_cell.i + radius + 1, player_cell.j - radius, view_center)
    span = (2 * radius + 1) * CELL_SIZE
    pygame.draw.rect(screen, RADIUS_COLOR, pygame.Rect(int(left), int(top), span, span), 1)


def _draw_hud(screen: Any, session: GameSession, font: Any, status_message: str | None) -> None:
    width, height = _viewport_size()
    pygame.draw.rect(screen, (0, 0, 0), pygame.Rect(0, height, width, HUD_HEIGHT))
    for index, line in enumerate(hud_lines(session, status_message)):
        surface = font.render(line, True, HUD_TEXT_COLOR)
        screen.blit(surface, (10, height + 8 + index * 26))


def _draw_frame(screen: Any, session: GameSession, fonts: tuple[Any, Any], status_message: str | None) -> None:
    cell_font, hud_font = fonts
    view_center = session.controller.view_center_cell_space()
    screen.fill(BACKGROUND_COLOR)
    _draw_world(screen, session, cell_font, view_center)
    _draw_player(screen, session, view_center)
    _draw_hud(screen, session, hud_font, status_message)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m tokengrid.cli.pygame_viewer",
        description="Run the Tokengrid pygame map surface.",
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Path to game config JSON.")
    parser.add_argument("--save-dir", default=DEFAULT_SAVE_DIR, help="Directory holding persisted override blobs.")
    parser.add_argument("--seed", type=int, help="Override the config seed.")
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Force SDL dummy video driver, draw one frame and exit.",
    )
    parser.add_argument("--reset", action="store_true", help="Discard persisted overrides before starting.")
    return parser


def _env_flag_enabled(var_name: str) -> bool:
    return os.environ.get(var_name, "").strip().lower() in {"1", "true", "yes", "on"}


def _print_startup_banner() -> None:
    try:
        pygame_version = importlib.metadata.version("pygame")
    except importlib.metadata.PackageNotFoundError:
        pygame_version = "not-installed"
    print(
        "[tokengrid.viewer] startup "
        f"python={platform.python_version()} "
        f"pygame={pygame_version} "
        f"platform={platform.platform()}"
    )
    for name in ("SDL_VIDEODRIVER", "SDL_AUDIODRIVER"):
        value = os.environ.get(name, "<unset>")
        print(f"[tokengrid.viewer] env {name}={value}")


def _ensure_pygame_imported() -> Any:
    global pygame
    if pygame is None:
        import pygame as pygame_module

        pygame = pygame_module
    return pygame


def load_viewer_session(config: GameConfig, save_dir: str, *, reset: bool = False) -> GameSession:
    blob_store = JsonFileBlobStore(save_dir)
    if reset:
        OverrideStore(blob_store).clear()
        print(f"[tokengrid.viewer] reset overrides save_dir={save_dir}")
    session = GameSession.start(blob_store, config)
    print(
        "[tokengrid.viewer] loaded "
        f"save_dir={save_dir} seed={config.seed} "
        f"overrides={len(session.overrides)} "
        f"overrides_hash={overrides_hash(session.overrides)}"
    )
    return session


def run_pygame_viewer(
    config: GameConfig | None = None,
    *,
    save_dir: str = DEFAULT_SAVE_DIR,
    headless: bool = False,
    reset: bool = False,
) -> int:
    if headless:
        os.environ["SDL_VIDEODRIVER"] = "dummy"
        print("[tokengrid.viewer] warning: headless mode active; no window will open.")

    _print_startup_banner()
    pygame_module = _ensure_pygame_imported()
    config = config or GameConfig()

    try:
        session = load_viewer_session(config, save_dir, reset=reset)
    except MalformedPersistedState as exc:
        print(
            f"[tokengrid.viewer] refusing to start: {exc}. "
            "Fix or move the save file, or start over explicitly with --reset.",
            file=sys.stderr,
        )
        return 1

    try:
        pygame_module.init()
        pygame_module.display.set_caption("Tokengrid")
        screen = pygame_module.display.set_mode(WINDOW_SIZE)
    except Exception as exc:
        print(
            f"[tokengrid.viewer] failed to open display: {exc}. "
            "Hint: use --headless or TOKENGRID_HEADLESS=1 without a display.",
            file=sys.stderr,
        )
        pygame_module.quit()
        return 1

    fonts = (pygame_module.font.SysFont("consolas", 14), pygame_module.font.SysFont("consolas", 18))
    status_message: str | None = None

    if headless:
        _draw_frame(screen, session, fonts, status_message)
        pygame_module.display.flip()
        pygame_module.quit()
        return 0

    clock = pygame_module.time.Clock()
    running = True
    while running:
        for event in pygame_module.event.get():
            if event.type == pygame_module.QUIT:
                running = False
            elif event.type == pygame_module.KEYDOWN and event.key == pygame_module.K_ESCAPE:
                running = False
            elif event.type == pygame_module.KEYDOWN and event.key == pygame_module.K_TAB:
                session.toggle_mode()
                status_message = f"mode: {session.mode.value}"
            elif event.type == pygame_module.KEYDOWN:
                direction = key_direction(event.key)
                if direction is not None:
                    session.move(direction)
            elif event.type == pygame_module.MOUSEBUTTONDOWN and event.button == 1:
                if event.pos[1] >= _viewport_size()[1]:
                    continue
                view_center = session.controller.view_center_cell_space()
                coord = pixel_to_cell(event.pos[0], event.pos[1], view_center)
                result = session.click(coord)
                status_message = outcome_message(result)
                if not result.rejected:
                    print(
                        "[tokengrid.viewer] "
                        f"{result.outcome.value} cell={coord.key()} value={result.value} "
                        f"overrides_hash={overrides_hash(session.overrides)}"
                    )
                if result.won:
                    print(f"[tokengrid.viewer] target {session.target_value} reached")

        _draw_frame(screen, session, fonts, status_message)
        pygame_module.display.flip()
        clock.tick(FRAME_RATE)

    pygame_module.quit()
    return 0


def main(argv: list[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)
    config = load_game_config_json(args.config)
    if args.seed is not None:
        config = dataclasses.replace(config, seed=args.seed)
    headless = args.headless or _env_flag_enabled("TOKENGRID_HEADLESS")
    raise SystemExit(run_pygame_viewer(config, save_dir=args.save_dir, headless=headless, reset=args.reset))


if __name__ == "__main__":
    main()
