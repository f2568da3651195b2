import pytest

from tokengrid.content.config import GameConfig
from tokengrid.content.io import MemoryBlobStore
from tokengrid.sim.interaction import PlayerState
from tokengrid.sim.movement import KEY_DIRECTIONS, Direction, MovementController, ViewMode
from tokengrid.sim.projection import GridProjection
from tokengrid.sim.session import GameSession
from tokengrid.sim.world import CellCoord


def _build_controller() -> MovementController:
    projection = GridProjection(origin_lat=10.0, origin_lng=20.0, tile_degrees=0.5)
    return MovementController(PlayerState(lat=10.0, lng=20.0), projection)


def test_player_mode_moves_player_and_view_follows() -> None:
    controller = _build_controller()

    center = controller.move(Direction.NORTH)
    controller.move(Direction.EAST)
    controller.move(Direction.EAST)

    assert center == (10.5, 20.0)
    assert controller.player.position == (10.5, 21.0)
    assert controller.view_center == controller.player.position
    assert controller.player_cell() == CellCoord(1, 2)


def test_player_mode_never_moves_free_view_center() -> None:
    controller = _build_controller()
    before = controller.free_view_center

    for direction in (Direction.NORTH, Direction.WEST, Direction.SOUTH, Direction.SOUTH):
        controller.move(direction)

    assert controller.free_view_center == before


def test_free_view_pans_without_moving_player() -> None:
    controller = _build_controller()
    controller.move(Direction.SOUTH)
    player_before = controller.player.position

    assert controller.toggle_mode() == ViewMode.FREE_VIEW
    assert controller.view_center == player_before

    for _ in range(4):
        controller.move(Direction.WEST)

    assert controller.player.position == player_before
    assert controller.view_center == (9.5, 18.0)


def test_toggle_back_to_player_mode_snaps_view_to_player() -> None:
    controller = _build_controller()
    controller.toggle_mode()
    controller.move_by(3.0, -2.0)

    assert controller.toggle_mode() == ViewMode.PLAYER_CENTERED
    assert controller.view_center == controller.player.position
    assert controller.free_view_center == controller.player.position


def test_visible_region_tracks_mode_center() -> None:
    controller = _build_controller()
    controller.toggle_mode()
    for _ in range(3):
        controller.move(Direction.NORTH)

    low, high = controller.visible_region(1, 1).cell_bounds()

    assert (low, high) == (CellCoord(2, -1), CellCoord(4, 1))


@pytest.mark.parametrize(
    ("key", "direction"),
    [("w", Direction.NORTH), ("up", Direction.NORTH), ("s", Direction.SOUTH), ("a", Direction.WEST), ("right", Direction.EAST)],
)
def test_key_bindings_cover_arrows_and_wasd(key: str, direction: Direction) -> None:
    assert KEY_DIRECTIONS[key] == direction


def test_session_move_returns_region_for_new_center() -> None:
    session = GameSession.start(MemoryBlobStore(), GameConfig(view_half_height=2, view_half_width=3))

    region = session.move(Direction.EAST)

    assert region.cell_bounds() == (CellCoord(-2, -2), CellCoord(2, 4))
    assert session.player_cell() == CellCoord(0, 1)
    assert session.mode == ViewMode.PLAYER_CENTERED
