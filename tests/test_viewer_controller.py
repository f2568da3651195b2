from tokengrid.cli.viewer import EMPTY_GLYPH, PLAYER_GLYPH, AsciiViewer
from tokengrid.content.config import GameConfig
from tokengrid.content.io import MemoryBlobStore
from tokengrid.sim.session import GameSession
from tokengrid.sim.world import EMPTY, CellCoord, Occupied


def _build_session() -> GameSession:
    return GameSession.start(MemoryBlobStore(), GameConfig(seed=44, view_half_height=1, view_half_width=1))


def test_ascii_viewer_draws_visible_window_north_up() -> None:
    session = _build_session()
    session.overrides.set(CellCoord(1, -1), Occupied(16))
    session.overrides.set(CellCoord(-1, 1), EMPTY)

    lines = AsciiViewer().render(session).splitlines()

    assert lines[0] == "mode=player holding=- player=(0,0) overrides=2"
    assert lines[1].startswith("i=   1:")
    assert lines[1].split(":", 1)[1].split()[0] == "16"
    assert lines[2].split(":", 1)[1].split()[1] == PLAYER_GLYPH
    assert lines[3].startswith("i=  -1:")
    assert lines[3].split(":", 1)[1].split()[2] == EMPTY_GLYPH


def test_ascii_viewer_shows_last_outcome_message() -> None:
    session = _build_session()
    session.overrides.set(CellCoord(0, 1), Occupied(2))

    session.click(CellCoord(0, 1))
    rendered = AsciiViewer().render(session)

    assert rendered.splitlines()[0].startswith("mode=player holding=2")
    assert rendered.splitlines()[-1] == "Picked up 2"
