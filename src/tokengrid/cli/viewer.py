from __future__ import annotations

from tokengrid.content.config import DEFAULT_CONFIG_PATH, GameConfig, load_game_config_json
from tokengrid.content.io import MemoryBlobStore
from tokengrid.sim.interaction import outcome_message
from tokengrid.sim.movement import KEY_DIRECTIONS
from tokengrid.sim.overrides import BlobStore
from tokengrid.sim.session import GameSession
from tokengrid.sim.world import CellCoord, Occupied

CELL_WIDTH = 4
EMPTY_GLYPH = "."
PLAYER_GLYPH = "@"


class AsciiViewer:
    """Read-only projection of the visible window for terminal display."""

    def render(self, session: GameSession) -> str:
        player_cell = session.player_cell()
        holding = session.player.holding if session.player.holding is not None else "-"
        lines = [
            f"mode={session.mode.value} holding={holding} "
            f"player=({player_cell.i},{player_cell.j}) overrides={len(session.overrides)}"
        ]

        by_row: dict[int, list[str]] = {}
        for coord, state in session.visible_cells():
            if coord == player_cell:
                glyph = PLAYER_GLYPH
            elif isinstance(state, Occupied):
                glyph = str(state.value)
            else:
                glyph = EMPTY_GLYPH
            by_row.setdefault(coord.i, []).append(glyph.rjust(CELL_WIDTH))

        # North (higher i) at the top.
        for i in sorted(by_row, reverse=True):
            lines.append(f"i={i:>4}:" + "".join(by_row[i]))

        if session.last_result is not None:
            lines.append(outcome_message(session.last_result))
        return "\n".join(lines)


def run_demo(config: GameConfig | None = None, blob_store: BlobStore | None = None) -> None:
    if config is None:
        config = load_game_config_json(DEFAULT_CONFIG_PATH)
    session = GameSession.start(blob_store if blob_store is not None else MemoryBlobStore(), config)
    view = AsciiViewer()

    print("Tokengrid demo. Commands: w|a|s|d | mode | click <i> <j> | show | quit")
    print(view.render(session))

    while True:
        raw = input("> ").strip().lower()
        if raw in {"quit", "exit"}:
            break
        if raw == "show":
            print(view.render(session))
            continue
        if raw in KEY_DIRECTIONS:
            session.move(KEY_DIRECTIONS[raw])
            print(view.render(session))
            continue
        if raw in {"mode", "tab"}:
            session.toggle_mode()
            print(view.render(session))
            continue

        parts = raw.split()
        if len(parts) == 3 and parts[0] == "click":
            try:
                coord = CellCoord(int(parts[1]), int(parts[2]))
            except ValueError:
                print("click needs integer cell coordinates")
                continue
            session.click(coord)
            print(view.render(session))
            continue

        print("unknown command")


if __name__ == "__main__":
    run_demo()
