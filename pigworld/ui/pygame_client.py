"""Pygame 2D viewer for PigWorld.

Draws the grid, its walls, every entity and (in debug mode) the sound
field, plus a side panel with the clock, population counts and a log of
recent world events.  The viewer only reads world state and forwards
user actions to the world's public operations.

Mouse: left-click an empty cell to add the selected kind there, or an
occupied cell to select its occupant; click near a cell edge to toggle
the wall in that gap.  The selected pig can then be sent to sleep, woken,
fed, put in the mood or made to drop its rope, and any selected agent
can be deleted.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

import numpy as np
import pygame

from pigworld.agents.animal import Animal
from pigworld.agents.pig import GirlPig, Pig
from pigworld.entities.items import RopePiece
from pigworld.entities.kinds import Kind
from pigworld.simulation.engine import PLACEABLE_KINDS
from pigworld.simulation.events import Event, EventQueue, EventType
from pigworld.simulation.scenario import Scenario
from pigworld.world.geometry import Position
from pigworld.world.grid import GapOrientation

if TYPE_CHECKING:
    from pigworld.entities.entity import Entity
    from pigworld.simulation.engine import World
    from pigworld.world.cell import Cell

logger = logging.getLogger(__name__)

# Colour palette
_BG = (25, 60, 25)
_CELL = (110, 160, 80)
_GRID_LINE = (80, 120, 60)
_WALL = (60, 40, 20)
_TEXT = (220, 220, 220)
_SOUND = np.array([255, 230, 60], dtype=np.float64)

_KIND_COLOURS: dict[Kind, tuple[int, int, int]] = {
    Kind.BOY_PIG: (0, 0, 255),
    Kind.GIRL_PIG: (255, 20, 147),
    Kind.WOLF: (90, 90, 100),
    Kind.TREE: (20, 90, 20),
    Kind.PIG_FOOD: (150, 90, 30),
}

# Pixels either side of a cell edge that count as clicking the gap.
_EDGE_MARGIN = 6
_LOG_LINES = 12
_SAMPLE_RATE = 22050
_TONES: dict[str, tuple[float, float]] = {
    "grunt": (140.0, 0.25),
    "shriek": (900.0, 0.2),
}

# Keys acting on the selected entity
CONTROL_KEYS: dict[int, str] = {
    pygame.K_z: "sleep",
    pygame.K_x: "wake",
    pygame.K_f: "feed",
    pygame.K_l: "love",
    pygame.K_c: "clear rope",
    pygame.K_DELETE: "delete",
    pygame.K_BACKSPACE: "delete",
}

_PIG_CONTROLS: dict[str, Callable[[Pig], None]] = {
    "sleep": Pig.sleep,
    "wake": Pig.wake_up,
    "feed": Pig.feed,
    "love": Pig.put_in_mood_for_love,
    "clear rope": Pig.clear_rope,
}


def locate(
    x: int,
    y: int,
    cell_size: int,
    rows: int,
    columns: int,
    edge_margin: int = _EDGE_MARGIN,
) -> tuple[Position, GapOrientation | None] | None:
    """Translate a click into a cell, or into the gap next to a cell.

    Args:
        x: Pixel column of the click.
        y: Pixel row of the click.
        cell_size: Pixel size of one cell.
        rows: Grid rows.
        columns: Grid columns.
        edge_margin: How close to an inner edge counts as the gap.

    Returns:
        ``(position, None)`` for a click inside a cell, ``(gap_position,
        orientation)`` for a click on an inner edge, or None when the
        click is off the grid.
    """
    if x < 0 or y < 0:
        return None
    row, column = y // cell_size, x // cell_size
    if row >= rows or column >= columns:
        return None
    local_x, local_y = x - column * cell_size, y - row * cell_size

    if local_y >= cell_size - edge_margin and row < rows - 1:
        return Position(row, column), GapOrientation.HORIZONTAL
    if local_y < edge_margin and row > 0:
        return Position(row - 1, column), GapOrientation.HORIZONTAL
    if local_x >= cell_size - edge_margin and column < columns - 1:
        return Position(row, column), GapOrientation.VERTICAL
    if local_x < edge_margin and column > 0:
        return Position(row, column - 1), GapOrientation.VERTICAL
    return Position(row, column), None


def describe(event: Event) -> str | None:
    """Return a one-line log message for an event, or None to skip it."""
    data = event.data
    if event.type is EventType.ENTITY_ADDED:
        entity = data["entity"]
        if entity.kind is Kind.ROPE_PIECE:
            return None
        return f"+ {entity.kind.label} {entity.id} at {entity.cell}"
    if event.type is EventType.ENTITY_REMOVED:
        entity = data["entity"]
        if entity.kind is Kind.ROPE_PIECE:
            return None
        return f"- {entity.kind.label} {entity.id} from {data.get('cell')}"
    if event.type is EventType.GAP_CHANGED:
        gap = data["gap"]
        state = "wall" if gap.has_wall else "open"
        return f"{gap.orientation.name.lower()} gap {gap.position}: {state}"
    if event.type is EventType.SOUND_PLAYED:
        return f"* {data['name']}!"
    if event.type is EventType.DEBUG_FLAG_CHANGED:
        return f"debug info {'on' if data['value'] else 'off'}"
    return None


def make_tone(frequency: float, seconds: float, sample_rate: int = _SAMPLE_RATE) -> np.ndarray:
    """Synthesise a fading sine tone as 16-bit stereo samples."""
    t = np.linspace(0.0, seconds, int(sample_rate * seconds), endpoint=False)
    envelope = np.linspace(1.0, 0.0, t.size)
    wave = np.sin(2.0 * np.pi * frequency * t) * envelope * 0.4
    mono = (wave * np.iinfo(np.int16).max).astype(np.int16)
    return np.column_stack((mono, mono))


def apply_control(entity: Entity, command: str) -> str | None:
    """Carry out a manual control on the selected entity.

    Any entity can be deleted; the other controls only apply to pigs.

    Returns:
        A log line for what was done, or None if ``command`` does not
        apply to ``entity``.
    """
    label = f"{entity.kind.label} {entity.id}"
    if command == "delete":
        entity.delete()
        return f"deleted {label}"
    control = _PIG_CONTROLS.get(command)
    if control is None or not isinstance(entity, Pig):
        return None
    control(entity)
    return f"{command}: {label}"


class PygameRenderer:
    """Renders a World into a Pygame window and forwards user input.

    Attributes:
        world: The world to visualise.
        cell_size: Pixel size of each grid cell.
        screen: The Pygame display surface.
    """

    # Speed presets in ticks per second
    _SPEED_STEPS: ClassVar[list[float]] = [0.5, 1.0, 2.0, 4.0, 8.0, 15.0, 30.0]

    _KEY_KINDS: ClassVar[dict[int, Kind]] = {
        pygame.K_1: Kind.BOY_PIG,
        pygame.K_2: Kind.GIRL_PIG,
        pygame.K_3: Kind.PIG_FOOD,
        pygame.K_4: Kind.TREE,
        pygame.K_5: Kind.WOLF,
    }

    _DEMO_KEYS: ClassVar[dict[int, str]] = {
        pygame.K_F1: "demo1.yaml",
        pygame.K_F2: "demo2.yaml",
        pygame.K_F3: "demo3.yaml",
    }

    def __init__(
        self,
        world: World,
        cell_size: int = 64,
        ticks_per_second: float = 4.0,
        demo_dir: Path | None = None,
    ) -> None:
        """Initialise the renderer.

        Args:
            world: The world to render.
            cell_size: Pixel width/height per grid cell.
            ticks_per_second: Simulation ticks per real-time second.
            demo_dir: Directory holding ``demo1.yaml`` .. ``demo3.yaml``.
        """
        self.world = world
        self.cell_size = cell_size
        self.ticks_per_second = ticks_per_second
        self.demo_dir = demo_dir
        self._speed_index = self._nearest_speed(ticks_per_second)
        self._tick_accumulator = 0.0
        self.selected_kind = PLACEABLE_KINDS[0]
        self.selected_entity: Entity | None = None
        self._events = EventQueue(world.bus)
        self._log: deque[str] = deque(maxlen=_LOG_LINES)

        w = world.columns * cell_size
        h = world.rows * cell_size
        self._panel_width = 260
        self._win_w = w + self._panel_width
        self._win_h = max(h, 640)

        pygame.init()
        self.screen = pygame.display.set_mode((self._win_w, self._win_h))
        pygame.display.set_caption("PigWorld")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", 14)
        self.small_font = pygame.font.SysFont("monospace", 10)
        self.running = True
        self.paused = True
        self._sounds = self._load_sounds()

    def _nearest_speed(self, tps: float) -> int:
        """Return the index of the closest speed preset."""
        diffs = [abs(s - tps) for s in self._SPEED_STEPS]
        return diffs.index(min(diffs))

    def _load_sounds(self) -> dict[str, pygame.mixer.Sound]:
        try:
            pygame.mixer.init(frequency=_SAMPLE_RATE, size=-16, channels=2)
        except pygame.error as exc:
            logger.warning("Audio unavailable: %s", exc)
            return {}
        return {
            name: pygame.sndarray.make_sound(make_tone(frequency, seconds))
            for name, (frequency, seconds) in _TONES.items()
        }

    def run(self, fps: int = 30) -> None:
        """Main loop: handle input, step the world, render.

        Args:
            fps: Target frames per second.
        """
        while self.running:
            dt = self.clock.tick(fps) / 1000.0  # seconds elapsed
            self._handle_events()
            if not self.paused:
                self._tick_accumulator += self.ticks_per_second * dt
                steps = int(self._tick_accumulator)
                self._tick_accumulator -= steps
                for _ in range(steps):
                    self.world.step()
            self._consume_world_events()
            self._draw()

        self._events.close()
        pygame.quit()

    # -- Input -----------------------------------------------------------------

    def _handle_events(self) -> None:
        """Process Pygame input events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                self._handle_key(event.key)
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._handle_click(*event.pos)

    def _handle_key(self, key: int) -> None:
        world = self.world
        if key == pygame.K_ESCAPE:
            self.running = False
        elif key == pygame.K_SPACE:
            self.paused = not self.paused
        elif key == pygame.K_s:
            world.step()
        elif key == pygame.K_d:
            world.show_debug_info = not world.show_debug_info
        elif key == pygame.K_a:
            world.enable_audio = not world.enable_audio
            self._log.append(f"audio {'on' if world.enable_audio else 'off'}")
        elif key == pygame.K_r:
            world.remove_all()
        elif key == pygame.K_w:
            world.remove_all_walls()
        elif key in (pygame.K_PLUS, pygame.K_EQUALS):
            self._speed_index = min(len(self._SPEED_STEPS) - 1, self._speed_index + 1)
            self.ticks_per_second = self._SPEED_STEPS[self._speed_index]
        elif key == pygame.K_MINUS:
            self._speed_index = max(0, self._speed_index - 1)
            self.ticks_per_second = self._SPEED_STEPS[self._speed_index]
        elif key in CONTROL_KEYS:
            self._control_selected(CONTROL_KEYS[key])
        elif key in self._KEY_KINDS:
            self.selected_kind = self._KEY_KINDS[key]
        elif key in self._DEMO_KEYS and self.demo_dir is not None:
            Scenario.from_yaml(self.demo_dir / self._DEMO_KEYS[key]).apply(world)

    def _handle_click(self, x: int, y: int) -> None:
        hit = locate(x, y, self.cell_size, self.world.rows, self.world.columns)
        if hit is None:
            return
        position, orientation = hit
        if orientation is not None:
            self.world.toggle_gap(position.row, position.column, orientation)
            return
        occupant = self.world.cell_at(position).occupant
        if occupant is not None:
            self.selected_entity = occupant
            self._log.append(f"selected {occupant.kind.label} {occupant.id}")
            return
        if self.world.add_entity_of_kind(self.selected_kind, position) is None:
            self._log.append(f"no room for {self.selected_kind.label}")

    def _control_selected(self, command: str) -> None:
        entity = self.selected_entity
        if entity is None or not entity.exists:
            self.selected_entity = None
            self._log.append("nothing selected")
            return
        message = apply_control(entity, command)
        if message is None:
            self._log.append(f"cannot {command} a {entity.kind.label.lower()}")
        else:
            self._log.append(message)
        if not entity.exists:
            self.selected_entity = None

    def _consume_world_events(self) -> None:
        for event in self._events.drain():
            if event.type is EventType.SOUND_PLAYED:
                sound = self._sounds.get(event.data["name"])
                if sound is not None:
                    sound.play()
            message = describe(event)
            if message is not None:
                self._log.append(message)

    # -- Drawing ---------------------------------------------------------------

    def _draw(self) -> None:
        """Render one frame."""
        self.screen.fill(_BG)
        for cell in self.world.grid.all_cells():
            self._draw_cell(cell)
        self._draw_walls()
        self._draw_info_panel()
        pygame.display.flip()

    def _cell_rect(self, cell: Cell) -> pygame.Rect:
        cs = self.cell_size
        return pygame.Rect(cell.column * cs, cell.row * cs, cs, cs)

    def _draw_cell(self, cell: Cell) -> None:
        rect = self._cell_rect(cell)
        pygame.draw.rect(self.screen, _CELL, rect)
        level = cell.air.level
        if self.world.show_debug_info and level > 0:
            alpha = int(min(level / 20.0, 1.0) * 140)
            overlay = pygame.Surface(rect.size, pygame.SRCALPHA)
            overlay.fill((*_SOUND.astype(int).tolist(), alpha))
            self.screen.blit(overlay, rect.topleft)
        pygame.draw.rect(self.screen, _GRID_LINE, rect, 1)

        for item in cell.ground_items():
            self._draw_ground_item(item, rect)
        if cell.occupant is not None:
            self._draw_agent(cell.occupant, rect)
            if cell.occupant is self.selected_entity:
                pygame.draw.rect(self.screen, _TEXT, rect, 2)
        if self.world.show_debug_info and level > 0:
            label = self.small_font.render(str(level), True, _TEXT)
            self.screen.blit(label, (rect.left + 3, rect.top + 2))

    def _draw_ground_item(self, item: Entity, rect: pygame.Rect) -> None:
        if isinstance(item, RopePiece):
            owner = item.owner
            colour = _KIND_COLOURS.get(owner.kind, _TEXT) if owner else _TEXT
            pygame.draw.line(
                self.screen,
                colour,
                (rect.left + 4, rect.bottom - 4),
                (rect.right - 4, rect.top + 4),
                2,
            )
            return
        size = rect.width // 4
        food = pygame.Rect(0, 0, size, size)
        food.bottomright = (rect.right - 4, rect.bottom - 4)
        pygame.draw.rect(self.screen, _KIND_COLOURS[item.kind], food)

    def _draw_agent(self, agent: Entity, rect: pygame.Rect) -> None:
        colour = _KIND_COLOURS.get(agent.kind, _TEXT)
        if agent.kind is Kind.TREE:
            pygame.draw.circle(self.screen, colour, rect.center, rect.width // 2 - 4)
            return
        pygame.draw.circle(self.screen, colour, rect.center, rect.width // 3)
        if isinstance(agent, GirlPig) and agent.is_grunting:
            pygame.draw.circle(self.screen, _SOUND.astype(int).tolist(), rect.center, rect.width // 3, 2)
        if isinstance(agent, Animal) and self.world.show_debug_info:
            label = self.small_font.render(
                f"{agent.id} e{agent.energy} {agent.last_action}",
                True,
                _TEXT,
            )
            self.screen.blit(label, (rect.left + 2, rect.bottom - 12))

    def _selected_label(self) -> str:
        entity = self.selected_entity
        if entity is None or not entity.exists:
            return "-"
        return f"{entity.kind.label} {entity.id}"

    def _draw_walls(self) -> None:
        cs = self.cell_size
        for gap in self.world.grid.walls():
            row, column = gap.position.row, gap.position.column
            if gap.orientation is GapOrientation.HORIZONTAL:
                y = (row + 1) * cs
                start, end = (column * cs, y), ((column + 1) * cs, y)
            else:
                x = (column + 1) * cs
                start, end = (x, row * cs), (x, (row + 1) * cs)
            pygame.draw.line(self.screen, _WALL, start, end, 5)

    def _draw_info_panel(self) -> None:
        """Draw a stats panel on the right side of the window."""
        world = self.world
        panel_x = world.columns * self.cell_size + 10
        y = 10

        lines = [
            f"Tick: {world.now}",
            f"Speed: {self.ticks_per_second:.1f} t/s",
            f"{'PAUSED' if self.paused else 'RUNNING'}",
            f"Adding: {self.selected_kind.label}",
            f"Selected: {self._selected_label()}",
            "",
            "--- Population ---",
        ]
        lines += [f"{kind.label}: {world.count(kind)}" for kind in PLACEABLE_KINDS]
        lines += [
            "",
            "--- Controls ---",
            "1-5: select kind",
            "click agent: select",
            "Z: sleep  X: wake",
            "F: feed  L: love",
            "C: clear rope  DEL: delete",
            "SPACE: run/pause  S: step",
            "D: debug  A: audio",
            "R: clear  W: no walls",
            "F1-F3: demos  ESC: quit",
            "",
            "--- Events ---",
        ]
        lines += list(self._log)

        for line in lines:
            surf = self.font.render(line, True, _TEXT)
            self.screen.blit(surf, (panel_x, y))
            y += 18
