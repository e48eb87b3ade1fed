"""
This file contains the campaign controller for the Prison Escape Arcade plus
the desktop/browser host: the PyGame display that replays draw commands, the
keyboard/mouse poller that builds per-frame input snapshots, and the
synchronous and async (pygbag) main loops.
"""

import asyncio
import collections
import traceback
from typing import Any

from env import get_platform_name, is_browser
from flappy_game import FlappyGame
from game_utils import (
    BLACK,
    DARKGREEN,
    GOLD,
    GREEN,
    HEIGHT,
    LIGHTGRAY,
    LIME,
    RAYWHITE,
    RED,
    WHITE,
    WIDTH,
    YELLOW,
    DrawBuffer,
    InputSnapshot,
    RandomSource,
    Rect,
    check_collision_point_rec,
    fade,
)
from invaders_game import InvadersGame
from maze_game import MazeGame
from obstacle_game import ObstacleGame

TARGET_FPS = 60
WINDOW_TITLE = "Prison Escape Arcade"

SUFFER_MESSAGE = "NO LOSER YOU NEED TO ESCAPE"
SUFFER_MESSAGE_DISPLAY_TIME = 2.0

ESCAPE_BUTTON = Rect(WIDTH / 2 - 150, HEIGHT / 2 + 50, 300, 70)
SUFFER_BUTTON = Rect(WIDTH / 2 - 150, HEIGHT / 2 + 150, 300, 70)
CONFIRM_BUTTON = Rect(WIDTH / 2 - 100, HEIGHT * 0.75, 200, 50)

# Played front to back; each entry builds a fresh level from the shared RNG.
LEVEL_ORDER = (MazeGame, InvadersGame, FlappyGame, ObstacleGame)


def _log(tag, *parts):
    """
    Print a tagged diagnostic line.

    Visible in the browser (pygbag) console and in desktop terminals.

    Args:
        tag (str): Short upper-case category such as "BOOT" or "LEVEL".
        *parts: Values appended to the line, separated by spaces.
    """
    print(tag + ":", *parts)


class Campaign:
    """
    Global state machine sequencing the four levels.

    Screens:
      - TITLE: ESCAPE starts a run, SUFFER shows a short toast
      - PLAYING: the active level owns every tick
      - TRANSITION: shows the next level's instructions until READY is clicked
      - LOST / WON: ENTER returns to the title
    """

    TITLE = "TITLE"
    TRANSITION = "TRANSITION"
    PLAYING = "PLAYING"
    LOST = "LOST"
    WON = "WON"

    def __init__(self, rng=None, level_order=LEVEL_ORDER, width=WIDTH, height=HEIGHT):
        """
        Build an idle campaign sitting on the title screen.

        Args:
            rng (RandomSource): Random source handed to every level.
            level_order: Sequence of level classes (factories) to play.
            width (int): Logical canvas width passed to each level.
            height (int): Logical canvas height passed to each level.
        """
        self.rng = rng if rng is not None else RandomSource()
        self.level_order = tuple(level_order)
        self.width = width
        self.height = height

        self.screen = self.TITLE
        self.levels = collections.deque()
        self.active = None
        self.next_level_name = ""
        self.next_level_instructions = ""
        self.show_suffer_message = False
        self.suffer_message_timer = 0.0
        # names of every level loaded during the current run, in order
        self.played_levels = []

    def _set_screen(self, screen):
        if screen != self.screen:
            _log("STATE", self.screen, "->", screen)
        self.screen = screen

    # ---------- level queue ----------

    def setup_levels(self):
        """Refill the queue with the fixed level order."""
        self.levels.clear()
        self.levels.extend(self.level_order)
        self.played_levels = []

    def unload_active(self):
        """Unload the active level (if any) and drop it."""
        if self.active is not None:
            self.active.unload()
            _log("LEVEL", "unloaded", self.active.name)
            self.active = None

    def load_next_level(self):
        """Unload the current level, then load the next one from the queue."""
        self.unload_active()
        if not self.levels:
            return None
        factory = self.levels.popleft()
        self.active = factory(self.rng, width=self.width, height=self.height)
        self.active.load()
        self.played_levels.append(self.active.name)
        _log("LEVEL", "loading", self.active.name)
        _log("LEVEL", "instructions", repr(self.active.instructions))
        return self.active

    # ---------- transitions ----------

    def start(self):
        """Leave the title: build the queue, load the first level and play it."""
        self.show_suffer_message = False
        self.suffer_message_timer = 0.0
        self.setup_levels()
        self.load_next_level()
        if self.active is None:
            self._set_screen(self.WON)
        else:
            self._set_screen(self.PLAYING)

    def reset_to_title(self):
        self.unload_active()
        self.levels.clear()
        self.show_suffer_message = False
        self.suffer_message_timer = 0.0
        self._set_screen(self.TITLE)

    def close(self):
        """Release the active level before shutdown."""
        self.unload_active()
        self.levels.clear()

    def _tick_title(self, dt, inp):
        if inp.mouse_pressed:
            if check_collision_point_rec(inp.mouse_pos, ESCAPE_BUTTON):
                _log("INPUT", "escape button pressed")
                self.start()
                return
            if check_collision_point_rec(inp.mouse_pos, SUFFER_BUTTON):
                _log("INPUT", "suffer button pressed")
                self.show_suffer_message = True
                self.suffer_message_timer = 0.0
                return

        if self.show_suffer_message:
            self.suffer_message_timer += dt
            if self.suffer_message_timer >= SUFFER_MESSAGE_DISPLAY_TIME:
                self.show_suffer_message = False

    def _tick_playing(self, dt, inp, now):
        if self.active is None:
            _log("ERROR", "no active level while playing")
            self._set_screen(self.LOST)
            return

        self.active.update(dt, inp, now)
        if not self.active.is_complete():
            return

        won = self.active.did_win()
        self.unload_active()
        if not won:
            self._set_screen(self.LOST)
        elif self.levels:
            upcoming = self.levels[0]
            self.next_level_name = upcoming.NAME
            self.next_level_instructions = upcoming.INSTRUCTIONS
            self._set_screen(self.TRANSITION)
        else:
            self._set_screen(self.WON)

    def _tick_transition(self, inp):
        if not inp.mouse_pressed or not check_collision_point_rec(inp.mouse_pos, CONFIRM_BUTTON):
            return
        self.load_next_level()
        if self.active is None:
            _log("ERROR", "transition requested with an empty level queue")
            self._set_screen(self.WON)
        else:
            self._set_screen(self.PLAYING)

    def tick(self, dt, inp, now):
        """
        Advance the campaign by one frame.

        Args:
            dt (float): Seconds since the previous frame.
            inp (InputSnapshot): Input state for this frame.
            now (float): Monotonic time in seconds.
        """
        if self.screen == self.TITLE:
            self._tick_title(dt, inp)
        elif self.screen == self.PLAYING:
            self._tick_playing(dt, inp, now)
        elif self.screen == self.TRANSITION:
            self._tick_transition(inp)
        elif self.screen in (self.LOST, self.WON):
            if inp.enter_pressed:
                self.show_suffer_message = False
                self.suffer_message_timer = 0.0
                self._set_screen(self.TITLE)

    # ---------- drawing ----------

    def draw(self, buf):
        """Queue the current screen's draw commands into `buf`."""
        if self.screen == self.PLAYING and self.active is not None:
            self.active.draw(buf)
        elif self.screen == self.TITLE:
            self.draw_title(buf)
        elif self.screen == self.TRANSITION:
            self.draw_transition(buf)
        elif self.screen == self.LOST:
            self.draw_lost(buf)
        elif self.screen == self.WON:
            self.draw_won(buf)

    def _draw_button(self, buf, rec, label, color):
        buf.rect_rec(rec, color)
        buf.text_centered(label, rec.x + rec.width / 2, rec.y + rec.height / 2 - 20, 40, BLACK)

    def draw_title(self, buf):
        cx = self.width / 2
        buf.text_centered(
            "You are in prison for kidnapping a qurbani ka bakra,\n \n \n \n \n \n \n \n       you should",
            cx,
            self.height / 2 - 150,
            30,
            WHITE,
        )
        self._draw_button(buf, ESCAPE_BUTTON, "ESCAPE", GREEN)
        self._draw_button(buf, SUFFER_BUTTON, "SUFFER", RED)
        if self.show_suffer_message:
            buf.text_centered(SUFFER_MESSAGE, cx, self.height / 2 + 280, 30, YELLOW)

    def draw_transition(self, buf):
        buf.rect(0, 0, self.width, self.height, fade(BLACK, 0.8))

        title = "Next Level: "
        title_w = buf.measure_text(title, 40)
        name_w = buf.measure_text(self.next_level_name, 40)
        left = self.width / 2 - (title_w + name_w) / 2
        buf.text(title, left, self.height / 4, 40, RAYWHITE)
        buf.text(self.next_level_name, left + title_w, self.height / 4, 40, GOLD)

        buf.text_centered("How to Play:", self.width / 2, self.height / 2 - 50, 30, RAYWHITE)
        buf.text_centered(self.next_level_instructions, self.width / 2, self.height / 2, 25, LIGHTGRAY)

        buf.rect_rec(CONFIRM_BUTTON, DARKGREEN)
        buf.rect_lines_rec(CONFIRM_BUTTON, 3, GREEN)
        buf.text_centered(
            "Ready!",
            CONFIRM_BUTTON.x + CONFIRM_BUTTON.width / 2,
            CONFIRM_BUTTON.y + CONFIRM_BUTTON.height / 2 - 15,
            30,
            RAYWHITE,
        )

    def draw_lost(self, buf):
        cx = self.width / 2
        buf.text_centered("loser you got caught.", cx, self.height / 2 - 50, 60, RED)
        buf.text_centered("Press ENTER to bribe & Try Again", cx, self.height / 2 + 20, 30, WHITE)

    def draw_won(self, buf):
        cx = self.width / 2
        buf.text_centered("CONGRATULATIONS!", cx, self.height / 2 - 80, 50, GOLD)
        buf.text_centered("You Escaped prison!", cx, self.height / 2 - 20, 40, LIME)
        buf.text_centered("Press ENTER to kidnap a bakra again!", cx, self.height / 2 + 50, 30, WHITE)


# ---------- Display ----------
class _PyGameDisplay:
    def __init__(self, w, h):
        """
        Initialize the PyGame display wrapper.

        Args:
            w (int): Logical canvas width in pixels.
            h (int): Logical canvas height in pixels.
        """
        self.w = int(w)
        self.h = int(h)
        self._pg = None
        self._screen = None
        self._fonts = {}
        self._inited = False

    def start(self):
        """
        Initialize PyGame and open the window.

        This method is idempotent and will do nothing if initialization
        has already been performed.
        """
        if self._inited:
            return
        try:
            import pygame  # type: ignore
        except Exception as e:
            raise RuntimeError(
                "PyGame not installed. Install with: pip install pygame"
            ) from e
        self._pg = pygame
        pygame.init()
        # pygbag's mixer init can block on a user gesture; audio is unused anyway
        if is_browser and hasattr(pygame, "mixer"):
            pygame.mixer.quit()
        pygame.display.set_caption(WINDOW_TITLE)
        self._screen = pygame.display.set_mode((self.w, self.h))
        self._inited = True
        _log("BOOT", "display started on", get_platform_name())

    def stop(self):
        if self._inited:
            self._pg.quit()
            self._inited = False

    def _font(self, size):
        size = max(1, int(size))
        font = self._fonts.get(size)
        if font is None:
            font = self._pg.font.Font(None, size)
            self._fonts[size] = font
        return font

    def measure_text(self, text, font_size):
        """Width in pixels of the widest line of `text` at `font_size`."""
        font = self._font(font_size)
        return max(font.size(line)[0] for line in text.split("\n"))

    def _translucent_rect(self, x, y, w, h, color):
        pg = self._pg
        overlay = pg.Surface((max(1, int(w)), max(1, int(h))), pg.SRCALPHA)
        overlay.fill(color)
        self._screen.blit(overlay, (int(x), int(y)))

    def render(self, buf):
        """Clear the window and replay every command queued in `buf`."""
        if not self._inited:
            return
        pg = self._pg
        draw = pg.draw
        screen = self._screen
        screen.fill(BLACK)

        for kind, args, color in buf:
            if kind == "rect":
                x, y, w, h = args
                if len(color) == 4:
                    self._translucent_rect(x, y, w, h, color)
                else:
                    draw.rect(screen, color, pg.Rect(int(x), int(y), int(w), int(h)))
            elif kind == "rect_lines":
                x, y, w, h, thickness = args
                draw.rect(screen, color, pg.Rect(int(x), int(y), int(w), int(h)), max(1, int(thickness)))
            elif kind in ("rect_rounded", "rect_rounded_lines"):
                x, y, w, h, roundness, _segments = args[:6]
                radius = int(min(w, h) * roundness / 2)
                width = max(1, int(args[6])) if kind == "rect_rounded_lines" else 0
                draw.rect(
                    screen,
                    color[:3],
                    pg.Rect(int(x), int(y), int(w), int(h)),
                    width,
                    border_radius=radius,
                )
            elif kind == "circle":
                cx, cy, radius = args
                draw.circle(screen, color[:3], (int(cx), int(cy)), max(1, int(radius)))
            elif kind == "circle_lines":
                cx, cy, radius = args
                draw.circle(screen, color[:3], (int(cx), int(cy)), max(1, int(radius)), 1)
            elif kind in ("ellipse", "ellipse_lines"):
                cx, cy, rx, ry = args
                bounds = pg.Rect(int(cx - rx), int(cy - ry), int(rx * 2), int(ry * 2))
                draw.ellipse(screen, color[:3], bounds, 1 if kind == "ellipse_lines" else 0)
            elif kind == "triangle":
                draw.polygon(screen, color[:3], [(int(px), int(py)) for px, py in args])
            elif kind == "text":
                text, x, y, size = args
                font = self._font(size)
                line_y = int(y)
                for line in text.split("\n"):
                    screen.blit(font.render(line, True, color[:3]), (int(x), line_y))
                    line_y += font.get_linesize()

    def show(self):
        """Present the finished frame."""
        if self._inited:
            self._pg.display.flip()


class _DesktopInput:
    # Keyboard/mouse poller producing one InputSnapshot per frame.
    def __init__(self):
        """Initialize with no pending quit request."""
        self.quit_requested = False

    def poll(self):
        """
        Pump PyGame events and return this frame's InputSnapshot.

        Edge flags come from KEYDOWN / MOUSEBUTTONDOWN events seen since the
        previous poll; held flags come from `pygame.key.get_pressed()`.
        """
        import pygame  # type: ignore

        space_pressed = enter_pressed = mouse_pressed = False
        mouse_pos = pygame.mouse.get_pos()
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.quit_requested = True
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_SPACE:
                    space_pressed = True
                elif event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
                    enter_pressed = True
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                mouse_pressed = True
                mouse_pos = event.pos

        keys = pygame.key.get_pressed()
        return InputSnapshot(
            left=bool(keys[pygame.K_LEFT]),
            right=bool(keys[pygame.K_RIGHT]),
            up=bool(keys[pygame.K_UP]),
            down=bool(keys[pygame.K_DOWN]),
            space=bool(keys[pygame.K_SPACE]),
            space_pressed=space_pressed,
            enter_pressed=enter_pressed,
            mouse_pressed=mouse_pressed,
            mouse_pos=(float(mouse_pos[0]), float(mouse_pos[1])),
        )


display: Any = _PyGameDisplay(WIDTH, HEIGHT)


def _run_frame(campaign, buf, dt, inp, now):
    """
    Tick, draw and present one frame.

    Unexpected errors are printed with their traceback, an ERR frame is
    shown and the campaign falls back to the title screen.
    """
    buf.clear()
    try:
        campaign.tick(dt, inp, now)
        campaign.draw(buf)
    except Exception as e:
        _log("ERROR", e)
        traceback.print_exc()
        campaign.reset_to_title()
        buf.clear()
        buf.text("ERR", 20, 20, 60, RED)
    display.render(buf)
    display.show()


def _setup(seed):
    display.start()
    buf = DrawBuffer(measure=display.measure_text)
    campaign = Campaign(RandomSource(seed))
    _log("BOOT", "seed", seed)
    return campaign, buf


# ---------- Main ----------
def main(seed=None):
    """
    Application entry point.

    Opens the window, then runs the campaign at TARGET_FPS until the window
    is closed. The active level is always unloaded before PyGame shuts down.
    """
    campaign, buf = _setup(seed)
    import pygame  # type: ignore

    clock = pygame.time.Clock()
    poller = _DesktopInput()
    try:
        while not poller.quit_requested:
            dt = clock.tick(TARGET_FPS) / 1000.0
            inp = poller.poll()
            now = pygame.time.get_ticks() / 1000.0
            _run_frame(campaign, buf, dt, inp, now)
    finally:
        campaign.close()
        display.stop()
        _log("BOOT", "shutdown")


# Pygbag async wrapper for browser compatibility
async def async_main(seed=None):
    """Async entrypoint for pygbag/web: same loop, yielding once per frame."""
    campaign, buf = _setup(seed)
    import pygame  # type: ignore

    clock = pygame.time.Clock()
    poller = _DesktopInput()
    try:
        while not poller.quit_requested:
            dt = clock.tick(TARGET_FPS) / 1000.0
            inp = poller.poll()
            now = pygame.time.get_ticks() / 1000.0
            _run_frame(campaign, buf, dt, inp, now)
            # yield to the browser event loop
            await asyncio.sleep(0)
    finally:
        campaign.close()
        display.stop()
        _log("BOOT", "shutdown")


if __name__ == "__main__":
    if is_browser:
        asyncio.run(async_main())
    else:
        main()
