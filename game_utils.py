"""
Shared game utilities for the Prison Escape Arcade.

This module provides reusable components and helper functions used across
all four levels so the game modules stay focused on their own rules.

Components:
- InputSnapshot: per-frame view of held keys and edge events
- RandomSource: seedable uniform real / integer draws
- Rect and collision helpers (rect/rect, circle/rect, point/rect)
- DrawBuffer: retained list of draw commands the host replays each frame
- BaseGame: base class providing the common level lifecycle
- Outcome: terminal report of a level (won or lost)
"""

import random

WIDTH = 1280
HEIGHT = 720

# ---------- Colours ----------
# RGB(A) tuples; the fourth channel is only present on translucent colours.
LIGHTGRAY = (200, 200, 200)
GRAY = (130, 130, 130)
DARKGRAY = (80, 80, 80)
YELLOW = (253, 249, 0)
GOLD = (255, 203, 0)
RED = (230, 41, 55)
GREEN = (0, 228, 48)
LIME = (0, 158, 47)
DARKGREEN = (0, 117, 44)
SKYBLUE = (102, 191, 255)
BLUE = (0, 121, 241)
DARKBLUE = (0, 82, 172)
PURPLE = (200, 122, 255)
BROWN = (127, 106, 79)
DARKBROWN = (76, 63, 47)
WHITE = (255, 255, 255)
BLACK = (0, 0, 0)
RAYWHITE = (245, 245, 245)


def fade(color, alpha):
    """Return `color` with an alpha channel scaled from `alpha` (0.0-1.0)."""
    return (color[0], color[1], color[2], int(max(0.0, min(1.0, alpha)) * 255))


def clamp(value, lo, hi):
    """Keep `value` within [lo, hi]."""
    if value < lo:
        return lo
    if value > hi:
        return hi
    return value


class Outcome:
    """Terminal report of a level."""

    WON = "won"
    LOST = "lost"


class InputSnapshot:
    """
    Per-frame input state handed to every tick.

    Held flags are level-triggered (true for every frame the key is down);
    the ``*_pressed`` flags are edge-triggered and only true on the frame
    the key or button went down.
    """

    def __init__(
        self,
        left=False,
        right=False,
        up=False,
        down=False,
        space=False,
        space_pressed=False,
        enter_pressed=False,
        mouse_pressed=False,
        mouse_pos=(0.0, 0.0),
    ):
        self.left = left
        self.right = right
        self.up = up
        self.down = down
        self.space = space
        self.space_pressed = space_pressed
        self.enter_pressed = enter_pressed
        self.mouse_pressed = mouse_pressed
        self.mouse_pos = mouse_pos

    @classmethod
    def click(cls, x, y):
        """Snapshot of a single left click at (x, y)."""
        return cls(mouse_pressed=True, mouse_pos=(x, y))

    def __repr__(self):
        held = [
            name
            for name in ("left", "right", "up", "down", "space")
            if getattr(self, name)
        ]
        return "InputSnapshot(held=%r, space_pressed=%r, enter_pressed=%r, mouse=%r@%r)" % (
            held,
            self.space_pressed,
            self.enter_pressed,
            self.mouse_pressed,
            self.mouse_pos,
        )


NO_INPUT = InputSnapshot()


class RandomSource:
    """
    Seedable random source passed explicitly into every level.

    Wraps a private ``random.Random`` so two sources built from the same
    seed produce the same draws regardless of what else in the process
    touches the module-level generator.
    """

    def __init__(self, seed=None):
        self.seed = seed
        self._rng = random.Random(seed)

    def uniform(self):
        """Uniform real on [0, 1)."""
        return self._rng.random()

    def randint(self, a, b):
        """Uniform integer on [a, b] (both inclusive)."""
        return self._rng.randint(a, b)

    def shuffle(self, seq):
        """Shuffle the list `seq` in place."""
        self._rng.shuffle(seq)


class Rect:
    """Axis-aligned rectangle with float coordinates."""

    __slots__ = ("x", "y", "width", "height")

    def __init__(self, x, y, width, height):
        self.x = float(x)
        self.y = float(y)
        self.width = float(width)
        self.height = float(height)

    @property
    def right(self):
        return self.x + self.width

    @property
    def bottom(self):
        return self.y + self.height

    def copy(self):
        return Rect(self.x, self.y, self.width, self.height)

    def as_tuple(self):
        return (self.x, self.y, self.width, self.height)

    def __eq__(self, other):
        if not isinstance(other, Rect):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    def __repr__(self):
        return "Rect(%g, %g, %g, %g)" % self.as_tuple()


def check_collision_recs(a, b):
    """Return True if two rectangles overlap (touching edges do not count)."""
    return a.x < b.x + b.width and a.x + a.width > b.x and a.y < b.y + b.height and a.y + a.height > b.y


def check_collision_circle_rec(center, radius, rec):
    """Return True if the circle at `center` with `radius` touches `rec`."""
    half_w = rec.width / 2.0
    half_h = rec.height / 2.0
    dx = abs(center[0] - (rec.x + half_w))
    dy = abs(center[1] - (rec.y + half_h))

    if dx > half_w + radius:
        return False
    if dy > half_h + radius:
        return False
    if dx <= half_w:
        return True
    if dy <= half_h:
        return True

    corner_sq = (dx - half_w) ** 2 + (dy - half_h) ** 2
    return corner_sq <= radius * radius


def check_collision_point_rec(point, rec):
    """Return True if `point` lies inside `rec` (left/top inclusive)."""
    return rec.x <= point[0] < rec.x + rec.width and rec.y <= point[1] < rec.y + rec.height


def default_measure_text(text, font_size):
    """
    Approximate rendered width of `text` in pixels.

    Used until the host installs a font-accurate measurer. Multi-line text
    is measured by its widest line.
    """
    lines = text.split("\n") if text else [""]
    widest = max(len(line) for line in lines)
    return int(widest * font_size * 0.55)


class DrawBuffer:
    """
    Retained per-frame list of draw commands.

    Levels and screens never touch the window directly; they append
    commands here and the host replays the list once per frame. Each
    command is a tuple ``(kind, args, color)``.
    """

    def __init__(self, measure=None):
        """
        Initialize an empty buffer.

        Args:
            measure: Optional callable ``(text, font_size) -> int`` supplied
                by the host for exact text widths.
        """
        self.commands = []
        self.measure = measure or default_measure_text

    def clear(self):
        """Drop every queued command."""
        del self.commands[:]

    def __len__(self):
        return len(self.commands)

    def __iter__(self):
        return iter(self.commands)

    def kinds(self):
        """Return the command kinds in emission order."""
        return [cmd[0] for cmd in self.commands]

    def texts(self):
        """Return every text string queued this frame."""
        return [cmd[1][0] for cmd in self.commands if cmd[0] == "text"]

    def _push(self, kind, args, color):
        self.commands.append((kind, args, tuple(color)))

    def rect(self, x, y, w, h, color):
        self._push("rect", (x, y, w, h), color)

    def rect_rec(self, rec, color):
        self._push("rect", rec.as_tuple(), color)

    def rect_lines(self, x, y, w, h, color, thickness=1):
        self._push("rect_lines", (x, y, w, h, thickness), color)

    def rect_lines_rec(self, rec, thickness, color):
        self._push("rect_lines", rec.as_tuple() + (thickness,), color)

    def rect_rounded(self, rec, roundness, segments, color):
        self._push("rect_rounded", rec.as_tuple() + (roundness, segments), color)

    def rect_rounded_lines(self, rec, roundness, segments, thickness, color):
        self._push(
            "rect_rounded_lines", rec.as_tuple() + (roundness, segments, thickness), color
        )

    def circle(self, cx, cy, radius, color):
        self._push("circle", (cx, cy, radius), color)

    def circle_lines(self, cx, cy, radius, color):
        self._push("circle_lines", (cx, cy, radius), color)

    def ellipse(self, cx, cy, rx, ry, color):
        self._push("ellipse", (cx, cy, rx, ry), color)

    def ellipse_lines(self, cx, cy, rx, ry, color):
        self._push("ellipse_lines", (cx, cy, rx, ry), color)

    def triangle(self, p1, p2, p3, color):
        self._push("triangle", (tuple(p1), tuple(p2), tuple(p3)), color)

    def text(self, text, x, y, font_size, color):
        self._push("text", (text, x, y, font_size), color)

    def measure_text(self, text, font_size):
        return self.measure(text, font_size)

    def text_centered(self, text, center_x, y, font_size, color):
        """Queue `text` horizontally centred on `center_x`."""
        self.text(text, center_x - self.measure_text(text, font_size) / 2, y, font_size, color)


class BaseGame:
    """
    Base class for campaign levels providing the common lifecycle.

    The campaign drives every level through the same capability set:

    - load(): build fresh level state (called exactly once per play)
    - unload(): release level state (idempotent)
    - update(dt, inp, now): advance the simulation by one tick
    - draw(buf): queue draw commands for the current state
    - is_complete() / outcome() / did_win(): completion report

    Subclasses set NAME and INSTRUCTIONS and override `_load`, `_unload`,
    `update` and `draw`. A subclass reports its result by calling
    `_finish(won)`; once finished the outcome never changes.
    """

    NAME = ""
    INSTRUCTIONS = ""

    def __init__(self, rng=None, width=WIDTH, height=HEIGHT):
        """
        Initialize base level state.

        Args:
            rng (RandomSource): Random source owned by the campaign.
            width (int): Logical canvas width in pixels.
            height (int): Logical canvas height in pixels.
        """
        self.rng = rng if rng is not None else RandomSource()
        self.screen_width = width
        self.screen_height = height
        self.loaded = False
        self._outcome = None

    @property
    def name(self):
        return self.NAME

    @property
    def instructions(self):
        return self.INSTRUCTIONS

    def load(self):
        """Reset the completion report and build the level."""
        self._outcome = None
        self._load()
        self.loaded = True

    def unload(self):
        """Release level state. Safe to call more than once."""
        if not self.loaded:
            return
        self._unload()
        self.loaded = False

    def _load(self):
        pass

    def _unload(self):
        pass

    def update(self, dt, inp, now):
        """
        Advance the level by one tick.

        Args:
            dt (float): Seconds since the previous tick.
            inp (InputSnapshot): Input state for this tick.
            now (float): Monotonic time in seconds.
        """

    def draw(self, buf):
        """Queue this level's draw commands into `buf`."""

    def _finish(self, won):
        if self._outcome is None:
            self._outcome = Outcome.WON if won else Outcome.LOST

    def outcome(self):
        """Return Outcome.WON / Outcome.LOST, or None while still running."""
        return self._outcome

    def is_complete(self):
        return self._outcome is not None

    def did_win(self):
        return self._outcome == Outcome.WON
