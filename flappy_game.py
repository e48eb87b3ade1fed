"""
Flappy level: keep the bird between scrolling pipes until the score reaches 10.

A crash costs health instead of ending the run straight away; the bird is
put back in the middle of the screen with a fresh pair of pipes and keeps
its score.
"""

from game_utils import (
    BROWN,
    DARKBLUE,
    DARKBROWN,
    DARKGRAY,
    DARKGREEN,
    GOLD,
    GRAY,
    GREEN,
    PURPLE,
    RED,
    SKYBLUE,
    WHITE,
    BaseGame,
    Rect,
    check_collision_circle_rec,
)

FLAPPY_PIPE_WIDTH = 80
FLAPPY_PIPE_GAP = 150
FLAPPY_PIPE_SPEED = 100.0
FLAPPY_BIRD_RADIUS = 20.0
FLAPPY_BIRD_JUMP_STRENGTH = -250.0
FLAPPY_GRAVITY = 700.0
FLAPPY_WIN_SCORE = 10
FLAPPY_INITIAL_HEALTH = 100.0
FLAPPY_DAMAGE_PER_HIT = 25.0
FLAPPY_MIN_HORIZONTAL_PIPE_SPACING = 250.0
FLAPPY_FONT_SIZE = 40


class Bird:
    """The player character: a circle under gravity with a health pool."""

    def __init__(self, x, y, screen_height):
        self.x = float(x)
        self.y = float(y)
        self.vy = 0.0
        self.radius = FLAPPY_BIRD_RADIUS
        self.health = FLAPPY_INITIAL_HEALTH
        self.screen_height = screen_height

    @property
    def position(self):
        return (self.x, self.y)

    def jump(self):
        self.vy = FLAPPY_BIRD_JUMP_STRENGTH

    def take_damage(self, amount):
        self.health = max(0.0, self.health - amount)

    def update(self, dt):
        self.vy += FLAPPY_GRAVITY * dt
        self.y += self.vy * dt

        # keep the bird within the vertical bounds of the screen
        low = self.radius * 1.5
        high = self.screen_height - self.radius * 1.5
        if self.y < low:
            self.y = low
            self.vy = 0.0
        if self.y > high:
            self.y = high
            self.vy = 0.0

    def draw(self, buf):
        r = self.radius
        body_w = r * 2.0
        body_h = r * 2.5
        leg_h = r * 0.8
        leg_w = r * 0.7
        visor_w = r * 1.2
        visor_h = r * 0.8

        body = Rect(self.x - body_w / 2, self.y - body_h / 2, body_w, body_h)
        buf.rect_rounded(body, 0.5, 8, PURPLE)
        buf.rect_rounded(
            Rect(body.x + r * 0.2, body.bottom - leg_h, leg_w, leg_h), 0.5, 8, PURPLE
        )
        buf.rect_rounded(
            Rect(body.right - leg_w - r * 0.2, body.bottom - leg_h, leg_w, leg_h),
            0.5,
            8,
            PURPLE,
        )

        visor_y = int(body.y + visor_h / 2 + r * 0.3)
        buf.ellipse(int(self.x), visor_y, int(visor_w / 2), int(visor_h / 2), SKYBLUE)
        buf.ellipse_lines(int(self.x), visor_y, int(visor_w / 2), int(visor_h / 2), DARKBLUE)


class FlappyGame(BaseGame):
    """One-button flappy clone with health-based retries."""

    NAME = "Flappy Level"
    INSTRUCTIONS = (
        "Press SPACE to make your character flap.\n \n "
        "Avoid hitting the pipes and the ground. \n \nGet a score of 10 to win."
    )

    MENU = 0
    PLAYING = 1
    OVER = 2
    WIN = 3

    def __init__(self, rng=None, **kwargs):
        super().__init__(rng, **kwargs)
        self.bird = None
        self.pipes = []
        self.score = 0
        self.screen = self.MENU
        self.finished = False
        self.won = False

    def _load(self):
        self.bird = Bird(self.screen_width / 4, self.screen_height / 2, self.screen_height)
        self.score = 0
        self.finished = False
        self.won = False
        self.seed_pipes()
        self.screen = self.MENU

    def _unload(self):
        self.pipes = []

    # ---------- pipes ----------

    def random_gap_y(self):
        return self.rng.randint(FLAPPY_PIPE_GAP, self.screen_height - FLAPPY_PIPE_GAP)

    def make_pipe(self, x, gap_y):
        """Build a top/bottom pipe pair whose opening is centred on `gap_y`."""
        half_gap = FLAPPY_PIPE_GAP // 2
        return {
            "top": Rect(x, 0, FLAPPY_PIPE_WIDTH, gap_y - half_gap),
            "bottom": Rect(
                x, gap_y + half_gap, FLAPPY_PIPE_WIDTH, self.screen_height - (gap_y + half_gap)
            ),
            "scored": False,
        }

    def seed_pipes(self):
        """Replace the pipe list with two fresh pipes just off the right edge."""
        self.pipes = [
            self.make_pipe(self.screen_width, self.random_gap_y()),
            self.make_pipe(
                self.screen_width + FLAPPY_MIN_HORIZONTAL_PIPE_SPACING, self.random_gap_y()
            ),
        ]

    def add_pipe(self):
        if self.pipes:
            x = self.pipes[-1]["top"].x + FLAPPY_MIN_HORIZONTAL_PIPE_SPACING
        else:
            x = self.screen_width
        self.pipes.append(self.make_pipe(x, self.random_gap_y()))

    # ---------- simulation ----------

    def collide(self):
        """Return True if the bird touches a pipe or the top/bottom of the screen."""
        center = self.bird.position
        radius = self.bird.radius
        for p in self.pipes:
            if check_collision_circle_rec(center, radius, p["top"]) or check_collision_circle_rec(
                center, radius, p["bottom"]
            ):
                return True
        return self.bird.y + radius >= self.screen_height or self.bird.y - radius <= 0

    def reset_after_crash(self):
        self.bird.x = self.screen_width / 4
        self.bird.y = self.screen_height / 2
        self.bird.vy = 0.0
        self.seed_pipes()

    def update(self, dt, inp, now):
        if self.bird is None:
            return

        if self.screen == self.MENU:
            if inp.space_pressed:
                self.screen = self.PLAYING
            return
        if self.screen != self.PLAYING:
            return

        self.bird.update(dt)

        bird_left = self.bird.x - self.bird.radius
        for p in self.pipes:
            p["top"].x -= FLAPPY_PIPE_SPEED * dt
            p["bottom"].x -= FLAPPY_PIPE_SPEED * dt
            if not p["scored"] and p["top"].right < bird_left:
                p["scored"] = True
                self.score += 1

        if self.collide():
            self.bird.take_damage(FLAPPY_DAMAGE_PER_HIT)
            if self.bird.health <= 0:
                self.screen = self.OVER
                self.finished = True
                self.won = False
            else:
                self.reset_after_crash()

        if self.pipes and self.pipes[0]["top"].right < 0:
            self.pipes.pop(0)
        if not self.pipes or self.pipes[-1]["top"].x < self.screen_width - FLAPPY_MIN_HORIZONTAL_PIPE_SPACING:
            self.add_pipe()

        # reaching the target score wins even on the tick the last health goes
        if self.score >= FLAPPY_WIN_SCORE:
            self.screen = self.WIN
            self.finished = True
            self.won = True

        if self.finished:
            self._finish(self.won)
            return

        if inp.space_pressed:
            self.bird.jump()

    # ---------- drawing ----------

    def _draw_health(self, buf):
        bar_w, bar_h = 100, 20
        bar_x = self.screen_width - 10 - bar_w
        bar_y = 10
        buf.rect(bar_x, bar_y, bar_w, bar_h, DARKGRAY)
        buf.rect(bar_x, bar_y, int(self.bird.health / FLAPPY_INITIAL_HEALTH * bar_w), bar_h, RED)
        buf.rect_lines(bar_x, bar_y, bar_w, bar_h, WHITE)
        buf.text("Health: %.0f" % self.bird.health, bar_x, bar_y + bar_h + 5, 20, WHITE)

    def draw(self, buf):
        if self.bird is None:
            return
        for p in self.pipes:
            buf.rect_rec(p["top"], GREEN)
            buf.rect_rec(p["bottom"], GREEN)
            buf.rect_lines_rec(p["top"], 2, DARKGREEN)
            buf.rect_lines_rec(p["bottom"], 2, DARKBROWN)

        self.bird.draw(buf)
        buf.text("Score: %02d" % self.score, 10, 10, FLAPPY_FONT_SIZE, WHITE)
        self._draw_health(buf)

        # ground strip
        buf.rect(0, self.screen_height - 20, self.screen_width, 20, BROWN)
        buf.rect_lines(0, self.screen_height - 20, self.screen_width, 20, DARKBROWN)

        cx = self.screen_width / 2
        big = int(FLAPPY_FONT_SIZE * 1.5)
        if self.screen == self.MENU:
            buf.text_centered("FLAPPY", cx, self.screen_height / 4, big, WHITE)
            buf.text_centered("Press SPACE to Start", cx, self.screen_height / 2, FLAPPY_FONT_SIZE, GRAY)
        elif self.screen in (self.OVER, self.WIN):
            if self.screen == self.OVER:
                buf.text_centered("GAME OVER!", cx, self.screen_height / 4, big, RED)
            else:
                buf.text_centered("LEVEL COMPLETE!", cx, self.screen_height / 4, big, GOLD)
            buf.text_centered(
                "Final Score: %02d" % self.score,
                cx,
                self.screen_height / 2 - FLAPPY_FONT_SIZE / 2,
                FLAPPY_FONT_SIZE,
                WHITE,
            )
