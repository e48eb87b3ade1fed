"""
Space Invaders level: shoot down a marching formation before it lands.
"""

from game_utils import (
    BLACK,
    BLUE,
    DARKBLUE,
    GOLD,
    RED,
    SKYBLUE,
    WHITE,
    YELLOW,
    BaseGame,
    Rect,
    check_collision_recs,
    clamp,
)

SI_PLAYER_SPEED = 5
SI_PLAYER_LIVES = 5
SI_PLAYER_SIZE = 50
SI_BULLET_SPEED = 3
SI_BULLET_WIDTH = 5
SI_BULLET_HEIGHT = 10
SI_FIRE_COOLDOWN = 0.5
SI_INVADER_SIZE = 30
SI_INVADER_STEP = 10
SI_INVADER_ROWS = 2
SI_INVADER_COLS = 8
SI_INVADER_SPACING_X = 50
SI_INVADER_SPACING_Y = 40
SI_INVADER_START_X = 50
SI_INVADER_START_Y = 100
SI_INVADER_FIRE_RATE = 0.15  # chance per second, rolled every tick
SI_INVADER_MOVE_INTERVAL = 0.8
SI_INVADER_DESCENT_AMOUNT = 20.0
SI_EDGE_MARGIN = 20
SI_POINTS_PER_INVADER = 100


class Bullet:
    """A player or invader bullet travelling straight up or down."""

    def __init__(self, x, y, from_player):
        self.rect = Rect(x, y, SI_BULLET_WIDTH, SI_BULLET_HEIGHT)
        self.active = True
        self.from_player = from_player

    def update(self, screen_height):
        if not self.active:
            return
        if self.from_player:
            self.rect.y -= SI_BULLET_SPEED
        else:
            self.rect.y += SI_BULLET_SPEED
        if self.rect.y < 0 or self.rect.y > screen_height:
            self.active = False

    def draw(self, buf):
        if self.active:
            buf.rect_rec(self.rect, YELLOW if self.from_player else RED)


class Invader:
    """One member of the formation."""

    def __init__(self, x, y, row):
        self.rect = Rect(x, y, SI_INVADER_SIZE, SI_INVADER_SIZE)
        self.active = True
        self.row = row

    def draw(self, buf):
        if not self.active:
            return
        r = self.rect
        buf.rect(r.x, r.y + r.height * 0.1, r.width, r.height * 0.9, RED)
        buf.circle(r.x + r.width / 2, r.y + r.height * 0.1, r.width / 2, RED)
        buf.circle(r.x + r.width / 2, r.y + r.height, r.width / 2, RED)

        visor = Rect(r.x + r.width * 0.2, r.y + r.height * 0.2, r.width * 0.6, r.height * 0.4)
        buf.rect_rec(visor, SKYBLUE)
        buf.rect_lines_rec(visor, 1, DARKBLUE)

        buf.rect(r.x + r.width * 0.15, r.y - 10, r.width * 0.7, 15, BLUE)
        buf.rect(r.x + r.width * 0.05, r.y - 5, r.width * 0.9, 5, DARKBLUE)
        buf.rect(r.x + r.width / 2 - 3, r.y - 7, 6, 6, YELLOW)


class InvadersGame(BaseGame):
    """Fixed-cannon shooter against a stepping, descending invader formation."""

    NAME = "Space Invaders Level"
    INSTRUCTIONS = (
        "Use LEFT/RIGHT arrows to move. \n \n Press SPACE to shoot. "
        "Destroy all invaders before\n \n  they reach the bottom or \n \n "
        "you run out of lives!"
    )

    def __init__(self, rng=None, **kwargs):
        super().__init__(rng, **kwargs)
        self.player = None
        self.lives = SI_PLAYER_LIVES
        self.last_shot_time = -SI_FIRE_COOLDOWN
        self.invaders = []
        self.player_bullets = []
        self.invader_bullets = []
        self.score = 0
        self.move_direction = 1
        self.move_timer = 0.0
        self.won = False
        self.lost = False

    def _load(self):
        self.player = Rect(
            self.screen_width / 2 - SI_PLAYER_SIZE / 2,
            self.screen_height - 70,
            SI_PLAYER_SIZE,
            SI_PLAYER_SIZE,
        )
        self.lives = SI_PLAYER_LIVES
        # first SPACE always fires
        self.last_shot_time = -SI_FIRE_COOLDOWN
        self.score = 0
        self.won = False
        self.lost = False
        self.move_direction = 1
        self.move_timer = 0.0

        self.player_bullets = []
        self.invader_bullets = []
        self.invaders = []
        for row in range(SI_INVADER_ROWS):
            for col in range(SI_INVADER_COLS):
                self.invaders.append(
                    Invader(
                        SI_INVADER_START_X + col * SI_INVADER_SPACING_X,
                        SI_INVADER_START_Y + row * SI_INVADER_SPACING_Y,
                        row,
                    )
                )

    def _unload(self):
        self.player_bullets = []
        self.invader_bullets = []
        self.invaders = []

    def live_invaders(self):
        return [inv for inv in self.invaders if inv.active]

    # ---------- per-tick phases ----------

    def _update_player(self, inp, now):
        """Translate the cannon and fire when the cooldown allows."""
        if inp.left:
            self.player.x -= SI_PLAYER_SPEED
        if inp.right:
            self.player.x += SI_PLAYER_SPEED
        self.player.x = clamp(self.player.x, 0.0, self.screen_width - self.player.width)

        if inp.space and now - self.last_shot_time >= SI_FIRE_COOLDOWN:
            self.player_bullets.append(
                Bullet(
                    self.player.x + self.player.width / 2 - SI_BULLET_WIDTH / 2,
                    self.player.y,
                    True,
                )
            )
            self.last_shot_time = now

    def _update_bullets(self):
        """Advance both bullet lists and drop the ones that left the screen."""
        for b in self.player_bullets:
            b.update(self.screen_height)
        self.player_bullets = [b for b in self.player_bullets if b.active]

        for b in self.invader_bullets:
            b.update(self.screen_height)
        self.invader_bullets = [b for b in self.invader_bullets if b.active]

    def _step_formation(self, dt):
        """Accumulate the step clock and march the formation one step when due."""
        self.move_timer += dt
        if self.move_timer < SI_INVADER_MOVE_INTERVAL:
            return
        self.move_timer = 0.0

        alive = self.live_invaders()
        if not alive:
            return

        min_x = min(inv.rect.x for inv in alive)
        max_x = max(inv.rect.right for inv in alive)

        descend = False
        if self.move_direction == 1:
            if max_x >= self.screen_width - SI_EDGE_MARGIN:
                self.move_direction = -1
                descend = True
        elif min_x <= SI_EDGE_MARGIN:
            self.move_direction = 1
            descend = True

        for inv in alive:
            inv.rect.x += self.move_direction * SI_INVADER_STEP
            if descend:
                inv.rect.y += SI_INVADER_DESCENT_AMOUNT
                if inv.rect.bottom >= self.player.y:
                    # formation reached the cannon line
                    self.lost = True

    def _invaders_fire(self, dt):
        chance = SI_INVADER_FIRE_RATE * dt
        for inv in self.invaders:
            if inv.active and self.rng.uniform() < chance:
                self.invader_bullets.append(
                    Bullet(
                        inv.rect.x + inv.rect.width / 2 - SI_BULLET_WIDTH / 2,
                        inv.rect.bottom,
                        False,
                    )
                )

    def _check_hits(self):
        """Resolve bullet hits on invaders and on the player."""
        for b in self.player_bullets:
            if not b.active:
                continue
            for inv in self.invaders:
                if inv.active and check_collision_recs(b.rect, inv.rect):
                    b.active = False
                    inv.active = False
                    self.score += SI_POINTS_PER_INVADER
                    break

        for b in self.invader_bullets:
            if not b.active:
                continue
            if check_collision_recs(b.rect, self.player):
                b.active = False
                self.lives -= 1
                if self.lives <= 0:
                    self.lives = 0
                    self.lost = True
                    break

    def update(self, dt, inp, now):
        if self.won or self.lost or self.player is None:
            return

        self._update_player(inp, now)
        self._update_bullets()
        self._step_formation(dt)
        self._invaders_fire(dt)
        self._check_hits()

        # clearing the formation counts even if the cannon fell on the same tick
        self.won = not self.live_invaders()
        if self.won or self.lost:
            self._finish(self.won)

    # ---------- drawing ----------

    def _draw_player(self, buf):
        r = self.player
        buf.triangle(
            (r.x + r.width / 2, r.y),
            (r.x, r.bottom),
            (r.right, r.bottom),
            DARKBLUE,
        )
        for frac, color in ((0.2, WHITE), (0.4, BLACK), (0.6, WHITE), (0.8, BLACK)):
            buf.rect(r.x, r.y + r.height * frac, r.width, r.height * 0.1, color)
        buf.rect(r.x + r.width / 4, r.y + r.height / 2, r.width / 2, r.height / 2, BLUE)

    def draw(self, buf):
        if self.player is None:
            return
        self._draw_player(buf)
        for inv in self.invaders:
            inv.draw(buf)
        for b in self.player_bullets:
            b.draw(buf)
        for b in self.invader_bullets:
            b.draw(buf)

        buf.text("SCORE: %04d" % self.score, 10, 10, 20, WHITE)
        buf.text("LIVES: %d" % self.lives, self.screen_width - 100, 10, 20, WHITE)

        if self.won:
            buf.text_centered("LEVEL COMPLETE!", self.screen_width / 2, self.screen_height / 2 - 20, 40, GOLD)
        elif self.lost:
            buf.text_centered("GAME OVER!", self.screen_width / 2, self.screen_height / 2 - 20, 40, RED)
