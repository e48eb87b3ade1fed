"""
Obstacle course level: a gravity platformer over a fixed set of ledges.

Collect the coin above every ledge, then touch the EXIT door. Falling
below the screen ends the run.
"""

from game_utils import (
    BLACK,
    BLUE,
    BROWN,
    DARKBLUE,
    DARKBROWN,
    DARKGRAY,
    GOLD,
    GREEN,
    PURPLE,
    RED,
    SKYBLUE,
    WHITE,
    YELLOW,
    BaseGame,
    Rect,
    check_collision_recs,
    fade,
)

OBSTACLE_PLAYER_SIZE = 40.0
OBSTACLE_PLAYER_SPEED = 200.0
OBSTACLE_JUMP_FORCE = 400.0
OBSTACLE_GRAVITY = 800.0
OBSTACLE_GROUND_HEIGHT = 50
OBSTACLE_COIN_SIZE = 20.0
OBSTACLE_COIN_LIFT = 10.0


def platform_layout(width, height):
    """Return the ground band followed by every ledge of the course, in order."""
    return [
        Rect(0, height - OBSTACLE_GROUND_HEIGHT, width, OBSTACLE_GROUND_HEIGHT),
        Rect(150, height - 150, 100, 20),
        Rect(300, height - 250, 90, 20),
        Rect(450, height - 350, 80, 20),
        Rect(550, height - 300, 60, 20),
        Rect(700, height - 300, 60, 20),
        Rect(800, height - 400, 50, 20),
        Rect(900, height - 500, 50, 20),
        Rect(800, height - 600, 50, 20),
        Rect(950, height - 550, 60, 20),
        Rect(1100, height - 450, 70, 20),
        Rect(1150, height - 300, 50, 20),
        Rect(width - 150, height - 100, 100, 20),
        Rect(1000, height - 200, 80, 20),
    ]


class Player:
    """Platformer avatar: an AABB with velocity and ground contact flags."""

    def __init__(self, x, y, size=OBSTACLE_PLAYER_SIZE):
        self.x = float(x)
        self.y = float(y)
        self.size = size
        self.vx = 0.0
        self.vy = 0.0
        self.on_ground = False
        self.has_jumped = False

    @property
    def bounds(self):
        return Rect(self.x, self.y, self.size, self.size)

    def update(self, dt, inp, screen_width):
        """Apply input, gravity and integration; collisions are resolved by the level."""
        self.vy += OBSTACLE_GRAVITY * dt

        if inp.left:
            self.vx = -OBSTACLE_PLAYER_SPEED
        elif inp.right:
            self.vx = OBSTACLE_PLAYER_SPEED
        else:
            self.vx = 0.0

        if inp.space_pressed and self.on_ground:
            self.vy = -OBSTACLE_JUMP_FORCE
            self.on_ground = False
            self.has_jumped = True

        self.x += self.vx * dt
        self.y += self.vy * dt

        if self.x < 0:
            self.x = 0.0
            self.vx = 0.0
        elif self.x + self.size > screen_width:
            self.x = screen_width - self.size
            self.vx = 0.0

        # airborne until a landing says otherwise
        self.on_ground = False

    def draw(self, buf):
        b = self.bounds
        buf.rect_rounded(b, 0.5, 8, PURPLE)
        buf.rect(b.x - b.width * 0.2, b.y + b.height * 0.1, b.width * 0.2, b.height * 0.6, fade(PURPLE, 0.8))
        visor = Rect(b.x + b.width * 0.2, b.y + b.height * 0.2, b.width * 0.6, b.height * 0.3)
        buf.rect_rounded(visor, 0.5, 8, SKYBLUE)
        buf.rect_rounded_lines(visor, 0.5, 8, 2, DARKBLUE)


class ObstacleGame(BaseGame):
    """Run and jump across the ledges, collect every coin, leave through the door."""

    NAME = "Obstacle Course Level"
    INSTRUCTIONS = (
        "Use LEFT/RIGHT arrows to move. \n \n Press SPACE to jump. \n \n "
        "Collect all coins and reach the EXIT door to win!"
    )

    GAMEPLAY = 0
    ENDING = 1

    def __init__(self, rng=None, **kwargs):
        super().__init__(rng, **kwargs)
        self.player = None
        self.start_point = (0.0, 0.0)
        self.exit_door = None
        self.obstacles = []
        self.coins = []
        self.collected_coins = 0
        self.total_coins = 0
        self.screen = self.GAMEPLAY
        self.finished = False
        self.won = False

    def _load(self):
        self.player = Player(
            100.0, self.screen_height - OBSTACLE_PLAYER_SIZE - OBSTACLE_GROUND_HEIGHT
        )
        self.start_point = (self.player.x, self.player.y)
        self.exit_door = Rect(self.screen_width - 100.0, 50.0, 50.0, 80.0)
        self.obstacles = platform_layout(self.screen_width, self.screen_height)

        self.coins = []
        ground_top = self.screen_height - OBSTACLE_GROUND_HEIGHT
        for obs in self.obstacles:
            if obs.height < 50 and obs.y < ground_top:
                self.coins.append(
                    Rect(
                        obs.x + obs.width / 2 - OBSTACLE_COIN_SIZE / 2,
                        obs.y - OBSTACLE_COIN_SIZE - OBSTACLE_COIN_LIFT,
                        OBSTACLE_COIN_SIZE,
                        OBSTACLE_COIN_SIZE,
                    )
                )
        self.total_coins = len(self.coins)
        self.collected_coins = 0

        self.screen = self.GAMEPLAY
        self.finished = False
        self.won = False

    def _unload(self):
        self.obstacles = []
        self.coins = []

    def resolve_collisions(self, prev_x, prev_y):
        """
        Push the player out of every obstacle it overlaps.

        The side of contact is chosen from where the player's edges were
        before this tick's move: above the obstacle means a landing, below
        means a head hit, otherwise a side hit in the direction of travel.
        """
        p = self.player
        size = p.size
        for obs in self.obstacles:
            if not check_collision_recs(p.bounds, obs):
                continue
            if p.vy > 0 and prev_y + size <= obs.y:
                p.y = obs.y - size
                p.vy = 0.0
                p.on_ground = True
                p.has_jumped = False
            elif p.vy < 0 and prev_y >= obs.bottom:
                p.y = obs.bottom
                p.vy = 0.0
            elif p.vx > 0 and prev_x + size <= obs.x:
                p.x = obs.x - size
                p.vx = 0.0
            elif p.vx < 0 and prev_x >= obs.right:
                p.x = obs.right
                p.vx = 0.0

    def update(self, dt, inp, now):
        if self.player is None or self.screen != self.GAMEPLAY:
            return

        prev_x, prev_y = self.player.x, self.player.y
        self.player.update(dt, inp, self.screen_width)
        self.resolve_collisions(prev_x, prev_y)

        bounds = self.player.bounds
        remaining = []
        for coin in self.coins:
            if check_collision_recs(bounds, coin):
                self.collected_coins += 1
            else:
                remaining.append(coin)
        self.coins = remaining

        if self.player.y > self.screen_height:
            self.finished = True
            self.won = False
            self.screen = self.ENDING
            self._finish(False)
            return

        if check_collision_recs(bounds, self.exit_door) and self.collected_coins == self.total_coins:
            self.finished = True
            self.won = True
            self.screen = self.ENDING
            self._finish(True)

    # ---------- drawing ----------

    def _draw_coin(self, buf, coin):
        cx = int(coin.x + coin.width / 2)
        cy = int(coin.y + coin.height / 2)
        buf.circle(cx, cy, coin.width / 2, YELLOW)
        buf.circle_lines(cx, cy, coin.width / 2, DARKGRAY)
        font_size = int(coin.width * 0.6)
        text_w = buf.measure_text("$", font_size)
        buf.text("$", int(cx - text_w / 2), int(cy - font_size / 2), font_size, BROWN)

    def _draw_door(self, buf):
        d = self.exit_door
        buf.rect_rec(d, BROWN)
        buf.rect_lines_rec(d, 3, BLACK)
        upper = Rect(d.x + d.width * 0.1, d.y + d.height * 0.1, d.width * 0.8, d.height * 0.4)
        lower = Rect(d.x + d.width * 0.1, d.y + d.height * 0.55, d.width * 0.8, d.height * 0.35)
        for panel in (upper, lower):
            buf.rect_rec(panel, DARKBROWN)
            buf.rect_lines_rec(panel, 2, BLACK)
        buf.text("EXIT", int(d.x) + 5, int(d.y) - 20, 15, WHITE)

    def draw(self, buf):
        if self.player is None:
            return
        cx = self.screen_width / 2
        if self.screen == self.GAMEPLAY:
            for obs in self.obstacles:
                buf.rect_rec(obs, BLUE)
            for coin in self.coins:
                self._draw_coin(buf, coin)
            self.player.draw(buf)
            self._draw_door(buf)

            sx, sy = self.start_point
            half = int(OBSTACLE_PLAYER_SIZE) // 2
            buf.circle(int(sx) + half, int(sy) + half, 10, GREEN)
            buf.text("START", int(sx), int(sy) - 20, 15, GREEN)
            buf.text("Coins: %d/%d" % (self.collected_coins, self.total_coins), 10, 10, 20, WHITE)
        elif self.won:
            buf.text_centered("LEVEL COMPLETE!", cx, self.screen_height / 3, 50, GOLD)
            buf.text_centered(
                "Collected: %d/%d Coins" % (self.collected_coins, self.total_coins),
                cx,
                self.screen_height / 3 + 60,
                30,
                WHITE,
            )
        else:
            buf.text_centered("GAME OVER!", cx, self.screen_height / 3, 60, RED)
