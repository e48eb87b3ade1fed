"""
Maze level: walk a generated maze, collect every coin, reach the exit.

The grid is carved with a depth-first recursive backtracker over odd
cells. The carve keeps its own stack of (row, col, directions) frames
instead of recursing, so large grids cannot exhaust the interpreter's
recursion limit, while drawing exactly the same random shuffles a
recursive carve would.
"""

import math

from game_utils import (
    BLACK,
    BaseGame,
    Rect,
    check_collision_recs,
    clamp,
)

MAZE_BASE_WIDTH_CELLS = 35
MAZE_BASE_HEIGHT_CELLS = 21
MAZE_PLAYER_SPEED = 3.0
COIN_SPAWN_CHANCE = 0.3

MAZE_WALL_COLOR = (128, 0, 128)
MAZE_PATH_COLOR = (0, 0, 0)
MAZE_PLAYER_COLOR = (255, 215, 0)
MAZE_PLAYER_EYE_COLOR = BLACK
MAZE_COIN_COLOR = (255, 193, 7)
MAZE_START_COLOR = (0, 0, 0)
MAZE_END_COLOR = (50, 205, 50)
MAZE_TEXT_COLOR = (245, 245, 245)


class MazeGame(BaseGame):
    """Maze explorer: collect all coins, then reach the green exit."""

    NAME = "Maze Level"
    INSTRUCTIONS = (
        "Navigate the maze using ARROW keys. \n \n "
        "Collect all coins and reach the green exit to win."
    )

    WALL = 0
    PATH = 1

    # (d_row, d_col) two cells at a time, skipping the wall in between
    DIRECTIONS = ((-2, 0), (0, 2), (2, 0), (0, -2))

    def __init__(self, rng=None, **kwargs):
        """Initialize maze dimensions; the grid itself is built on load."""
        super().__init__(rng, **kwargs)
        self.grid = []
        self.coins = []
        self.total_initial_coins = 0
        self.collected_coins = 0
        self.level_won = False
        self.player_x = 0.0
        self.player_y = 0.0
        self.player_speed = MAZE_PLAYER_SPEED
        self.calculate_maze_dimensions()

    def calculate_maze_dimensions(self):
        """Derive cell size, odd grid dimensions, start/end cells and sprite sizes."""
        width_cells = MAZE_BASE_WIDTH_CELLS
        if width_cells % 2 == 0:
            width_cells += 1
        height_cells = MAZE_BASE_HEIGHT_CELLS
        if height_cells % 2 == 0:
            height_cells += 1

        self.cell_size = float(
            math.floor(
                min(
                    self.screen_width / width_cells,
                    self.screen_height / height_cells,
                )
            )
        )

        self.width_cells = int(self.screen_width / self.cell_size)
        if self.width_cells % 2 == 0:
            self.width_cells -= 1
        self.height_cells = int(self.screen_height / self.cell_size)
        if self.height_cells % 2 == 0:
            self.height_cells -= 1
        self.width_cells = max(self.width_cells, 3)
        self.height_cells = max(self.height_cells, 3)

        self.start_row, self.start_col = 1, 1
        self.end_row = self.height_cells - 2
        self.end_col = self.width_cells - 2

        self.player_size = self.cell_size * 0.6
        self.coin_size = self.cell_size * 0.3

    # ---------- generation ----------

    def init_maze_grid(self):
        """Fill the whole grid with walls."""
        self.grid = [
            [self.WALL] * self.width_cells for _ in range(self.height_cells)
        ]

    def _shuffled_directions(self):
        dirs = list(self.DIRECTIONS)
        self.rng.shuffle(dirs)
        return dirs

    def generate_maze(self, row, col):
        """Carve passages outward from (row, col) with a DFS backtracker."""
        self.grid[row][col] = self.PATH
        stack = [(row, col, self._shuffled_directions())]

        while stack:
            r, c, dirs = stack[-1]
            if not dirs:
                stack.pop()
                continue
            dr, dc = dirs.pop(0)
            nr, nc = r + dr, c + dc
            if (
                0 <= nr < self.height_cells
                and 0 <= nc < self.width_cells
                and self.grid[nr][nc] == self.WALL
            ):
                # open the wall between and descend
                self.grid[r + dr // 2][c + dc // 2] = self.PATH
                self.grid[nr][nc] = self.PATH
                stack.append((nr, nc, self._shuffled_directions()))

    def generate_new_maze_structure(self):
        """Regenerate the grid without touching the player or coins."""
        self.calculate_maze_dimensions()
        self.init_maze_grid()
        self.generate_maze(self.start_row, self.start_col)

    def reset_player_and_coins(self):
        """Put the player on the start cell and scatter coins over path cells."""
        self.player_x = (
            self.start_col * self.cell_size + (self.cell_size - self.player_size) / 2
        )
        self.player_y = (
            self.start_row * self.cell_size + (self.cell_size - self.player_size) / 2
        )
        self.level_won = False

        self.coins = []
        self.collected_coins = 0
        for r in range(self.height_cells):
            for c in range(self.width_cells):
                if self.grid[r][c] != self.PATH:
                    continue
                if (r, c) in (
                    (self.start_row, self.start_col),
                    (self.end_row, self.end_col),
                ):
                    continue
                if self.rng.uniform() < COIN_SPAWN_CHANCE:
                    self.coins.append(
                        (
                            c * self.cell_size + self.cell_size / 2,
                            r * self.cell_size + self.cell_size / 2,
                        )
                    )
        self.total_initial_coins = len(self.coins)

    def _load(self):
        self.generate_new_maze_structure()
        self.reset_player_and_coins()

    def _unload(self):
        self.grid = []
        self.coins = []

    # ---------- simulation ----------

    def cell_rect(self, row, col):
        return Rect(
            col * self.cell_size, row * self.cell_size, self.cell_size, self.cell_size
        )

    def player_rect(self):
        return Rect(self.player_x, self.player_y, self.player_size, self.player_size)

    def check_wall_collision(self, px, py, dx, dy):
        """Return True if the player moved by (dx, dy) from (px, py) overlaps a wall."""
        moved = Rect(px + dx, py + dy, self.player_size, self.player_size)

        # every cell the moved rectangle can touch
        min_col = clamp(int(moved.x // self.cell_size), 0, self.width_cells - 1)
        max_col = clamp(int(moved.right // self.cell_size), 0, self.width_cells - 1)
        min_row = clamp(int(moved.y // self.cell_size), 0, self.height_cells - 1)
        max_row = clamp(int(moved.bottom // self.cell_size), 0, self.height_cells - 1)

        for r in range(min_row, max_row + 1):
            for c in range(min_col, max_col + 1):
                if self.grid[r][c] == self.WALL and check_collision_recs(
                    moved, self.cell_rect(r, c)
                ):
                    return True
        return False

    def update(self, dt, inp, now):
        """Move the player axis by axis, collect coins and test for the exit."""
        if self.level_won or not self.grid:
            return

        dx = dy = 0.0
        if inp.right:
            dx += self.player_speed
        if inp.left:
            dx -= self.player_speed
        if inp.up:
            dy -= self.player_speed
        if inp.down:
            dy += self.player_speed

        # X then Y so diagonals cannot slip through corners
        if dx and not self.check_wall_collision(self.player_x, self.player_y, dx, 0):
            self.player_x += dx
        if dy and not self.check_wall_collision(self.player_x, self.player_y, 0, dy):
            self.player_y += dy

        self.player_x = clamp(self.player_x, 0.0, self.screen_width - self.player_size)
        self.player_y = clamp(self.player_y, 0.0, self.screen_height - self.player_size)

        player = self.player_rect()
        half = self.coin_size / 2
        remaining = []
        for cx, cy in self.coins:
            coin = Rect(cx - half, cy - half, self.coin_size, self.coin_size)
            if check_collision_recs(player, coin):
                self.collected_coins += 1
            else:
                remaining.append((cx, cy))
        self.coins = remaining

        exit_rect = self.cell_rect(self.end_row, self.end_col)
        if (
            check_collision_recs(player, exit_rect)
            and self.collected_coins == self.total_initial_coins
        ):
            self.level_won = True
            self._finish(True)

    def draw(self, buf):
        """Render walls, start/end cells, coins, the player and the coin counter."""
        size = self.cell_size
        for r, row in enumerate(self.grid):
            for c, cell in enumerate(row):
                if c * size >= self.screen_width or r * size >= self.screen_height:
                    continue
                color = MAZE_WALL_COLOR if cell == self.WALL else MAZE_PATH_COLOR
                buf.rect(c * size, r * size, size, size, color)

        buf.rect(self.start_col * size, self.start_row * size, size, size, MAZE_START_COLOR)
        buf.rect(self.end_col * size, self.end_row * size, size, size, MAZE_END_COLOR)

        for cx, cy in self.coins:
            buf.circle(cx, cy, self.coin_size / 2, MAZE_COIN_COLOR)

        ps = self.player_size
        center_x = self.player_x + ps / 2
        center_y = self.player_y + ps / 2
        buf.circle(center_x, center_y, ps / 2, MAZE_PLAYER_COLOR)
        buf.circle(center_x - ps * 0.18, center_y - ps * 0.15, ps * 0.09, MAZE_PLAYER_EYE_COLOR)
        buf.circle(center_x + ps * 0.18, center_y - ps * 0.15, ps * 0.09, MAZE_PLAYER_EYE_COLOR)

        buf.text(
            "Coins: %d/%d" % (self.collected_coins, self.total_initial_coins),
            10,
            10,
            20,
            MAZE_TEXT_COLOR,
        )
