#!/usr/bin/env python3
"""
Space Invaders level tests: cannon, cooldown, formation march and outcomes.

Run with pytest or directly as a script.
"""

import random
import sys

from game_utils import NO_INPUT, InputSnapshot, Outcome, RandomSource
from invaders_game import (
    SI_FIRE_COOLDOWN,
    SI_INVADER_MOVE_INTERVAL,
    SI_PLAYER_LIVES,
    Bullet,
    InvadersGame,
)

TICK = 1 / 60


class ScriptedRandom(RandomSource):
    """RandomSource whose uniform draws are pinned to one value."""

    def __init__(self, uniform_value):
        super().__init__(0)
        self.uniform_value = uniform_value

    def uniform(self):
        return self.uniform_value


def _quiet_game():
    # 0.99 never beats the per-tick fire chance, so invaders hold fire
    game = InvadersGame(ScriptedRandom(0.99))
    game.load()
    return game


def test_formation_layout():
    game = _quiet_game()
    assert len(game.invaders) == 16
    first, last = game.invaders[0], game.invaders[-1]
    assert (first.rect.x, first.rect.y, first.row) == (50, 100, 0)
    assert (last.rect.x, last.rect.y, last.row) == (400, 140, 1)
    assert game.player.as_tuple() == (615, 650, 50, 50)
    assert game.lives == SI_PLAYER_LIVES


def test_fire_cooldown():
    game = _quiet_game()
    fire = InputSnapshot(space=True)

    game.update(TICK, fire, 0.0)
    assert len(game.player_bullets) == 1
    game.update(TICK, fire, 0.1)
    assert len(game.player_bullets) == 1
    game.update(TICK, fire, SI_FIRE_COOLDOWN + 0.1)
    assert len(game.player_bullets) == 2


def test_player_clamped_to_screen():
    game = _quiet_game()
    for _ in range(200):
        game.update(TICK, InputSnapshot(left=True), 0.0)
    assert game.player.x == 0
    for _ in range(400):
        game.update(TICK, InputSnapshot(right=True), 0.0)
    assert game.player.x == game.screen_width - game.player.width


def test_formation_steps_on_interval():
    game = _quiet_game()
    start = [inv.rect.x for inv in game.invaders]
    game.update(0.5, NO_INPUT, 0.0)
    assert [inv.rect.x for inv in game.invaders] == start
    game.update(0.5, NO_INPUT, 0.0)
    assert [inv.rect.x for inv in game.invaders] == [x + 10 for x in start]
    assert game.move_timer == 0.0


def test_last_invader_shot_wins():
    game = _quiet_game()
    for inv in game.invaders[1:]:
        inv.active = False
    game.player.x = 40

    now = 0.0
    for _ in range(300):
        game.update(0.001, InputSnapshot(space=True), now)
        now += TICK
        if game.is_complete():
            break
    assert game.won
    assert game.did_win()
    assert game.score == 100
    assert game.live_invaders() == []


def test_formation_landing_loses():
    game = _quiet_game()
    for _ in range(10000):
        game.update(0.8, NO_INPUT, 0.0)
        if game.is_complete():
            break
    assert game.lost
    assert game.outcome() == Outcome.LOST
    assert not game.did_win()
    assert game.lives == SI_PLAYER_LIVES
    assert any(inv.rect.bottom >= game.player.y for inv in game.live_invaders())


def test_losing_every_life_loses():
    game = _quiet_game()
    game.lives = 1
    game.invader_bullets.append(Bullet(630, 660, False))
    game.update(TICK, NO_INPUT, 0.0)
    assert game.lives == 0
    assert game.outcome() == Outcome.LOST


def test_clearing_formation_wins_even_when_cannon_falls():
    game = _quiet_game()
    for inv in game.invaders[1:]:
        inv.active = False
    game.lives = 1
    # one bullet about to hit the last invader, one about to hit the cannon
    game.player_bullets.append(Bullet(60, 110, True))
    game.invader_bullets.append(Bullet(630, 660, False))

    game.update(TICK, NO_INPUT, 0.0)
    assert game.live_invaders() == []
    assert game.lives == 0
    assert game.won
    assert game.did_win()
    assert game.outcome() == Outcome.WON


def _shift_formation(game, dx):
    for inv in game.invaders:
        inv.rect.x += dx


def test_formation_reverses_at_right_edge():
    game = _quiet_game()
    # rightmost invader edge starts at 430; one short of the margin keeps marching
    _shift_formation(game, 1259 - 430)
    ys = [inv.rect.y for inv in game.invaders]
    game.update(SI_INVADER_MOVE_INTERVAL, NO_INPUT, 0.0)
    assert game.move_direction == 1
    assert [inv.rect.y for inv in game.invaders] == ys
    assert max(inv.rect.right for inv in game.invaders) == 1269

    xs = [inv.rect.x for inv in game.invaders]
    game.update(SI_INVADER_MOVE_INTERVAL, NO_INPUT, 0.0)
    assert game.move_direction == -1
    assert [inv.rect.x for inv in game.invaders] == [x - 10 for x in xs]
    assert [inv.rect.y for inv in game.invaders] == [y + 20 for y in ys]

    # the step after a reversal only marches
    game.update(SI_INVADER_MOVE_INTERVAL, NO_INPUT, 0.0)
    assert game.move_direction == -1
    assert [inv.rect.y for inv in game.invaders] == [y + 20 for y in ys]
    assert not game.is_complete()


def test_formation_reverses_at_left_edge():
    game = _quiet_game()
    game.move_direction = -1
    # leftmost invader starts at x=50
    _shift_formation(game, 20 - 50)
    xs = [inv.rect.x for inv in game.invaders]
    ys = [inv.rect.y for inv in game.invaders]
    game.update(SI_INVADER_MOVE_INTERVAL, NO_INPUT, 0.0)
    assert game.move_direction == 1
    assert [inv.rect.x for inv in game.invaders] == [x + 10 for x in xs]
    assert [inv.rect.y for inv in game.invaders] == [y + 20 for y in ys]


def test_invaders_fire_when_roll_succeeds():
    game = InvadersGame(ScriptedRandom(0.0))
    game.load()
    game.update(TICK, NO_INPUT, 0.0)
    assert len(game.invader_bullets) == 16
    assert all(not b.from_player for b in game.invader_bullets)


def test_score_and_lives_monotonic():
    game = InvadersGame(RandomSource(5))
    game.load()
    pad = random.Random(9)
    now = 0.0
    prev_score, prev_lives = game.score, game.lives
    dead = set()
    for _ in range(4000):
        inp = InputSnapshot(
            left=pad.random() < 0.3,
            right=pad.random() < 0.3,
            space=pad.random() < 0.8,
        )
        game.update(TICK, inp, now)
        now += TICK

        assert game.score >= prev_score
        assert game.lives <= prev_lives
        assert 0 <= game.lives <= SI_PLAYER_LIVES
        for i, inv in enumerate(game.invaders):
            if i in dead:
                assert not inv.active
            elif not inv.active:
                dead.add(i)
        assert game.score == 100 * len(dead)
        prev_score, prev_lives = game.score, game.lives
        if game.is_complete():
            break


def test_finished_game_is_frozen():
    game = _quiet_game()
    game.lives = 1
    game.invader_bullets.append(Bullet(630, 660, False))
    game.update(TICK, NO_INPUT, 0.0)
    assert game.is_complete()

    x = game.player.x
    game.update(TICK, InputSnapshot(left=True), 1.0)
    assert game.player.x == x


def test_draw_and_unload():
    from game_utils import DrawBuffer

    game = _quiet_game()
    buf = DrawBuffer()
    game.draw(buf)
    texts = buf.texts()
    assert "SCORE: 0000" in texts
    assert "LIVES: 5" in texts
    assert "triangle" in buf.kinds()

    game.unload()
    assert game.invaders == [] and game.player_bullets == [] and game.invader_bullets == []


def run_all_tests():
    """Run every test in this module and print a summary."""
    tests = [(name, fn) for name, fn in sorted(globals().items()) if name.startswith("test_") and callable(fn)]
    failed = 0
    for name, fn in tests:
        try:
            fn()
            print(f"✓ PASS  {name}")
        except Exception as e:
            failed += 1
            print(f"✗ FAIL  {name}: {e!r}")
    print(f"\nResult: {len(tests) - failed}/{len(tests)} tests passed")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(run_all_tests())
