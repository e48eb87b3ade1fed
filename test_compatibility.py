#!/usr/bin/env python3
"""
Platform compatibility test suite for the Prison Escape Arcade.

Checks that the app imports and wires up the same way on both targets:
1. Desktop (CPython + PyGame), including headless runs
2. Browser (Pygbag/Emscripten + WASM)

Run this script (or pytest) to verify that recent changes keep both entry
points intact. Nothing here opens a window.
"""

import inspect
import os
import sys


def test_imports():
    """Test that all modules import successfully."""
    print("\n" + "=" * 60)
    print("TEST 1: Module Imports")
    print("=" * 60)

    for name in (
        "env",
        "game_utils",
        "maze_game",
        "invaders_game",
        "flappy_game",
        "obstacle_game",
        "arcade_app",
        "main",
    ):
        __import__(name)
        print(f"✓ {name}.py imports successfully")


def test_platform_detection():
    """Test platform detection logic."""
    print("\n" + "=" * 60)
    print("TEST 2: Platform Detection")
    print("=" * 60)

    import env

    print(f"\nCurrent platform: {sys.platform}")
    print(f"  env.is_browser: {env.is_browser}")
    print(f"  env.is_desktop: {env.is_desktop}")
    print(f"  env.is_headless: {env.is_headless}")

    assert env.is_desktop == (not env.is_browser)
    assert env.is_browser == (sys.platform == "emscripten")
    assert env.get_platform_name() in ("desktop", "headless", "browser")

    dummy = os.environ.get("SDL_VIDEODRIVER", "").lower() == "dummy"
    assert env.is_headless == (env.is_desktop and dummy)
    print("✓ Platform flags consistent")


def test_platform_guards():
    """Test that require_* guards raise on the wrong platform."""
    print("\n" + "=" * 60)
    print("TEST 3: Platform Guards")
    print("=" * 60)

    import env

    if env.is_desktop:
        env.require_desktop()
        try:
            env.require_browser()
        except RuntimeError as e:
            assert "Current platform: " + env.get_platform_name() in str(e)
            print("✓ require_browser raises on desktop")
        else:
            raise AssertionError("require_browser should raise on desktop")
    else:
        env.require_browser()
        try:
            env.require_desktop()
        except RuntimeError:
            print("✓ require_desktop raises in browser")
        else:
            raise AssertionError("require_desktop should raise in browser")


def test_async_functions():
    """Test that the sync and async entry points are properly defined."""
    print("\n" + "=" * 60)
    print("TEST 4: Async Function Definitions")
    print("=" * 60)

    import arcade_app
    import main

    for module in (main, arcade_app):
        assert hasattr(module, "main"), f"{module.__name__}.main does NOT exist"
        assert not inspect.iscoroutinefunction(module.main), f"{module.__name__}.main should NOT be async"
        print(f"✓ {module.__name__}.main is synchronous (correct)")

        assert hasattr(module, "async_main"), f"{module.__name__}.async_main does NOT exist"
        assert inspect.iscoroutinefunction(module.async_main), f"{module.__name__}.async_main should be async"
        print(f"✓ {module.__name__}.async_main is async (correct)")

    for fn in (arcade_app.main, arcade_app.async_main):
        params = inspect.signature(fn).parameters
        assert "seed" in params and params["seed"].default is None
    print("✓ entry points accept an optional seed")


def test_display_abstraction():
    """Test that display is properly abstracted and not started on import."""
    print("\n" + "=" * 60)
    print("TEST 5: Display Abstraction")
    print("=" * 60)

    import arcade_app
    from game_utils import DrawBuffer

    assert hasattr(arcade_app, "display"), "arcade_app.display does NOT exist"
    for method in ("start", "stop", "render", "show", "measure_text"):
        assert hasattr(arcade_app.display, method), f"display.{method} does NOT exist"
        print(f"✓ display.{method} exists")

    assert not arcade_app.display._inited
    buf = DrawBuffer()
    buf.text("hello", 0, 0, 20, (255, 255, 255))
    # rendering before start is a no-op rather than an error
    arcade_app.display.render(buf)
    arcade_app.display.show()
    print("✓ display stays idle until started")


def test_game_constants():
    """Test that game constants are defined."""
    print("\n" + "=" * 60)
    print("TEST 6: Game Constants")
    print("=" * 60)

    import arcade_app

    constants = {
        "WIDTH": 1280,
        "HEIGHT": 720,
        "TARGET_FPS": 60,
        "SUFFER_MESSAGE_DISPLAY_TIME": 2.0,
    }
    for const, expected in constants.items():
        value = getattr(arcade_app, const)
        assert value == expected, f"{const} = {value} (expected {expected})"
        print(f"✓ {const} = {value} (correct)")

    assert arcade_app.ESCAPE_BUTTON.as_tuple() == (490, 410, 300, 70)
    assert arcade_app.SUFFER_BUTTON.as_tuple() == (490, 510, 300, 70)
    assert arcade_app.CONFIRM_BUTTON.as_tuple() == (540, 540, 200, 50)
    print("✓ button rectangles correct")


def test_level_lifecycle():
    """Test that every level can be built, loaded and unloaded twice."""
    print("\n" + "=" * 60)
    print("TEST 7: Level Lifecycle")
    print("=" * 60)

    import arcade_app
    from game_utils import RandomSource

    names = []
    for factory in arcade_app.LEVEL_ORDER:
        level = factory(RandomSource(1))
        assert level.name and level.instructions
        level.load()
        assert level.loaded and not level.is_complete()
        level.unload()
        level.unload()
        assert not level.loaded
        names.append(level.name)
        print(f"✓ {level.name} loads and unloads")

    assert names == ["Maze Level", "Space Invaders Level", "Flappy Level", "Obstacle Course Level"]


def run_all_tests():
    """Run all compatibility tests."""
    print("\n" + "=" * 60)
    print("PRISON ESCAPE ARCADE - PLATFORM COMPATIBILITY TEST SUITE")
    print("=" * 60)
    print("\nTesting compatibility across:")
    print("  1. Desktop (CPython + PyGame)")
    print("  2. Browser (Pygbag/Emscripten)")

    tests = [
        ("Module Imports", test_imports),
        ("Platform Detection", test_platform_detection),
        ("Platform Guards", test_platform_guards),
        ("Async Functions", test_async_functions),
        ("Display Abstraction", test_display_abstraction),
        ("Game Constants", test_game_constants),
        ("Level Lifecycle", test_level_lifecycle),
    ]

    results = []
    for name, test_func in tests:
        try:
            test_func()
            results.append((name, True))
        except Exception as e:
            print(f"\n✗ Test '{name}' raised exception: {e}")
            import traceback

            traceback.print_exc()
            results.append((name, False))

    # Print summary
    print("\n" + "=" * 60)
    print("TEST SUMMARY")
    print("=" * 60)

    passed = sum(1 for _, result in results if result)
    total = len(results)

    for name, result in results:
        status = "✓ PASS" if result else "✗ FAIL"
        print(f"  {status:8} {name}")

    print("\n" + "-" * 60)
    print(f"Result: {passed}/{total} tests passed")
    print("=" * 60)

    if passed == total:
        print("\n✓ ALL TESTS PASSED - Platform compatibility verified!")
        return 0
    else:
        print(f"\n✗ {total - passed} test(s) FAILED - Review errors above")
        return 1


if __name__ == "__main__":
    exit_code = run_all_tests()
    sys.exit(exit_code)
