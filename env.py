"""Platform detection and environment utilities for the Prison Escape Arcade.

This module is the single place where the runtime decides whether it is a
desktop build, a pygbag browser build, or a headless run (CI, tests).

Platform Support
----------------
1. **Desktop (CPython + PyGame)**:
   - Development and normal play
   - Detected when not running under Emscripten
   - Uses a PyGame window and keyboard/mouse input

2. **Browser (Pygbag/Emscripten/WASM)**:
   - Web deployment via WebAssembly
   - Detected via ``sys.platform == "emscripten"``
   - Requires async/await for cooperative multitasking

3. **Headless**:
   - A desktop run with ``SDL_VIDEODRIVER=dummy`` set
   - PyGame still works but nothing is shown on screen

Module Variables
----------------
is_browser : bool
    True when running in browser via pygbag (Emscripten/WASM).

is_desktop : bool
    True when running on desktop CPython with PyGame.

is_headless : bool
    True when SDL has been told to use the dummy video driver.

Example Usage
-------------
::

    from env import get_platform_name, is_browser

    if is_browser:
        asyncio.run(async_main())
    print(f"Detected platform: {get_platform_name()}")

Notes
-----
- Detection occurs at module import time and is cached in module variables
- Use ``require_*`` functions for strict platform enforcement
"""

import os
import sys

# ============================================================================
# Platform Detection
# ============================================================================

# Pygbag patches sys.platform to "emscripten"; the platform module is not
# reliable inside WASM.
is_browser = sys.platform == "emscripten"

is_desktop = not is_browser

is_headless = is_desktop and os.environ.get("SDL_VIDEODRIVER", "").lower() == "dummy"


def get_platform_name():
    """Return a human-readable platform name.

    Returns
    -------
    str
        One of:
        - "browser" : Running in browser via pygbag/WASM
        - "headless" : Desktop CPython with the SDL dummy video driver
        - "desktop" : Desktop CPython with a PyGame window

    Examples
    --------
    >>> from env import get_platform_name
    >>> get_platform_name()
    'desktop'
    """
    if is_browser:
        return "browser"
    elif is_headless:
        return "headless"
    else:
        return "desktop"


def require_browser():
    """Raise an error if not running in browser environment.

    Raises
    ------
    RuntimeError
        If not running in pygbag browser environment. The message includes
        the detected platform name.

    See Also
    --------
    require_desktop : Enforce desktop environment
    """
    if not is_browser:
        raise RuntimeError(
            "This code requires browser environment (pygbag/Emscripten). "
            f"Current platform: {get_platform_name()}"
        )


def require_desktop():
    """Raise an error if not running in desktop environment.

    Headless runs count as desktop; they only lack a visible window.

    Raises
    ------
    RuntimeError
        If not running in desktop CPython environment. The message includes
        the detected platform name.

    See Also
    --------
    require_browser : Enforce browser environment
    """
    if not is_desktop:
        raise RuntimeError(
            "This code requires desktop CPython environment. "
            f"Current platform: {get_platform_name()}"
        )
