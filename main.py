# Launcher for the Prison Escape Arcade.
# pygbag packages the directory that holds main.py and runs it as the entry
# module, so the browser build needs the async loop started from here.
import asyncio

from arcade_app import async_main, main
from env import is_browser

if is_browser:
    asyncio.run(async_main())
elif __name__ == "__main__":
    main()
