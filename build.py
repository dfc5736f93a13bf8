"""
Build script for creating a standalone executable using PyInstaller.

This script bundles the loader CLI and its dependencies into a single
executable file named `aaa-cmd`.
"""

import PyInstaller.__main__  # type: ignore

PyInstaller.__main__.run(["main.py", "--onefile", "--name=aaa-cmd"])
