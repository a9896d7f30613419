"""
Entry point for running nativegen CLI as a module.

Usage: python -m nativegen.cli FOLDER [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
