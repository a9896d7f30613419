"""
Entry point for running nativegen as a module.

Usage: python -m nativegen FOLDER [command] [options]
"""

from nativegen.cli.parser import main

if __name__ == "__main__":
    main()
