#!/usr/bin/env python3
"""
Batch Rename Preview Tool - Main Entry

Supports:
- GUI mode (default startup)
- CLI mode (--cli or -c parameter)

Usage:
    python main.py                        # GUI mode (default)
    python main.py -c                     # CLI interactive browser
    python main.py -c list ./dir          # CLI command mode
    python main.py -c preview ./dir ...   # CLI command mode
    python main.py -c apply ./dir ...     # CLI command mode
"""

import sys


def main():
    """Main entry point"""
    # Check if CLI should be started
    if "--cli" in sys.argv or "-c" in sys.argv:
        argv = [arg for arg in sys.argv[1:] if arg not in ("--cli", "-c")]

        from cli import main as cli_main
        return cli_main(argv)

    # Default to starting GUI
    try:
        from gui import main as gui_main
    except ImportError as e:
        print("Error: Unable to start GUI, please ensure PySide6 is installed")
        print(f"Detailed error: {e}")
        print("\nInstall command: pip install PySide6")
        print("\nTo use CLI mode, run:")
        print("    python main.py --cli")
        print("or  python main.py -c")
        return 1
    return gui_main(sys.argv[1:])


if __name__ == "__main__":
    sys.exit(main())
