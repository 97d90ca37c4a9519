#!/usr/bin/env python3
"""
ZIP Rename Tool - Main Entry

Supports:
- GUI mode (default startup)
- CLI mode (--cli or -c as the first parameter)

Usage:
    python main.py                              # GUI mode (default)
    python main.py --cli                        # CLI interactive mode
    python main.py -c analyze photos.zip        # CLI command mode
    python main.py -c preview photos.zip -t seo # CLI command mode
"""

import sys


def main():
    """Main entry point"""
    # Check if CLI should be started
    if len(sys.argv) > 1 and sys.argv[1] in ("--cli", "-c"):
        # CLI mode
        from ziprename.cli import main as cli_main
        return cli_main(sys.argv[2:])

    # Default to starting GUI
    try:
        from ziprename.gui import main as gui_main
        return gui_main()
    except ImportError as e:
        print("Error: Unable to start GUI, please ensure PySide6 is installed")
        print(f"Detailed error: {e}")
        print("\nInstall command: pip install PySide6")
        print("\nTo use CLI mode, run:")
        print("    python main.py --cli")
        print("or  python main.py -c")
        return 1


if __name__ == "__main__":
    sys.exit(main())
