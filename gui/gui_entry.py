"""
gui_entry.py - GUI Entry

Launch PySide6 GUI application
"""

import argparse
import sys
from typing import List, Optional

from PySide6.QtWidgets import QApplication
from PySide6.QtCore import Qt

from core.log import setup_logging
from .gui_mainwindow import MainWindow


def main(argv: Optional[List[str]] = None):
    """GUI main entry"""
    parser = argparse.ArgumentParser(prog="rename_tool", description="Batch Rename Preview Tool")
    parser.add_argument("directory", nargs="?", default=None, help="Starting directory (default: home)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.add_argument("--log-file", type=str, default=None, help="Also write logs to this file")
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose, log_file=args.log_file)

    # High DPI support
    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    app = QApplication(sys.argv[:1])
    app.setApplicationName("Batch Rename Tool")
    app.setApplicationVersion("1.0.0")

    # Set style
    app.setStyle("Fusion")

    window = MainWindow(args.directory)
    window.show()

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
