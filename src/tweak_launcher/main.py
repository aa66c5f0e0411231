#!/usr/bin/env python3
"""Tweak Launcher - Main entry point.

Launches a target executable with the enabled tweak libraries preloaded.
"""

import argparse
import sys

from loguru import logger

from .config import load_config
from .i18n import set_language

# Unique name for single-instance socket
SOCKET_NAME = "tweak-launcher-single-instance"


class SingleInstance:
    """Ensures only one instance of the application runs.

    On second start, the existing instance is activated.
    """

    def __init__(self, socket_name: str):
        """Initialize the single-instance server."""
        from PySide6.QtNetwork import QLocalServer, QLocalSocket

        self.socket_name = socket_name
        self.server = None
        self.is_running = False
        self.window = None

        # Try to connect to existing instance
        socket = QLocalSocket()
        socket.connectToServer(socket_name)

        if socket.waitForConnected(500):
            # Other instance is running - send signal and exit
            self.is_running = True
            socket.write(b"activate")
            socket.waitForBytesWritten(1000)
            socket.disconnectFromServer()
        else:
            # Remove old socket if present (after crash)
            QLocalServer.removeServer(socket_name)

            self.server = QLocalServer()
            self.server.newConnection.connect(self._on_new_connection)
            if not self.server.listen(socket_name):
                logger.warning(
                    f"Could not start single-instance server: {self.server.errorString()}"
                )

    def set_window(self, window):
        """Set the main window for activation."""
        self.window = window

    def _on_new_connection(self):
        """Handle a connection from another instance."""
        if self.server:
            socket = self.server.nextPendingConnection()
            if socket:
                socket.waitForReadyRead(1000)
                if self.window:
                    self.window.showNormal()
                    self.window.raise_()
                    self.window.activateWindow()
                socket.disconnectFromServer()

    def cleanup(self):
        """Clean up the server."""
        if self.server:
            self.server.close()


def setup_logging(verbose: bool = False) -> None:
    """Replace loguru's default sink with a single stderr sink."""
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "INFO",
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tweak-launcher",
        description="Launch an application with tweak libraries injected.",
    )
    parser.add_argument("--tweaks-dir", help="Directory containing tweak libraries")
    parser.add_argument("--target", help="Target executable or .app bundle")
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Run without a window and stream the target's output to stdout",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def exit_status(returncode: int) -> int:
    """Map a Popen return code to a shell exit status (128 + signal number)."""
    if returncode < 0:
        return 128 - returncode
    return returncode


def run_headless(launcher) -> int:
    """Launch once, relay output to the terminal and return the exit status."""
    launcher.refresh_tweaks()
    if launcher.launch() is None:
        return 1
    try:
        returncode = launcher.wait()
    except KeyboardInterrupt:
        launcher.stop()
        returncode = launcher.wait()
    return exit_status(returncode)


def run_gui(config) -> int:
    """Start the Qt application."""
    from PySide6.QtWidgets import QApplication

    app = QApplication(sys.argv)
    app.setApplicationName("Tweak Launcher")
    app.setOrganizationName("Tweak Launcher")

    # Single-Instance Check
    single_instance = SingleInstance(SOCKET_NAME)
    if single_instance.is_running:
        # Other instance was activated - exit silently
        logger.info("Tweak Launcher is already running - activating existing window")
        return 0

    from .window import LauncherWindow

    window = LauncherWindow(config)
    single_instance.set_window(window)
    window.show()

    exit_code = app.exec()

    # Cleanup
    single_instance.cleanup()
    return exit_code


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    config = load_config()
    set_language(config.language)

    if args.tweaks_dir:
        config.tweaks_dir = args.tweaks_dir

    if args.headless:
        from .launcher import TweakLauncher

        # Operator messages reach stderr through the loguru sink
        launcher = TweakLauncher(
            config,
            on_chunk=lambda text: print(text, end="", flush=True),
            save=lambda _config: None,
        )
        if args.target and launcher.select_target(args.target) is None:
            return 1
        return run_headless(launcher)

    if args.target:
        config.target_path = args.target
    return run_gui(config)


if __name__ == "__main__":
    sys.exit(main())
