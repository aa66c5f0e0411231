"""Main window: tweak list, target selection, launcher log and target output."""

from pathlib import Path

from PySide6.QtCore import QObject, Qt, QTimer, Signal
from PySide6.QtGui import QCloseEvent, QFont, QTextCursor
from PySide6.QtWidgets import (
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QPlainTextEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from .config import Config, save_config
from .i18n import tr
from .launcher import TweakLauncher

STATUS_POLL_MS = 500


class _Bridge(QObject):
    """Carries relay and log messages from worker threads to the GUI thread."""

    chunk = Signal(str)
    log = Signal(str)


class LauncherWindow(QMainWindow):
    """Desktop front end for a TweakLauncher."""

    def __init__(self, config: Config):
        super().__init__()
        self.config = config
        self._bridge = _Bridge()
        self._reported_exit = True

        self.launcher = TweakLauncher(
            config,
            on_log=self._bridge.log.emit,
            on_chunk=self._bridge.chunk.emit,
        )

        self.setWindowTitle(tr("window_title"))
        self.resize(config.window_width, config.window_height)
        self._build_ui()

        self._bridge.log.connect(self._append_log)
        self._bridge.chunk.connect(self._append_output)

        self._status_timer = QTimer(self)
        self._status_timer.timeout.connect(self._poll_target)
        self._status_timer.start(STATUS_POLL_MS)

        self.refresh_tweaks()

    def _build_ui(self):
        central = QWidget()
        layout = QVBoxLayout(central)

        header = QHBoxLayout()
        title = QLabel(tr("window_title"))
        title_font = QFont()
        title_font.setPointSize(20)
        title.setFont(title_font)
        header.addWidget(title)
        header.addStretch()
        refresh_btn = QPushButton(tr("refresh_tweaks"))
        refresh_btn.clicked.connect(self.refresh_tweaks)
        header.addWidget(refresh_btn)
        layout.addLayout(header)

        target_row = QHBoxLayout()
        target_row.addWidget(QLabel(tr("target")))
        self.target_label = QLabel()
        self.target_label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
        target_row.addWidget(self.target_label, 1)
        select_btn = QPushButton(tr("select_target"))
        select_btn.clicked.connect(self._on_select_target)
        target_row.addWidget(select_btn)
        layout.addLayout(target_row)
        self._update_target_label()

        self.tweak_list = QListWidget()
        self.tweak_list.setMinimumHeight(200)
        self.tweak_list.itemChanged.connect(self._on_item_changed)
        layout.addWidget(self.tweak_list)

        buttons = QHBoxLayout()
        buttons.addStretch()
        self.launch_btn = QPushButton(tr("launch_target"))
        self.launch_btn.clicked.connect(self._on_launch)
        buttons.addWidget(self.launch_btn)
        self.stop_btn = QPushButton(tr("stop_target"))
        self.stop_btn.setEnabled(False)
        self.stop_btn.clicked.connect(self._on_stop)
        buttons.addWidget(self.stop_btn)
        buttons.addStretch()
        layout.addLayout(buttons)

        layout.addWidget(QLabel(tr("launcher_log")))
        self.log_view = QPlainTextEdit()
        self.log_view.setReadOnly(True)
        self.log_view.setFixedHeight(100)
        layout.addWidget(self.log_view)

        layout.addWidget(QLabel(tr("target_output")))
        self.output_view = QPlainTextEdit()
        self.output_view.setReadOnly(True)
        self.output_view.setMinimumHeight(200)
        mono = QFont("Menlo")
        mono.setStyleHint(QFont.StyleHint.Monospace)
        self.output_view.setFont(mono)
        layout.addWidget(self.output_view)

        self.setCentralWidget(central)

    def _update_target_label(self):
        path = self.config.target_path
        self.target_label.setText(path or tr("no_target"))
        self.target_label.setStyleSheet("" if path else "color: red;")

    def refresh_tweaks(self):
        """Rescan the tweak directory and rebuild the list."""
        tweaks = self.launcher.refresh_tweaks()

        self.tweak_list.blockSignals(True)
        self.tweak_list.clear()
        for index, tweak in enumerate(tweaks):
            text = "\n".join([tweak.name, *tweak.summary()])
            item = QListWidgetItem(text)
            item.setFlags(Qt.ItemFlag.ItemIsEnabled | Qt.ItemFlag.ItemIsUserCheckable)
            item.setCheckState(Qt.CheckState.Checked if tweak.enabled else Qt.CheckState.Unchecked)
            item.setData(Qt.ItemDataRole.UserRole, index)
            item.setToolTip(tweak.library_path)
            self.tweak_list.addItem(item)
        if not tweaks:
            placeholder = QListWidgetItem(tr("no_tweaks"))
            placeholder.setFlags(Qt.ItemFlag.NoItemFlags)
            self.tweak_list.addItem(placeholder)
        self.tweak_list.blockSignals(False)

    def _on_item_changed(self, item: QListWidgetItem):
        index = item.data(Qt.ItemDataRole.UserRole)
        if index is None:
            return
        tweak = self.launcher.tweaks[index]
        enabled = item.checkState() == Qt.CheckState.Checked
        if enabled != tweak.enabled:
            self.launcher.set_tweak_enabled(tweak, enabled)

    def _on_select_target(self):
        start_dir = "/Applications" if Path("/Applications").is_dir() else str(Path.home())
        path, _ = QFileDialog.getOpenFileName(self, tr("select_target_title"), start_dir)
        if path and self.launcher.select_target(path):
            self._update_target_label()

    def _on_launch(self):
        if self.launcher.launch() is not None:
            self._reported_exit = False
            self.stop_btn.setEnabled(True)

    def _on_stop(self):
        self.launcher.stop()

    def _poll_target(self):
        running = self.launcher.is_running()
        self.stop_btn.setEnabled(running)
        if not running and not self._reported_exit and self.launcher.handle is not None:
            self._reported_exit = True
            self._append_log(tr("target_exited").format(code=self.launcher.handle.returncode))

    def _append_log(self, message: str):
        self.log_view.appendPlainText(message)

    def _append_output(self, text: str):
        # Chunks are not line-aligned; insert without adding newlines
        cursor = self.output_view.textCursor()
        cursor.movePosition(QTextCursor.MoveOperation.End)
        cursor.insertText(text)
        self.output_view.setTextCursor(cursor)
        self.output_view.ensureCursorVisible()

    def closeEvent(self, event: QCloseEvent):
        self.config.window_width = self.width()
        self.config.window_height = self.height()
        save_config(self.config)
        super().closeEvent(event)
