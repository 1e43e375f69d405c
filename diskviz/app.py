from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QFont
from PySide6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QPushButton,
    QLabel, QFileDialog, QProgressBar, QTableWidget, QTableWidgetItem,
    QHeaderView, QAbstractItemView, QMenu
)

from .config import ScanConfig, make_worker_pool
from .drives import list_drives
from .log import configure_logging
from .models import Finished, Node, Progress, ScanProgress
from .navigation import IndexPath, breadcrumb, child_path, is_valid, parent_path, resolve, sorted_children
from .scanner import ScanCoordinator, ScanHandle
from .utils import format_bytes, percent_of, reveal_in_file_manager

logger = logging.getLogger(__name__)

APP_NAME = "DiskViz"
MAX_ROWS = 2000
BAR_STEPS = 1000

# -------------------- Style --------------------
DARK_QSS = r"""
* { font-size: 12px; }
QMainWindow { background: #0f1220; }
QWidget { color: #dbe6ff; }

QTableWidget {
    background: #121826;
    border: 1px solid #25314a;
    border-radius: 10px;
    gridline-color: #1e2a40;
    alternate-background-color: #0f1526;
    selection-background-color: rgba(47, 107, 255, 0.40);
    selection-color: #ffffff;
}

QPushButton {
    background: #16203a;
    border: 1px solid #2a3a5a;
    border-radius: 10px;
    padding: 6px 12px;
}
QPushButton:hover { background: #1a2a4c; border-color: #3a5aa8; }
QPushButton:disabled { color: #6a7894; border-color: #1d2433; }

QProgressBar {
    background: #0e1320;
    border: 1px solid #26334d;
    border-radius: 8px;
    text-align: center;
    color: #cfe0ff;
}
QProgressBar::chunk { background: #2f6bff; border-radius: 8px; }

QHeaderView::section {
    background: #0e1320;
    color: #9fb6ea;
    padding: 6px 8px;
    border: none;
}
"""


# -------------------- Main window --------------------
class MainWindow(QMainWindow):
    def __init__(self, coordinator: ScanCoordinator, config: ScanConfig):
        super().__init__()
        self.setWindowTitle(APP_NAME)
        self.resize(1100, 700)

        self.coordinator = coordinator
        self.config = config
        self.handle: Optional[ScanHandle] = None
        self.tree: Optional[Node] = None
        self.last_progress: Optional[ScanProgress] = None
        self.index_path: IndexPath = ()
        self._rows: List[Node] = []

        central = QWidget()
        self.setCentralWidget(central)
        root = QVBoxLayout(central)
        root.setContentsMargins(12, 12, 12, 12)
        root.setSpacing(8)

        # ---------- Top controls
        top = QHBoxLayout()
        title = QLabel(APP_NAME)
        tf = QFont(); tf.setPointSize(15); tf.setBold(True)
        title.setFont(tf)
        top.addWidget(title)
        top.addSpacing(10)

        btn_scan = QPushButton("Select && Scan")
        btn_scan.clicked.connect(self.pick_folder)
        top.addWidget(btn_scan)

        self.btn_drives = QPushButton("Drives")
        self.drive_menu = QMenu(self.btn_drives)
        self.drive_menu.aboutToShow.connect(self._fill_drive_menu)
        self.btn_drives.setMenu(self.drive_menu)
        top.addWidget(self.btn_drives)

        self.btn_stop = QPushButton("Stop")
        self.btn_stop.setEnabled(False)
        self.btn_stop.clicked.connect(self.stop_scan)
        top.addWidget(self.btn_stop)

        self.progress = QProgressBar()
        self.progress.setRange(0, BAR_STEPS)
        self.progress.setValue(0)
        self.progress.setFormat("")
        top.addWidget(self.progress, 1)
        root.addLayout(top)

        self.summary = QLabel("No data yet…")
        self.summary.setStyleSheet("QLabel{color:#aabce6;}")
        root.addWidget(self.summary)

        # ---------- Breadcrumb
        nav = QHBoxLayout()
        self.btn_up = QPushButton("Up")
        self.btn_up.setEnabled(False)
        self.btn_up.clicked.connect(self.go_up)
        nav.addWidget(self.btn_up)
        self.crumb = QLabel("")
        self.crumb.setTextInteractionFlags(Qt.TextSelectableByMouse)
        nav.addWidget(self.crumb, 1)
        root.addLayout(nav)

        # ---------- Children table
        self.table = QTableWidget(0, 4)
        self.table.setHorizontalHeaderLabels(["Name", "Size", "%", "Share"])
        hh = self.table.horizontalHeader()
        hh.setSectionResizeMode(0, QHeaderView.Stretch)
        hh.setSectionResizeMode(1, QHeaderView.ResizeToContents)
        hh.setSectionResizeMode(2, QHeaderView.ResizeToContents)
        hh.setSectionResizeMode(3, QHeaderView.Stretch)
        self._init_table(self.table)
        self.table.cellDoubleClicked.connect(self.on_row_double)
        self.table.setContextMenuPolicy(Qt.CustomContextMenu)
        self.table.customContextMenuRequested.connect(self._row_menu)
        root.addWidget(self.table, 1)

        self.poll_timer = QTimer(self)
        self.poll_timer.timeout.connect(self.poll)
        self.poll_timer.start(max(1, int(config.poll_interval_ms)))

        self.statusBar().showMessage("Ready.")

    def _init_table(self, t: QTableWidget):
        t.verticalHeader().setVisible(False)
        t.setShowGrid(False)
        t.setAlternatingRowColors(True)
        t.setEditTriggers(QAbstractItemView.NoEditTriggers)
        t.setSelectionBehavior(QAbstractItemView.SelectRows)
        t.setSelectionMode(QAbstractItemView.SingleSelection)
        t.setVerticalScrollMode(QAbstractItemView.ScrollPerPixel)

    # ---------- Source selection
    def pick_folder(self):
        path = QFileDialog.getExistingDirectory(self, "Select folder to scan", os.path.expanduser("~"))
        if path:
            self.start_scan(path)

    def _fill_drive_menu(self):
        self.drive_menu.clear()
        drives = list_drives()
        if not drives:
            self.drive_menu.addAction("No drives found").setEnabled(False)
            return
        for d in drives:
            act = self.drive_menu.addAction(f"{d.label}  {format_bytes(d.used)} / {format_bytes(d.total)}")
            act.triggered.connect(lambda _=False, mp=d.mountpoint: self.start_scan(mp))

    # ---------- Scan
    def start_scan(self, path: str):
        if self.handle is not None:
            # the old scan keeps running, its output is never read
            self.handle.close()
        self.handle = self.coordinator.begin_scan(path)

        self.tree = None
        self.last_progress = None
        self.index_path = ()
        self._rows = []
        self.table.setRowCount(0)
        self.crumb.setText("")
        self.btn_up.setEnabled(False)
        self.progress.setRange(0, 0)
        self.progress.setFormat("")
        self.summary.setText(f"Scanning {self.handle.root}…")
        self.btn_stop.setEnabled(True)
        self.statusBar().showMessage("Scan started…")

    def stop_scan(self):
        if self.handle is not None:
            self.handle.cancel()
            self.btn_stop.setEnabled(False)
            self.statusBar().showMessage("Stopping…")

    def poll(self):
        if self.handle is None:
            return
        for msg in self.handle.drain():
            if isinstance(msg, Progress):
                self.on_scan_progress(msg.progress)
            elif isinstance(msg, Finished):
                self.on_scan_done(msg.root)

    def on_scan_progress(self, p: ScanProgress):
        self.last_progress = p
        self.progress.setRange(0, BAR_STEPS)
        self.progress.setValue(int(p.fraction * BAR_STEPS))
        self.progress.setFormat(f"{format_bytes(p.scanned_bytes)} / {format_bytes(p.total_bytes)}")

    def on_scan_done(self, root: Node):
        self.handle = None
        self.tree = root
        self.btn_stop.setEnabled(False)
        self.progress.setRange(0, BAR_STEPS)
        self.progress.setValue(BAR_STEPS)

        p = self.last_progress or ScanProgress()
        self.summary.setText(f"{root.path}: {format_bytes(root.size)} in {p.total_dirs} folders")
        self.statusBar().showMessage("Scan finished.")
        self.refresh_view()

    # ---------- Drill-down
    def refresh_view(self):
        if self.tree is None:
            return
        if not is_valid(self.tree, self.index_path):
            self.index_path = ()
        node = resolve(self.tree, self.index_path)
        self.crumb.setText("  ›  ".join(breadcrumb(self.tree, self.index_path)))
        self.btn_up.setEnabled(bool(self.index_path))

        self._rows = sorted_children(node)[:MAX_ROWS]
        self.table.setUpdatesEnabled(False)
        self.table.setRowCount(0)
        if not self._rows:
            self.statusBar().showMessage("Empty.")
        for r, child in enumerate(self._rows):
            self.table.insertRow(r)
            pct = percent_of(child.size, node.size)
            name = child.name + (os.sep if child.is_dir else "")
            it = QTableWidgetItem(name)
            it.setToolTip(child.path)
            self.table.setItem(r, 0, it)
            size_it = QTableWidgetItem(format_bytes(child.size))
            size_it.setTextAlignment(Qt.AlignRight | Qt.AlignVCenter)
            self.table.setItem(r, 1, size_it)
            pct_it = QTableWidgetItem(f"{pct:.2f}%")
            pct_it.setTextAlignment(Qt.AlignRight | Qt.AlignVCenter)
            self.table.setItem(r, 2, pct_it)
            bar = QProgressBar()
            bar.setRange(0, BAR_STEPS)
            bar.setValue(int(pct * BAR_STEPS / 100.0))
            bar.setTextVisible(False)
            bar.setFixedHeight(8)
            self.table.setCellWidget(r, 3, bar)
        self.table.setUpdatesEnabled(True)

    def on_row_double(self, row: int, _col: int):
        if row < 0 or row >= len(self._rows):
            return
        child = self._rows[row]
        if not child.is_dir or not child.children:
            return
        self.index_path = child_path(self.index_path, row)
        self.refresh_view()

    def go_up(self):
        if not self.index_path:
            return
        self.index_path = parent_path(self.index_path)
        self.refresh_view()

    # ---------- Context actions
    def _copy_text(self, text: str):
        if not text:
            return
        QApplication.clipboard().setText(text)
        self.statusBar().showMessage("Copied to clipboard")

    def _reveal_path(self, path: str):
        if not reveal_in_file_manager(path):
            self.statusBar().showMessage("Could not open the file manager.")

    def _row_menu(self, pos):
        item = self.table.itemAt(pos)
        if not item or item.row() >= len(self._rows):
            return
        node = self._rows[item.row()]

        menu = QMenu(self.table)
        a_copy = menu.addAction("Copy Path")
        a_copy_name = menu.addAction("Copy Name")
        a_open = menu.addAction("Open in File Manager")
        menu.addSeparator()
        a_scan_this = menu.addAction("Scan This Folder")
        a_scan_this.setEnabled(node.is_dir)

        act = menu.exec(self.table.viewport().mapToGlobal(pos))
        if act == a_copy:
            self._copy_text(node.path)
        elif act == a_copy_name:
            self._copy_text(node.name)
        elif act == a_open:
            self._reveal_path(node.path)
        elif act == a_scan_this:
            self.start_scan(node.path)

    def closeEvent(self, ev):
        self.poll_timer.stop()
        if self.handle is not None:
            self.handle.close()
            self.handle = None
        super().closeEvent(ev)


def run(argv: Optional[List[str]] = None):
    argv = list(sys.argv if argv is None else argv)
    parser = argparse.ArgumentParser(prog="diskviz", description="Disk usage browser.")
    parser.add_argument("path", nargs="?", help="folder to scan on startup")
    parser.add_argument("--log-level", default=None, help="debug, info, warning, error or off")
    args, qt_args = parser.parse_known_args(argv[1:])

    configure_logging(args.log_level)
    config = ScanConfig.from_env()
    pool = make_worker_pool(config.workers)
    logger.info("worker pool: %d threads, tree depth %s", config.workers, config.tree_depth)

    app = QApplication([argv[0]] + qt_args)
    app.setApplicationName(APP_NAME)
    app.setStyleSheet(DARK_QSS)
    w = MainWindow(ScanCoordinator(pool, config), config)
    w.show()
    if args.path:
        w.start_scan(args.path)
    rc = app.exec()
    pool.shutdown(wait=False, cancel_futures=True)
    sys.exit(rc)
