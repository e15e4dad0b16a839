"""Summary Dialog

Per-person production value across the selected projects. A checkbox list
chooses which projects are counted; the tree shows one row per person with
collapsible (project / phase) groups and their path detail rows.

While visible the dialog owns an Escape binding that closes it, shadowing
any Escape binding of the window underneath until the dialog hides.
"""

from __future__ import annotations

from typing import Dict, Optional, Sequence

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QCheckBox,
    QDialog,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QPushButton,
    QTreeWidget,
    QTreeWidgetItem,
    QVBoxLayout,
    QWidget,
)

from domain.grouping import format_money, format_path
from domain.models import Project
from gui.services.shortcut_registry import ShortcutBinding, ShortcutRegistry
from gui.viewmodels.summary_viewmodel import SummaryViewModel

__all__ = ["SummaryDialog"]


class SummaryDialog(QDialog):
    def __init__(
        self,
        projects: Sequence[Project],
        registry: ShortcutRegistry,
        parent: Optional[QWidget] = None,
        *,
        viewmodel: SummaryViewModel | None = None,
    ):
        super().__init__(parent)
        self.setObjectName("SummaryDialog")
        self.setWindowTitle("Production value by person")
        self.resize(820, 560)
        self._vm = viewmodel or SummaryViewModel(projects)
        if viewmodel is not None:
            self._vm.set_projects(projects)
        self._escape = ShortcutBinding(registry, "Escape", lambda _e: self.close())
        self._checkboxes: Dict[str, QCheckBox] = {}

        layout = QVBoxLayout(self)
        filter_row = QHBoxLayout()
        filter_row.addWidget(QLabel("Projects counted:", self))
        self.select_all_btn = QPushButton("Select all", self)
        self.select_all_btn.setObjectName("summarySelectAll")
        self.select_all_btn.clicked.connect(self._on_select_all)  # type: ignore
        self.clear_btn = QPushButton("Clear", self)
        self.clear_btn.setObjectName("summaryClear")
        self.clear_btn.clicked.connect(self._on_clear)  # type: ignore
        filter_row.addStretch(1)
        filter_row.addWidget(self.select_all_btn)
        filter_row.addWidget(self.clear_btn)
        layout.addLayout(filter_row)

        self.project_box = QVBoxLayout()
        layout.addLayout(self.project_box)
        self.no_projects_label = QLabel("No projects", self)
        self.project_box.addWidget(self.no_projects_label)

        self.tree = QTreeWidget(self)
        self.tree.setObjectName("summaryTree")
        self.tree.setColumnCount(2)
        self.tree.setHeaderLabels(["Name / team", "Total"])
        self.tree.header().setSectionResizeMode(0, QHeaderView.ResizeMode.Stretch)
        layout.addWidget(self.tree, 1)

        self._listening = False
        self._listen()
        self._build_checkboxes()
        self.refresh()

    # Lifecycle ------------------------------------------------------
    def showEvent(self, event):  # noqa: N802 - Qt override
        if not self._listening:
            self._listen()
            self._on_selection_changed(self._vm.selection)
        if not self._escape.active:
            self._escape.start()
        super().showEvent(event)

    def hideEvent(self, event):  # noqa: N802 - Qt override
        if self._escape.active:
            self._escape.stop()
        super().hideEvent(event)

    def closeEvent(self, event):  # noqa: N802 - Qt override
        # Exclusions are ephemeral: reopening counts every project again.
        self._vm.close()
        if self._listening:
            # An injected view model can outlive this widget.
            self._vm.selection.remove_listener(self._on_selection_changed)
            self._listening = False
        super().closeEvent(event)

    def _listen(self) -> None:
        self._vm.selection.add_listener(self._on_selection_changed)
        self._listening = True

    # Rendering ------------------------------------------------------
    def _build_checkboxes(self) -> None:
        for cb in self._checkboxes.values():
            self.project_box.removeWidget(cb)
            cb.deleteLater()
        self._checkboxes.clear()
        choices = self._vm.project_choices()
        self.no_projects_label.setVisible(not choices)
        for choice in choices:
            cb = QCheckBox(choice.name, self)
            cb.setChecked(choice.included)
            cb.toggled.connect(lambda _checked, pid=choice.project_id: self._vm.toggle_project(pid))  # type: ignore
            self.project_box.addWidget(cb)
            self._checkboxes[choice.project_id] = cb

    def refresh(self) -> None:
        self.tree.clear()
        message = self._vm.empty_message()
        if message is not None:
            item = QTreeWidgetItem([message, ""])
            item.setFlags(Qt.ItemFlag.NoItemFlags)
            self.tree.addTopLevelItem(item)
            return
        for row in self._vm.rows():
            person_item = QTreeWidgetItem([row.person, format_money(row.total)])
            person_item.setTextAlignment(1, Qt.AlignmentFlag.AlignRight)
            for group in row.groups:
                group_item = QTreeWidgetItem(
                    [f"{group.project_name} / {group.phase_name}", format_money(group.total)]
                )
                group_item.setTextAlignment(1, Qt.AlignmentFlag.AlignRight)
                for detail in group.details:
                    detail_item = QTreeWidgetItem(
                        [format_path(detail.path), format_money(detail.amount)]
                    )
                    detail_item.setTextAlignment(1, Qt.AlignmentFlag.AlignRight)
                    group_item.addChild(detail_item)
                person_item.addChild(group_item)
            self.tree.addTopLevelItem(person_item)
            person_item.setExpanded(True)

    def _on_selection_changed(self, _selection) -> None:
        for pid, cb in self._checkboxes.items():
            included = self._vm.selection.is_included(pid)
            if cb.isChecked() != included:
                cb.blockSignals(True)
                cb.setChecked(included)
                cb.blockSignals(False)
        self.refresh()

    def _on_select_all(self) -> None:
        self._vm.select_all()

    def _on_clear(self) -> None:
        self._vm.deselect_all()

    def viewmodel(self) -> SummaryViewModel:
        return self._vm
