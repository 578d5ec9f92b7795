from PySide6.QtWidgets import QTableView


class TableView(QTableView):
    """Read-only, single-row-selection list used by the document pages."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setSortingEnabled(True)
        self.setAlternatingRowColors(True)
        self.setEditTriggers(QTableView.NoEditTriggers)
        self.setSelectionBehavior(QTableView.SelectRows)
        self.setSelectionMode(QTableView.SingleSelection)
        self.verticalHeader().setVisible(False)
        self.horizontalHeader().setStretchLastSection(True)

    def selected_source_row(self) -> int | None:
        """Row of the current selection in the source model (maps through a proxy)."""
        sel = self.selectionModel()
        idxs = sel.selectedRows() if sel else []
        if not idxs:
            return None
        idx = idxs[0]
        model = self.model()
        if hasattr(model, "mapToSource"):
            idx = model.mapToSource(idx)
        return idx.row()
