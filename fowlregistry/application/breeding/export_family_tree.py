"""
Use case: Export a family tree as a PNG image or a PDF document.

Input: fowl id, format ("png" | "pdf")
Output: TreeExport (bytes, media type, suggested file name)
Side effects: Buffers a tree_exported analytics event.
Failure cases: UnsupportedExportFormatError, PedigreeRootNotFoundError.
"""

import logging

from fowlregistry.application.analytics import AnalyticsRecorder
from fowlregistry.application.breeding.dtos import TreeExport
from fowlregistry.domain.breeding.errors import UnsupportedExportFormatError
from fowlregistry.domain.breeding.family_tree import FamilyTreeBuilder
from fowlregistry.domain.breeding.ports import TreeRenderer

logger = logging.getLogger(__name__)

MEDIA_TYPES = {
    "png": "image/png",
    "pdf": "application/pdf",
}


class ExportFamilyTreeUseCase:
    def __init__(
        self,
        builder: FamilyTreeBuilder,
        renderer: TreeRenderer,
        analytics: AnalyticsRecorder,
    ) -> None:
        self._builder = builder
        self._renderer = renderer
        self._analytics = analytics

    def execute(self, fowl_id: str, export_format: str) -> TreeExport:
        fmt = (export_format or "").lower()
        if fmt not in MEDIA_TYPES:
            raise UnsupportedExportFormatError(export_format)

        tree = self._builder.build(fowl_id)
        if fmt == "png":
            content = self._renderer.render_png(tree)
        else:
            content = self._renderer.render_pdf(tree)

        logger.info(
            "Exported family tree fowl=%s format=%s bytes=%d",
            fowl_id,
            fmt,
            len(content),
        )
        self._analytics.record(
            "tree_exported",
            {"fowlId": fowl_id, "format": fmt, "nodeCount": len(tree.nodes)},
        )
        return TreeExport(
            content=content,
            media_type=MEDIA_TYPES[fmt],
            filename=f"family_tree_{fowl_id}.{fmt}",
        )
