"""
Adapter: Family tree renderer.

Implements TreeRenderer port. Both formats draw the same radial layout:
connections first, then gender-coloured node markers with a black
outline and the fowl's name underneath.

- PNG: Pillow, 1200x800 canvas.
- PDF: reportlab, A4. Page 1 holds the drawing; the node table follows
  and paginates on its own.
"""

import io
import logging

from PIL import Image, ImageDraw, ImageFont
from reportlab.graphics.shapes import Circle, Drawing, Line, String
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import (
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from fowlregistry.domain.breeding.entities import FamilyTree
from fowlregistry.domain.breeding.family_tree import (
    DEFAULT_LEVEL_RADIUS,
    drawable_connections,
    layout_tree,
    node_color,
)
from fowlregistry.domain.breeding.ports import TreeRenderer

logger = logging.getLogger(__name__)

PNG_SIZE = (1200, 800)
NODE_RADIUS = 20
CANVAS_MARGIN = 40


def fit_scale(tree: FamilyTree, level_radius: float, width: float, height: float) -> float:
    """Scale factor that keeps the outermost ring inside width x height."""
    extent = tree.generations * level_radius + NODE_RADIUS
    room = min(width, height) / 2 - CANVAS_MARGIN
    if extent <= 0 or room <= 0:
        return 1.0
    return min(1.0, room / extent)


class PillowReportlabTreeRenderer(TreeRenderer):
    def __init__(self, level_radius: float = DEFAULT_LEVEL_RADIUS) -> None:
        self._level_radius = level_radius

    def render_png(self, tree: FamilyTree) -> bytes:
        width, height = PNG_SIZE
        scale = fit_scale(tree, self._level_radius, width, height)
        positions = layout_tree(tree, width / 2, height / 2, self._level_radius * scale)

        image = Image.new("RGB", PNG_SIZE, "white")
        draw = ImageDraw.Draw(image)
        font = ImageFont.load_default()

        for _connection, start, end in drawable_connections(tree, positions):
            draw.line([(start.x, start.y), (end.x, end.y)], fill="gray", width=2)

        for node in tree.nodes:
            pos = positions[node.id]
            draw.ellipse(
                [
                    (pos.x - NODE_RADIUS, pos.y - NODE_RADIUS),
                    (pos.x + NODE_RADIUS, pos.y + NODE_RADIUS),
                ],
                fill=node_color(node.gender),
                outline="black",
                width=2,
            )
            label = node.name or node.id
            label_width = draw.textlength(label, font=font)
            draw.text(
                (pos.x - label_width / 2, pos.y + NODE_RADIUS + 4),
                label,
                fill="black",
                font=font,
            )

        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        logger.debug("Rendered PNG tree root=%s", tree.root_id)
        return buffer.getvalue()

    def render_pdf(self, tree: FamilyTree) -> bytes:
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=54,
            leftMargin=54,
            topMargin=54,
            bottomMargin=54,
            title=f"Family tree {tree.root_id}",
        )
        styles = getSampleStyleSheet()

        story = [
            Paragraph(f"Family tree of {self._root_label(tree)}", styles["Title"]),
            Spacer(1, 12),
            self._drawing(tree, doc.width, doc.height - 1.5 * inch),
            PageBreak(),
            Paragraph("Members", styles["Heading2"]),
            Spacer(1, 8),
            self._node_table(tree),
        ]
        doc.build(story)
        logger.debug("Rendered PDF tree root=%s", tree.root_id)
        return buffer.getvalue()

    @staticmethod
    def _root_label(tree: FamilyTree) -> str:
        root = tree.node(tree.root_id)
        return root.name if root is not None and root.name else tree.root_id

    def _drawing(self, tree: FamilyTree, width: float, height: float) -> Drawing:
        scale = fit_scale(tree, self._level_radius, width, height)
        positions = layout_tree(tree, width / 2, height / 2, self._level_radius * scale)
        drawing = Drawing(width, height)

        # reportlab's y axis points up
        for _connection, start, end in drawable_connections(tree, positions):
            drawing.add(
                Line(
                    start.x,
                    height - start.y,
                    end.x,
                    height - end.y,
                    strokeColor=colors.gray,
                    strokeWidth=1.5,
                )
            )
        for node in tree.nodes:
            pos = positions[node.id]
            drawing.add(
                Circle(
                    pos.x,
                    height - pos.y,
                    NODE_RADIUS * 0.6,
                    fillColor=colors.toColor(node_color(node.gender)),
                    strokeColor=colors.black,
                    strokeWidth=1,
                )
            )
            drawing.add(
                String(
                    pos.x,
                    height - pos.y - NODE_RADIUS,
                    node.name or node.id,
                    fontSize=7,
                    textAnchor="middle",
                )
            )
        return drawing

    @staticmethod
    def _node_table(tree: FamilyTree) -> Table:
        rows = [["Name", "Breed", "Gender", "Generation", "Birth date"]]
        for node in sorted(tree.nodes, key=lambda n: (n.generation, n.position)):
            rows.append(
                [
                    node.name or node.id,
                    node.breed,
                    node.gender,
                    str(node.generation),
                    node.birth_date,
                ]
            )
        table = Table(rows, repeatRows=1)
        table.setStyle(
            TableStyle(
                [
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
                    ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
                    ("ALIGN", (0, 0), (-1, -1), "LEFT"),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ]
            )
        )
        return table
