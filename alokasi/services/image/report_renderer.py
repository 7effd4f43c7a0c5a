"""
Report Image Renderer using Pillow

Draws the monthly report as a portrait (9:16) JPEG suitable for
downloading or attaching to a share.

Layout, top to bottom:
1. Header band: title, period label, remaining balance
2. Summary boxes: total income, total expense
3. Table: No, Keterangan, Kategori, Masuk, Keluar, Sisa (running balance)
4. Footer band

CRITICAL: The renderer only ever sees a BudgetState snapshot. It never
reads the live session, so an edit made while an export is running
cannot leak into that export.
"""

from io import BytesIO
from typing import Optional

from PIL import Image, ImageDraw, ImageFont

from alokasi.categories.registry import CategoryRegistry
from alokasi.config import ReportSettings
from alokasi.formatting import format_currency, period_label
from alokasi.ledger.ledger import TransactionLedger
from alokasi.models.budget import BudgetState


# Palette
PRIMARY = "#0284c7"
PRIMARY_LIGHT = "#e0f2fe"
SUCCESS = "#16a34a"
DANGER = "#dc2626"
TEXT = "#334155"
MUTED = "#94a3b8"
ROW_ALT = "#f8fafc"
BORDER = "#e2e8f0"
FOOTER = "#1e293b"
WHITE = "#ffffff"

# Sizes at the reference width of 1080px; scaled for other widths
BASE_WIDTH = 1080
HEADER_HEIGHT = 200
SUMMARY_HEIGHT = 180
TABLE_HEAD_HEIGHT = 72
ROW_HEIGHT = 64
FOOTER_HEIGHT = 170
MARGIN = 48

# Column x positions as fractions of the content width
# (No, Keterangan, Kategori) are left aligned at their start,
# (Masuk, Keluar, Sisa) are right aligned at their end.
COLUMNS = {
    "no": (0.00, 0.07),
    "description": (0.07, 0.34),
    "category": (0.34, 0.58),
    "income": (0.58, 0.72),
    "expense": (0.72, 0.86),
    "balance": (0.86, 1.00),
}


class ReportRenderError(Exception):
    """The report image could not be produced."""
    pass


class ReportImageRenderer:
    """
    Renders a BudgetState into JPEG bytes.

    Stateless apart from settings and loaded fonts; one instance can
    render any number of snapshots.
    """

    def __init__(
        self,
        settings: Optional[ReportSettings] = None,
        currency_prefix: str = "Rp",
    ):
        self._settings = settings or ReportSettings()
        self._currency_prefix = currency_prefix
        self._scale = self._settings.width / BASE_WIDTH
        self._fonts: dict[int, ImageFont.ImageFont] = {}

    @property
    def size(self) -> tuple[int, int]:
        return self._settings.width, self._settings.height

    def _px(self, value: float) -> int:
        return max(1, int(round(value * self._scale)))

    def _font(self, size: int) -> ImageFont.ImageFont:
        size = self._px(size)
        if size not in self._fonts:
            if self._settings.font_path:
                try:
                    self._fonts[size] = ImageFont.truetype(self._settings.font_path, size)
                except OSError:
                    self._fonts[size] = ImageFont.load_default(size=size)
            else:
                self._fonts[size] = ImageFont.load_default(size=size)
        return self._fonts[size]

    def _fit(self, draw: ImageDraw.ImageDraw, text: str, font, max_width: int) -> str:
        """Shorten text with an ellipsis until it fits max_width."""
        if draw.textlength(text, font=font) <= max_width:
            return text
        while text and draw.textlength(text + "...", font=font) > max_width:
            text = text[:-1]
        return text + "..."

    def max_table_rows(self) -> int:
        """How many ledger rows fit in the table area."""
        available = (
            self._settings.height
            - self._px(HEADER_HEIGHT)
            - self._px(SUMMARY_HEIGHT)
            - self._px(TABLE_HEAD_HEIGHT)
            - self._px(FOOTER_HEIGHT)
            - 2 * self._px(MARGIN)
        )
        return max(0, available // self._px(ROW_HEIGHT))

    def render(self, state: BudgetState) -> bytes:
        """
        Draw the report and encode it as JPEG.

        Raises:
            ReportRenderError: If drawing or encoding fails
        """
        try:
            image = self._draw(state)
            buffer = BytesIO()
            image.save(
                buffer,
                format="JPEG",
                quality=self._settings.jpeg_quality,
                optimize=True,
            )
            return buffer.getvalue()
        except ReportRenderError:
            raise
        except Exception as e:
            raise ReportRenderError(f"Failed to render report: {e}")

    def _draw(self, state: BudgetState) -> Image.Image:
        width, height = self.size
        image = Image.new("RGB", (width, height), WHITE)
        draw = ImageDraw.Draw(image)

        registry = CategoryRegistry(state.categories)
        ledger = TransactionLedger(registry, transactions=state.transactions)

        y = self._draw_header(draw, state, ledger.final_balance())
        y = self._draw_summary(draw, y, ledger.total_income(), ledger.total_expense())
        self._draw_table(draw, y, registry, ledger)
        self._draw_footer(draw)
        return image

    def _draw_header(self, draw, state: BudgetState, balance: int) -> int:
        width = self._settings.width
        margin = self._px(MARGIN)
        bottom = self._px(HEADER_HEIGHT)

        draw.rectangle([0, 0, width, bottom], fill=PRIMARY)
        draw.text((margin, self._px(40)), "Laporan Keuangan", font=self._font(56), fill=WHITE)
        draw.text((margin, self._px(118)), period_label(state.period), font=self._font(34), fill=PRIMARY_LIGHT)

        label_font = self._font(24)
        value_font = self._font(52)
        label = "SISA SALDO"
        value = format_currency(balance)
        draw.text(
            (width - margin - draw.textlength(label, font=label_font), self._px(48)),
            label, font=label_font, fill=PRIMARY_LIGHT,
        )
        draw.text(
            (width - margin - draw.textlength(value, font=value_font), self._px(88)),
            value, font=value_font, fill=WHITE,
        )
        return bottom

    def _draw_summary(self, draw, top: int, total_income: int, total_expense: int) -> int:
        width = self._settings.width
        margin = self._px(MARGIN)
        gap = self._px(32)
        box_top = top + self._px(28)
        box_bottom = top + self._px(SUMMARY_HEIGHT) - self._px(28)
        box_width = (width - 2 * margin - gap) // 2

        boxes = [
            ("TOTAL PEMASUKAN", total_income, SUCCESS),
            ("TOTAL PENGELUARAN", total_expense, DANGER),
        ]
        for index, (label, amount, color) in enumerate(boxes):
            left = margin + index * (box_width + gap)
            draw.rounded_rectangle(
                [left, box_top, left + box_width, box_bottom],
                radius=self._px(20), fill=WHITE, outline=BORDER, width=self._px(2),
            )
            draw.text((left + self._px(24), box_top + self._px(18)), label,
                      font=self._font(24), fill=MUTED)
            draw.text((left + self._px(24), box_top + self._px(58)),
                      f"{self._currency_prefix} {format_currency(amount)}",
                      font=self._font(40), fill=color)
        return top + self._px(SUMMARY_HEIGHT)

    def _column(self, name: str) -> tuple[int, int]:
        margin = self._px(MARGIN)
        content = self._settings.width - 2 * margin
        start, end = COLUMNS[name]
        return margin + int(start * content), margin + int(end * content)

    def _draw_table(self, draw, top: int, registry: CategoryRegistry, ledger: TransactionLedger) -> None:
        margin = self._px(MARGIN)
        width = self._settings.width
        pad = self._px(12)
        head_font = self._font(24)
        row_font = self._font(26)

        # Header row
        head_bottom = top + self._px(TABLE_HEAD_HEIGHT)
        draw.rectangle([margin, top, width - margin, head_bottom], fill=ROW_ALT)
        headings = [
            ("no", "NO", False),
            ("description", "KETERANGAN", False),
            ("category", "KATEGORI", False),
            ("income", "MASUK", True),
            ("expense", "KELUAR", True),
            ("balance", "SISA", True),
        ]
        text_y = top + (self._px(TABLE_HEAD_HEIGHT) - self._px(24)) // 2
        for column, label, right in headings:
            self._cell(draw, column, label, text_y, head_font, MUTED, right, pad)

        rows = ledger.to_list()
        balances = ledger.running_balances()
        capacity = self.max_table_rows()
        if len(rows) > capacity:
            # Keep one line for the "more rows" note
            shown = max(0, capacity - 1)
        else:
            shown = len(rows)

        row_height = self._px(ROW_HEIGHT)
        y = head_bottom
        for index in range(shown):
            row = rows[index]
            if index % 2 == 1:
                draw.rectangle([margin, y, width - margin, y + row_height], fill=ROW_ALT)
            draw.line([margin, y + row_height, width - margin, y + row_height], fill=BORDER, width=1)
            text_y = y + (row_height - self._px(26)) // 2

            category = registry.find_by_id(row.category_id)
            self._cell(draw, "no", str(index + 1), text_y, row_font, MUTED, False, pad)
            self._cell(draw, "description", row.description or "-", text_y, row_font, TEXT, False, pad)
            if category is not None:
                dot = self._px(14)
                left, _ = self._column("category")
                dot_y = y + (row_height - dot) // 2
                draw.ellipse([left + pad, dot_y, left + pad + dot, dot_y + dot], fill=category.color)
                self._cell(draw, "category", category.name, text_y, row_font, category.color,
                           False, pad, indent=dot + self._px(10))
            else:
                self._cell(draw, "category", "-", text_y, row_font, MUTED, False, pad)
            self._cell(draw, "income", format_currency(row.income) if row.income > 0 else "-",
                       text_y, row_font, SUCCESS, True, pad)
            self._cell(draw, "expense", format_currency(row.expense) if row.expense > 0 else "-",
                       text_y, row_font, DANGER, True, pad)
            self._cell(draw, "balance", format_currency(balances[index]),
                       text_y, row_font, TEXT, True, pad)
            y += row_height

        hidden = len(rows) - shown
        if hidden > 0:
            note = f"+{hidden} baris lainnya"
            draw.text((margin + pad, y + (row_height - self._px(26)) // 2), note,
                      font=row_font, fill=MUTED)

    def _cell(self, draw, column: str, text: str, y: int, font, fill: str,
              right: bool, pad: int, indent: int = 0) -> None:
        left, right_edge = self._column(column)
        max_width = right_edge - left - 2 * pad - indent
        text = self._fit(draw, text, font, max_width)
        if right:
            x = right_edge - pad - draw.textlength(text, font=font)
        else:
            x = left + pad + indent
        draw.text((x, y), text, font=font, fill=fill)

    def _draw_footer(self, draw) -> None:
        width, height = self.size
        top = height - self._px(FOOTER_HEIGHT)
        draw.rectangle([0, top, width, height], fill=FOOTER)

        title_font = self._font(34)
        note_font = self._font(22)
        title = "Alokasi Pendapatan"
        note = "Laporan ini dibuat secara otomatis."
        draw.text(((width - draw.textlength(title, font=title_font)) / 2, top + self._px(44)),
                  title, font=title_font, fill=WHITE)
        draw.text(((width - draw.textlength(note, font=note_font)) / 2, top + self._px(100)),
                  note, font=note_font, fill=MUTED)
