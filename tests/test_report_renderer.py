"""Tests for the Pillow report renderer."""

import pytest
from datetime import date
from io import BytesIO

from PIL import Image

from alokasi.config import ReportSettings
from alokasi.services.image import ReportImageRenderer, ReportRenderError
from alokasi.session import BudgetSession


TODAY = date(2025, 1, 10)


@pytest.fixture
def small_renderer():
    return ReportImageRenderer(ReportSettings(width=360, height=640, jpeg_quality=80))


def populated_session(rows: int = 3) -> BudgetSession:
    session = BudgetSession(today=TODAY)
    session.set_income(5_000_000)
    for index in range(rows):
        row = session.add_transaction()
        session.update_transaction(row.id, "description", f"bayar listrik bulan {index}")
        session.update_transaction(row.id, "expense", 100_000)
    return session


class TestReportImageRenderer:
    """Tests for ReportImageRenderer."""

    def test_default_size_is_portrait_hd(self):
        """Test the default canvas is 1080x1920."""
        assert ReportImageRenderer().size == (1080, 1920)

    def test_renders_jpeg(self):
        """Test output decodes as a JPEG of the configured size."""
        image_bytes = ReportImageRenderer().render(populated_session().snapshot())
        image = Image.open(BytesIO(image_bytes))
        assert image.format == "JPEG"
        assert image.size == (1080, 1920)

    def test_scaled_canvas(self, small_renderer):
        """Test other widths render at their own size."""
        image_bytes = small_renderer.render(populated_session().snapshot())
        assert Image.open(BytesIO(image_bytes)).size == (360, 640)

    def test_head_row_only(self, small_renderer):
        """Test an empty ledger still renders."""
        image_bytes = small_renderer.render(BudgetSession(today=TODAY).snapshot())
        assert image_bytes[:2] == b"\xff\xd8"

    def test_overflowing_ledger(self, small_renderer):
        """Test more rows than fit still renders."""
        capacity = small_renderer.max_table_rows()
        assert capacity > 0
        session = populated_session(rows=capacity + 10)
        image_bytes = small_renderer.render(session.snapshot())
        assert Image.open(BytesIO(image_bytes)).size == (360, 640)

    def test_missing_category_and_long_text(self, small_renderer):
        """Test dangling categories and long descriptions render."""
        session = BudgetSession(today=TODAY)
        category = session.add_category("Kucing", "#111111")
        row = session.add_transaction()
        session.update_transaction(row.id, "description", "x" * 300)
        session.update_transaction(row.id, "categoryId", category.id)
        session.update_transaction(row.id, "expense", 10)
        session.remove_category(category.id)
        assert small_renderer.render(session.snapshot())[:2] == b"\xff\xd8"

    def test_missing_font_falls_back(self, tmp_path):
        """Test an unreadable font path falls back to the default font."""
        with pytest.warns(UserWarning):
            settings = ReportSettings(width=360, height=640, font_path=str(tmp_path / "nope.ttf"))
        renderer = ReportImageRenderer(settings)
        assert renderer.render(populated_session().snapshot())[:2] == b"\xff\xd8"

    def test_failure_wrapped(self, small_renderer, monkeypatch):
        """Test drawing errors surface as ReportRenderError."""
        def broken(state):
            raise RuntimeError("no canvas")

        monkeypatch.setattr(small_renderer, "_draw", broken)
        with pytest.raises(ReportRenderError):
            small_renderer.render(populated_session().snapshot())


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
