"""
Main Orchestrator for Alokasi Pendapatan

This module ties together the session and the boundary services and
defines the end-to-end flows for:
1. Report Export (snapshot → render → JPEG bytes + filename)
2. Report Share (snapshot → render → share sink, or → wa.me link)

DESIGN DECISION: The orchestrator enforces the boundaries:
- The snapshot is taken before the first await, so edits made while a
  flow is running never reach its output
- Flows never mutate the session
- Every outcome is audited under one correlation id

Collaborator failures are turned into result objects. The one error a
caller must handle is a missing share recipient.
"""

import asyncio
from typing import Optional
from uuid import UUID

from alokasi.audit import AuditLogger, create_correlation_id
from alokasi.config import Settings, get_settings
from alokasi.models.audit import AuditEventBuilder
from alokasi.models.budget import BudgetState
from alokasi.models.report import ExportResult, ShareMethod, ShareResult
from alokasi.services.image import ReportImageRenderer, ReportRenderError
from alokasi.services.share import (
    MissingRecipientError,
    ShareCancelledError,
    ShareError,
    ShareSinkInterface,
    build_share_message,
    build_whatsapp_link,
)
from alokasi.services.storage import JsonFileStateStorage
from alokasi.session import BudgetSession


class ReportExportFlow:
    """
    Orchestrates the report export.

    Flow:
    1. Snapshot → Capture the session state
    2. Render → Draw the JPEG in a worker thread
    3. Result → Bytes plus download filename, or a failure message
    """

    def __init__(
        self,
        renderer: Optional[ReportImageRenderer] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._renderer = renderer or ReportImageRenderer()
        self._audit_logger = audit_logger

    async def export(
        self,
        session: BudgetSession,
        correlation_id: Optional[UUID] = None,
    ) -> ExportResult:
        """
        Render the current report.

        Returns:
            ExportResult; success is False when rendering failed
        """
        # Everything the render needs, captured before yielding
        return await self.export_snapshot(
            snapshot=session.snapshot(),
            filename=session.report_filename(),
            audit_logger=self._audit_logger or session.audit_logger,
            correlation_id=correlation_id,
        )

    async def export_snapshot(
        self,
        snapshot: BudgetState,
        filename: str,
        audit_logger: AuditLogger,
        correlation_id: Optional[UUID] = None,
    ) -> ExportResult:
        """Render an already captured state."""
        correlation_id = correlation_id or create_correlation_id()

        try:
            image_bytes = await asyncio.to_thread(self._renderer.render, snapshot)
        except ReportRenderError as e:
            audit_logger.log(AuditEventBuilder.report_export_failed(
                error_message=str(e),
                correlation_id=correlation_id,
            ))
            return ExportResult(
                success=False,
                error_message="Gagal membuat gambar laporan. Silakan coba lagi.",
            )

        result = ExportResult(
            success=True,
            filename=filename,
            image_bytes=image_bytes,
        )
        audit_logger.log(AuditEventBuilder.report_exported(
            export_id=result.export_id,
            filename=filename,
            size_bytes=result.size_bytes,
            correlation_id=correlation_id,
        ))
        return result


class ReportShareFlow:
    """
    Orchestrates sharing the report to WhatsApp.

    Flow:
    1. Check → A recipient number is required (raise if missing)
    2. Snapshot → Capture state, summary and message text
    3. Native → Render the image and hand it to the share sink
    4. Fallback → Build the wa.me text link when there is no sink, the
       sink cannot take files, rendering fails, or the sink refuses
    """

    def __init__(
        self,
        export_flow: Optional[ReportExportFlow] = None,
        share_sink: Optional[ShareSinkInterface] = None,
        link_base: str = "https://wa.me",
        currency_prefix: str = "Rp",
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._export_flow = export_flow or ReportExportFlow(audit_logger=audit_logger)
        self._share_sink = share_sink
        self._link_base = link_base
        self._currency_prefix = currency_prefix
        self._audit_logger = audit_logger

    async def share(
        self,
        session: BudgetSession,
        correlation_id: Optional[UUID] = None,
    ) -> ShareResult:
        """
        Share the current report.

        Returns:
            ShareResult describing which route was taken

        Raises:
            MissingRecipientError: If no WhatsApp number is configured
        """
        correlation_id = correlation_id or create_correlation_id()
        audit_logger = self._audit_logger or session.audit_logger

        number = session.whatsapp_number
        if not number:
            audit_logger.log(AuditEventBuilder.share_blocked(
                reason="missing_recipient",
                correlation_id=correlation_id,
            ))
            raise MissingRecipientError(
                "Nomor WhatsApp belum diisi. Atur nomor tujuan di Pengaturan."
            )

        snapshot = session.snapshot()
        filename = session.report_filename()
        summary = session.summary_text()
        title = summary.title
        text = build_share_message(summary, snapshot, self._currency_prefix)

        fallback_reason = await self._try_native_share(
            snapshot, filename, title, text, correlation_id, audit_logger
        )
        if fallback_reason is None:
            audit_logger.log(AuditEventBuilder.share_completed(
                method=ShareMethod.NATIVE.value,
                image_attached=True,
                correlation_id=correlation_id,
            ))
            return ShareResult(
                method=ShareMethod.NATIVE,
                title=title,
                text=text,
                image_attached=True,
            )

        audit_logger.log(AuditEventBuilder.share_fallback_used(
            reason=fallback_reason,
            correlation_id=correlation_id,
        ))
        link_url = build_whatsapp_link(self._link_base, number, text)
        audit_logger.log(AuditEventBuilder.share_completed(
            method=ShareMethod.LINK.value,
            image_attached=False,
            correlation_id=correlation_id,
        ))
        return ShareResult(
            method=ShareMethod.LINK,
            title=title,
            text=text,
            link_url=link_url,
            fallback_reason=fallback_reason,
        )

    async def _try_native_share(
        self,
        snapshot: BudgetState,
        filename: str,
        title: str,
        text: str,
        correlation_id: UUID,
        audit_logger: AuditLogger,
    ) -> Optional[str]:
        """
        Attempt the share sheet route.

        Returns:
            None on success, otherwise the reason for falling back
        """
        if self._share_sink is None:
            return "no_share_sink"
        if not self._share_sink.can_share_files():
            return "files_not_supported"

        export = await self._export_flow.export_snapshot(
            snapshot=snapshot,
            filename=filename,
            audit_logger=audit_logger,
            correlation_id=correlation_id,
        )
        if not export.success:
            return "render_failed"

        try:
            await self._share_sink.share(
                title=title,
                text=text,
                image=export.image_bytes,
                filename=export.filename,
            )
        except ShareCancelledError:
            return "cancelled"
        except ShareError as e:
            audit_logger.log_external_service_error(
                service="share_sink",
                error_message=str(e),
                correlation_id=correlation_id,
            )
            return "share_failed"
        except Exception as e:
            audit_logger.log_external_service_error(
                service="share_sink",
                error_message=f"Unexpected {type(e).__name__}: {e}",
                correlation_id=correlation_id,
            )
            return "share_failed"
        return None


def create_app_components(
    use_storage: bool = True,
    share_sink: Optional[ShareSinkInterface] = None,
    settings: Optional[Settings] = None,
) -> tuple[BudgetSession, ReportExportFlow, ReportShareFlow]:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to load from and write to the JSON state
                    file. Set to False for an in-memory session.
        share_sink: Native share target, if the platform has one
        settings: Settings to use; the cached settings if None

    Returns:
        (session, export_flow, share_flow)
    """
    settings = settings or get_settings()
    audit_logger = AuditLogger()
    currency_prefix = settings.app.currency_prefix

    if use_storage:
        storage = JsonFileStateStorage(settings.storage.state_path)
        session = BudgetSession.open(
            storage,
            storage_key=settings.storage.state_key,
            default_savings_percent=settings.app.default_savings_percent,
            audit_logger=audit_logger,
            currency_prefix=currency_prefix,
        )
    else:
        session = BudgetSession.load(
            None,
            default_savings_percent=settings.app.default_savings_percent,
            audit_logger=audit_logger,
            currency_prefix=currency_prefix,
        )

    export_flow = ReportExportFlow(
        renderer=ReportImageRenderer(settings.report, currency_prefix=currency_prefix),
        audit_logger=audit_logger,
    )

    share_flow = ReportShareFlow(
        export_flow=export_flow,
        share_sink=share_sink,
        link_base=settings.share.link_base,
        currency_prefix=currency_prefix,
        audit_logger=audit_logger,
    )

    return session, export_flow, share_flow
