import io
import logging
import random
import string
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from pypdf import PdfReader, PdfWriter
from reportlab.pdfgen import canvas

from classes.certificate_layout import DEFAULT_LAYOUT, layout_certificate
from classes.exceptions import RecordPersistFailed, StorageUploadFailed, TemplateUnavailable
from classes.validators import validate_required

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"


@dataclass(frozen=True)
class CertificateRequest:
    user_id: int
    course_id: int
    name_text: str
    completion_line: str
    completion_date: str

    def __post_init__(self):
        validate_required("name_text", self.name_text)
        validate_required("completion_line", self.completion_line)
        validate_required("completion_date", self.completion_date)


@dataclass(frozen=True)
class CertificateArtifact:
    id: Optional[int]
    user_id: int
    course_id: int
    certificate_url: str
    certificate_number: str
    storage_path: str
    issued_at: datetime
    completed_at: datetime
    document: bytes

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "course_id": self.course_id,
            "certificate_url": self.certificate_url,
            "certificate_number": self.certificate_number,
            "issued_at": self.issued_at.isoformat(),
            "completed_at": self.completed_at.isoformat(),
        }


def generate_certificate_number():
    """Eight random digits for display. Not guaranteed unique."""
    return "".join(random.choices(string.digits, k=8))


def certificate_file_name(course_id, user_id, issued_at):
    # naive timestamps are UTC
    if issued_at.tzinfo is None:
        issued_at = issued_at.replace(tzinfo=timezone.utc)
    epoch_ms = int(issued_at.astimezone(timezone.utc).timestamp() * 1000)
    return f"cert_{course_id}_{user_id}_{epoch_ms}.pdf"


def render_certificate(template_bytes, request, layout=DEFAULT_LAYOUT):
    """Draw the request's text onto a copy of the template's first page."""
    try:
        reader = PdfReader(io.BytesIO(template_bytes))
        pages = reader.pages
        if len(pages) == 0:
            raise ValueError("template has no pages")
        page = pages[0]
    except Exception as e:
        raise TemplateUnavailable(f"Certificate template could not be read: {e}") from e

    box = page.mediabox
    page_width = float(box.width)
    page_height = float(box.height)

    overlay_buffer = io.BytesIO()
    overlay = canvas.Canvas(overlay_buffer, pagesize=(page_width, page_height))
    overlay.setFillColorRGB(0, 0, 0)
    for placed in layout_certificate(request, page_width, page_height, layout):
        overlay.setFont(placed.font_name, placed.font_size)
        overlay.drawString(placed.x, placed.y, placed.text)
    overlay.showPage()
    overlay.save()

    overlay_page = PdfReader(io.BytesIO(overlay_buffer.getvalue())).pages[0]

    # merge only once the page belongs to the writer
    writer = PdfWriter()
    page = writer.add_page(page)
    page.merge_translated_page(overlay_page, float(box.left), float(box.bottom))
    output = io.BytesIO()
    writer.write(output)
    return output.getvalue()


class CertificateGenerator:
    """Produces, stores and records one certificate per call.

    Steps run strictly in order and the first failure aborts the rest; the
    metadata row is only written once the upload has succeeded. Nothing is
    retried here.
    """

    def __init__(self, storage, template_loader, recorder, folder="certificates",
                 layout=DEFAULT_LAYOUT, clock=None, serial_factory=generate_certificate_number):
        self.storage = storage
        self.template_loader = template_loader
        self.recorder = recorder
        self.folder = folder.strip("/")
        self.layout = layout
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.serial_factory = serial_factory

    def load_template(self):
        try:
            template_bytes = self.template_loader()
        except Exception as e:
            logger.error("Certificate template fetch failed: %s", e)
            raise TemplateUnavailable(f"Could not load certificate template: {e}") from e
        if not template_bytes:
            raise TemplateUnavailable("Certificate template is empty.")
        return template_bytes

    def generate(self, request: CertificateRequest) -> CertificateArtifact:
        template_bytes = self.load_template()
        document = render_certificate(template_bytes, request, self.layout)

        issued_at = self.clock()
        file_name = certificate_file_name(request.course_id, request.user_id, issued_at)
        path = f"{self.folder}/{request.user_id}/{file_name}"

        try:
            public_url, storage_path = self.storage.upload_file(document, path, content_type=PDF_CONTENT_TYPE)
        except Exception as e:
            logger.exception("Certificate upload failed for user %s course %s", request.user_id, request.course_id)
            raise StorageUploadFailed(f"Failed to upload certificate PDF: {e}") from e
        if not public_url:
            raise StorageUploadFailed("Storage did not return a location for the certificate.")

        certificate_number = self.serial_factory()
        try:
            record = self.recorder(
                user_id=request.user_id,
                course_id=request.course_id,
                certificate_url=public_url,
                certificate_number=certificate_number,
                storage_path=storage_path,
                issued_at=issued_at,
                completed_at=issued_at,
            )
        except Exception as e:
            logger.exception("Certificate record insert failed for user %s course %s", request.user_id, request.course_id)
            # nothing references the upload now; drop it so storage holds no orphan
            try:
                removed = self.storage.delete_file(storage_path)
            except Exception as cleanup_error:
                logger.warning("Could not remove certificate file %s: %s", storage_path, cleanup_error)
                removed = False
            if not removed:
                logger.warning("Orphaned certificate file left at %s", storage_path)
            raise RecordPersistFailed("Failed to save certificate record.") from e

        logger.info(
            "Issued certificate #%s to user %s for course %s",
            certificate_number, request.user_id, request.course_id,
        )
        return CertificateArtifact(
            id=getattr(record, "id", None),
            user_id=request.user_id,
            course_id=request.course_id,
            certificate_url=public_url,
            certificate_number=certificate_number,
            storage_path=storage_path,
            issued_at=issued_at,
            completed_at=issued_at,
            document=document,
        )
