import json
import logging
from dataclasses import dataclass

from django.core.serializers.json import DjangoJSONEncoder
from django.http import HttpResponse
from django.utils import timezone

logger = logging.getLogger(__name__)

BOOKINGS_EXPORT_PREFIX = "bookings-export"
ADMIN_REPORT_PREFIX = "admin-report"
BACKUP_PREFIX = "orro-motors-backup"


@dataclass(frozen=True)
class ExportDocument:
    filename: str
    content: str


def export_json(payload, filename_prefix, today=None):
    """Serialize ``payload`` in one pass with 2-space indentation.

    The file is named ``<prefix>-<YYYY-MM-DD>.json`` after the current local date.
    """
    today = today or timezone.localdate()
    content = json.dumps(payload, indent=2, cls=DjangoJSONEncoder, ensure_ascii=False)
    filename = f"{filename_prefix}-{today.isoformat()}.json"
    logger.info("Exported %s", filename, extra={"bytes": len(content)})
    return ExportDocument(filename=filename, content=content)


def json_download(document):
    response = HttpResponse(document.content, content_type="application/json")
    response["Content-Disposition"] = f'attachment; filename="{document.filename}"'
    return response
