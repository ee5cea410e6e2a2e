import os
import uuid
from fastapi import UploadFile
from inventory_tracker.core.config import Settings
from inventory_tracker.core.errors import ValidationFailed


async def save_invoice_file(file: UploadFile, settings: Settings) -> tuple[str, str]:
    """Store an uploaded invoice scan and return (original filename, stored path)."""
    ext = os.path.splitext(file.filename or "")[1].lower()
    allowed = settings.allowed_upload_extensions
    if ext not in allowed:
        raise ValidationFailed(
            f"File type {ext or '(none)'} not supported. Allowed: {', '.join(sorted(allowed))}",
            field="invoiceFile",
        )

    content = await file.read()
    if len(content) == 0:
        raise ValidationFailed("Empty file", field="invoiceFile")
    if len(content) > settings.max_upload_bytes:
        raise ValidationFailed(f"File exceeds {settings.MAX_UPLOAD_SIZE_MB}MB limit", field="invoiceFile")

    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    filepath = os.path.join(settings.UPLOAD_DIR, f"invoiceFile-{uuid.uuid4().hex}{ext}")
    with open(filepath, "wb") as f:
        f.write(content)
    return file.filename, filepath
