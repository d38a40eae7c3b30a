"""
File Upload Utility - store resume files on disk.

Supported formats:
- PDF (.pdf)
- Word (.doc, .docx)

Files are saved under Settings.upload_dir as "<user_id>-<timestamp><ext>"
and served back from /uploads/<filename>.
"""

import logging
import os
import time

from fastapi import UploadFile

from placement_portal.core.errors import ValidationError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {'.pdf', '.doc', '.docx'}


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


def build_resume_filename(user_id: str, ext: str) -> str:
    return f"{user_id}-{int(time.time() * 1000)}{ext}"


async def save_resume(file: UploadFile, user_id: str, upload_dir: str, max_size_mb: int) -> str:
    """
    Validate and store an uploaded resume.

    Args:
        file: FastAPI UploadFile
        user_id: owner, used as the filename prefix
        upload_dir: target directory (created if missing)
        max_size_mb: size cap

    Returns:
        Stored filename (the reference kept on the user document)

    Raises:
        ValidationError on missing/unsupported/oversized/empty files
    """
    if not file or not file.filename:
        raise ValidationError("No file uploaded")

    ext = get_file_extension(file.filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise ValidationError(f"Unsupported file type '{ext}'. Allowed: PDF, DOC, DOCX")

    content = await file.read()
    if not content:
        raise ValidationError("Uploaded file is empty")
    if len(content) > max_size_mb * 1024 * 1024:
        raise ValidationError(f"File too large. Maximum size: {max_size_mb}MB")

    os.makedirs(upload_dir, exist_ok=True)
    filename = build_resume_filename(user_id, ext)
    with open(os.path.join(upload_dir, filename), "wb") as fh:
        fh.write(content)

    logger.info("Stored resume %s (%d bytes)", filename, len(content))
    return filename
