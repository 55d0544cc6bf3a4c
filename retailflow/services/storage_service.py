"""
Local disk storage for uploaded product images.

Files are written as-is under UPLOAD_FOLDER with a uuid prefix and served
back from /uploads/<filename>.
"""
import logging
import os
import uuid

from flask import current_app
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from retailflow.exceptions import ValidationError

logger = logging.getLogger(__name__)


def allowed_file(filename: str) -> bool:
    """Check the extension against ALLOWED_EXTENSIONS."""
    if not filename or '.' not in filename:
        return False
    extension = filename.rsplit('.', 1)[1].lower()
    return extension in current_app.config.get('ALLOWED_EXTENSIONS', set())


def save_upload(file: FileStorage) -> str:
    """
    Save an uploaded file and return its stored filename.

    Raises:
        ValidationError: If no file was sent or the extension is not allowed
    """
    if file is None or not file.filename:
        raise ValidationError('No file uploaded')

    original_name = secure_filename(file.filename)
    if not allowed_file(original_name):
        raise ValidationError('File type not allowed')

    upload_dir = current_app.config['UPLOAD_FOLDER']
    os.makedirs(upload_dir, exist_ok=True)

    filename = f"{uuid.uuid4()}-{original_name}"
    file.save(os.path.join(upload_dir, filename))
    logger.info(f"[STORAGE] Saved upload {filename}")
    return filename
