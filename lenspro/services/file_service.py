from datetime import datetime, timezone
from pathlib import Path
from uuid import uuid4

from PIL import Image
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from lenspro.errors import AppError

ALLOWED_EXTENSIONS = {"png", "jpg", "jpeg", "webp"}


class FileService:
    @staticmethod
    def _is_allowed(filename):
        return "." in filename and filename.rsplit(".", 1)[1].lower() in ALLOWED_EXTENSIONS

    @classmethod
    def save_equipment_image(cls, storage: FileStorage, upload_root: str):
        """Store an uploaded product photo and return its path under ``static/``."""
        if not storage or not storage.filename:
            return None

        filename = secure_filename(storage.filename)
        if not filename or not cls._is_allowed(filename):
            raise AppError("Unsupported image format.", 400)

        # Verify actual image bytes to avoid extension spoofing.
        try:
            img = Image.open(storage.stream)
            img.verify()
            storage.stream.seek(0)
        except Exception as exc:
            raise AppError("Invalid image file.", 400) from exc

        dated_folder = datetime.now(timezone.utc).strftime("%Y/%m")
        folder = Path(upload_root) / "equipment" / dated_folder
        folder.mkdir(parents=True, exist_ok=True)

        extension = filename.rsplit(".", 1)[1].lower()
        unique_filename = f"{uuid4().hex}.{extension}"
        storage.save(folder / unique_filename)

        return f"{Path(upload_root).name}/equipment/{dated_folder}/{unique_filename}"
