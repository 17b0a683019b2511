import os
import time
from uuid import uuid4
from flask import current_app
from werkzeug.utils import secure_filename
from utils.errors import NotFoundError, ValidationError
from utils.time_utils import utc_now

ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}
MAX_FILE_SIZE = 5 * 1024 * 1024  # 5 MB per image
MAX_FILES = 10
DEFAULT_CATEGORY = 'general'


def allowed_file(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def _category(value):
    return secure_filename(value or '') or DEFAULT_CATEGORY


def _category_dir(category):
    return os.path.join(current_app.config['UPLOAD_FOLDER'], category)


def _describe(category, filename, original_name, size, mimetype, uploaded_at):
    return {
        'id': filename,
        'name': original_name,
        'filename': filename,
        'url': f"/uploads/{category}/{filename}",
        'size': size,
        'mimetype': mimetype,
        'category': category,
        'uploadedAt': uploaded_at
    }


def _save(file, category):
    if file.filename == '':
        raise ValidationError("No file selected")
    if not allowed_file(file.filename):
        raise ValidationError(f"Only image files are allowed ({', '.join(sorted(ALLOWED_EXTENSIONS))})")

    file_data = file.read()
    if len(file_data) > MAX_FILE_SIZE:
        raise ValidationError("File is too large (limit: 5 MB)")
    file.seek(0)

    original_name = secure_filename(file.filename)
    stem, extension = os.path.splitext(original_name)
    filename = f"{stem or 'image'}-{int(time.time() * 1000)}-{uuid4().hex[:8]}{extension.lower()}"

    directory = _category_dir(category)
    os.makedirs(directory, exist_ok=True)
    filepath = os.path.join(directory, filename)
    file.save(filepath)
    current_app.logger.debug(f"Saved upload to {filepath}")

    return _describe(category, filename, file.filename, len(file_data), file.mimetype, utc_now().isoformat())


class UploadService:
    @staticmethod
    def upload_single(current_user, files, form):
        if 'image' not in files:
            raise ValidationError("No file uploaded")
        category = _category(form.get('category'))
        described = _save(files['image'], category)
        current_app.logger.info(f"User {current_user.id} uploaded {described['url']}")
        return {'message': 'File uploaded successfully', 'file': described}, 200

    @staticmethod
    def upload_multiple(current_user, files, form):
        uploads = files.getlist('images')
        if not uploads:
            raise ValidationError("No files uploaded")
        if len(uploads) > MAX_FILES:
            raise ValidationError(f"At most {MAX_FILES} files per request")

        category = _category(form.get('category'))
        described = [_save(file, category) for file in uploads]
        current_app.logger.info(f"User {current_user.id} uploaded {len(described)} files to '{category}'")
        return {'message': 'Files uploaded successfully', 'files': described}, 200

    @staticmethod
    def list_files(category):
        category = _category(category)
        directory = _category_dir(category)
        if not os.path.isdir(directory):
            return [], 200

        files = []
        for filename in sorted(os.listdir(directory)):
            filepath = os.path.join(directory, filename)
            if not os.path.isfile(filepath):
                continue
            stats = os.stat(filepath)
            uploaded_at = time.strftime('%Y-%m-%dT%H:%M:%S', time.gmtime(stats.st_mtime))
            files.append(_describe(category, filename, filename, stats.st_size, None, uploaded_at))
        return files, 200

    @staticmethod
    def delete_file(current_user, category, filename):
        filepath = os.path.join(_category_dir(_category(category)), secure_filename(filename))
        if not os.path.isfile(filepath):
            raise NotFoundError("File not found")
        os.remove(filepath)
        current_app.logger.info(f"User {current_user.id} deleted {filepath}")
        return {'message': 'File deleted successfully'}, 200
