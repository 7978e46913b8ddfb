"""
Upload and Download Pages

Plain HTTP surface of the service: the upload form, the multipart upload
receiver and the download endpoint. Responses are HTML or plain text, not
JSON, to stay compatible with existing links and scripts.
"""

from typing import Type, TypeVar
from urllib.parse import quote

from flask import Blueprint, Response, current_app, request, send_file
from markupsafe import escape
from werkzeug.exceptions import RequestEntityTooLarge
from werkzeug.formparser import parse_form_data

from filedrop.application.dependency_container import DependencyNotFoundError
from filedrop.application.ingestion_service import IngestionService
from filedrop.application.retrieval_service import RetrievalService
from filedrop.domain.errors import (
    RecordNotFoundError,
    StorageFailureError,
    UploadParseError,
)
from filedrop.domain.file_storage.value_objects import DEFAULT_EXPIRY_MINUTES

T = TypeVar("T")

pages_bp = Blueprint("pages", __name__)

UPLOAD_FORM = (
    '<form action="/receive" method="post" enctype="multipart/form-data">'
    '<p><input type="file" name="upload-file-1"></p>'
    f'<p>Expire: <input type="text" name="expire" value="{DEFAULT_EXPIRY_MINUTES}"> minute(s)</p>'
    '<input type="submit" value="Upload">'
    '</form>'
)

FILE_NOT_FOUND_BODY = "File not found.\n"


class ServiceUnavailable(Exception):
    """Raised when application services failed to initialize."""
    pass


@pages_bp.route("/", methods=["GET"])
def display_form():
    """Upload form."""
    return Response(UPLOAD_FORM, status=200, mimetype="text/html")


@pages_bp.route("/receive", methods=["GET", "POST"])
def upload_file():
    """
    Accept a multipart upload and list download links for stored files.

    On a parse failure nothing is stored and a one-line plain-text error is
    returned instead of the listing.
    """
    try:
        ingestion_service = _resolve(IngestionService)
    except ServiceUnavailable:
        return _plain_text("Service unavailable\n", status=503)

    try:
        form, files = _parse_upload()
    except UploadParseError as e:
        current_app.logger.warning(f"[UPLOAD] Rejected upload: {e}")
        return _plain_text(f"Upload error: {e}\n")

    uploads = [(storage.filename, storage.stream) for _, storage in files.items(multi=True)]
    try:
        accepted = ingestion_service.ingest(uploads, form.get("expire"))
    except StorageFailureError as e:
        current_app.logger.error(f"[UPLOAD] Failed to store upload: {e}", exc_info=True)
        return _plain_text("Upload error: the file could not be stored\n")
    finally:
        for _, storage in files.items(multi=True):
            storage.close()

    lines = ["<p>Upload successful:</p>\n"]
    for uploaded in accepted:
        expires = uploaded.expires_at_local().strftime("%Y-%m-%d %H:%M")
        lines.append(
            f"<p>{escape(uploaded.filename)} ({uploaded.size} bytes, expires at: {expires}): "
            f'<a href=".{escape(uploaded.download_link())}">{uploaded.file_id}</a></p>\n'
        )
    return Response("".join(lines), status=200, mimetype="text/html")


@pages_bp.route("/file/", defaults={"name": ""}, methods=["GET"])
@pages_bp.route("/file/<path:name>", methods=["GET"])
def download_file(name):
    """
    Stream a stored file as an attachment.

    A missing id and an unknown id both get the same low-ceremony
    "File not found." answer with status 200.
    """
    try:
        retrieval_service = _resolve(RetrievalService)
    except ServiceUnavailable:
        return _plain_text("Service unavailable\n", status=503)

    file_id = request.args.get("id")
    try:
        target = retrieval_service.open_download(file_id, name)
    except RecordNotFoundError:
        return _plain_text(FILE_NOT_FOUND_BODY)
    except StorageFailureError as e:
        current_app.logger.error(f"[DOWNLOAD] Failed to open {file_id}: {e}", exc_info=True)
        return _plain_text("File could not be read.\n", status=500)

    current_app.logger.info(f"[DOWNLOAD] Serving {target.download_name} for id {file_id}")

    response = send_file(
        target.stream,
        mimetype=target.mimetype,
        conditional=False,
        etag=False,
        max_age=0,
    )
    if target.size is not None:
        response.content_length = target.size
    response.headers["Content-Disposition"] = content_disposition(target.download_name)
    return response


def content_disposition(name: str) -> str:
    """
    Build an attachment Content-Disposition header for name.

    Names that are not plain ASCII also get an RFC 5987 filename* parameter.
    """
    name = "".join(c for c in name if c.isprintable())
    fallback = name.encode("ascii", "ignore").decode("ascii")
    fallback = fallback.replace("\\", "_").replace('"', "_") or "download"
    value = f'attachment; filename="{fallback}"'
    if fallback != name:
        value += f"; filename*=UTF-8''{quote(name, safe='')}"
    return value


def _parse_upload():
    """
    Parse the request body as multipart form data.

    Returns:
        (form, files) multi-dicts

    Raises:
        UploadParseError: If the body is not a well-formed multipart upload
    """
    if request.mimetype != "multipart/form-data":
        received = request.mimetype or "no content type"
        raise UploadParseError(f"expected multipart/form-data, got {received}")

    try:
        _, form, files = parse_form_data(
            request.environ,
            silent=False,
            max_content_length=current_app.config.get("MAX_CONTENT_LENGTH"),
        )
    except RequestEntityTooLarge as e:
        raise UploadParseError("upload exceeds the maximum allowed size", e) from e
    except ValueError as e:
        raise UploadParseError(str(e) or "malformed multipart body", e) from e

    return form, files


def _resolve(interface: Type[T]) -> T:
    container = getattr(current_app, "container", None)
    if container is None:
        current_app.logger.error("Application services not initialized")
        raise ServiceUnavailable()
    try:
        return container.resolve(interface)
    except DependencyNotFoundError as e:
        current_app.logger.error(f"Service not registered: {e}")
        raise ServiceUnavailable() from e


def _plain_text(body: str, status: int = 200) -> Response:
    return Response(body, status=status, mimetype="text/plain")
