"""
API Namespaces - Organized endpoint groups
"""

from flask import current_app
from flask_restx import Namespace, Resource

from filedrop.api.health import get_health_status
from filedrop.api.v1.models import (
    error_response,
    file_info_response,
    health_response,
    sweep_summary,
)
from filedrop.application.retrieval_service import RetrievalService
from filedrop.domain.errors import (
    ErrorCategory,
    RecordNotFoundError,
    StorageFailureError,
    create_error_response,
)
from filedrop.domain.file_storage.value_objects import FileId

# =============================================================================
# Files Namespace - Stored file information
# =============================================================================

files_ns = Namespace("files", description="Uploaded file operations")
files_ns.add_model(file_info_response.name, file_info_response)
files_ns.add_model(error_response.name, error_response)


@files_ns.route("/<string:file_id>")
@files_ns.param("file_id", "The file identifier from the download link")
class FileInfo(Resource):
    """Stored file information"""

    @files_ns.doc("get_file_info")
    @files_ns.response(200, "Success", file_info_response)
    @files_ns.response(404, "File Not Found", error_response)
    @files_ns.response(503, "Service Unavailable", error_response)
    def get(self, file_id):
        """
        Get filename, size and expiry of an uploaded file

        Works for files the sweeper has not discovered yet.
        """
        container = getattr(current_app, "container", None)
        if container is None:
            return create_error_response(
                ErrorCategory.SYSTEM_ERROR,
                "Services not initialized",
                status_code=503
            )

        if not FileId.is_valid(file_id):
            return create_error_response(
                ErrorCategory.FILE_NOT_FOUND,
                f"Invalid file id {file_id!r}",
                status_code=404
            )

        try:
            return container.resolve(RetrievalService).describe(file_id), 200
        except RecordNotFoundError:
            return create_error_response(
                ErrorCategory.FILE_NOT_FOUND,
                f"File {file_id} not found",
                status_code=404
            )
        except StorageFailureError as e:
            current_app.logger.error(f"Error describing file {file_id}: {e}", exc_info=True)
            return create_error_response(
                ErrorCategory.STORAGE_FAILURE,
                str(e),
                status_code=503
            )


# =============================================================================
# System Namespace - System health and monitoring
# =============================================================================

system_ns = Namespace("system", description="System health and monitoring operations")
system_ns.add_model(sweep_summary.name, sweep_summary)
system_ns.add_model(health_response.name, health_response)


@system_ns.route("/health")
class Health(Resource):
    """System health check"""

    @system_ns.doc("health_check")
    @system_ns.response(200, "Healthy", health_response)
    @system_ns.response(503, "Service Degraded", health_response)
    def get(self):
        """
        Check storage availability, cache size and the last sweep outcome
        """
        return get_health_status(current_app)
