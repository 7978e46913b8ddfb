"""
API Models for response validation and Swagger documentation

Models are attached to their namespaces, which register them with every
Api the namespace is added to.
"""

from flask_restx import Model, fields

# =============================================================================
# Response Models
# =============================================================================

file_info_response = Model(
    "FileInfo",
    {
        "file_id": fields.String(description="Opaque file identifier"),
        "filename": fields.String(description="Original filename", allow_null=True),
        "expire_at": fields.Integer(
            description="Expiry deadline as a millisecond epoch timestamp",
            allow_null=True,
        ),
        "expires_at": fields.String(
            description="Expiry deadline (ISO 8601, UTC)", allow_null=True
        ),
        "remaining_seconds": fields.Integer(
            description="Seconds until the file is eligible for removal", allow_null=True
        ),
        "size": fields.Integer(description="Stored size in bytes", allow_null=True),
        "cached": fields.Boolean(description="Whether the sweeper has discovered the file"),
        "download_url": fields.String(description="Relative download link", allow_null=True),
    },
)

sweep_summary = Model(
    "SweepSummary",
    {
        "started_at": fields.Integer(description="Sweep start (ms epoch)"),
        "finished_at": fields.Integer(description="Sweep end (ms epoch)", allow_null=True),
        "discovered": fields.Integer(description="Records newly loaded into the cache"),
        "reclaimed": fields.Integer(description="Expired files removed"),
        "purged": fields.Integer(description="Abandoned temporary files removed"),
        "errors": fields.List(fields.String, description="Per-item failures"),
    },
)

health_response = Model(
    "HealthResponse",
    {
        "status": fields.String(description="Overall status", enum=["ok", "degraded"]),
        "message": fields.String(description="Status message"),
        "storage": fields.String(description="Metadata backend reachability"),
        "metadata_backend": fields.String(description="Configured metadata backend"),
        "sweeper_mode": fields.String(description="How the reclamation sweep runs"),
        "cache_entries": fields.Integer(description="Records held by the expiry cache"),
        "last_sweep": fields.Nested(sweep_summary, allow_null=True),
    },
)

error_response = Model(
    "ErrorResponse",
    {
        "error": fields.String(description="Error category"),
        "title": fields.String(description="Short error title"),
        "message": fields.String(description="User-facing error message"),
        "action": fields.String(description="Suggested next step"),
    },
)
