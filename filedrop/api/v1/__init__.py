"""
API v1 - filedrop JSON API

Versioned JSON endpoints with OpenAPI/Swagger documentation.
"""

import os

from flask import Blueprint
from flask_restx import Api

from .namespaces import files_ns, system_ns

API_VERSION = os.getenv("API_VERSION", "v1")


def create_api_blueprint() -> Blueprint:
    """
    Build the /api/<version> blueprint with its own Api instance.

    A fresh blueprint per application keeps every app built by the factory
    independent of the others.
    """
    blueprint = Blueprint("api_v1", __name__, url_prefix=f"/api/{API_VERSION}")

    api = Api(
        blueprint,
        version="1.0",
        title="filedrop API",
        description="Inspect uploaded files and the health of the expiring file store",
        doc="/docs",  # Swagger UI will be available at /api/v1/docs
        license="MIT",
    )
    api.add_namespace(files_ns, path="/files")
    api.add_namespace(system_ns, path="/system")

    return blueprint
