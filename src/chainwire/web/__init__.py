"""HTTP dispatcher for chainwire services."""

from .app import HttpError, controller_name_for, create_app
from .request import HttpRequestInfo

__all__ = ["HttpError", "HttpRequestInfo", "controller_name_for", "create_app"]
