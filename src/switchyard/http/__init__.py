"""HTTP value types — Request, Response, Redirect, QueryParams."""

from switchyard.http.query import QueryParams
from switchyard.http.request import Request
from switchyard.http.response import Redirect, Response

__all__ = ["QueryParams", "Redirect", "Request", "Response"]
