"""HTTP value types returned by built-in endpoints."""

from thicket.http.response import Response

__all__ = ["Response"]
