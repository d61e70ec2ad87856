"""HTTP boundary types: the verbs, a minimal request, a mutable response."""

from sprig.http.method import Method
from sprig.http.request import Request
from sprig.http.response import MessageResponse, Response

__all__ = ["MessageResponse", "Method", "Request", "Response"]
