# folder_share/middleware/cors.py
# Permissive cross-origin headers on every response; OPTIONS answered before routing

from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from folder_share.constants import CORS_HEADERS


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """
    Any OPTIONS request gets an empty 204, whatever the path.
    Everything else, errors included, gets the same headers appended.
    Must be the outermost middleware so error responses are covered too.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=CORS_HEADERS)

        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response
