from __future__ import annotations

import os

from starlette.exceptions import HTTPException
from starlette.responses import Response
from starlette.staticfiles import StaticFiles
from starlette.types import Scope


class HtmlFallbackStaticFiles(StaticFiles):
    """정적 클라이언트 디렉터리. ``/about`` 처럼 확장자 없는 경로는 ``about.html`` 도 찾아본다."""

    def __init__(self, directory: str | os.PathLike[str]) -> None:
        super().__init__(directory=directory, html=True)

    async def get_response(self, path: str, scope: Scope) -> Response:
        try:
            return await super().get_response(path, scope)
        except HTTPException as exc:
            if exc.status_code != 404 or path in ("", ".") or path.endswith(".html"):
                raise
            return await super().get_response(f"{path}.html", scope)
