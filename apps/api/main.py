from __future__ import annotations

import logging
import time
import uuid
from typing import Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from notelens_api.config import load_settings
from notelens_api.domain.entities import InfoOptions, InputKind, SelectionInput
from notelens_api.domain.exceptions import NoteNotFoundError, NoteReadError, PathError, VaultEnumerationError
from notelens_api.domain.schemas import NoteInfoOut, NoteListOut
from notelens_api.filters import list_files
from notelens_api.info import get_note_info
from notelens_api.vault import FileVault, normalize_note_path


def create_app() -> FastAPI:
    app = FastAPI(title="Notelens API", version="0.1.0")

    settings = load_settings()
    vault = FileVault()
    vault_path = str(settings.vault_dir)

    logger = logging.getLogger("notelens.api")

    @app.middleware("http")
    async def request_id_and_logging(request: Request, call_next):
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            dt_ms = (time.perf_counter() - start) * 1000.0
            logger.exception("request_error", extra={"rid": request_id, "path": request.url.path, "ms": dt_ms})
            return JSONResponse(
                status_code=500,
                content={"detail": "internal_error", "request_id": request_id},
                headers={"X-Request-ID": request_id},
            )

        dt_ms = (time.perf_counter() - start) * 1000.0
        extra = {
            "rid": request_id,
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "ms": dt_ms,
        }
        if settings.api_debug_log:
            extra["query"] = request.url.query
        logger.info("request", extra=extra)
        response.headers["X-Request-ID"] = request_id
        return response

    @app.get("/health")
    def health():
        return {"ok": True}

    @app.get("/notes", response_model=NoteListOut)
    def list_notes(
        request: Request,
        path: Optional[list[str]] = Query(None),
        tag: Optional[list[str]] = Query(None),
        find: Optional[list[str]] = Query(None),
    ):
        inputs = [SelectionInput(InputKind.PATH, v) for v in path or []]
        inputs += [SelectionInput(InputKind.TAG, v) for v in tag or []]
        inputs += [SelectionInput(InputKind.FIND, v) for v in find or []]
        try:
            items = list_files(vault, vault_path, inputs, verbose=settings.verbose)
        except VaultEnumerationError as e:
            raise HTTPException(status_code=503, detail="vault_unavailable") from e
        logger.info(
            "notes_list",
            extra={"rid": request.state.request_id, "inputs": len(inputs), "count": len(items)},
        )
        return NoteListOut(items=items, count=len(items))

    @app.get(
        "/notes/info",
        response_model=NoteInfoOut,
        response_model_exclude_none=True,
    )
    def note_info(
        request: Request,
        path: str,
        tags: bool = False,
        links: bool = False,
    ):
        try:
            note_path = normalize_note_path(path)
            info = get_note_info(
                vault,
                vault,
                note_path,
                vault_path,
                InfoOptions(include_tags=tags, include_links=links),
                verbose=settings.verbose,
            )
        except PathError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        except NoteNotFoundError as e:
            raise HTTPException(status_code=404, detail="note_not_found") from e
        except NoteReadError as e:
            raise HTTPException(status_code=500, detail="note_read_failed") from e
        except VaultEnumerationError as e:
            raise HTTPException(status_code=503, detail="vault_unavailable") from e
        logger.info("note_info", extra={"rid": request.state.request_id, "path": note_path})
        return NoteInfoOut(**info.to_dict())

    return app


app = create_app()
