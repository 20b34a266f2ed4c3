"""FastAPI service exposing GL 505 ledger parsing for the budget dashboard.

Endpoints:
  POST /parse       (multipart/form-data: file=<pdf|txt>) -> parsed entries + groups
  POST /parse-text  (json: {"text": "..."})              -> parsed entries + groups
  POST /ledger      (multipart/form-data: files=<pdf|txt> x N) -> per-file results
  GET  /health -> simple health check

Nothing is persisted; callers review the payload before committing it to
budget records.

Run (dev): uvicorn gl_ledger.api:app --reload --port 8000
"""

from __future__ import annotations

import hashlib
import logging
import os
import traceback
from tempfile import SpooledTemporaryFile
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, File, HTTPException, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from pydantic import BaseModel

from .categorize import CANONICAL_CATEGORIES
from .ledger_parser import extract_ledger_text, parse_ledger_text
from .models import NotALedgerError

logging.basicConfig(level=os.getenv("API_LOG_LEVEL", "INFO"))
logger = logging.getLogger("ledger_api")

MAX_FILE_BYTES = int(os.getenv("MAX_FILE_BYTES", 50 * 1024 * 1024))  # 50MB default
MAX_FILES = int(os.getenv("MAX_FILES", 10))
ALLOWED_EXTENSIONS = (".pdf", ".txt")
CORS_ORIGINS = [
    o.strip()
    for o in os.getenv(
        "CORS_ORIGINS", "http://localhost:3000,http://localhost:5173"
    ).split(",")
    if o.strip()
]


class ParseTextRequest(BaseModel):
    text: str
    name: Optional[str] = None


app = FastAPI(title="Location Ledger Parser API", version="0.1.0")
app.add_middleware(GZipMiddleware, minimum_size=1024)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
def root():  # simple root for quick manual test
    return {"service": "ledger-parser", "status": "ok"}


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/categories")
def categories() -> dict[str, List[str]]:
    return {"categories": CANONICAL_CATEGORIES}


def _debug_enabled(request: Request) -> bool:
    return request.query_params.get("debug") == "1" or os.getenv("API_DEBUG") == "1"


def _not_a_ledger(name: Optional[str]) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail={
            "error": NotALedgerError.error_code,
            "message": "Not a valid production ledger format",
            "fileName": name,
        },
    )


async def _read_upload(file: UploadFile) -> SpooledTemporaryFile:
    """Stream an upload into a spooled file, enforcing the size guard."""
    name = (file.filename or "").lower()
    if not name.endswith(ALLOWED_EXTENSIONS):
        raise HTTPException(
            status_code=400, detail="Only PDF or text ledger files are supported"
        )
    spooled: SpooledTemporaryFile[bytes] = SpooledTemporaryFile(
        max_size=MAX_FILE_BYTES + 1024
    )
    total = 0
    chunk_size = 1024 * 64
    while True:
        chunk = await file.read(chunk_size)
        if not chunk:
            break
        total += len(chunk)
        if total > MAX_FILE_BYTES:
            spooled.close()
            raise HTTPException(
                status_code=413,
                detail=f"File too large (> {MAX_FILE_BYTES // (1024 * 1024)}MB)",
            )
        spooled.write(chunk)
    if total == 0:
        spooled.close()
        raise HTTPException(status_code=400, detail="Empty file")
    spooled.seek(0)
    return spooled


def _content_hash(spooled: SpooledTemporaryFile) -> str:
    digest = hashlib.md5()
    spooled.seek(0)
    for chunk in iter(lambda: spooled.read(1024 * 64), b""):
        digest.update(chunk)
    spooled.seek(0)
    return digest.hexdigest()


def _text_from_upload(filename: str, spooled: SpooledTemporaryFile) -> str:
    if filename.lower().endswith(".txt"):
        return spooled.read().decode("utf-8", errors="replace")
    return extract_ledger_text(spooled)


def _parse_upload(filename: str, spooled: SpooledTemporaryFile) -> Dict[str, Any]:
    text = _text_from_upload(filename, spooled)
    return parse_ledger_text(text).to_dict()


@app.post("/parse-text")
async def parse_text(req: ParseTextRequest, request: Request):
    try:
        result = await run_in_threadpool(parse_ledger_text, req.text)
    except NotALedgerError as e:
        raise _not_a_ledger(req.name) from e
    except Exception as e:  # pragma: no cover - defensive
        tb = traceback.format_exc()
        logger.error("Parse failure: %s\n%s", e, tb)
        detail = {"error": "PARSE_FAILURE", "message": str(e)}
        if _debug_enabled(request):
            detail["traceback"] = tb
        raise HTTPException(status_code=500, detail=detail) from e
    payload = result.to_dict()
    if req.name:
        payload["fileName"] = req.name
    return payload


@app.post("/parse")
async def parse_file(request: Request, file: UploadFile = File(...)):
    spooled = await _read_upload(file)
    try:
        content_hash = _content_hash(spooled)
        # parsing is CPU and IO bound, run off the event loop
        payload = await run_in_threadpool(_parse_upload, file.filename, spooled)
    except NotALedgerError as e:
        raise _not_a_ledger(file.filename) from e
    except Exception as e:  # pragma: no cover - defensive
        tb = traceback.format_exc()
        logger.error("Parse failure for %s: %s\n%s", file.filename, e, tb)
        detail = {"error": "PARSE_FAILURE", "message": str(e)}
        if _debug_enabled(request):
            detail["traceback"] = tb
        raise HTTPException(status_code=500, detail=detail) from e
    finally:
        spooled.close()
    logger.info(
        "Parsed %s: %d entries", file.filename, payload.get("entriesFound", 0)
    )
    return {"fileName": file.filename, "contentHash": content_hash, **payload}


@app.post("/ledger")
async def parse_ledgers(files: List[UploadFile] = File(...)):
    """Parse several ledger files in one request.

    Each file succeeds or fails on its own. Files whose content hash repeats
    an earlier file in the same request are reported as duplicates and not
    parsed again.
    """
    if not files:
        raise HTTPException(status_code=400, detail="No files uploaded")
    if len(files) > MAX_FILES:
        raise HTTPException(
            status_code=400, detail=f"Too many files (max {MAX_FILES})"
        )

    results: List[Dict[str, Any]] = []
    duplicates: List[Dict[str, Any]] = []
    seen: Dict[str, str] = {}
    for file in files:
        try:
            spooled = await _read_upload(file)
        except HTTPException as e:
            results.append(
                {"fileName": file.filename, "success": False, "error": e.detail}
            )
            continue
        try:
            content_hash = _content_hash(spooled)
            if content_hash in seen:
                duplicates.append(
                    {
                        "fileName": file.filename,
                        "type": "exact",
                        "duplicateOf": seen[content_hash],
                        "contentHash": content_hash,
                    }
                )
                continue
            seen[content_hash] = file.filename
            payload = await run_in_threadpool(_parse_upload, file.filename, spooled)
            results.append(
                {
                    "fileName": file.filename,
                    "contentHash": content_hash,
                    "success": True,
                    **payload,
                }
            )
        except NotALedgerError:
            results.append(
                {
                    "fileName": file.filename,
                    "success": False,
                    "error": "Not a valid production ledger format",
                }
            )
        except Exception as e:  # pragma: no cover - defensive
            logger.error("Parse failure for %s: %s", file.filename, e, exc_info=True)
            results.append(
                {"fileName": file.filename, "success": False, "error": str(e)}
            )
        finally:
            spooled.close()

    successful = sum(1 for r in results if r["success"])
    return {
        "total_files": len(files),
        "successful": successful,
        "failed": len(results) - successful,
        "duplicates": len(duplicates),
        "results": results,
        "duplicate_files": duplicates,
    }


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    uvicorn.run("gl_ledger.api:app", host="0.0.0.0", port=8000, reload=True)
