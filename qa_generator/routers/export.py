from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import StreamingResponse
from urllib.parse import quote
from loguru import logger
import io, re

from ..services.pdf import export_filename, render_pdf
from ..services.session import store

router = APIRouter()

@router.get("/export/pdf")
def export_pdf(session_id: str = Query(...)):
    snap = store.get(session_id)
    if snap.result is None or snap.request is None:
        raise HTTPException(404, "No Q&A generated for this session.")

    data = render_pdf(snap.request, snap.result)
    filename = export_filename(snap.request.topic, snap.request.difficulty.value)
    ascii_name = re.sub(r"[^A-Za-z0-9._-]+", "_", filename)
    headers = {
        "Content-Disposition": f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename)}"
    }
    logger.info(f"[export] session={session_id} file={filename} bytes={len(data)}")
    return StreamingResponse(io.BytesIO(data), media_type="application/pdf", headers=headers)
