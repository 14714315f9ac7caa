import uuid
from fastapi import APIRouter, HTTPException, Query
from google.genai import errors as genai_errors
from openai import APIError, AuthenticationError, RateLimitError
from loguru import logger

from ..errors import GENERIC_FAILURE, GenerationInProgress, MalformedResponse, ValidationError
from ..schemas import GenerateBody, GenerateResponse, SessionView
from ..services.generator import make_request, run
from ..services.session import store

router = APIRouter()

def _fail(session_id: str, status: int, detail: str) -> HTTPException:
    store.fail(session_id, detail)
    logger.warning(f"[qa] session={session_id} failed: {status} {detail}")
    return HTTPException(status, detail)

@router.post("/qa/generate", response_model=GenerateResponse)
async def generate_qa(body: GenerateBody):
    session_id = body.session_id or str(uuid.uuid4())
    try:
        req = make_request(body.topic, body.difficulty, body.num_questions)
    except ValidationError as e:
        raise HTTPException(400, str(e))

    try:
        store.begin(session_id, req)
    except GenerationInProgress as e:
        raise HTTPException(409, str(e))

    try:
        result = await run(req)
    except MalformedResponse:
        raise _fail(session_id, 502, GENERIC_FAILURE)
    except AuthenticationError:
        raise _fail(session_id, 401, "OpenAI auth failed. Check OPENAI_API_KEY.")
    except RateLimitError:
        raise _fail(session_id, 429, "OpenAI quota/rate limit exceeded.")
    except APIError as e:
        raise _fail(session_id, 502, f"OpenAI API error: {getattr(e, 'message', str(e))}")
    except genai_errors.APIError as e:
        raise _fail(session_id, 502, f"Gemini API error: {getattr(e, 'message', str(e))}")
    except Exception as e:
        logger.exception(f"[qa] session={session_id} unexpected error")
        raise _fail(session_id, 500, f"Server error: {str(e)}")
    except BaseException:
        # cancelled (client disconnect / shutdown): release the session, then propagate
        store.fail(session_id, "Generation was cancelled.")
        raise

    store.complete(session_id, result)
    return GenerateResponse(
        session_id=session_id,
        topic=req.topic,
        difficulty=req.difficulty,
        num_questions=req.num_questions,
        qa_list=result.qa_list,
        sources=result.sources,
    )

@router.get("/qa/current", response_model=SessionView)
def current(session_id: str = Query(...)):
    snap = store.get(session_id)
    return SessionView(
        session_id=session_id,
        is_generating=snap.is_generating,
        error=snap.error,
        request=snap.request,
        result=snap.result,
    )
