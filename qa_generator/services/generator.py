from loguru import logger

from ..errors import EnrichmentFailure, MalformedResponse, Result, ValidationError
from ..schemas import Difficulty, GenerationRequest, GenerationResult, Source
from ..settings import settings
from .llm import llm
from .parse import extract_json_span, extract_sources, parse_qa_list, parse_summaries
from .prompts import build_qa_prompt, build_summary_prompt

def make_request(topic: str, difficulty: Difficulty | str, num_questions: int) -> GenerationRequest:
    topic = (topic or "").strip()
    if not topic:
        raise ValidationError("Please enter a topic.")
    try:
        difficulty = Difficulty(difficulty)
    except ValueError:
        raise ValidationError(f"Unknown difficulty: {difficulty!r}")
    try:
        num_questions = int(num_questions)
    except (TypeError, ValueError):
        raise ValidationError(f"Number of questions must be an integer, got {num_questions!r}")
    num_questions = max(1, min(num_questions, settings.MAX_QUESTIONS))
    return GenerationRequest(topic=topic, difficulty=difficulty, num_questions=num_questions)

async def summarize_sources(sources: list[Source], topic: str) -> Result[list[Source]]:
    """Attach one-sentence summaries by exact uri match. Errors come back in the Result."""
    if not sources:
        return Result.ok(sources)
    try:
        reply = await llm(build_summary_prompt(sources, topic))
        summaries = parse_summaries(extract_json_span(reply.text))
    except Exception as e:
        return Result.fail(EnrichmentFailure(str(e)))
    return Result.ok([s.model_copy(update={"summary": summaries.get(s.uri)}) for s in sources])

async def enrich_with_summaries(sources: list[Source], topic: str) -> list[Source]:
    result = await summarize_sources(sources, topic)
    if not result.is_ok:
        logger.warning(f"[enrich] could not generate summaries for sources: {result.error}")
    return result.unwrap_or(sources)

async def run(req: GenerationRequest) -> GenerationResult:
    reply = await llm(build_qa_prompt(req))
    try:
        qa_list = parse_qa_list(extract_json_span(reply.text))
    except MalformedResponse as e:
        logger.error(f"[generate] topic={req.topic!r} parse failed: {e}; raw={reply.text[:500]!r}")
        raise

    sources = extract_sources(reply.citations)
    if settings.ENRICH_SOURCES:
        sources = await enrich_with_summaries(sources, req.topic)

    logger.info(f"[generate] topic={req.topic!r} qa={len(qa_list)} sources={len(sources)}")
    return GenerationResult(qa_list=qa_list, sources=sources)

async def generate(topic: str, difficulty: Difficulty | str, num_questions: int) -> GenerationResult:
    """
    UI boundary: topic/difficulty/count in, GenerationResult out.
    Raises ValidationError (no oracle call made) or MalformedResponse; oracle
    transport errors propagate as-is.
    """
    return await run(make_request(topic, difficulty, num_questions))
