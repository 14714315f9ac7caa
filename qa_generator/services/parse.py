import json
from typing import Any, Iterable
import pydantic
from ..errors import MalformedResponse
from ..schemas import QAItem, Source, SourceSummary

def extract_json_span(text: str) -> str:
    """
    Pull the JSON array out of a chatty reply (markdown fences included):
    first '[' through last ']'. Falls back to the outermost '{...}' wrapped
    as a one-element array.
    """
    s = text or ""
    start, end = s.find("["), s.rfind("]")
    if start != -1 and end != -1:
        return s[start:end + 1]
    obj_start, obj_end = s.find("{"), s.rfind("}")
    if obj_start != -1 and obj_end != -1:
        return f"[{s[obj_start:obj_end + 1]}]"
    raise MalformedResponse("Could not find a valid JSON structure in the response.")

def _load_array(span: str) -> list:
    try:
        data = json.loads(span)
    except json.JSONDecodeError as e:
        raise MalformedResponse(f"Invalid JSON: {e}") from e
    if not isinstance(data, list):
        raise MalformedResponse(f"Expected a JSON array, got {type(data).__name__}")
    return data

def parse_qa_list(span: str) -> list[QAItem]:
    data = _load_array(span)
    if not data:
        raise MalformedResponse("Generated content is not a valid Q&A list (empty).")
    try:
        return [QAItem.model_validate(item) for item in data]
    except pydantic.ValidationError as e:
        raise MalformedResponse(f"Q&A item failed validation: {e.errors()[0]['msg']}") from e

def parse_summaries(span: str) -> dict[str, str]:
    data = _load_array(span)
    try:
        items = [SourceSummary.model_validate(item) for item in data]
    except pydantic.ValidationError as e:
        raise MalformedResponse(f"Summary item failed validation: {e.errors()[0]['msg']}") from e
    return {s.uri: s.summary for s in items}

def extract_sources(citations: Iterable[Any]) -> list[Source]:
    """Map citation records to Sources, dropping incomplete ones; first uri wins."""
    seen: set[str] = set()
    out: list[Source] = []
    for rec in citations or []:
        if not isinstance(rec, dict):
            continue
        uri, title = rec.get("uri"), rec.get("title")
        if not isinstance(uri, str) or not isinstance(title, str):
            continue
        if not uri or not title or uri in seen:
            continue
        seen.add(uri)
        out.append(Source(uri=uri, title=title))
    return out
