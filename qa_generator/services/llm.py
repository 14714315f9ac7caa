import asyncio, json, re
from dataclasses import dataclass, field
from loguru import logger
from ..settings import settings

@dataclass(frozen=True)
class OracleReply:
    text: str
    # raw grounding metadata: [{"uri": ..., "title": ...}], fields may be None
    citations: list[dict] = field(default_factory=list)

_openai_client = None
_gemini_client = None

def _openai():
    global _openai_client
    if _openai_client is None:
        from openai import OpenAI
        _openai_client = OpenAI(api_key=settings.OPENAI_API_KEY)
    return _openai_client

def _gemini():
    global _gemini_client
    if _gemini_client is None:
        from google import genai
        _gemini_client = genai.Client(api_key=settings.GEMINI_API_KEY)
    return _gemini_client

def _mock_reply(prompt: str) -> OracleReply:
    if "Web pages to summarize:" in prompt:
        uris = re.findall(r"^(https?://\S+)$", prompt, flags=re.MULTILINE)
        return OracleReply(json.dumps([{"uri": u, "summary": f"MOCK summary of {u}."} for u in uris]))
    m = re.search(r"Number of Questions: (\d+)", prompt)
    n = int(m.group(1)) if m else 1
    qa = [{"question": f"MOCK question {i}?", "answer": f"MOCK answer {i}."} for i in range(1, n + 1)]
    return OracleReply(
        text=json.dumps(qa),
        citations=[
            {"uri": "https://en.wikipedia.org/wiki/Mock", "title": "Mock - Wikipedia"},
            {"uri": "https://www.britannica.com/mock", "title": "Mock | Britannica"},
        ],
    )

def _openai_sync(prompt: str) -> OracleReply:
    resp = _openai().responses.create(
        model=settings.OPENAI_MODEL,
        input=prompt,
        tools=[{"type": settings.OPENAI_SEARCH_TOOL}],
    )
    citations = []
    for item in resp.output or []:
        if getattr(item, "type", None) != "message":
            continue
        for part in item.content or []:
            for ann in getattr(part, "annotations", None) or []:
                if getattr(ann, "type", None) == "url_citation":
                    citations.append({"uri": ann.url, "title": ann.title})
    return OracleReply(text=resp.output_text or "", citations=citations)

def _gemini_sync(prompt: str) -> OracleReply:
    from google.genai import types
    resp = _gemini().models.generate_content(
        model=settings.GEMINI_MODEL,
        contents=prompt,
        config=types.GenerateContentConfig(tools=[types.Tool(google_search=types.GoogleSearch())]),
    )
    citations = []
    candidates = resp.candidates or []
    meta = candidates[0].grounding_metadata if candidates else None
    for chunk in (meta.grounding_chunks if meta else None) or []:
        web = chunk.web
        citations.append({"uri": web.uri if web else None, "title": web.title if web else None})
    return OracleReply(text=resp.text or "", citations=citations)

def _llm_sync(prompt: str) -> OracleReply:
    if settings.MOCK_MODE:
        return _mock_reply(prompt)
    provider = (settings.LLM_PROVIDER or "openai").lower()
    logger.info(f"[llm] provider={provider} prompt_chars={len(prompt)}")
    if provider == "openai":
        return _openai_sync(prompt)
    if provider == "gemini":
        return _gemini_sync(prompt)
    raise ValueError(f"Unknown LLM_PROVIDER: {provider}")

async def llm(prompt: str) -> OracleReply:
    return await asyncio.to_thread(_llm_sync, prompt)
