import html, io, re
import fitz  # PyMuPDF
from ..schemas import GenerationRequest, GenerationResult

PAGE = fitz.paper_rect("a4")
MARGIN = 36  # points

CSS = """
body { font-family: sans-serif; font-size: 11pt; }
h1 { font-size: 18pt; margin-bottom: 4pt; }
h2 { font-size: 14pt; margin-top: 14pt; }
p.meta { color: #6b7280; }
p.q { font-weight: bold; margin-top: 10pt; margin-bottom: 2pt; }
p.a { margin-top: 0; }
p.src { margin-top: 6pt; margin-bottom: 0; }
p.uri, p.summary { margin-top: 0; font-size: 9pt; color: #4b5563; }
"""

def export_filename(topic: str, difficulty: str) -> str:
    safe = re.sub(r"\s+", "_", topic.strip())
    return f"QA_{safe}_{difficulty}.pdf"

def _html(req: GenerationRequest, result: GenerationResult) -> str:
    e = html.escape
    parts = [
        f"<h1>{e(req.topic)}</h1>",
        f"<p class='meta'>Difficulty: {e(req.difficulty.value)} &middot; {len(result.qa_list)} questions</p>",
    ]
    for i, qa in enumerate(result.qa_list, start=1):
        parts.append(f"<p class='q'>{i}. {e(qa.question)}</p>")
        parts.append(f"<p class='a'>{e(qa.answer)}</p>")
    if result.sources:
        parts.append("<h2>Sources</h2>")
        for s in result.sources:
            parts.append(f"<p class='src'>{e(s.title or s.uri)}</p>")
            parts.append(f"<p class='uri'>{e(s.uri)}</p>")
            if s.summary:
                parts.append(f"<p class='summary'>{e(s.summary)}</p>")
    return "\n".join(parts)

def render_pdf(req: GenerationRequest, result: GenerationResult) -> bytes:
    """Flow the Q&A list and sources across as many A4 pages as needed."""
    story = fitz.Story(html=_html(req, result), user_css=CSS)
    where = PAGE + (MARGIN, MARGIN, -MARGIN, -MARGIN)
    buf = io.BytesIO()
    writer = fitz.DocumentWriter(buf)
    more = 1
    while more:
        device = writer.begin_page(PAGE)
        more, _ = story.place(where)
        story.draw(device)
        writer.end_page()
    writer.close()
    return buf.getvalue()
