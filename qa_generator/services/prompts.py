from ..schemas import GenerationRequest, Source

QA_SYSTEM = (
    "You are an expert Question and Answer generation system. Your task is to generate a set of "
    "unique, factually accurate questions and answers based on a given topic, difficulty, and "
    "number of questions."
)

QA_EXAMPLE = """[
    {
        "question": "This is the first question on the topic.",
        "answer": "This is the factually correct answer to the first question."
    },
    {
        "question": "This is the second question on the topic.",
        "answer": "This is the factually correct answer to the second question."
    }
]"""

SUMMARY_EXAMPLE = """[
    {
        "uri": "https://example.com/page1",
        "summary": "This is a one-sentence summary for page1."
    },
    {
        "uri": "https://example.com/page2",
        "summary": "This is a one-sentence summary for page2."
    }
]"""

def build_qa_prompt(req: GenerationRequest) -> str:
    return (
        f"{QA_SYSTEM}\n\n"
        "CRITICAL INSTRUCTIONS:\n"
        "1. Factual accuracy is paramount: use the search tool to find and verify all information. "
        "Do not include anything that is not verifiable.\n"
        "2. Uniqueness: no two questions may be duplicates or too similar.\n"
        "3. Strict JSON output: your entire response MUST be a single, valid JSON array of objects. "
        "No text, markdown, or explanations outside of the JSON.\n"
        "4. JSON structure: each object has two keys, \"question\" (string) and \"answer\" (string).\n\n"
        "Request:\n"
        f"- Topic: {req.topic}\n"
        f"- Difficulty: {req.difficulty.value}\n"
        f"- Number of Questions: {req.num_questions}\n\n"
        f"Example JSON output format:\n{QA_EXAMPLE}\n\n"
        "Now, generate the response for the provided request."
    )

def build_summary_prompt(sources: list[Source], topic: str) -> str:
    uris = "\n".join(s.uri for s in sources)
    return (
        "You are an expert at summarizing web content for research purposes.\n"
        f"Given the main topic \"{topic}\", provide a concise, one-sentence summary for each of the "
        "following web pages. Use your search tool to access and understand each page.\n"
        "Your entire response must be a single, valid JSON array of objects. No text, markdown, or "
        "explanations outside of the JSON.\n\n"
        "CRITICAL INSTRUCTIONS:\n"
        "1. The summary MUST be a single, informative sentence.\n"
        "2. Each object has two keys: \"uri\" (string) and \"summary\" (string).\n"
        "3. The \"uri\" MUST exactly match the URI provided in the list below.\n\n"
        f"Web pages to summarize:\n{uris}\n\n"
        f"Example JSON output:\n{SUMMARY_EXAMPLE}\n\n"
        "Now, generate the response."
    )
