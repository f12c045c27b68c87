"""Structured answer template: composition, compliance check and repair.

Educational replies must follow a fixed markdown layout (brief, subject/topic
heading, question, numbered solution, tips). Gemini is asked for that layout
explicitly; when the reply ignores it, the layout is rebuilt locally from
whatever solution-like and tips-like text the reply contains. Repair is
deterministic and never needs a second model call.
"""

import enum
import re
from typing import List, Optional, Sequence, Tuple

from study_assistant.models.classification import EducationalQuery, ExtractedSections


QUESTION_MARKER = "**Question:**"
SOLUTION_MARKER = "**Solution:**"
TIPS_MARKER = "**💡 Tricks & Tips:**"

REQUIRED_MARKERS: Tuple[str, ...] = ("##", "###", QUESTION_MARKER, SOLUTION_MARKER, TIPS_MARKER)

SOLUTION_KEYWORDS: Tuple[str, ...] = ("solution", "answer", "explanation", "steps", "working")
TRICKS_KEYWORDS: Tuple[str, ...] = ("tricks", "tips", "hint", "note", "remember")
TIP_WORDS: Tuple[str, ...] = ("tip", "trick", "hint", "note", "remember")

# Sentences/lines this short are dropped when numbering solution steps
MIN_STEP_LENGTH = 15
# A "label:" shorter than this starts a new section
MAX_HEADER_LABEL_LENGTH = 20

_STEP_SPLIT = re.compile(r"\n|\.")


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------

def default_tricks(subject: str) -> str:
    return f"Remember to approach {subject} problems methodically, breaking them down into smaller parts."


def format_solution_steps(solution: str) -> str:
    """Render a solution as ``Step N:`` lines unless it is already stepped."""
    if "Step " in solution:
        return solution

    lines = [piece.strip() for piece in _STEP_SPLIT.split(solution)]
    lines = [line for line in lines if len(line) > MIN_STEP_LENGTH]

    if len(lines) <= 1:
        return f"Step 1: {solution}"

    return "\n".join(
        f"Step {index}: {line}{'' if line.endswith('.') else '.'}"
        for index, line in enumerate(lines, start=1)
    )


def create_response_template(
    subject: str,
    topic: str,
    question: str,
    solution: str,
    tricks: Optional[str] = None,
) -> str:
    """Build a template-compliant answer document.

    Args:
        subject: Display subject (e.g. "Physics").
        topic: Display topic (e.g. "Kinematics").
        question: The user's question.
        solution: Solution text; split into numbered steps if not already.
        tricks: Optional tips; a generic study tip is used when empty.

    Returns:
        Markdown document containing every marker in REQUIRED_MARKERS.
    """
    brief = solution.split(".")[0] + "."
    formatted_solution = format_solution_steps(solution)

    return (
        f"*{brief}*\n\n"
        f"## **{subject}** | *{topic}*\n\n"
        f"### {QUESTION_MARKER}\n{question}\n\n"
        f"### {SOLUTION_MARKER}\n{formatted_solution}\n\n"
        f"### {TIPS_MARKER}\n{tricks or default_tricks(subject)}"
    )


def is_template_compliant(document: str) -> bool:
    """True if the document carries all five structural markers."""
    return all(marker in document for marker in REQUIRED_MARKERS)


# ---------------------------------------------------------------------------
# Section scraping
# ---------------------------------------------------------------------------

class _ScanState(enum.Enum):
    SEEKING = "seeking"
    CAPTURING = "capturing"
    DONE = "done"


def _is_section_header(line: str, keywords: Sequence[str]) -> bool:
    lower = line.lower()
    for keyword in keywords:
        if f"{keyword}:" in lower or f"{keyword.upper()}:" in line:
            return True
        if lower.startswith(f"# {keyword}") or lower.startswith(f"## {keyword}"):
            return True
    return False


def _looks_like_other_header(line: str) -> bool:
    if ":" not in line:
        return False
    label = line.split(":", 1)[0].strip()
    return len(label) < MAX_HEADER_LABEL_LENGTH


def find_section(text: str, keywords: Sequence[str]) -> Optional[str]:
    """Return the block of lines introduced by a header naming one of ``keywords``.

    A header is a line containing ``keyword:`` or starting with ``# keyword``
    / ``## keyword``. Capture runs from the header until a line that looks
    like some other ``Label:`` header (label under 20 chars), which is not
    included. Further matching headers inside the block are kept.
    """
    state = _ScanState.SEEKING
    captured: List[str] = []

    for line in text.split("\n"):
        if state is _ScanState.DONE:
            break

        if _is_section_header(line, keywords):
            state = _ScanState.CAPTURING
            captured.append(line)
        elif state is _ScanState.CAPTURING:
            if _looks_like_other_header(line) and captured:
                state = _ScanState.DONE
                continue
            captured.append(line)

    return "\n".join(captured) if captured else None


def extract_from_incomplete_response(response: str) -> ExtractedSections:
    """Recover solution and tips text from a reply that ignored the template."""
    non_empty = [line for line in response.split("\n") if line.strip()]
    if not non_empty:
        return ExtractedSections()

    solution = find_section(response, SOLUTION_KEYWORDS)
    if not solution:
        solution = "\n".join(non_empty)

    tricks = find_section(response, TRICKS_KEYWORDS)
    if not tricks:
        tips = [line for line in non_empty if any(word in line.lower() for word in TIP_WORDS)]
        tricks = "\n".join(tips)

    return ExtractedSections(solution=solution, tricks=tricks)


def repair_response(subject: str, topic: str, question: str, response: str) -> str:
    """Rebuild a compliant document from an arbitrary model reply."""
    extracted = extract_from_incomplete_response(response)
    return create_response_template(subject, topic, question, extracted.solution, extracted.tricks)


def ensure_template(response: str, query: EducationalQuery) -> Tuple[str, bool]:
    """Return ``(document, repaired)``; compliant replies pass through untouched."""
    if is_template_compliant(response):
        return response, False
    return repair_response(query.subject, query.topic, query.question, response), True


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------

def build_template_prompt(query: EducationalQuery) -> str:
    """Instruction block forcing Gemini to answer in the template layout."""
    return f"""IMPORTANT SYSTEM INSTRUCTION: THIS IS AN EDUCATIONAL QUERY.

The user's message: "{query.question}"

YOU MUST RESPOND USING THIS EXACT TEMPLATE FORMAT WITH NO DEVIATIONS:

*[1-2 sentence summary of the answer]*

## **{query.subject}** | *{query.topic}*

### {QUESTION_MARKER}
{query.question}

### {SOLUTION_MARKER}
Step 1: [First step]
Step 2: [Second step]
...

### {TIPS_MARKER}
[Optional tips, mnemonics, or shortcuts to remember the concept]

DO NOT ADD ANY TEXT BEFORE OR AFTER THIS TEMPLATE.
DO NOT CHANGE THE SECTION HEADINGS OR FORMAT.
FOLLOW THIS TEMPLATE EXACTLY WITH NO MODIFICATIONS TO THE STRUCTURE."""


def build_factual_prompt(message: str) -> str:
    """Append accuracy instructions to a factual question."""
    return (
        f"{message}\n\n"
        "Please provide a clear, accurate, and well-structured response. Include relevant "
        "details and examples where appropriate. If you're unsure about any part of the "
        "answer, please say so explicitly."
    )


SYSTEM_INSTRUCTION = (
    "You are a study assistant designed to be helpful, informative, and engaging. "
    "Provide clear, concise, and accurate responses."
)
