"""Keyword-vote categorization for concept cards.

Every category in the extended academic taxonomy owns a keyword tuple. A
category scores one point per keyword present in the text (presence, not
frequency). The best score wins, earlier categories winning ties, and the
winner is folded into the four labels the card UI can display.
"""

from typing import Dict, Tuple, get_args

from study_assistant.models.classification import CategoryLabel


# Order matters: it is the tie-break order.
CATEGORY_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "Physics": (
        "physics", "mechanics", "gravity", "force", "energy", "motion", "velocity",
        "acceleration", "momentum", "quantum", "relativity", "electromagnetics",
        "thermodynamics", "optics", "acoustics", "nuclear",
    ),
    "Chemistry": (
        "chemistry", "chemical", "element", "compound", "reaction", "molecule", "acid",
        "base", "organic", "inorganic", "pH", "bond", "atom", "solution", "catalyst",
        "gas", "liquid", "solid",
    ),
    "Biology": (
        "biology", "organism", "cell", "gene", "dna", "species", "evolution", "ecosystem",
        "plant", "animal", "human", "anatomy", "physiology", "ecology", "microbiology",
        "virus", "bacteria", "photosynthesis",
    ),
    "Science": (
        "science", "scientific", "study", "research", "experiment", "laboratory",
        "hypothesis", "theory", "evidence", "data", "observation", "environment",
        "natural", "measurement", "analysis",
    ),
    "Technology": (
        "technology", "computer", "software", "hardware", "internet", "digital", "app",
        "web", "code", "program", "algorithm", "data", "network", "cyber", "virtual",
        "online", "device", "gadget", "robot", "ai", "artificial intelligence",
        "machine learning",
    ),
    "History": (
        "history", "historical", "ancient", "medieval", "modern", "century", "war",
        "revolution", "civilization", "empire", "kingdom", "monarch", "president",
        "leader", "movement", "era", "period", "decade", "past", "timeline",
    ),
    "Mathematics": (
        "math", "mathematics", "algebra", "geometry", "calculus", "arithmetic",
        "statistics", "probability", "equation", "number", "formula", "function",
        "variable", "constant", "theorem", "proof", "calculation", "computation",
        "mathematical", "trigonometry",
    ),
    "Art": (
        "art", "artistic", "painting", "sculpture", "drawing", "photography", "design",
        "visual", "aesthetic", "creative", "museum", "gallery", "artist", "artwork",
        "masterpiece", "composition", "color", "style", "beauty", "expression",
    ),
    "Literature": (
        "literature", "book", "novel", "poem", "poetry", "story", "author", "writer",
        "character", "plot", "narrative", "theme", "literary", "fiction", "nonfiction",
        "genre", "prose", "verse", "publication", "text",
    ),
    "Philosophy": (
        "philosophy", "philosopher", "ethics", "moral", "logic", "reason", "thought",
        "idea", "concept", "theory", "perspective", "view", "belief", "existence",
        "meaning", "truth", "knowledge", "wisdom", "consciousness", "mind",
    ),
    "Health": (
        "health", "medical", "medicine", "disease", "condition", "symptom", "treatment",
        "therapy", "doctor", "nurse", "patient", "hospital", "clinic", "wellness",
        "fitness", "nutrition", "diet", "exercise", "body", "mental health",
    ),
    "Business": (
        "business", "economics", "economy", "finance", "market", "investment", "company",
        "corporation", "industry", "trade", "commerce", "management", "leadership",
        "entrepreneur", "startup", "profit", "revenue", "strategy", "organization",
        "commercial",
    ),
}

CARD_LABELS: Tuple[str, ...] = get_args(CategoryLabel)
SCIENCE_UMBRELLA = frozenset({"Science", "Technology", "Mathematics"})
SCIENCE_LABELS: Tuple[str, ...] = ("Physics", "Chemistry", "Biology")
# A specific science needs more than this many hits to claim an umbrella winner
SPECIFIC_SCIENCE_THRESHOLD = 1


def score_categories(text: str) -> Dict[str, int]:
    """Count, per category, how many of its keywords appear in ``text``.

    The text is lower-cased; keywords are matched as written.
    """
    lower = text.lower()
    return {
        category: sum(1 for keyword in keywords if keyword in lower)
        for category, keywords in CATEGORY_KEYWORDS.items()
    }


def pick_top_category(counts: Dict[str, int]) -> str:
    """Highest count wins; on ties the first category in table order keeps it."""
    best, highest = "Other", 0
    for category, count in counts.items():
        if count > highest:
            best, highest = category, count
    return best


def determine_category(title: str, query: str, content: str) -> CategoryLabel:
    """Classify a concept into Physics, Chemistry, Biology or Other.

    Args:
        title: Concept card title.
        query: The user's question.
        content: Card body (usually the trimmed model answer).

    Returns:
        One of the four card labels; never anything else.
    """
    counts = score_categories(f"{title} {query} {content}")
    best = pick_top_category(counts)

    if best in CARD_LABELS:
        return best  # type: ignore[return-value]

    if best in SCIENCE_UMBRELLA:
        for label in SCIENCE_LABELS:
            if counts[label] > SPECIFIC_SCIENCE_THRESHOLD:
                return label  # type: ignore[return-value]
        return "Physics"

    return "Other"
