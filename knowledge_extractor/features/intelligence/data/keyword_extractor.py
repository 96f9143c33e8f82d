import re
from collections import Counter
from typing import List

WORD_PATTERN = re.compile(r"\w+")


def extract_top_keywords(text: str, top_n: int = 3) -> List[str]:
    """
    Local frequency-based keyword extraction.
    normalize -> tokenize -> count -> top N (ties keep first-seen order)
    """
    if top_n <= 0:
        return []
    words = WORD_PATTERN.findall(text.lower())
    return [word for word, _ in Counter(words).most_common(top_n)]
