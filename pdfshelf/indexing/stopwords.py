"""English stop words ignored when judging sentence importance."""

DEFAULT_STOP_WORDS: frozenset[str] = frozenset(
    {
        # Articles and conjunctions
        "the", "a", "an", "and", "or", "but",
        # Prepositions
        "in", "on", "at", "to", "for", "of", "with", "by",
        # Auxiliaries
        "is", "are", "was", "were", "be", "been",
        "have", "has", "had", "do", "does", "did",
        "will", "would", "could", "should",
        # Demonstratives and pronouns
        "this", "that", "these", "those",
        "i", "you", "he", "she", "it", "we", "they",
    }
)  # fmt: skip
