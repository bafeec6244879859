DEFAULT_CATEGORY = "General"

CATEGORY_KEYWORDS: dict[str, tuple[str, ...]] = {
    "Academic": (
        "academic", "study", "research", "science", "engineering",
        "math", "computer", "business",
    ),
    "Cultural": (
        "cultural", "culture", "international", "ethnic", "heritage", "language",
    ),
    "Sports": ("sport", "athletic", "fitness", "recreation", "team", "club sport"),
    "Arts": ("art", "music", "dance", "theatre", "creative", "design", "film"),
    "Social": ("social", "community", "networking", "friendship"),
    "Professional": (
        "professional", "career", "industry", "business", "entrepreneurship",
    ),
    "Service": (
        "service", "volunteer", "community service", "charity", "outreach",
    ),
    "Religious": (
        "religious", "faith", "spiritual", "christian", "muslim", "jewish", "buddhist",
    ),
    "Special Interest": ("gaming", "anime", "technology", "environment", "political"),
}


def determine_categories(name: str, description: str) -> list[str]:
    """Tag a club with every category whose keywords appear in its text.

    Matching is plain substring search over the lower-cased name and
    description. Falls back to ``["General"]`` so the result is never empty.
    """
    text = f"{name} {description}".casefold()
    categories = [
        category
        for category, keywords in CATEGORY_KEYWORDS.items()
        if any(keyword in text for keyword in keywords)
    ]
    return categories or [DEFAULT_CATEGORY]
