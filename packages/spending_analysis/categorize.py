"""Rule-based categorization of transaction descriptions.

Rules are an ordered sequence of ``(pattern, category)`` pairs evaluated
first-match-wins, so order encodes precedence. For example the Subscriptions
rule (which matches ``amazon prime``) sits before the Shopping rule, and the
Shopping rule additionally excludes ``amazon`` followed by ``prime``.

Keep this as a tuple, not a mapping: reordering entries changes results.
"""

from __future__ import annotations

import re

from .models import UNCATEGORIZED


def _rule(pattern: str, category: str) -> tuple[re.Pattern[str], str]:
    return re.compile(pattern, re.IGNORECASE), category


RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    _rule(r"\b(rent|mortgage|hoa|property\s*mgmt|apt|leasing)\b", "Rent/Mortgage"),
    _rule(
        r"\b(kroger|walmart|whole\s*foods|trader\s*joe|safeway|aldi|costco|publix|target"
        r"|wegmans|heb|meijer|sprouts|grocery|groceries)\b",
        "Groceries",
    ),
    _rule(
        r"\b(shell|chevron|exxon|mobil|bp\b|marathon|speedway|wawa|circle\s*k|gas|fuel"
        r"|sunoco|valero|citgo|auto\s*parts|autozone|jiffy\s*lube|car\s*wash)\b",
        "Gas & Auto",
    ),
    _rule(
        r"\b(mcdonald|burger\s*king|wendy|starbucks|chipotle|chick-fil-a|taco\s*bell|subway"
        r"|panera|dunkin|domino|pizza\s*hut|panda\s*express|grubhub|doordash|uber\s*eats"
        r"|postmates|restaurant|dining|cafe|diner|bistro|grill|sushi|thai|chinese|mexican"
        r"|indian|italian)\b",
        "Dining",
    ),
    _rule(
        r"\b(netflix|spotify|hulu|disney\+?|apple\s*(music|tv|one)|youtube|amazon\s*prime"
        r"|hbo|paramount|peacock|audible|dropbox|icloud|google\s*(storage|one)|adobe"
        r"|microsoft\s*365)\b",
        "Subscriptions",
    ),
    _rule(
        r"\b(electric|gas\s*co|water\s*(bill|utility)|sewer|power|energy|utility|utilities"
        r"|comcast|xfinity|att\b|at&t|verizon|t-mobile|tmobile|spectrum|internet|cable"
        r"|phone\s*bill)\b",
        "Utilities",
    ),
    _rule(r"\b(transfer|zelle|venmo|paypal|cash\s*app|wire|ach)\b", "Transfers"),
    _rule(
        r"\b(payroll|direct\s*dep|salary|wage|irs|tax\s*refund|interest\s*payment)\b",
        "Income",
    ),
    _rule(
        r"\b(insurance|geico|progressive|state\s*farm|allstate|usaa|liberty\s*mutual)\b",
        "Insurance",
    ),
    _rule(
        r"\b(pharmacy|cvs|walgreens|doctor|hospital|medical|dental|health|urgent\s*care"
        r"|labcorp|quest\s*diag)\b",
        "Health & Medical",
    ),
    _rule(
        r"\b(amazon(?!\s*prime)|ebay|etsy|best\s*buy|home\s*depot|lowes|ikea|nordstrom"
        r"|macys|kohls|tjmaxx|marshalls|ross)\b",
        "Shopping",
    ),
    _rule(
        r"\b(airline|flight|hotel|airbnb|vrbo|booking\.com|expedia|hertz|enterprise"
        r"|uber(?!\s*eats)|lyft|parking|toll)\b",
        "Travel & Transport",
    ),
    _rule(
        r"\b(gym|fitness|planet\s*fitness|la\s*fitness|equinox|peloton|crossfit|yoga)\b",
        "Fitness",
    ),
    _rule(
        r"\b(tuition|university|college|school|student\s*loan|coursera|udemy)\b",
        "Education",
    ),
    _rule(
        r"\b(movie|cinema|theater|concert|ticketmaster|amc|regal|steam|playstation|xbox"
        r"|nintendo)\b",
        "Entertainment",
    ),
)

CATEGORIES: tuple[str, ...] = tuple(dict.fromkeys(cat for _, cat in RULES)) + (UNCATEGORIZED,)


def categorize(description: str) -> str:
    """Return the category of the first rule matching ``description``.

    Total over any string; returns ``"Uncategorized"`` when nothing matches
    (including the empty string).
    """

    for pattern, category in RULES:
        if pattern.search(description):
            return category
    return UNCATEGORIZED


__all__ = ["RULES", "CATEGORIES", "categorize"]
