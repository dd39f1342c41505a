"""
Accent Folding Utilities

Strips Latin diacritics (French catalogue names) for URL slugs,
grouping keys and accent-insensitive comparisons.
"""

import re
import unicodedata

# Typographic apostrophes are folded to spaces in grouping keys
APOSTROPHES = "’'"


def strip_accents(text: str) -> str:
    """
    Remove combining diacritical marks from text.

    Args:
        text: Text that may contain accented characters

    Returns:
        Text with accents removed

    Example:
        >>> strip_accents("Vêtements Écharpes")
        'Vetements Echarpes'
    """
    decomposed = unicodedata.normalize('NFD', text)
    return ''.join(char for char in decomposed if not unicodedata.combining(char))


def slugify(title: str, prefix: str = '') -> str:
    """
    Generate URL-friendly slug from a title.

    Lowercases, removes accents, drops punctuation and replaces
    whitespace runs with single hyphens.

    Args:
        title: Product or category title
        prefix: Optional prefix (e.g., 'categorie-')

    Returns:
        URL-friendly slug

    Example:
        >>> slugify("Robe Soirée Été")
        'robe-soiree-ete'
        >>> slugify("Sacs & Bagages")
        'sacs-bagages'
    """
    text = f"{prefix}{title}" if prefix else title

    text = strip_accents(text).lower()
    text = re.sub(r'[^a-z0-9\s-]', '', text).strip()
    text = re.sub(r'\s+', '-', text)
    text = re.sub(r'-+', '-', text)

    return text.strip('-')


def normalize_key(value: str) -> str:
    """
    Build a loose grouping key from a file or product name.

    Accents, apostrophes and punctuation are removed, whitespace is
    collapsed and a trailing number (``robe-2``, ``robe 03``) is dropped.

    Example:
        >>> normalize_key("Robe d’été 2")
        'robe d ete'
    """
    text = strip_accents(value)
    for apostrophe in APOSTROPHES:
        text = text.replace(apostrophe, ' ')
    text = text.lower()
    text = re.sub(r'[^a-z0-9\s-]', ' ', text)
    text = re.sub(r'\s+', ' ', text).strip()
    text = re.sub(r'(?:\s|-)*\d+$', '', text)
    return text.strip()


def title_case(value: str) -> str:
    """Capitalise the first letter of every word, leaving the rest intact."""
    return ' '.join(word[0].upper() + word[1:] for word in value.split(' ') if word)
