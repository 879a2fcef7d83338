"""
Heuristic Recipe Parser.

This module segments raw recipe text into sections (ingredients,
instructions, description, notes, yield and timing) using header detection
and line-shape heuristics, requiring no AI inference. It is the last-resort
parser and never raises for malformed input.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from ..const import (
    DEFAULT_RECIPE_NAME,
    DEFAULT_YIELD_UNIT,
    METHOD_HEURISTIC,
    PLACEHOLDER_INGREDIENT,
    PLACEHOLDER_INSTRUCTION,
)
from ..models.recipe import ParsedIngredient, ParsedRecipe
from ..quantity import UNICODE_FRACTIONS, extract_leading_quantity, parse_duration_minutes
from ..unit_converter import is_known_unit
from .base_parser import BaseRecipeParser
from .ingredient_parser import split_ingredient_line

_LOGGER = logging.getLogger(__name__)

# Sections
NAME = "name"
DESCRIPTION = "description"
INGREDIENTS = "ingredients"
INSTRUCTIONS = "instructions"
NOTES = "notes"
YIELD = "yield"
PREP_TIME = "prep_time"
COOK_TIME = "cook_time"
OTHER = "other"

# Normalized header text for each section
SECTION_SYNONYMS = {
    NAME: ("name", "title", "recipe", "recipe name", "recipe title"),
    DESCRIPTION: ("description", "about", "summary", "intro", "introduction", "overview"),
    INGREDIENTS: (
        "ingredients", "ingredient list", "what you need", "what you will need",
        "you will need", "youll need", "shopping list",
    ),
    INSTRUCTIONS: (
        "instructions", "directions", "method", "steps", "preparation",
        "procedure", "how to make", "how to make it", "cooking instructions",
    ),
    NOTES: (
        "notes", "note", "tips", "tip", "chefs notes", "cooks notes",
        "recipe notes", "variations",
    ),
    YIELD: ("yield", "yields", "servings", "serves", "makes", "portions"),
    PREP_TIME: ("prep time", "preparation time", "prep", "active time"),
    COOK_TIME: (
        "cook time", "cooking time", "bake time", "baking time", "cook",
        "total cook time",
    ),
}

# Sections whose header may carry a trailing qualifier ("Ingredients for the cake")
_QUALIFIABLE_SECTIONS = (DESCRIPTION, INGREDIENTS, INSTRUCTIONS, NOTES)

# Headers whose value sits on the header line or the line after it
_FIELD_SECTIONS = (NAME, YIELD, PREP_TIME, COOK_TIME)

_SYNONYMS_LONGEST_FIRST = sorted(
    ((synonym, section)
     for section, synonyms in SECTION_SYNONYMS.items()
     for synonym in synonyms),
    key=lambda item: len(item[0]),
    reverse=True,
)

# Words that make "a"/"an" lines read like an ingredient ("A pinch of salt")
ARTICLE_MEASURE_WORDS = (
    "pinch", "dash", "handful", "few", "couple", "splash", "sprig", "bunch",
    "knob", "drizzle", "little", "sprinkle", "squeeze", "small", "medium",
    "large",
)

SEQUENCE_WORDS = (
    "first", "next", "then", "finally", "meanwhile", "afterwards", "after that",
    "lastly", "once", "while", "second", "third", "to finish", "to serve",
)

_FRACTION_CHARS = "".join(UNICODE_FRACTIONS)

_MARKDOWN_RE = re.compile(r"^#{1,6}\s*(.*?)\s*#*$")
_NUMBERED_HEADER_RE = re.compile(r"^\d+\.\s*(?=[A-Z])(.+)$")
_LABEL_RE = re.compile(r"^([^:]{1,40}):\s*(.*)$")
_STEP_NUMBER_RE = re.compile(r"^\d+\s*[.)](?:\s|$)")
_STEP_RE = re.compile(r"^(?:\d+\s*[.)](?:\s|$)|step\s*\d+)", re.IGNORECASE)
_BULLET_RE = re.compile(r"^[-*•]\s*")
_STEP_PREFIX_RE = re.compile(
    r"^(?:step\s*\d+\s*[.):-]?|\d+\s*[.)])(?=\s|$)\s*", re.IGNORECASE)
_INGREDIENT_START_RE = re.compile(rf"^[\d{_FRACTION_CHARS}]")
_ARTICLE_RE = re.compile(r"^an?\s+(\S+)", re.IGNORECASE)
_TO_TASTE_RE = re.compile(r"\b(?:to taste|as needed)\W*$", re.IGNORECASE)
_IMPERATIVE_RE = re.compile(r"^[A-Z][a-z]+(?:\s+and\s+[a-z]+)?\s+the\b")
_SEQUENCE_RE = re.compile(
    r"^(?:%s)\b" % "|".join(re.escape(word) for word in SEQUENCE_WORDS),
    re.IGNORECASE,
)


def normalize_header(label: str) -> str:
    """Lowercase a header label and strip numbering and punctuation.

    Examples:
        >>> normalize_header("1. Chef's Notes:")
        'chefs notes'
    """
    text = label.lower().strip().lstrip("#").strip()
    text = re.sub(r"^\d+[.)]\s*", "", text)
    text = text.replace("'", "").replace("’", "")
    text = re.sub(r"[^\w\s]", " ", text)
    return " ".join(text.split())


def match_section(label: str) -> str | None:
    """Match a header label against the section synonym lists."""
    normalized = normalize_header(label)
    if not normalized:
        return None

    for synonym, section in _SYNONYMS_LONGEST_FIRST:
        if normalized == synonym:
            return section
        if section in _QUALIFIABLE_SECTIONS and normalized.startswith(synonym + " "):
            return section
    return None


def _is_all_caps(text: str) -> bool:
    return any(c.isalpha() for c in text) and text == text.upper()


def _split_header(line: str) -> tuple[str, str, bool] | None:
    """Split a header-shaped line into (label, inline content, strong shape).

    Header shapes: markdown "# Title", all caps text optionally followed by a
    colon, Title-Case text followed by a colon, and "1. INGREDIENTS". The
    shape is strong for markdown, numbered and all caps headers.
    """
    match = _MARKDOWN_RE.match(line)
    if match and line.startswith("#"):
        label, _, inline = match.group(1).partition(":")
        return label.strip(), inline.strip(), True

    body = line
    numbered = _NUMBERED_HEADER_RE.match(line)
    if numbered:
        body = numbered.group(1)

    match = _LABEL_RE.match(body)
    if match:
        label, inline = match.groups()
        strong = bool(numbered) or _is_all_caps(label)
        if strong or label[:1].isupper():
            return label.strip(), inline.strip(), strong
        return None

    if numbered or _is_all_caps(body):
        return body.strip(), "", True
    return None


def match_header(line: str) -> tuple[str, str] | None:
    """Return (section, inline content) when the line is a known section header.

    A Title-Case label with text after the colon ("Note: do not brown it.")
    only counts for single-value fields such as yield and times; list
    sections need the colon to end the line or a strong header shape.
    """
    parts = _split_header(line)
    if not parts:
        return None

    label, inline, strong = parts
    section = match_section(label)
    if section is None:
        return None
    if inline and not strong and section not in _FIELD_SECTIONS:
        return None
    return section, inline


def is_group_label(line: str) -> bool:
    """True for sub-section labels such as "For the Béchamel:"."""
    return (
        line.endswith(":")
        and not any(c.isdigit() for c in line)
        and len(line.split()) <= 6
    )


def looks_like_ingredient(line: str) -> bool:
    """Classify a line with no active section as an ingredient by its shape."""
    if _INGREDIENT_START_RE.match(line) and not _STEP_NUMBER_RE.match(line):
        return True

    match = _ARTICLE_RE.match(line)
    if match:
        word = match.group(1).lower().strip(",.")
        if word in ARTICLE_MEASURE_WORDS or is_known_unit(word):
            return True
        if len(line.split()) <= 4 and not line.endswith((".", "!", "?")):
            return True

    return bool(_TO_TASTE_RE.search(line))


def looks_like_instruction(line: str) -> bool:
    """Classify a line with no active section as an instruction by its shape."""
    return bool(
        _STEP_RE.match(line)
        or _BULLET_RE.match(line)
        or _IMPERATIVE_RE.match(line)
        or _SEQUENCE_RE.match(line)
    )


def _strip_bullet(line: str) -> str:
    return _BULLET_RE.sub("", line).strip()


def _step_text(line: str) -> str:
    """Strip bullets and step numbering ("1.", "Step 2:") from an instruction."""
    return _STEP_PREFIX_RE.sub("", _strip_bullet(line), count=1).strip()


@dataclass
class _ParseState:
    """Buffers filled while walking the recipe lines."""

    name: str | None = None
    section: str = OTHER
    pending_field: str | None = None
    group: str | None = None
    description: list[str] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)
    ingredients: list[ParsedIngredient] = field(default_factory=list)
    instructions: list[str] = field(default_factory=list)
    yield_quantity: float | None = None
    yield_unit: str | None = None
    prep_time_minutes: int | None = None
    cook_time_minutes: int | None = None


class HeuristicRecipeParser(BaseRecipeParser):
    """Parses recipe data from plain text using header and line-shape heuristics.

    Ingredient lines are kept as free text (quantity 1, unit 'piece', the
    whole line as name) unless split_ingredients is enabled, in which case
    lines shaped like "<quantity> <unit> <name>" are split into fields.
    """

    method = METHOD_HEURISTIC

    def __init__(self, split_ingredients: bool = False) -> None:
        """Initialize the heuristic recipe parser.

        Args:
            split_ingredients: Split ingredient lines into quantity, unit and name
        """
        self.split_ingredients = split_ingredients
        _LOGGER.debug("Initialized HeuristicRecipeParser (split_ingredients: %s)",
                      split_ingredients)

    def parse_recipe(self, text: str) -> ParsedRecipe:
        """Parse recipe information from unstructured text.

        Args:
            text: The raw recipe text

        Returns:
            A best-effort ParsedRecipe; missing pieces are defaulted
        """
        lines = [line.strip() for line in (text or "").splitlines() if line.strip()]
        _LOGGER.info("Parsing recipe from %d lines of text heuristically", len(lines))

        state = _ParseState()

        if lines and match_header(lines[0]) is None:
            state.name = lines.pop(0).lstrip("#").strip() or None

        for line in lines:
            self._consume_line(state, line)

        return self._build_recipe(state)

    def _consume_line(self, state: _ParseState, line: str) -> None:
        header = match_header(line)
        if header:
            section, inline = header
            state.pending_field = None
            state.group = None
            if section in _FIELD_SECTIONS:
                state.section = OTHER
                if inline:
                    self._apply_field(state, section, inline)
                else:
                    state.pending_field = section
            else:
                state.section = section
                if inline:
                    self._add_to_section(state, section, inline)
            _LOGGER.debug("Detected %s header: '%s'", section, line)
            return

        if state.pending_field:
            self._apply_field(state, state.pending_field, line)
            state.pending_field = None
            return

        if state.section == OTHER:
            self._classify_line(state, line)
        else:
            self._add_to_section(state, state.section, line)

    def _add_to_section(self, state: _ParseState, section: str, line: str) -> None:
        if section == INGREDIENTS:
            if is_group_label(line):
                state.group = line.rstrip(":").strip()
                return
            self._add_ingredient(state, line)
        elif section == INSTRUCTIONS:
            if is_group_label(line):
                return
            step = _step_text(line)
            if step:
                state.instructions.append(step)
        elif section == NOTES:
            state.notes.append(line)
        else:
            state.description.append(line)

    def _classify_line(self, state: _ParseState, line: str) -> None:
        if is_group_label(line):
            state.group = line.rstrip(":").strip()
            return

        candidate = _strip_bullet(line)
        if not candidate:
            return

        if looks_like_ingredient(candidate):
            self._add_ingredient(state, candidate)
        elif looks_like_instruction(line):
            step = _step_text(line)
            if step:
                state.instructions.append(step)
        else:
            state.description.append(line)

    def _add_ingredient(self, state: _ParseState, line: str) -> None:
        text = _strip_bullet(line)
        if not text:
            return

        ingredient = None
        if self.split_ingredients:
            ingredient = split_ingredient_line(text, group=state.group)
        if ingredient is None:
            ingredient = ParsedIngredient(name=text, raw=text, group=state.group)
        state.ingredients.append(ingredient)

    def _apply_field(self, state: _ParseState, section: str, value: str) -> None:
        if section == NAME:
            state.name = value
        elif section == YIELD:
            quantity, unit = extract_leading_quantity(value)
            if quantity is not None and quantity > 0:
                state.yield_quantity = quantity
                state.yield_unit = unit or DEFAULT_YIELD_UNIT
            else:
                _LOGGER.debug("No yield quantity found in '%s'", value)
        elif section == PREP_TIME:
            state.prep_time_minutes = parse_duration_minutes(value)
        elif section == COOK_TIME:
            state.cook_time_minutes = parse_duration_minutes(value)

    def _build_recipe(self, state: _ParseState) -> ParsedRecipe:
        description = list(state.description)
        name = state.name
        if not name and description:
            name = description.pop(0)
            _LOGGER.debug("Promoted first description line to recipe name")

        ingredients = state.ingredients
        if not ingredients:
            _LOGGER.warning("No ingredients found, inserting placeholder")
            ingredients = [ParsedIngredient(name=PLACEHOLDER_INGREDIENT)]

        instructions = state.instructions
        if not instructions:
            _LOGGER.warning("No instructions found, inserting placeholder")
            instructions = [PLACEHOLDER_INSTRUCTION]

        recipe = ParsedRecipe(
            name=name or DEFAULT_RECIPE_NAME,
            description="\n".join(description),
            ingredients=ingredients,
            instructions=instructions,
            notes="\n".join(state.notes) or None,
            yield_quantity=state.yield_quantity,
            yield_unit=state.yield_unit,
            prep_time_minutes=state.prep_time_minutes,
            cook_time_minutes=state.cook_time_minutes,
        )
        _LOGGER.info("Heuristically parsed recipe '%s' with %d ingredients and %d steps",
                     recipe.name, len(recipe.ingredients), len(recipe.instructions))
        return recipe
