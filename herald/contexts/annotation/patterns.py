"""
Pattern building and matcher safety checks for the annotation context.

Category matchers are authored as data (see config/categories.yaml). This
module turns keyword term lists into regex sources and inspects regex sources
for shapes that backtrack catastrophically, so the registry can reject them
before any text is segmented.

Pattern classes follow the convention of the other pattern modules:
- Dataclasses with frozen=True for immutability
- Class-level constants for patterns
- Helper functions that use these patterns
"""

import re
from dataclasses import dataclass
from typing import Iterable, Optional

# =============================================================================
# KEYWORD BOUNDARIES
# =============================================================================


@dataclass(frozen=True)
class KeywordBoundaries:
    """
    Boundaries placed around keyword alternations.

    Lookarounds on word characters are used instead of \\b so that terms
    starting or ending in punctuation (".net", "c++", "c#", "401(k)") still
    match as whole tokens.
    """

    WORD_START: str = r"(?<!\w)"
    WORD_END: str = r"(?!\w)"


def build_keyword_pattern(terms: Iterable[str]) -> str:
    """
    Build one regex source matching any of the given keyword terms as a whole token.

    Terms are regex fragments (e.g. "problem[- ]solving", "401\\(?k\\)?") and are
    tried in the order given, so the leftmost match in the text wins and, at
    the same position, the earliest listed term wins.

    Args:
        terms: Keyword regex fragments

    Returns:
        Regex source string

    Raises:
        ValueError: If terms is empty or contains an empty term

    Example:
        build_keyword_pattern(["remote", "hybrid", "on-site"])
        # '(?<!\\w)(?:remote|hybrid|on-site)(?!\\w)'
    """
    terms = [str(term) for term in terms]
    if not terms:
        raise ValueError("Cannot build a keyword pattern from an empty term list")
    if any(not term for term in terms):
        raise ValueError("Keyword term lists must not contain empty terms")

    alternation = "|".join(terms)
    return f"{KeywordBoundaries.WORD_START}(?:{alternation}){KeywordBoundaries.WORD_END}"


# =============================================================================
# MATCHER SAFETY
# =============================================================================


@dataclass(frozen=True)
class QuantifierPatterns:
    """Regex patterns for reading quantifiers out of a regex source."""

    # Counted repetition: {m}, {m,}, {m,n}, {,n}
    COUNTED: re.Pattern = re.compile(r"\{(\d*)(,?)(\d*)\}")


def _skip_character_class(source: str, start: int) -> int:
    """Return the index just past the character class opening at start."""
    i = start + 1
    if i < len(source) and source[i] == "^":
        i += 1
    # A ']' right after the opening bracket is a literal
    if i < len(source) and source[i] == "]":
        i += 1
    while i < len(source):
        if source[i] == "\\":
            i += 2
            continue
        if source[i] == "]":
            return i + 1
        i += 1
    return i


def _read_quantifier(source: str, i: int) -> Optional[tuple[bool, int]]:
    """
    Read a quantifier at position i.

    Returns:
        (is_unbounded, index past the quantifier and any lazy/possessive
        modifier), or None if no quantifier starts at i
    """
    ch = source[i]
    if ch in "*+":
        end = i + 1
        unbounded = True
    elif ch == "?":
        end = i + 1
        unbounded = False
    elif ch == "{":
        match = QuantifierPatterns.COUNTED.match(source, i)
        if not match or not (match.group(1) or match.group(3)) and not match.group(2):
            return None
        end = match.end()
        unbounded = bool(match.group(2)) and not match.group(3)
    else:
        return None

    if end < len(source) and source[end] in "?+":
        end += 1
    return unbounded, end


def find_backtracking_groups(source: str) -> list[int]:
    """
    Find groups whose unbounded repetition can backtrack catastrophically.

    A group repeated with an unbounded quantifier is flagged when it contains
    another unbounded repetition, as in (a+)+, (\\w*\\s?)* and (x+y){2,}, or an
    alternation, as in (a|ab)+ and (?:\\w|\\d)+. Either shape can make the
    engine try an exponential number of ways to split the input before
    failing. Alternations are flagged whether or not their branches overlap.

    This is a static check on the shape of the source. Shapes it does not
    recognise are still bounded at run time by the per-search timeout of the
    segmentation budget.

    Args:
        source: Regex source string

    Returns:
        Offsets (into source) of the opening parenthesis of each offending group
    """
    offenders = []
    # Each open group: [offset of "(", contains an unbounded quantifier, contains "|"]
    open_groups = []
    last_closed = None
    i = 0

    while i < len(source):
        ch = source[i]

        if ch == "\\":
            last_closed = None
            i += 2
            continue

        if ch == "[":
            last_closed = None
            i = _skip_character_class(source, i)
            continue

        if ch == "(":
            open_groups.append([i, False, False])
            last_closed = None
            i += 1
            # Group modifiers like ?: ?<! ?P<name> are not quantifiers
            if i < len(source) and source[i] == "?":
                i += 1
            continue

        if ch == ")":
            if open_groups:
                start, unbounded, alternation = open_groups.pop()
                last_closed = (start, unbounded or alternation)
                if open_groups:
                    open_groups[-1][1] = open_groups[-1][1] or unbounded
                    open_groups[-1][2] = open_groups[-1][2] or alternation
            i += 1
            continue

        if ch == "|":
            if open_groups:
                open_groups[-1][2] = True
            last_closed = None
            i += 1
            continue

        quantifier = _read_quantifier(source, i)
        if quantifier is not None:
            unbounded, end = quantifier
            if unbounded:
                if last_closed is not None and last_closed[1]:
                    offenders.append(last_closed[0])
                for group in open_groups:
                    group[1] = True
            last_closed = None
            i = end
            continue

        last_closed = None
        i += 1

    return offenders
