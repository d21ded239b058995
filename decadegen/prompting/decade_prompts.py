"""Decade restyling prompt templates.

This module only builds prompt strings. Model invocation and validation happen
in `decadegen.image.service`.

Design constraints:
    - Deterministic construction for identical inputs.
    - No I/O or global state mutation.
"""

# =========================================================
# SUPPORTED DECADES
# =========================================================
# Order is the display order used by callers that iterate all decades.

DECADES = ("1950s", "1960s", "1970s", "1980s", "1990s", "2000s")


# =========================================================
# DECADE PROMPT
# =========================================================
# Component order:
#   1) Restyling instruction naming the decade
#   2) Aspects to change (clothing, hairstyle, photo quality, aesthetic)
#   3) Output constraint (photorealistic, person clearly visible)

DECADE_PROMPT_TEMPLATE = (
    "Reimagine the person in this photo in the style of the {decade}. "
    "This includes clothing, hairstyle, photo quality, and the overall "
    "aesthetic of that decade. The output must be a photorealistic image "
    "showing the person clearly."
)


def normalize_decade(decade: str) -> str:
    """Accept `1970s`, `1970`, `70s` and return the canonical `1970s` form."""
    value = str(decade).strip().lower()
    if not value.endswith("s"):
        value += "s"
    if len(value) == 3:
        value = "19" + value if value[0] != "0" else "20" + value
    return value


def build_decade_prompt(decade: str) -> str:
    """Build the restyling prompt for one decade.

    Args:
        decade: Decade label; see `normalize_decade` for accepted spellings.

    Returns:
        Prompt text for the generation request.

    Raises:
        ValueError: When the decade is not in `DECADES`.
    """
    canonical = normalize_decade(decade)
    if canonical not in DECADES:
        raise ValueError(
            f"Unsupported decade: {decade!r}. Choose one of: {', '.join(DECADES)}"
        )
    return DECADE_PROMPT_TEMPLATE.format(decade=canonical)
