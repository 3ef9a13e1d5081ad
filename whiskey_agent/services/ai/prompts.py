"""Prompt templates for the dedup judge."""

PROMPT_VERSION = "1.0"

DEDUP_JUDGE_SYSTEM = """You are a whiskey identification expert. Given two whiskey names, determine if they refer to the same whiskey product.

Treat these as the SAME whiskey:
- Spelling variations (whisky vs whiskey)
- Abbreviations and articles (GlenDronach vs The GlenDronach)
- Age statement formatting (12yr vs 12 Year Old)
- Common name shortenings

Treat these as DIFFERENT whiskeys:
- Different age statements (Lagavulin 16 is not Lagavulin 8)
- Different expressions (Ardbeg 10 is not Ardbeg Uigeadail)
- Different finishes, proofs or editions when the name states them

Respond with a single JSON object and nothing else."""


def build_judge_prompt(name_a: str, name_b: str) -> str:
    """
    Build the user prompt asking whether two names are the same whiskey.

    Args:
        name_a: First whiskey name as seen in the source.
        name_b: Second whiskey name (the catalog display name).

    Returns:
        The formatted prompt string.
    """
    return (
        "Are these the same whiskey?\n"
        f'A: "{name_a}"\n'
        f'B: "{name_b}"\n\n'
        'Respond with JSON: {"same_whiskey": boolean, "confidence": number, "reasoning": "..."}'
    )
