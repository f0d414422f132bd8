from typing import List

from .schemas import BrandAnalysis, LogoType

TRANSCRIPT_ANALYSIS_PROMPT = """You are a senior brand strategist. You are given the transcript of a meeting between a designer and a client.
Extract the brand attributes a logo designer needs.

Extract:
1. Company name: the official or working name of the company
2. Industry: the sector they operate in
3. Brand personality: 3-5 adjectives describing the brand's character (e.g. "technical", "trustworthy", "warm", "premium")
4. Key differentiators: what sets them apart from competitors
5. Target audience: who they are trying to reach
6. Visual preferences: aesthetic preferences mentioned (colors, styles, moods)
7. Anti-preferences: things they explicitly do not want
8. Suggested direction: wordmark, pictorial mark or abstract icon, with a short reason

If the transcript says not to do something, record it as an anti-preference.

Output format (required):
Return ONLY a JSON object with exactly this structure:
{
  "companyName": "string",
  "industry": "string",
  "brandPersonality": ["trait1", "trait2", "trait3"],
  "keyDifferentiators": ["diff1", "diff2"],
  "targetAudience": "string",
  "visualPreferences": ["preference1"],
  "antiPreferences": ["anti-preference1"],
  "suggestedDirection": {
    "type": "wordmark | pictorial | abstract",
    "reasoning": "1-2 sentences"
  }
}

No text before or after the JSON."""

LOGO_SYSTEM_PROMPT = """You are a modernist logo designer in the tradition of Paul Rand, Saul Bass and Massimo Vignelli.
You design logos directly as SVG code.

Principles:
- Simplicity above all. Every element must earn its place; no more than 2-3 visual elements.
- Geometric precision: clean curves, consistent stroke widths, optical (not just mathematical) balance.
- Negative space is a design element.
- The mark must read at 16x16px and at billboard size.
- Pure black (#000000) on white (#FFFFFF). No gradients, shadows, filters or effects.

Tonal calibration (decide this before drawing):
- WARM brands (community, craft, lifestyle): light strokes (1-3), open forms, rounded terminals
- TECHNICAL brands (engineering, infrastructure): medium strokes (3-5), tight geometry, sharp corners
- ELEGANT brands (luxury, premium): thin strokes (1-2), generous spacing, refined proportions
- BOLD brands (consumer, energy): heavy strokes (5-8), chunky forms, strong presence

Typography (choose the voice from the brand personality and justify it in the rationale):
- technical: font-family="'Courier New', monospace"
- modern / minimal: font-family="Helvetica, Arial, sans-serif"
- elegant / premium: font-family="Georgia, 'Times New Roman', serif"
- friendly / warm: font-family="Verdana, Geneva, sans-serif"
- bold / industrial: font-family="'Arial Black', sans-serif"

SVG requirements:
- viewBox "0 0 200 200", logo visually centered
- Only <path>, <circle>, <rect>, <polygon>, <line>, <text>, <g>, <defs>, <clipPath>
- Presentation attributes only (fill, stroke, stroke-width); no inline styles, images or external references
- Any text MUST use <text> elements; never draw letterforms with <path>
- Under 50 lines, all paths closed and well formed

Your design is one of a set of concepts for the same brand; keep a geometric language that belongs to one visual system.

Output format (required):
Return ONLY a JSON object, no markdown:
{
  "name": "Concept name (2-3 words)",
  "type": "wordmark | pictorial | abstract",
  "rationale": "2-3 sentences connecting the design choices to the brand.",
  "svg": "<svg xmlns='http://www.w3.org/2000/svg' viewBox='0 0 200 200'>...</svg>"
}"""

PICTORIAL_VARIANT_DIRECTIVE = """
VARIANT DIRECTIVE: this is a SECOND pictorial concept for the same brand. Take a different visual angle:
- If the obvious metaphor is what the company DOES, explore what it VALUES or how it FEELS instead.
- Change the geometric language: angular instead of curved, outlined instead of filled (or the reverse).
- Look for an adjacent concept or a hidden meaning in the company name.
"""


def transcript_analysis_prompt(formatted_transcript: str) -> str:
    return f"{TRANSCRIPT_ANALYSIS_PROMPT}\n\nTRANSCRIPT:\n{formatted_transcript}"


def _join(values: List[str]) -> str:
    return ", ".join(values)


def brand_context(brand_analysis: BrandAnalysis) -> str:
    """Render the brand analysis as the shared header of every logo prompt."""
    lines = [
        "BRAND CONTEXT:",
        f"- Company Name: {brand_analysis.company_name}",
        f"- Industry: {brand_analysis.industry}",
        f"- Brand Personality: {_join(brand_analysis.brand_personality)}",
        f"- Key Differentiators: {_join(brand_analysis.key_differentiators)}",
        f"- Target Audience: {brand_analysis.target_audience}",
    ]
    if brand_analysis.visual_preferences:
        lines.append(f"- Visual Preferences: {_join(brand_analysis.visual_preferences)}")
    if brand_analysis.anti_preferences:
        lines.append(f"- Avoid: {_join(brand_analysis.anti_preferences)}")
    return "\n".join(lines)


def wordmark_prompt(brand_analysis: BrandAnalysis) -> str:
    name = brand_analysis.company_name
    return f"""{brand_context(brand_analysis)}

YOUR TASK:
Design a WORDMARK logo for "{name}": the company name in a distinctive typographic treatment.

Wordmark guidance:
- Legibility is the first priority. Use <text> elements for the name.
- Choose ONE structure that fits this brand (do not default to stacked uppercase with a rule):
  * SINGLE LINE: distinctive through font, weight and spacing (short names, confident brands)
  * MONOGRAM + NAME: a bold initial paired with the full name at a different scale (premium brands)
  * MIXED WEIGHT: one word heavy, the other light (two-word names)
  * LOWERCASE: tight tracking, modern feel (approachable or tech brands)
  * STACKED: words on separate lines with real size or weight contrast
  * INLINE WITH SYMBOL: a small dot, slash, bracket or underscore worked into the name (developer brands)
- Use font-weight, letter-spacing, font-size and text-anchor to create character.
- The name is the hero; a subtle geometric accent is allowed only if it serves the brand.
- Squint test: if the name is no longer readable, simplify.

Create a single, polished wordmark concept. Return only the JSON object."""


def pictorial_prompt(brand_analysis: BrandAnalysis, variant: int = 1) -> str:
    name = brand_analysis.company_name
    directive = PICTORIAL_VARIANT_DIRECTIVE if variant == 2 else ""
    return f"""{brand_context(brand_analysis)}

YOUR TASK:
Design a PICTORIAL MARK for "{name}": a recognisable symbol that relates to what the company does or stands for.
{directive}
Pictorial guidance:
- Use metaphor and association; do not be literal.
- Avoid industry cliches (no nodes for AI, globes for international, lightbulbs for ideas, gears for engineering).
- The mark must work without the company name.
- Focus on what makes THIS company different, not on its industry.
- Build from <path>, <circle>, <rect>, <polygon>; at most 2-3 elements, each deliberately placed.

Think step by step:
1. What makes this brand unique?
2. Which unexpected visual metaphor captures that?
3. How far can it be reduced while staying unexpected?

Create a single, polished pictorial mark concept. Return only the JSON object."""


def abstract_prompt(brand_analysis: BrandAnalysis) -> str:
    name = brand_analysis.company_name
    return f"""{brand_context(brand_analysis)}

YOUR TASK:
Design an ABSTRACT ICON for "{name}": a geometric mark that could only belong to this company.

Before drawing, decide:
- the ONE word that captures the brand
- the geometric RELATIONSHIP that expresses it (convergence, tension, nesting, slicing, rotation, intersection)
- the micro-story the mark tells in pure geometry

Abstract guidance:
- Start from a concept, not a shape. Every element needs a one-sentence reason to exist.
- Never use: overlapping circles, asterisks or starbursts, lattice grids or dot matrices,
  stacked bars, radial symmetry with 4+ points, swooshes, unexplained polygons.
- Prefer: a single shape with a meaningful cut or void, two shapes in tension,
  a familiar form rotated or cropped into ambiguity, negative space forming a second shape,
  interlocking forms that need each other.
- At most 2-3 elements, each load-bearing. Match stroke weight to the brand's tonal register.
- Quality bar: if it could sit on a competitor's website unnoticed, redesign it.

Create a single, polished abstract icon concept. Return only the JSON object."""


def logo_prompt(logo_type: LogoType, brand_analysis: BrandAnalysis, variant: int = 1) -> str:
    if logo_type == LogoType.WORDMARK:
        return wordmark_prompt(brand_analysis)
    if logo_type == LogoType.PICTORIAL:
        return pictorial_prompt(brand_analysis, variant)
    if logo_type == LogoType.ABSTRACT:
        return abstract_prompt(brand_analysis)
    raise ValueError(f"Unknown logo type: {logo_type}")
