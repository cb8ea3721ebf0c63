"""Best-effort extraction of labelled sections from a model completion.

The model is asked to answer with three labelled lines (references,
curiosities, author's intention) each ending in an emoji, but nothing
enforces that. Everything here is total: any input, including ``None`` or an
empty string, yields all three sections, falling back to a fixed description
and icon for whatever could not be found.
"""
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..ports.analysis_repo import InsightItem

FALLBACK_DESCRIPTION = "None found."

REFERENCES = "references"
CURIOSITIES = "curiosities"
INTENTION = "intention"

DEFAULT_ICONS: Dict[str, str] = {
    REFERENCES: "\U0001F517",  # link
    CURIOSITIES: "\U0001F4A1",  # light bulb
    INTENTION: "\U0001F4DD",  # memo
}

TITLES: Dict[str, str] = {
    REFERENCES: "References",
    CURIOSITIES: "Curiosities",
}

# Misc symbols/dingbats, symbols & pictographs (incl. emoticons/transport),
# supplemental symbols & pictographs, symbols & pictographs extended-A.
EMOJI = "[\u2600-\u27bf\U0001f300-\U0001f6ff\U0001f900-\U0001f9ff\U0001fa70-\U0001faff]"
_EMOJI_TOKEN = EMOJI + "\ufe0f?"

_LABEL_WORDS: Dict[str, str] = {
    REFERENCES: r"references?",
    CURIOSITIES: r"curiosit(?:y|ies)",
    INTENTION: r"(?:author(?:'s|s'|\u2019s)?\s+)?intention",
}


# labels start a line or follow the end of a sentence or an emoji
_LABEL_START = (
    r"(?:^|(?<=\n)|(?<=[.!?;][^\S\n])|(?<=\ufe0f[^\S\n])|(?<=" + EMOJI + r"[^\S\n]))[^\S\n]*"
)


def _label_pattern(word: str) -> "re.Pattern[str]":
    # optional list number and markdown, up to five qualifier words
    # ("Cultural, historical or literary references"), then the colon
    return re.compile(
        _LABEL_START
        + r"(?:[-#\u2022]+[^\S\n]*)?(?:\d+[.)][^\S\n]*)?[*_]*[^\S\n]*"
        r"(?:[^\W\d_]+,?[^\S\n]+){0,5}?"
        r"\b" + word + r"\b[^:\n]{0,40}?[*_]*[^\S\n]*:[*_]*",
        re.IGNORECASE,
    )


_LABELS: Dict[str, "re.Pattern[str]"] = {name: _label_pattern(word) for name, word in _LABEL_WORDS.items()}

_TRAILING_EMOJI = re.compile(r"(?:" + _EMOJI_TOKEN + r"\s*)+$")
_LEADING_EMOJI = re.compile(r"^(?:" + _EMOJI_TOKEN + r"\s*)+")
_SINGLE_EMOJI = re.compile(EMOJI)
_MARKDOWN = re.compile(r"[*#`]+")


@dataclass(frozen=True)
class Section:
    description: str
    icon: str
    found: bool = True


@dataclass(frozen=True)
class ExtractedAnalysis:
    references: Section
    curiosities: Section
    intention: Section


def _fallback(name: str) -> Section:
    return Section(description=FALLBACK_DESCRIPTION, icon=DEFAULT_ICONS[name], found=False)


def _find_block(text: str, name: str) -> Optional[str]:
    match = _LABELS[name].search(text)
    if not match:
        return None
    start = match.end()
    end = len(text)
    for other in _LABELS.values():
        nxt = other.search(text, start)
        if nxt and nxt.start() < end:
            end = nxt.start()
    return text[start:end]


def _split_icon(description: str) -> Tuple[str, Optional[str]]:
    trailing = _TRAILING_EMOJI.search(description)
    if trailing:
        icon = _SINGLE_EMOJI.search(trailing.group(0)).group(0)
        return description[: trailing.start()].rstrip(), icon
    leading = _LEADING_EMOJI.match(description)
    if leading:
        icon = _SINGLE_EMOJI.search(leading.group(0)).group(0)
        return description[leading.end():].lstrip(), icon
    return description, None


def _clean(block: str) -> str:
    block = _MARKDOWN.sub("", block)
    block = " ".join(block.split())
    return block.strip(" -\u2013\u2014")


def extract_section(text: str, name: str) -> Section:
    block = _find_block(text, name)
    if block is None:
        return _fallback(name)
    description, icon = _split_icon(_clean(block))
    if not description:
        return _fallback(name)
    return Section(description=description, icon=icon or DEFAULT_ICONS[name])


def extract_analysis(text: Optional[str]) -> ExtractedAnalysis:
    if not isinstance(text, str):
        text = "" if text is None else str(text)
    return ExtractedAnalysis(
        references=extract_section(text, REFERENCES),
        curiosities=extract_section(text, CURIOSITIES),
        intention=extract_section(text, INTENTION),
    )


def build_insights(extracted: ExtractedAnalysis) -> Tuple[List[InsightItem], List[InsightItem], str]:
    """Shape an extraction into (references, curiosities, author_intention)."""
    references = [
        InsightItem(
            title=TITLES[REFERENCES],
            description=extracted.references.description,
            icon=extracted.references.icon,
        )
    ]
    curiosities = [
        InsightItem(
            title=TITLES[CURIOSITIES],
            description=extracted.curiosities.description,
            icon=extracted.curiosities.icon,
        )
    ]
    author_intention = f"{extracted.intention.icon} {extracted.intention.description}"
    return references, curiosities, author_intention
