"""Per-section CSS reduction.

``reduce_css`` restricts one stylesheet to the rules whose selectors match
something inside one markup fragment.  ``reduce_section`` runs it for every
stylesheet of a page and stitches the results together for one section.
"""

from __future__ import annotations

import asyncio
import logging
import re

import soupsieve
import tinycss2
from bs4 import BeautifulSoup

from sectioncss.config import settings
from sectioncss.purge.errors import ReduceError
from sectioncss.purge.models import Issue, ReducedCSS, Section, Stage, StylesheetContent

logger = logging.getLogger(__name__)

# Pseudo-classes and pseudo-elements that depend on user interaction or
# generated content; a static tree never matches them.
_UNMATCHABLE_PSEUDO = re.compile(
    r"::[\w-]+(?:\([^)]*\))?"
    r"|:(?:hover|focus-within|focus-visible|focus|active|visited|target"
    r"|before|after|first-line|first-letter)(?![\w-])",
    re.IGNORECASE,
)
_TRAILING_COMBINATOR = re.compile(r"[\s>+~]$")

# At-rules whose block holds ordinary rules; they are reduced recursively.
_GROUP_AT_RULES = {
    "media",
    "supports",
    "layer",
    "container",
    "scope",
    "starting-style",
    "document",
    "-moz-document",
}
_DROPPED_AT_RULES = {"charset"}


def _parse_stylesheet(css: str) -> list:
    # @import targets are kept as text and never followed.
    return tinycss2.parse_stylesheet(css, skip_comments=True, skip_whitespace=True)


def split_selector_list(prelude) -> list[str]:
    """Split a rule prelude on its top-level commas.

    Commas inside functional notation (``:is(.a, .b)``, ``:not(...)``) stay
    with their selector.
    """
    groups: list[list] = [[]]
    for token in prelude:
        if token.type == "literal" and token.value == ",":
            groups.append([])
        else:
            groups[-1].append(token)
    return [text for text in (tinycss2.serialize(group).strip() for group in groups) if text]


def matchable_selector(selector: str) -> str:
    """Strip pseudo parts that cannot match a static tree from *selector*.

    ``a:hover`` becomes ``a``; ``::selection`` becomes ``*``; ``ul > :focus``
    becomes ``ul > *``.
    """
    cleaned = _UNMATCHABLE_PSEUDO.sub("", selector)
    if not cleaned.strip():
        return "*"
    if _TRAILING_COMBINATOR.search(cleaned):
        return cleaned.rstrip() + " *"
    return cleaned.strip()


def selector_matches(fragment: BeautifulSoup, selector: str) -> bool:
    """Return ``True`` if *selector* matches at least one element of *fragment*.

    Selectors the matcher cannot evaluate count as matching.
    """
    try:
        return fragment.select_one(matchable_selector(selector)) is not None
    except (soupsieve.SelectorSyntaxError, NotImplementedError) as exc:
        logger.debug("Keeping selector %r the matcher cannot evaluate: %s", selector, exc)
        return True



def _reduce_style_rule(rule, fragment: BeautifulSoup) -> str | None:
    kept = [
        selector
        for selector in split_selector_list(rule.prelude)
        if selector_matches(fragment, selector)
    ]
    if not kept:
        return None
    # Nested rules and declarations in the block are kept as written.
    return f"{', '.join(kept)} {{{tinycss2.serialize(rule.content)}}}"


def _reduce_group_rule(rule, fragment: BeautifulSoup) -> str | None:
    children = tinycss2.parse_rule_list(rule.content, skip_comments=True, skip_whitespace=True)
    inner, used = _reduce_rules(children, fragment)
    if not used:
        return None
    header = f"@{rule.at_keyword}"
    prelude = tinycss2.serialize(rule.prelude).strip()
    if prelude:
        header = f"{header} {prelude}"
    body = "\n".join(inner)
    return f"{header} {{\n{body}\n}}"


def _reduce_rules(rules, fragment: BeautifulSoup) -> tuple[list[str], bool]:
    """Reduce a rule list; report whether any style rule in it survived."""
    output: list[str] = []
    used = False
    for rule in rules:
        if rule.type == "qualified-rule":
            text = _reduce_style_rule(rule, fragment)
            used = used or text is not None
        elif rule.type == "at-rule":
            keyword = rule.lower_at_keyword
            if keyword in _DROPPED_AT_RULES:
                continue
            if keyword in _GROUP_AT_RULES and rule.content is not None:
                text = _reduce_group_rule(rule, fragment)
                used = used or text is not None
            else:
                text = rule.serialize()
        elif rule.type == "error":
            logger.debug("Skipping unparseable CSS at line %s: %s", rule.source_line, rule.message)
            continue
        else:
            continue
        if text:
            output.append(text)
    return output, used


def reduce_css(markup: str, css: str) -> str:
    """Return *css* restricted to the rules used by *markup*.

    The fragment is matched as if it were a full document.  Style rules keep
    only their matching selectors; group rules (``@media``, ``@supports``,
    ``@layer``, ``@container``, ...) are reduced recursively and dropped when
    nothing inside them is used.  Selector-less rules (``@font-face``,
    ``@keyframes``, ``@import``, ...) are kept only when at least one style
    rule survives, so a stylesheet nothing in the fragment uses reduces to
    the empty string.

    Raises:
        ReduceError: If the stylesheet or the fragment cannot be processed.
    """
    try:
        fragment = BeautifulSoup(markup, "html.parser")
        output, used = _reduce_rules(_parse_stylesheet(css), fragment)
    except Exception as exc:
        raise ReduceError(f"Could not reduce stylesheet: {exc}") from exc

    if not used:
        return ""
    return "\n".join(output)


async def reduce_section(
    section: Section,
    stylesheets: list[StylesheetContent],
    *,
    limit: asyncio.Semaphore | None = None,
) -> tuple[ReducedCSS, list[Issue]]:
    """Reduce every stylesheet against *section* and concatenate the results.

    The reductions run as independent worker-thread tasks; their outputs are
    joined in stylesheet order regardless of completion order.  A failing
    reduction contributes nothing and is recorded as an issue.
    """
    if limit is None:
        limit = asyncio.Semaphore(settings.max_concurrent_reductions)
    semaphore = limit

    async def _one(stylesheet: StylesheetContent) -> str:
        async with semaphore:
            return await asyncio.to_thread(reduce_css, section.markup, stylesheet.css)

    results = await asyncio.gather(
        *(_one(stylesheet) for stylesheet in stylesheets),
        return_exceptions=True,
    )

    parts: list[str] = []
    issues: list[Issue] = []
    for stylesheet, result in zip(stylesheets, results):
        if isinstance(result, ReduceError):
            logger.warning(
                "Error purging CSS for section %s with %s: %s",
                section.id,
                stylesheet.url,
                result,
            )
            issues.append(
                Issue(
                    stage=Stage.REDUCING_PER_SECTION,
                    resource=f"{section.id} <- {stylesheet.url}",
                    message=str(result),
                )
            )
            continue
        if isinstance(result, BaseException):
            raise result
        if result.strip():
            parts.append(result)

    return ReducedCSS(section_id=section.id, css="\n".join(parts)), issues
