"""
RewriteRule and RewriteResult — ordered, named text rewrite rules.

Both the HTML sanitizer and the preview extractor are expressed as a table
of rules applied in sequence. Each rule is independently testable through
``rule.apply(text)``.
"""
import logging
from dataclasses import dataclass, field
from re import Pattern
from typing import Callable, List, Optional, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RewriteRule:
    """A single named rewrite step."""

    name: str
    rewrite: Callable[[str], str]
    rationale: str
    pattern: Optional[Pattern[str]] = None      # primary trigger pattern, if any

    def apply(self, text: str) -> str:
        return self.rewrite(text)

    def __repr__(self) -> str:
        return f"RewriteRule({self.name})"


@dataclass
class RewriteResult:
    """Outcome of running a rule table over one input."""

    text: str
    rules_applied: List[str] = field(default_factory=list)
    rounds: int = 1
    fallback_applied: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.rules_applied) or self.fallback_applied


def apply_rules(rules: Sequence[RewriteRule], text: str) -> RewriteResult:
    """
    Run *rules* in order, each consuming the previous rule's output.

    Returns:
        RewriteResult with the final text and the names of the rules that
        changed it (in application order).
    """
    applied: List[str] = []
    for rule in rules:
        rewritten = rule.apply(text)
        if rewritten != text:
            applied.append(rule.name)
            logger.debug("Rule '%s' rewrote %d -> %d chars", rule.name, len(text), len(rewritten))
        text = rewritten
    return RewriteResult(text=text, rules_applied=applied)
