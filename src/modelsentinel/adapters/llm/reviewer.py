"""LLM-backed implementation of the change-set reviewer port."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from modelsentinel.domain.review import SYSTEM_PROMPT, build_user_prompt

from .parsing import parse_review_response

if TYPE_CHECKING:
    from modelsentinel.domain.ports.review import LLMClient
    from modelsentinel.domain.reconciliation.changeset import ChangeSet
    from modelsentinel.domain.review import ReviewResult

log = getLogger(__name__)


class LLMChangeSetReviewer:
    def __init__(self, client: LLMClient) -> None:
        self._client = client

    def evaluate(self, changeset: ChangeSet) -> ReviewResult | None:
        if not changeset.new and not changeset.updated:
            return None
        log.info(
            "Requesting LLM review for %s (%s new, %s updated)",
            changeset.provider,
            len(changeset.new),
            len(changeset.updated),
        )
        text = self._client.complete(SYSTEM_PROMPT, build_user_prompt(changeset))
        result = parse_review_response(text)
        log.info("LLM review returned %s verdicts for %s", len(result.verdicts), changeset.provider)
        return result

