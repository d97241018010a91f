"""Report analyzer — one LLM call per report window.

Takes the inspector's recent reports (newest first). The newest is the report
under review; the rest are shown to the model as prior context for the
inspector's writing style. The raw response is then interpreted: affirming
"looks good" answers and very short answers mean there is nothing to
recommend.
"""

import asyncio
import logging
from typing import Protocol, Sequence

from app.services.recommendation.config import RecommendationConfig, recommendation_config
from app.services.recommendation.errors import AnalysisUnavailable
from app.services.recommendation.prompts import load_prompt
from app.services.recommendation.record_source import ReportRecord

logger = logging.getLogger(__name__)

_COACH_GUIDE = load_prompt("report_coach_guide.md")


class Completer(Protocol):
    async def complete(
        self, system: str, user: str, *, max_tokens: int = ..., temperature: float = ...
    ) -> str:
        ...


def build_analysis_prompt(records: Sequence[ReportRecord]) -> str:
    """User prompt: prior reports for style context, then the new report."""
    new_report, previous = records[0], records[1:]

    lines = ["Analyze this NEW safety inspection report and provide specific feedback to improve it.", ""]

    if previous:
        lines.append("PREVIOUS REPORTS (for context on writing style):")
        for index, report in enumerate(previous, start=1):
            lines.append("")
            lines.append(f"Previous Report {index}:")
            lines.append(f"- Observed Hazard: {report.observed_hazard}")
            lines.append(f"- Severity: {report.severity_rating}")
            lines.append(f"- Recommended Action: {report.recommended_action}")
        lines.extend(["", "---", ""])

    lines.append("NEW REPORT TO ANALYZE:")
    lines.append(f"Date: {new_report.date_of_inspection}")
    lines.append(f"Location: {new_report.location}")
    lines.append(f"Observed Hazard: {new_report.observed_hazard}")
    lines.append(f"Severity: {new_report.severity_rating}")
    lines.append(f"Recommended Action: {new_report.recommended_action}")
    lines.append("")
    lines.append(
        "Provide 1-2 specific tips to improve THIS new report. Focus on clarity, detail, "
        "and actionability. If the report is already well-written, say "
        '"This report is well-written" and nothing else.'
    )
    return "\n".join(lines)


class ReportAnalyzer:
    """Wraps the LLM call with a deadline and response interpretation."""

    def __init__(
        self,
        llm: Completer,
        config: RecommendationConfig = recommendation_config,
        timeout: float | None = None,
    ):
        self._llm = llm
        self._cfg = config
        self._timeout = timeout if timeout is not None else config.analyzer_timeout_seconds

    async def analyze(self, records: Sequence[ReportRecord]) -> str | None:
        """Return a recommendation, or None when there is no actionable feedback.

        Raises:
            AnalysisUnavailable: the LLM call failed or exceeded the timeout.
        """
        if not records:
            return None

        prompt = build_analysis_prompt(records)
        try:
            raw = await asyncio.wait_for(
                self._llm.complete(
                    system=_COACH_GUIDE,
                    user=prompt,
                    max_tokens=self._cfg.llm.max_tokens,
                    temperature=self._cfg.llm.temperature,
                ),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as e:
            logger.warning(f"Report analysis timed out after {self._timeout}s")
            raise AnalysisUnavailable("Analysis timed out") from e
        except Exception as e:
            logger.warning(f"Report analysis failed: {e}")
            raise AnalysisUnavailable(str(e)) from e

        return self.interpret(raw)

    def interpret(self, raw: str | None) -> str | None:
        text = (raw or "").strip()
        if not text:
            return None

        rules = self._cfg.interpretation
        lowered = text.lower()
        if len(text) < rules.min_length or any(p in lowered for p in rules.affirming_phrases):
            logger.info("Report is already good, no recommendation needed")
            return None

        logger.info("Recommendation generated (%d chars)", len(text))
        return text
