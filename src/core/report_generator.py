"""
Report Generator for PrepKit interviews

Scores a finished interview from its transcript using the text-generation
provider. Any provider or schema failure degrades to a heuristic report,
so report generation never raises to the caller.
"""

import json
import logging
import random

from pydantic import ValidationError

from src.core.errors import ExternalServiceError, GenerationValidationError
from src.core.text_generation import GenerationConfig, TextGenerationProvider
from src.models.question import Question
from src.models.report import (
    ComparisonToStandards,
    InterviewReport,
    NextInterviewSuggestion,
    QuestionAnalysis,
    QuestionFeedback,
    Recommendation,
    ScoreBreakdown,
    ScoringDetails,
    Strength,
    Weakness,
)
from src.prompts.report import ReportPrompts

logger = logging.getLogger(__name__)

# Lower temperature than question generation for more consistent scoring
REPORT_GENERATION_CONFIG = GenerationConfig(
    temperature=0.5,
    max_output_tokens=4000,
    top_p=0.9,
    json_output=True,
)


class ReportGenerator:
    """
    Generates scored interview reports.

    Uses the provider for the real analysis and falls back to a crude
    length-based heuristic when the provider is unavailable or its
    output does not match the report schema.
    """

    def __init__(self, provider: TextGenerationProvider):
        self.provider = provider
        self.prompts = ReportPrompts()

    async def generate(
        self,
        session_id: str,
        transcript: str,
        questions: list[Question],
        track: str,
        difficulty: str,
    ) -> InterviewReport:
        """
        Generate the interview report.

        Args:
            session_id: Session being scored
            transcript: Raw call transcript
            questions: Questions that were asked
            track: Interview track
            difficulty: Difficulty tier

        Returns:
            InterviewReport (is_fallback=True when the heuristic was used)
        """
        prompt = self.prompts.generate_report_prompt(transcript, questions, track, difficulty)

        try:
            response = await self.provider.generate(prompt, REPORT_GENERATION_CONFIG)
            report = self.parse_report(response, session_id)
        except (ExternalServiceError, GenerationValidationError) as e:
            logger.warning(f"Report generation failed for session {session_id}, using fallback: {e}")
            return self.fallback_report(session_id, transcript, questions, difficulty)

        logger.info(f"Generated report for session {session_id}: score={report.overall_score}")
        return report

    def parse_report(self, response: str, session_id: str) -> InterviewReport:
        """Parse and validate the provider's JSON report object."""
        json_start = response.find("{")
        json_end = response.rfind("}") + 1
        if json_start < 0 or json_end <= json_start:
            raise GenerationValidationError("No JSON object in report response")

        try:
            data = json.loads(response[json_start:json_end])
        except json.JSONDecodeError as e:
            raise GenerationValidationError(f"Invalid report JSON: {e}") from e

        if not isinstance(data, dict):
            raise GenerationValidationError("Report response is not an object")

        # Identity fields are ours, not the provider's
        for key in ("reportId", "report_id", "generatedAt", "generated_at", "isFallback", "is_fallback"):
            data.pop(key, None)
        data["sessionId"] = session_id
        data.pop("session_id", None)

        try:
            return InterviewReport.model_validate(data)
        except ValidationError as e:
            raise GenerationValidationError(f"Report schema mismatch: {e}") from e

    def fallback_report(
        self,
        session_id: str,
        transcript: str,
        questions: list[Question],
        difficulty: str,
    ) -> InterviewReport:
        """Heuristic report. Per-question scores carry random jitter."""
        base_score = min(70, len(transcript) // 100 + 50)

        return InterviewReport(
            session_id=session_id,
            overall_score=base_score,
            score_breakdown=ScoreBreakdown(
                technical_depth=base_score - 5,
                communication=base_score,
                problem_solving=base_score - 10,
                trade_off_analysis=base_score - 15,
                time_management=base_score,
            ),
            summary="Basic analysis completed. For detailed feedback, please contact support.",
            question_analysis=[
                QuestionAnalysis(
                    question_id=q.id,
                    question_text=q.text,
                    user_score=base_score + random.randint(-5, 4),
                    feedback=QuestionFeedback(
                        what_you_did_well=["Attempted the question", "Provided a response"],
                        what_could_be_better=["Add more details", "Consider edge cases"],
                        missing_points=["Additional examples"],
                        scoring_details=ScoringDetails(
                            technical_correctness=7,
                            completeness=6,
                            communication=7,
                            depth_of_thinking=6,
                        ),
                    ),
                )
                for q in questions
            ],
            strengths=[
                Strength(
                    area="Participation",
                    description="You attempted all questions and provided responses",
                    importance="Good effort",
                )
            ],
            weaknesses=[
                Weakness(
                    area="Detail Level",
                    description="Responses could benefit from more specific details",
                    importance="Important for technical interviews",
                    focus_on="Add concrete examples and edge cases",
                )
            ],
            recommendations=[
                Recommendation(
                    priority=1,
                    topic="Practice more questions",
                    resources=["PrepKit modules", "Practice platforms"],
                    time_to_master="2-3 hours",
                    practice_strategy="Do more mock interviews",
                )
            ],
            comparison_to_standards=ComparisonToStandards(
                your_score=base_score,
                average_for_difficulty=65,
                top_performer_score=85,
                status_message="Keep practicing to improve your score",
            ),
            next_steps=[
                "Review the questions you struggled with",
                "Practice similar problems",
                "Schedule another mock interview",
            ],
            suggestion_for_next_interview=NextInterviewSuggestion(
                recommended_topic="Same type with focus on weak areas",
                focus_areas=["Detail improvement"],
                difficulty=difficulty,
                estimated_improvement="+5-10 points",
            ),
            is_fallback=True,
        )
