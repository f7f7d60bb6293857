"""
AI Report Generation Prompts

Contains the prompt used to score a finished interview from its
transcript and the questions that were asked.
"""

from src.models.question import Question


class ReportPrompts:
    """
    Prompt templates for generating the scored report.

    The provider is asked for a single JSON object matching
    InterviewReport (camelCase keys, without id/session/timestamp).
    """

    SYSTEM_CONTEXT = """You are an expert technical interviewer analyzing a mock interview session.
Your job is to provide a detailed, actionable report to help the candidate improve.

Analyze the interview objectively and provide:
1. Accurate scoring based on actual performance
2. Specific, actionable feedback
3. Clear strengths and weaknesses
4. Concrete recommendations with resources
5. Encouraging but honest assessment

Format your response as a JSON object matching the specified structure."""

    def generate_report_prompt(
        self,
        transcript: str,
        questions: list[Question],
        track: str,
        difficulty: str,
    ) -> str:
        """Generate prompt for the full interview report."""

        questions_text = "\n\n".join(
            f"{i}. [{q.id}] {q.text}\n"
            f"   Expected Key Points: {', '.join(q.expected_key_points)}"
            for i, q in enumerate(questions, 1)
        )

        prompt = f"""{self.SYSTEM_CONTEXT}

Analyze this mock interview session and generate a comprehensive report.

Interview Type: {track}
Difficulty: {difficulty}

Questions Asked:
{questions_text}

Interview Transcript:
{transcript}

Generate a detailed JSON report with this structure:
{{
  "overallScore": 75,
  "scoreBreakdown": {{
    "technicalDepth": 78,
    "communication": 72,
    "problemSolving": 75,
    "tradeOffAnalysis": 70,
    "timeManagement": 73
  }},
  "summary": "Brief overall assessment",
  "questionAnalysis": [
    {{
      "questionId": "q1",
      "questionText": "...",
      "userScore": 75,
      "feedback": {{
        "whatYouDidWell": ["point1", "point2"],
        "whatCouldBeBetter": ["point1", "point2"],
        "missingPoints": ["point1", "point2"],
        "scoringDetails": {{
          "technicalCorrectness": 8,
          "completeness": 7,
          "communication": 7,
          "depthOfThinking": 7
        }}
      }}
    }}
  ],
  "strengths": [
    {{
      "area": "Strength name",
      "description": "What they did well",
      "importance": "Why this matters"
    }}
  ],
  "weaknesses": [
    {{
      "area": "Weakness name",
      "description": "What needs improvement",
      "importance": "Why this matters",
      "focusOn": "Specific action items"
    }}
  ],
  "recommendations": [
    {{
      "priority": 1,
      "topic": "Topic to focus on",
      "resources": ["resource1", "resource2"],
      "timeToMaster": "5-7 hours",
      "practiceStrategy": "How to practice"
    }}
  ],
  "comparisonToStandards": {{
    "yourScore": 75,
    "averageForDifficulty": 65,
    "topPerformerScore": 85,
    "statusMessage": "Above average performance"
  }},
  "nextSteps": ["step1", "step2", "step3"],
  "suggestionForNextInterview": {{
    "recommendedTopic": "Topic name",
    "focusAreas": ["area1", "area2"],
    "difficulty": "{difficulty}",
    "estimatedImprovement": "+8-12 points"
  }}
}}

Important:
- All scores except scoringDetails are 0-100; scoringDetails are 0-10
- Use the question ids shown in brackets for questionId
- Be specific and actionable in feedback
- Provide realistic scores based on actual performance
- Include concrete resources and practice strategies
- Be encouraging but honest
- Focus on the top 3-5 strengths and weaknesses"""

        return prompt
