"""
Question Generation for PrepKit interviews

Builds the ordered question list for a session using the text-generation
provider. Generation is total: any provider or validation failure falls
back to a static, hand-authored question bank.
"""

import json
import logging

from pydantic import TypeAdapter, ValidationError

from src.core.errors import ExternalServiceError, GenerationValidationError
from src.core.text_generation import GenerationConfig, TextGenerationProvider
from src.models.interview import Difficulty, InterviewSetup
from src.models.question import Question
from src.prompts.interviewer import InterviewerPrompts

logger = logging.getLogger(__name__)

QUESTION_GENERATION_CONFIG = GenerationConfig(
    temperature=0.7,
    max_output_tokens=3000,
    top_k=40,
    top_p=0.95,
    json_output=True,
)

_QUESTION_LIST = TypeAdapter(list[Question])

DEFAULT_FALLBACK_TRACK = "javascript"

FALLBACK_QUESTIONS: dict[str, list[Question]] = {
    "javascript": [
        Question(
            id="js_fb_1",
            order=1,
            text="Explain the event loop in JavaScript and how it handles asynchronous operations.",
            motivation="Tests fundamental understanding of JavaScript runtime",
            expected_key_points=["Call stack", "Event queue", "Microtasks", "Macrotasks", "Non-blocking"],
            difficulty=5,
            time_allocation_minutes=5,
            follow_ups=[
                "What is the difference between setTimeout and Promise?",
                "How does async/await work internally?",
            ],
        ),
        Question(
            id="js_fb_2",
            order=2,
            text="What are closures in JavaScript and when would you use them?",
            motivation="Tests understanding of scope and practical application",
            expected_key_points=["Lexical scope", "Function scope", "Data privacy", "Practical examples"],
            difficulty=4,
            time_allocation_minutes=4,
            follow_ups=["Can you show a practical use case?", "What are potential memory issues?"],
        ),
        Question(
            id="js_fb_3",
            order=3,
            text="How does prototypal inheritance work, and how do ES6 classes relate to it?",
            motivation="Tests understanding of the object model behind class syntax",
            expected_key_points=["Prototype chain", "Object.create", "Class syntax sugar", "Property lookup"],
            difficulty=5,
            time_allocation_minutes=4,
            follow_ups=["What does the new keyword do step by step?"],
        ),
        Question(
            id="js_fb_4",
            order=4,
            text="Explain how `this` is bound in regular functions versus arrow functions.",
            motivation="Tests understanding of execution context",
            expected_key_points=["Call-site binding", "Lexical this", "bind/call/apply", "Method extraction pitfalls"],
            difficulty=5,
            time_allocation_minutes=4,
            follow_ups=["When would an arrow function be the wrong choice for a method?"],
        ),
        Question(
            id="js_fb_5",
            order=5,
            text="How would you implement debounce and throttle, and when would you use each?",
            motivation="Tests practical problem solving with timers and closures",
            expected_key_points=["Timer reset", "Leading vs trailing calls", "Closures", "UI use cases"],
            difficulty=6,
            time_allocation_minutes=5,
            follow_ups=["How would you add a cancel method?", "How would you test it?"],
        ),
        Question(
            id="js_fb_6",
            order=6,
            text="What causes memory leaks in long-running JavaScript applications and how do you find them?",
            motivation="Tests production debugging experience",
            expected_key_points=["Detached DOM nodes", "Forgotten listeners", "Closures holding references", "Heap snapshots"],
            difficulty=7,
            time_allocation_minutes=5,
            follow_ups=["How do WeakMap and WeakRef help?"],
        ),
    ],
    "system-design": [
        Question(
            id="sd_fb_1",
            order=1,
            text="Design a URL shortener service like bit.ly that can handle 1 billion requests per day.",
            motivation="Tests scalability and system design fundamentals",
            expected_key_points=["Capacity estimation", "Database choice", "Hashing algorithm", "Caching", "Load balancing"],
            difficulty=6,
            time_allocation_minutes=8,
            follow_ups=[
                "How would you handle collisions?",
                "What database would you choose and why?",
                "How would you implement analytics?",
            ],
        ),
        Question(
            id="sd_fb_2",
            order=2,
            text="Design a rate limiter for a public API serving millions of clients.",
            motivation="Tests distributed coordination and algorithm trade-offs",
            expected_key_points=["Token bucket", "Sliding window", "Distributed counters", "Failure modes"],
            difficulty=6,
            time_allocation_minutes=7,
            follow_ups=["How do you keep limits consistent across regions?"],
        ),
        Question(
            id="sd_fb_3",
            order=3,
            text="Design the news feed for a social network with 100 million daily active users.",
            motivation="Tests fan-out strategies and read/write trade-offs",
            expected_key_points=["Fan-out on write vs read", "Ranking", "Caching", "Celebrity accounts"],
            difficulty=7,
            time_allocation_minutes=8,
            follow_ups=["How would you handle users with millions of followers?"],
        ),
        Question(
            id="sd_fb_4",
            order=4,
            text="Design a real-time chat system supporting one-to-one and group messages.",
            motivation="Tests connection management and delivery guarantees",
            expected_key_points=["WebSockets", "Message ordering", "Delivery receipts", "Presence", "Storage"],
            difficulty=7,
            time_allocation_minutes=8,
            follow_ups=["How do you deliver messages to offline users?"],
        ),
    ],
    "dsa": [
        Question(
            id="dsa_fb_1",
            order=1,
            text="Given an array of integers, find two numbers that add up to a specific target.",
            motivation="Tests basic problem-solving and optimization",
            expected_key_points=["Hash map approach", "Time complexity O(n)", "Space complexity", "Edge cases"],
            difficulty=3,
            time_allocation_minutes=5,
            follow_ups=["What if the array is sorted?", "Can you do it with O(1) space?"],
        ),
        Question(
            id="dsa_fb_2",
            order=2,
            text="Find the length of the longest substring without repeating characters.",
            motivation="Tests the sliding window technique",
            expected_key_points=["Sliding window", "Character index map", "O(n) time", "Window shrink rule"],
            difficulty=5,
            time_allocation_minutes=6,
            follow_ups=["How would you return the substring itself?"],
        ),
        Question(
            id="dsa_fb_3",
            order=3,
            text="Merge k sorted linked lists into one sorted list.",
            motivation="Tests heap usage and complexity analysis",
            expected_key_points=["Min-heap", "O(n log k)", "Divide and conquer alternative", "Null handling"],
            difficulty=6,
            time_allocation_minutes=6,
            follow_ups=["Compare the heap approach with pairwise merging."],
        ),
        Question(
            id="dsa_fb_4",
            order=4,
            text="Detect whether a directed graph contains a cycle.",
            motivation="Tests graph traversal fundamentals",
            expected_key_points=["DFS with colors", "Topological sort", "Recursion stack", "Complexity O(V+E)"],
            difficulty=6,
            time_allocation_minutes=6,
            follow_ups=["How would you return the nodes in the cycle?"],
        ),
        Question(
            id="dsa_fb_5",
            order=5,
            text="Design an LRU cache with O(1) get and put operations.",
            motivation="Tests combining data structures for constant-time operations",
            expected_key_points=["Hash map", "Doubly linked list", "Eviction", "Capacity handling"],
            difficulty=6,
            time_allocation_minutes=6,
            follow_ups=["How would you make it thread-safe?"],
        ),
    ],
}


class QuestionGenerationService:
    """
    Generates the ordered question list for an interview session.

    Never raises to the caller: provider errors and malformed output
    degrade to the static question bank.
    """

    def __init__(self, provider: TextGenerationProvider):
        self.provider = provider
        self.prompts = InterviewerPrompts()

    async def generate(self, setup: InterviewSetup) -> list[Question]:
        """
        Generate interview questions.

        Args:
            setup: Track, difficulty, focus areas and duration

        Returns:
            Non-empty ordered list of questions
        """
        prompt = self.prompts.generate_questions_prompt(setup)

        try:
            response = await self.provider.generate(prompt, QUESTION_GENERATION_CONFIG)
            questions = self.parse_questions(response)
        except (ExternalServiceError, GenerationValidationError) as e:
            logger.warning(
                f"Question generation failed for track={setup.track} "
                f"difficulty={setup.difficulty.value}, using fallback bank: {e}"
            )
            return self.fallback_questions(setup.track, setup.difficulty)

        logger.info(f"Generated {len(questions)} questions for track={setup.track}")
        return questions

    def parse_questions(self, response: str) -> list[Question]:
        """Parse and validate the provider's JSON array of questions."""
        json_start = response.find("[")
        json_end = response.rfind("]") + 1
        if json_start < 0 or json_end <= json_start:
            raise GenerationValidationError("No JSON array in question response")

        try:
            data = json.loads(response[json_start:json_end])
        except json.JSONDecodeError as e:
            raise GenerationValidationError(f"Invalid question JSON: {e}") from e

        if not isinstance(data, list) or not data:
            raise GenerationValidationError("Question response is not a non-empty array")

        try:
            questions = _QUESTION_LIST.validate_python(data)
        except ValidationError as e:
            raise GenerationValidationError(f"Question schema mismatch: {e}") from e

        return sorted(questions, key=lambda q: q.order)

    def fallback_questions(self, track: str, difficulty: Difficulty) -> list[Question]:
        """Select a prefix of the static bank: 3 for easy, 5 otherwise."""
        bank = FALLBACK_QUESTIONS.get(track, FALLBACK_QUESTIONS[DEFAULT_FALLBACK_TRACK])
        count = 3 if difficulty == Difficulty.EASY else 5
        return list(bank[:count])
