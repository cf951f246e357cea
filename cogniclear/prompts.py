"""
Prompt text and structured-output schema for the bias audit model.
"""

from cogniclear.models.analysis import AnalysisResult
from cogniclear.models.decision import ScenarioContext

SYSTEM_INSTRUCTION = """You are an advanced Cognitive Science AI designed to audit human decision-making.
Your goal is to detect cognitive biases (e.g., Confirmation Bias, Anchoring, Sunk Cost, Availability Heuristic, Framing Effect, etc.) in the provided text.

You must output strictly valid JSON.

Analyze the text for:
1. Implicit and explicit biases.
2. Logical fallacies.
3. Emotional reasoning vs. data-driven reasoning.

Output Schema:
{
  "overallScore": integer (0-100, where 100 is perfectly unbiased and rational),
  "summary": string (A concise 1-sentence executive summary of the bias level),
  "biases": array of objects {
     "name": string (Name of the bias),
     "description": string (Brief explanation of why it applies here),
     "confidence": integer (0-100),
     "triggerPhrase": string (Exact quote from the text that indicates this bias)
  },
  "metrics": {
     "rationality": integer (0-100),
     "objectivity": integer (0-100),
     "completeness": integer (0-100)
  },
  "correction": string (A rewritten version of the decision/thought process that removes the bias while keeping the core intent, if valid. If the core intent is flawed, provide a counter-recommendation.)
}"""

RESPONSE_SCHEMA = AnalysisResult.model_json_schema(by_alias=True)


def context_clause(context: ScenarioContext) -> str:
    """Return the qualifier line for ``context``, or an empty string for NONE."""
    if context is ScenarioContext.NONE:
        return ""
    return f"The decision maker is under: {context.value}."


def build_prompt(text: str, context: ScenarioContext) -> str:
    """Compose the user prompt: optional context line, then the quoted text."""
    lines = []
    clause = context_clause(context)
    if clause:
        lines.append(clause)
    lines.append("Analyze the following decision text:")
    lines.append(f'"{text}"')
    return "\n".join(lines)


def build_messages(text: str, context: ScenarioContext) -> list:
    """Return the system and user chat messages for one analysis."""
    return [
        {"role": "system", "content": SYSTEM_INSTRUCTION},
        {"role": "user", "content": build_prompt(text, context)},
    ]
