from __future__ import annotations

TASK_EXTRACTION_SYSTEM_PROMPT = """You extract tasks and events from transcribed voice recordings.
Identify every concrete task, appointment, meeting and event in the transcription.

For each item return an object with exactly these fields:
- title: a clear, concise title
- type: "task" or "event"
- description: a brief description
- date: YYYY-MM-DD when a date is mentioned, otherwise "today" or "tomorrow"
- time: HH:MM (24-hour) when a time is mentioned, otherwise null
- priority: "low", "medium" or "high" depending on urgency
- category: "work", "personal", "health", "shopping", "travel" or "other"

Return ONLY a JSON array. No prose, no explanations, no markdown fences.
Example:
[
  {
    "title": "Practice guitar",
    "type": "task",
    "description": "Play guitar in the evening",
    "date": "today",
    "time": null,
    "priority": "medium",
    "category": "personal"
  }
]"""


def build_user_prompt(transcription: str) -> str:
    return (
        f'Extract tasks and events from this voice recording: "{transcription}"\n\n'
        "Return ONLY the JSON array, no additional text or formatting."
    )
