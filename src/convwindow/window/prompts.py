"""Prompt templates for batch summarization."""

BATCH_SUMMARY_PROMPT = """\
You are a precision fact-extractor processing a batch of conversation messages for compression.

Your job: Extract key facts, decisions, commitments, entities, preferences, and actionable
outcomes as observational memory entries.

Rules:
- Extract 3-8 observational memory entries
- Each entry: priority (🔴/🟡/⚪), one-sentence content
- Third-person neutral voice ("User requested...", "System completed...")
- Include specifics: names, dates, numbers, slugs, URLs, versions
- 🔴 Critical = identity, strong prefs/goals, promises, deal-breakers
- 🟡 Valuable = decisions, patterns, progress markers
- ⚪ Low = minor items (use sparingly)

IMPORTANT: Your response must be valid JSON only. No explanations, no markdown, no additional text.
Return only a JSON object in this format:
{
  "observations": [
    {"priority": "🟡", "content": "One concise fact sentence with specific details."},
    {"priority": "🔴", "content": "Another critical fact sentence."}
  ]
}"""

BATCH_USER_TEMPLATE = "Here are the conversation messages to extract observations from:\n\n{transcript}"

SUMMARY_HEADER = "## Conversation Summary"

PLACEHOLDER_TEXT = (
    f"{SUMMARY_HEADER}\n\n"
    "_Earlier messages were compacted, but no distillable content was found this cycle._"
)

SECTION_TITLES = {
    "🔴": "Critical Context",
    "🟡": "Key Context",
    "⚪": "Background",
}

OTHER_SECTION_TITLE = "Notes"
