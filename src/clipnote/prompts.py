"""Prompt templates for video analysis and repair of the model's front matter.

Everything here is pure string work: no network, no filesystem. The clock is
injectable so generated dates are reproducible in tests.

Two directions:

- `PromptService.create_analysis_prompt` builds the prompt. The front-matter
  block the model must reproduce is rendered from a typed `FrontMatter` map.
- `PromptService.process_ai_response` ingests unconstrained model output, so it
  patches the front matter with regexes instead of parsing it.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, List, Mapping, Optional, Union

from clipnote import logger as logger_mod

from .helpers import extract_video_id
from .llm.errors import PromptValidationError
from .llm.types import OutputFormat, PromptContext

log = logger_mod.get_logger()

AI_PROVIDER_TOKEN = "__AI_PROVIDER__"
AI_MODEL_TOKEN = "__AI_MODEL__"

# Placeholders available inside custom prompt bodies
CUSTOM_TITLE_TOKEN = "__VIDEO_TITLE__"
CUSTOM_DESCRIPTION_TOKEN = "__VIDEO_DESCRIPTION__"
CUSTOM_URL_TOKEN = "__VIDEO_URL__"

MIN_PROMPT_LENGTH = 10
MAX_PROMPT_LENGTH = 50000

EMBED_BASE_URL = "https://www.youtube-nocookie.com/embed/"

FrontMatterValue = Union[str, int, List[str]]

BASE_TEMPLATE = """Analyze this YouTube video using comprehensive multimodal analysis with audio_video_tokens=True:

VIDEO INFORMATION:
Title: {{TITLE}}
URL: {{URL}}
Description/Context: {{DESCRIPTION}}

MULTIMODAL ANALYSIS INSTRUCTIONS:
1. Watch the complete video using both audio and visual analysis capabilities with audio_video_tokens=True
2. Extract insights from spoken content, music, sound effects, and ambient audio
3. Analyze visual elements including:
   - Slides, presentations, and text overlays
   - Diagrams, charts, and visual demonstrations
   - Body language, gestures, and facial expressions
   - Screen recordings, code examples, or software demos
   - Any visual aids or props used
4. Before responding, perform a web search to find relevant insights or highlights about this topic
5. Use web search results only when they directly enhance the response by adding clarity, depth, or useful context
6. Focus on practical, action-oriented information that viewers can implement
7. Maintain accuracy and cite specific examples from the video when relevant
8. Identify the main value proposition and key learning objectives"""

# The video URL and title are given once in VIDEO INFORMATION; templates refer back to them.
VIDEO_URL_REF = "[video URL from VIDEO INFORMATION]"
VIDEO_TITLE_REF = "[video title from VIDEO INFORMATION]"

EXECUTIVE_SUMMARY_BODY = """## Key Insights
- [Critical insight 1 with specific detail]
- [Critical insight 2 with specific detail]
- [Critical insight 3 with specific detail]

## Concise Summary
[Provide a concise, cohesive summary in exactly two paragraphs, maximum 250 words total. Focus on the core value, main insights, and key actionable takeaways. Make every word count.]

## Resources
- **Original Video:** [Watch on YouTube]({url_ref})
- **Channel:** [Creator's Channel](https://youtube.com/channel/[extract-channel-id])
- **Key Tools/Frameworks:** [List main tools or frameworks mentioned]
- **Official Documentation:** [Links to official docs for mentioned technologies]
- **Further Reading:** [1-2 high-quality related articles or resources]

CRITICAL: Keep the Executive Summary section to exactly 250 words or fewer. Be concise but comprehensive."""

DETAILED_GUIDE_BODY = """## Comprehensive Tutorial

### Concise Summary

[A concise summary under 150 words that captures the video's core value and main insights]

## Step-by-Step Implementation Guide
### Step 1: [Action Title]
- Detailed instruction 1
- Detailed instruction 2
- Key considerations or tips

### Step 2: [Action Title]
- Detailed instruction 1
- Detailed instruction 2
- Key considerations or tips

[Continue with additional numbered steps as needed - provide comprehensive coverage]

## Resources
- **Original Video:** [Watch on YouTube]({url_ref})
- **Channel:** [Creator's Channel](https://youtube.com/channel/[extract-channel-id])
- **Related Documentation:** [If any tools/frameworks mentioned, provide official docs links]
- **Additional Learning:** [Suggest 2-3 related high-quality resources]
- **Tools & Software:** [List any tools mentioned with download/setup links]
- **Community:** [Relevant forums, Discord servers, or communities]

IMPORTANT: Provide detailed, actionable steps that someone could follow to implement the concepts from the video."""

BRIEF_BODY = """## Brief Description
[Provide a concise 3-4 sentence description that captures the core message of the video]

## Resources
- **Original Video:** [Watch on YouTube]({url_ref})
- **Channel:** [Creator's Channel](https://youtube.com/channel/[extract-channel-id])
- **Top resources mentioned or related (links):**
  - [Resource 1]
  - [Resource 2]
  - [Resource 3]

IMPORTANT: Keep the Brief Description short and focused. Provide 2-3 high-quality resource links that help the reader explore the topic further."""

_FORMAT_HEADINGS = {
    OutputFormat.EXECUTIVE_SUMMARY: "EXECUTIVE SUMMARY",
    OutputFormat.DETAILED_GUIDE: "COMPREHENSIVE TUTORIAL",
    OutputFormat.BRIEF: "BRIEF DESCRIPTION + RESOURCES",
}

_FORMAT_BODIES = {
    OutputFormat.EXECUTIVE_SUMMARY: EXECUTIVE_SUMMARY_BODY,
    OutputFormat.DETAILED_GUIDE: DETAILED_GUIDE_BODY,
    OutputFormat.BRIEF: BRIEF_BODY,
}

_FRONT_MATTER_RE = re.compile(r"\A---[ \t]*\n(.*?)^---[ \t]*$", re.S | re.M)
# A block after preamble text must open with a `key:` line, so horizontal rules don't match
_LATE_FRONT_MATTER_RE = re.compile(
    r"^---[ \t]*\n(?=[ \t]*[A-Za-z_][\w-]*[ \t]*:)(.*?)^---[ \t]*$", re.S | re.M
)
_CODE_FENCE_RE = re.compile(r"\A```[a-zA-Z]*[ \t]*\r?\n(.*?)\r?\n```\s*\Z", re.S)


def _quote(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


@dataclass
class FrontMatter:
    """Ordered key/value preamble, rendered deterministically.

    Strings are double-quoted (JSON escaping, which YAML accepts), ints are
    bare, lists become block sequences.
    """

    fields: Dict[str, FrontMatterValue] = field(default_factory=dict)

    def set(self, key: str, value: FrontMatterValue) -> "FrontMatter":
        self.fields[key] = value
        return self

    def render(self) -> str:
        lines = ["---"]
        for key, value in self.fields.items():
            if isinstance(value, list):
                lines.append(f"{key}:")
                lines.extend(f"  - {item}" for item in value)
            elif isinstance(value, bool):
                lines.append(f"{key}: {'true' if value else 'false'}")
            elif isinstance(value, int):
                lines.append(f"{key}: {value}")
            else:
                lines.append(f"{key}: {_quote(str(value))}")
        lines.append("---")
        return "\n".join(lines)


def embed_preview(source_url: str) -> str:
    video_id = extract_video_id(source_url)
    if not video_id:
        return "[No embeddable preview: the video id could not be determined]"
    return (
        f'<iframe width="640" height="360" src="{EMBED_BASE_URL}{video_id}" '
        f'title="{VIDEO_TITLE_REF}" frameborder="0" '
        'allow="accelerometer; autoplay; clipboard-write; encrypted-media; '
        'gyroscope; picture-in-picture; web-share" '
        'referrerpolicy="strict-origin-when-cross-origin" allowfullscreen></iframe>'
    )


class PromptService:
    def __init__(
        self,
        custom_prompts: Optional[Mapping[str, str]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._custom_prompts = {
            OutputFormat.parse(k): v
            for k, v in (custom_prompts or {}).items()
            if isinstance(v, str) and v.strip()
        }
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # --- prompt creation --------------------------------------------------

    def create_analysis_prompt(self, ctx: PromptContext) -> str:
        """Build the full prompt for `ctx.format`.

        Title, URL and description are substituted with a literal replace, so
        template-like text inside them is not escaped.
        """

        fmt = OutputFormat.parse(ctx.format)
        base = (
            BASE_TEMPLATE.replace("{{TITLE}}", ctx.title, 1)
            .replace("{{URL}}", ctx.source_url, 1)
            .replace("{{DESCRIPTION}}", ctx.description, 1)
        )

        if fmt is OutputFormat.CUSTOM:
            body = ctx.custom_body or self._custom_prompts.get(OutputFormat.CUSTOM)
            if not body or not body.strip():
                raise PromptValidationError("Custom format requires a prompt body")
            return f"{base}\n\n{self._fill_custom(body, ctx)}"

        override = self._custom_prompts.get(fmt)
        if override:
            log.debug(f"Using configured prompt override for {fmt.value}")
            return f"{base}\n\n{self._fill_custom(override, ctx)}"

        return f"{base}\n\n{self._format_section(fmt, ctx.source_url)}"

    def front_matter_for(self, fmt: OutputFormat, source_url: str) -> FrontMatter:
        now = self._clock()
        today = now.date().isoformat()
        video_id = extract_video_id(source_url) or "unknown"

        fm = FrontMatter()
        fm.set("title", VIDEO_TITLE_REF)
        fm.set("source", VIDEO_URL_REF)
        fm.set("created", today)
        fm.set("modified", today)

        if fmt is OutputFormat.BRIEF:
            fm.set("description", "One short paragraph (3-4 sentences) summarizing the video")
        else:
            fm.set("description", "Single sentence capturing the core insight")

        fm.set("type", "youtube-note")

        if fmt is OutputFormat.EXECUTIVE_SUMMARY:
            fm.set("format", "executive-summary")
            fm.set("tags", ["youtube", "executive-summary", "tag_1", "tag_2", "tag_3"])
        elif fmt is OutputFormat.DETAILED_GUIDE:
            fm.set("format", "detailed-tutorial")
            fm.set(
                "tags",
                ["youtube", "tutorial", "step-by-step", "tag_1", "tag_2", "tag_3"],
            )
        else:
            fm.set("format", "brief")
            fm.set("tags", ["youtube", "brief"])

        fm.set("status", "processed")
        fm.set("duration", "[Extract video duration]")
        fm.set("channel", "[Extract channel name]")
        fm.set("video_id", video_id)
        fm.set("processing_date", now.isoformat(timespec="seconds"))

        if fmt is OutputFormat.EXECUTIVE_SUMMARY:
            fm.set("word_count", 250)
        elif fmt is OutputFormat.DETAILED_GUIDE:
            fm.set("word_count", "[estimated word count]")

        fm.set("ai_provider", AI_PROVIDER_TOKEN)
        fm.set("ai_model", AI_MODEL_TOKEN)

        if fmt is OutputFormat.DETAILED_GUIDE:
            fm.set("difficulty", "[beginner/intermediate/advanced]")
            fm.set("estimated_time", "[time to complete]")

        return fm

    def _format_section(self, fmt: OutputFormat, source_url: str) -> str:
        body = _FORMAT_BODIES[fmt].format(url_ref=VIDEO_URL_REF)
        return "\n\n".join(
            [
                f"OUTPUT FORMAT - {_FORMAT_HEADINGS[fmt]}:",
                "Use this EXACT template:",
                self.front_matter_for(fmt, source_url).render(),
                embed_preview(source_url),
                "---",
                body,
            ]
        )

    @staticmethod
    def _fill_custom(body: str, ctx: PromptContext) -> str:
        return (
            body.replace(CUSTOM_TITLE_TOKEN, ctx.title)
            .replace(CUSTOM_DESCRIPTION_TOKEN, ctx.description)
            .replace(CUSTOM_URL_TOKEN, ctx.source_url)
        )

    def create_summary_prompt(self, title: str, description: str, source_url: str) -> str:
        return "\n".join(
            [
                "Create a concise summary for this YouTube video:",
                "",
                f"Title: {title}",
                f"URL: {source_url}",
                f"Description: {description}",
                "",
                "Please provide:",
                "1. A 2-paragraph summary (max 250 words)",
                "2. 3-5 key takeaways",
                "3. Main actionable insights",
                "",
                "Format as markdown with clear headings.",
            ]
        )

    # --- response post-processing -----------------------------------------

    def process_ai_response(
        self,
        content: str,
        provider: str,
        model: str,
        *,
        source_url: Optional[str] = None,
    ) -> str:
        """Inject provider/model identity into the generated note.

        Replaces the reserved tokens anywhere in the text, then makes sure the
        front matter carries `ai_provider` and `ai_model` (and `source` when
        given), overwriting or inserting as needed. Applying it twice with the
        same values is a no-op.
        """

        provider_value = (provider or "").strip() or "unknown"
        model_value = (model or "").strip() or "unknown"

        text = _strip_code_fence((content or "").strip())
        text = text.replace(AI_PROVIDER_TOKEN, provider_value).replace(
            AI_MODEL_TOKEN, model_value
        )

        required: Dict[str, str] = {}
        if source_url:
            required["source"] = source_url
        required["ai_provider"] = provider_value
        required["ai_model"] = model_value

        return ensure_front_matter_values(text, required)

    # --- validation -------------------------------------------------------

    @staticmethod
    def validate_prompt(prompt: object) -> bool:
        return (
            isinstance(prompt, str)
            and len(prompt.strip()) > MIN_PROMPT_LENGTH
            and len(prompt) < MAX_PROMPT_LENGTH
        )

    def check_prompt(self, prompt: object) -> str:
        if not isinstance(prompt, str) or not prompt:
            raise PromptValidationError("Prompt must be a non-empty string")
        if len(prompt.strip()) <= MIN_PROMPT_LENGTH:
            raise PromptValidationError(
                f"Prompt is too short (needs more than {MIN_PROMPT_LENGTH} characters)"
            )
        if len(prompt) >= MAX_PROMPT_LENGTH:
            raise PromptValidationError(
                f"Prompt is too long ({len(prompt)} characters, limit {MAX_PROMPT_LENGTH})"
            )
        return prompt


def _strip_code_fence(text: str) -> str:
    match = _CODE_FENCE_RE.match(text)
    return match.group(1).strip() if match else text


def ensure_front_matter_values(text: str, values: Mapping[str, str]) -> str:
    """Overwrite or insert `key: "value"` lines inside the leading `---` block.

    Line endings are normalized to LF. Chatter before the block ("Here is your
    note:") is dropped so the note starts with it. Text without a front-matter
    block gets a new block holding just `values`.
    """

    text = text.replace("\r\n", "\n")
    match = _FRONT_MATTER_RE.match(text)
    if match is None:
        late = _LATE_FRONT_MATTER_RE.search(text)
        if late is not None:
            log.debug(f"Dropping {late.start()} chars of text before the front matter")
            text = text[late.start():]
            match = _FRONT_MATTER_RE.match(text)
    if match is None:
        lines = "\n".join(f"{k}: {_quote(v)}" for k, v in values.items())
        return f"---\n{lines}\n---\n\n{text}" if text else f"---\n{lines}\n---"

    block = match.group(1)
    missing: List[str] = []
    for key, value in values.items():
        pattern = re.compile(
            rf"^[ \t]*{re.escape(key)}[ \t]*:[^\n]*$", re.IGNORECASE | re.MULTILINE
        )
        line = f"{key}: {_quote(value)}"
        block, count = pattern.subn(lambda _m: line, block, count=1)
        if count == 0:
            missing.append(line)

    if missing:
        block = "\n".join(missing) + "\n" + block

    return f"---\n{block}{text[match.end(1):]}"
