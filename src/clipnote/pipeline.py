from __future__ import annotations

import datetime
from pathlib import Path
from typing import Optional

from clipnote import config
from clipnote import logger as logger_mod
from clipnote.llm import AIService, OutputFormat, PromptContext, build_ai_service
from clipnote.notes import NoteWriter
from clipnote.prompts import PromptService
from clipnote.youtube import YouTubeVideoService

log = logger_mod.get_logger()


async def process_video(
    url: str,
    *,
    fmt: OutputFormat | str = OutputFormat.DETAILED_GUIDE,
    settings: Optional[config.Settings] = None,
    provider_name: Optional[str] = None,
    model: Optional[str] = None,
    custom_prompt: Optional[str] = None,
    video_service: Optional[YouTubeVideoService] = None,
    ai_service: Optional[AIService] = None,
    prompt_service: Optional[PromptService] = None,
    writer: Optional[NoteWriter] = None,
) -> Path:
    """URL -> video data -> prompt -> AI response -> note on disk.

    Uses `provider_name` (and optional `model`) when given, otherwise the
    ordered fallback across every configured provider. Returns the note path.
    """

    settings = settings or config.Settings.from_env()
    output_format = OutputFormat.parse(fmt)

    video_service = video_service or YouTubeVideoService()
    ai_service = ai_service or build_ai_service(settings)
    prompt_service = prompt_service or PromptService(settings.custom_prompts)
    writer = writer or NoteWriter(settings.output_path)

    started = datetime.datetime.now()
    video_id = video_service.validate_and_extract_video_id(url)
    video = await video_service.get_video_data(video_id)
    log.info(f"Processing '{video.title}' ({video_id}) as {output_format.value}")

    prompt = prompt_service.create_analysis_prompt(
        PromptContext(
            title=video.title,
            description=video.description,
            source_url=url,
            format=output_format,
            custom_body=custom_prompt,
        )
    )
    prompt_service.check_prompt(prompt)

    if provider_name:
        response = await ai_service.process_with(provider_name, prompt, model)
    else:
        response = await ai_service.process(prompt)

    note = prompt_service.process_ai_response(
        response.content, response.provider, response.model, source_url=url
    )
    path = writer.save(video.title, note)
    log.info(
        f"Finished {video_id} with {response.provider} ({response.model}) "
        f"started {logger_mod.format_date(started)}"
    )
    return path
