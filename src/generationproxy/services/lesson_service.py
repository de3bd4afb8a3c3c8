"""Lesson-plan generator (AI Lesson Architect) generation functions."""

import logging
import re

from generationproxy.models.errors import ClassifiedError, ErrorKind
from generationproxy.models.lesson import (
    ContentItem,
    HomeworkCheckResult,
    LessonForm,
    LessonMeta,
    LessonPlan,
    ModuleResult,
    SectionContent,
)
from generationproxy.models.requests import GeminiModel, GenerationConfig, GenerationRequest, InlineData, Part
from generationproxy.services.generation_service import GenerationService
from generationproxy.utils.error_utils import feature_error
from generationproxy.utils.schema_utils import schema_for

logger = logging.getLogger(__name__)

DEFAULT_VOICES = ["Puck", "Kore", "Fenrir", "Charon", "Zephyr"]
DEFAULT_SINGLE_VOICE = "Kore"

FALLBACK_FULL_LESSON = [
    "1. Framework Intro",
    "2. Warm-up",
    "3. Core Vocabulary",
    "4. Grammar Points",
    "5. Scenario Dialogue",
    "6. Native Upgrade",
    "7. Fixed Practice",
    "8. Derived Practice",
]

_SPEAKER_PATTERN = re.compile(r"^([A-Za-z0-9\s]+):")


def content_scale(minutes: int) -> str:
    """Amount of material appropriate for a class length."""
    if minutes <= 45:
        return "Concise. ~8 vocabulary words. 1 short dialogue (10 lines)."
    if minutes <= 60:
        return "Standard. ~12 vocabulary words. 1 medium dialogue (14 lines)."
    if minutes <= 90:
        return "Extended. ~15 vocabulary words. 1 long dialogue + 1 scenario."
    return "Intensive. ~20 vocabulary words. 1 comprehensive dialogue + 2 role-plays."


async def polish_content(service: GenerationService, text: str) -> str:
    """Tidy free-form teacher input; returns the input unchanged if the model sends nothing."""
    request = GenerationRequest.from_parts(
        [
            Part.from_text(
                "Act as a professional curriculum editor. Polish the following text to be clear and "
                "organized, keeping its original language.\nText:\n" + text
            )
        ],
        model=GeminiModel.PRO.value,
    )
    try:
        response = await service.generate(request, service_name="polish_content")
    except Exception as e:
        raise feature_error("polish content", e) from e
    return response.text.strip() or text


def _audio_session(form: LessonForm) -> LessonPlan:
    script = form.syllabus.text or "Please enter text to generate audio."
    return LessonPlan(
        meta=LessonMeta(title="Audio Tool Session", target_audience="N/A", mode="audio"),
        in_class=SectionContent(
            goal="Audio Generation",
            duration="N/A",
            student_materials=[
                ContentItem(
                    title="Audio Script (Ready to Generate)",
                    content=script,
                    tips_for_teacher="Click the audio icon to generate speech.",
                )
            ],
        ),
    )


def _lesson_parts(form: LessonForm) -> list[Part]:
    profiles = "; ".join(
        ", ".join(filter(None, [p.age, p.industry, p.job, p.english_level, *p.goal, *p.interests]))
        for p in form.student_profiles
    )
    brief = (
        f"Class: {form.class_mode}, {form.class_type}, {form.duration} minutes.\n"
        f"Students: {profiles or 'not specified'}.\n"
        f"Scale: {content_scale(form.duration)}"
    )
    if form.mode == "module":
        brief += f"\nGenerate only these modules: {', '.join(form.module_types)}."
    if form.additional_prompt:
        brief += f"\nAdditional requirements: {form.additional_prompt}"

    parts = [Part.from_text(brief)]
    if form.syllabus.text:
        parts.append(Part.from_text(f"SYLLABUS:\n{form.syllabus.text}"))
    if form.syllabus.file:
        parts.append(Part(inline_data=form.syllabus.file))
    return parts


async def generate_lesson_plan(service: GenerationService, form: LessonForm) -> LessonPlan:
    """Generate a full lesson or the selected modules from a syllabus."""
    if form.mode == "audio":
        return _audio_session(form)

    request = GenerationRequest.from_parts(
        _lesson_parts(form),
        model=GeminiModel.PRO.value,
        config=GenerationConfig(
            system_instruction=(
                "You are an expert ESL curriculum designer. Build a lesson plan with pre-class, "
                "in-class and post-class sections, each with student materials and a teacher guide."
            ),
            response_mime_type="application/json",
            response_schema=schema_for(LessonPlan),
        ),
    )
    try:
        plan = await service.generate_json(request, LessonPlan, service_name="lesson_plan")
    except Exception as e:
        raise feature_error("generate lesson plan", e) from e

    plan.meta.mode = form.mode
    if form.mode == "full" and not plan.in_class.student_materials:
        logger.warning("⚠️ [LessonService] In-class materials empty, using outline fallback")
        plan.in_class.student_materials = [
            ContentItem(title=step, content="Content generation incomplete. Please regenerate this section.")
            for step in FALLBACK_FULL_LESSON
        ]
    if form.mode == "module" and not plan.modules:
        logger.warning("⚠️ [LessonService] Modules empty, using placeholders")
        plan.modules = [
            ModuleResult(
                type=module,
                title=module,
                content=[
                    ContentItem(
                        title="Generation Failed",
                        content="Content generation incomplete. Please regenerate this module.",
                        tips_for_teacher="",
                    )
                ],
            )
            for module in form.module_types
        ]
    return plan


async def check_homework(service: GenerationService, form: LessonForm) -> HomeworkCheckResult:
    """Correct a student's text, image or audio submission."""
    parts: list[Part] = []
    if form.syllabus.text:
        parts.append(Part.from_text(f"Student Text Submission:\n{form.syllabus.text}"))
    if form.syllabus.file:
        parts.append(Part(inline_data=form.syllabus.file))
    if not parts:
        raise ValueError("A homework submission (text or file) is required")
    direction = form.generation_direction or "General Correction"
    parts.append(Part.from_text(f"Teacher's Correction Direction: {direction}\nAnalyze and return JSON."))

    request = GenerationRequest.from_parts(
        parts,
        model=GeminiModel.PRO.value,
        config=GenerationConfig(
            system_instruction=(
                "You are a senior ESL teacher correcting homework. Give a score, bilingual overall "
                "feedback, sentence-level corrections, a revised model answer and study suggestions. "
                "For audio, also assess pronunciation, intonation and fluency."
            ),
            response_mime_type="application/json",
            response_schema=schema_for(HomeworkCheckResult),
        ),
    )
    try:
        return await service.generate_json(request, HomeworkCheckResult, service_name="check_homework")
    except Exception as e:
        raise feature_error("analyze homework", e) from e


def detect_speakers(text: str) -> list[str]:
    """Speaker names from "Name: line" prefixes, in first-seen order."""
    speakers: list[str] = []
    for line in text.splitlines():
        match = _SPEAKER_PATTERN.match(line)
        if match:
            name = match.group(1).strip()
            if name and len(name) < 20 and name not in speakers:
                speakers.append(name)
    return speakers


def build_speech_config(text: str, speaker_map: dict[str, str] | None = None) -> dict:
    """Voice configuration: multi-speaker for dialogues, a single voice otherwise."""
    speaker_map = speaker_map or {}
    speakers = detect_speakers(text)
    if len(speakers) >= 2:
        return {
            "multiSpeakerVoiceConfig": {
                "speakerVoiceConfigs": [
                    {
                        "speaker": speaker,
                        "voiceConfig": {
                            "prebuiltVoiceConfig": {
                                "voiceName": speaker_map.get(speaker) or DEFAULT_VOICES[index % len(DEFAULT_VOICES)]
                            }
                        },
                    }
                    for index, speaker in enumerate(speakers)
                ]
            }
        }
    voice = (speakers and speaker_map.get(speakers[0])) or speaker_map.get("default") or DEFAULT_SINGLE_VOICE
    return {"voiceConfig": {"prebuiltVoiceConfig": {"voiceName": voice}}}


async def generate_speech(
    service: GenerationService,
    text: str,
    speaker_map: dict[str, str] | None = None,
) -> InlineData:
    """Synthesize speech; returns the raw audio part as sent by the model."""
    request = GenerationRequest.from_parts(
        [Part.from_text(text)],
        model=GeminiModel.FLASH_TTS.value,
        config=GenerationConfig(
            response_modalities=["AUDIO"],
            speech_config=build_speech_config(text, speaker_map),
        ),
    )
    try:
        response = await service.generate(request, service_name="generate_speech")
        audio = response.first_inline_data()
        if audio is None:
            raise ClassifiedError(ErrorKind.MALFORMED_RESPONSE, "No audio part in response")
    except Exception as e:
        raise feature_error("generate audio", e) from e
    return audio
