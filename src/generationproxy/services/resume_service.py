"""Résumé optimizer (GlobalCV Pro) generation functions."""

import logging

from generationproxy.models.requests import GeminiModel, GenerationConfig, GenerationRequest, Part
from generationproxy.models.resume import (
    ATSAnalysis,
    ATSData,
    InterviewDifficulty,
    InterviewPrep,
    OptimizationConfig,
    OptimizationResult,
    WritingExerciseFeedback,
)
from generationproxy.services.generation_service import GenerationService
from generationproxy.utils.error_utils import feature_error
from generationproxy.utils.json_utils import strip_code_fences
from generationproxy.utils.schema_utils import schema_for

logger = logging.getLogger(__name__)

RESUME_SYSTEM_INSTRUCTION = """You are GlobalCV Pro, an expert résumé optimizer and ATS specialist.
Return a complete JSON object matching the schema.
Score ATS compatibility as keywords (max 40), formatting (max 30) and structure (max 30).
The optimized résumé must be single-column Markdown without tables, rewritten with the STAR method.
'optimizedContentTarget' must be in {language}; 'optimizedContentNative' must be in Simplified Chinese.
Use '# Name', '## SECTION' and '### Title, Company **Dates**' headers.
Leave 'interviewPrep' empty; it is generated separately."""


def _resume_parts(config: OptimizationConfig) -> list[Part]:
    parts: list[Part] = []
    if config.file_input:
        parts.append(Part(inline_data=config.file_input))
    elif config.original_resume:
        parts.append(Part.from_text(f"RESUME CONTENT:\n{config.original_resume}"))

    if config.jd_file:
        parts.append(Part(inline_data=config.jd_file))
    elif config.job_description:
        parts.append(Part.from_text(f"TARGET JOB DESCRIPTION:\n{config.job_description}"))

    if config.refinement_instruction:
        parts.append(Part.from_text(f"Refine based on: {config.refinement_instruction}"))
    else:
        parts.append(Part.from_text("Analyze and optimize this resume."))
    return parts


async def process_resume(service: GenerationService, config: OptimizationConfig) -> OptimizationResult:
    """Analyze and rewrite a résumé against an optional job description."""
    if not (config.file_input or config.original_resume):
        raise ValueError("A résumé file or résumé text is required")

    request = GenerationRequest.from_parts(
        _resume_parts(config),
        model=GeminiModel.FLASH.value,
        config=GenerationConfig(
            system_instruction=RESUME_SYSTEM_INSTRUCTION.format(language=config.target_language.value),
            response_mime_type="application/json",
            response_schema=schema_for(OptimizationResult),
        ),
    )

    try:
        result = await service.generate_json(request, OptimizationResult, service_name="process_resume")
    except Exception as e:
        raise feature_error("process resume", e) from e

    if result.analysis.ats_analysis is None:
        logger.warning("⚠️ [ResumeService] Model omitted ATS analysis, using placeholder")
        result.analysis.ats_analysis = ATSAnalysis(
            original=ATSData.unavailable(),
            optimized=ATSData.unavailable(),
            section_detection=[],
        )

    result.optimized_content_target = strip_code_fences(result.optimized_content_target)
    result.optimized_content_native = strip_code_fences(result.optimized_content_native)
    result.transcribed_original = strip_code_fences(result.transcribed_original)
    return result


async def regenerate_interview_questions(
    service: GenerationService,
    result: OptimizationResult,
    config: OptimizationConfig,
    prompt: str = "",
) -> InterviewPrep:
    """Generate the five-part interview script for an optimized résumé."""
    difficulty = config.interview_difficulty or InterviewDifficulty.ADVANCED
    level = "Basic" if difficulty == InterviewDifficulty.BASIC else "Advanced"
    system_instruction = (
        "You are an elite interview coach simulating a full structured interview.\n"
        f"Difficulty: {level}. Target: \"{config.target_company or 'Global Company'}\".\n"
        "Produce the five interview parts of the schema: introduction, résumé walk-through, "
        "behavioral (STAR), technical and reverse questions."
    )
    parts = [Part.from_text(f"RESUME:\n{result.optimized_content_target}")]
    if prompt:
        parts.append(Part.from_text(f"Additional focus: {prompt}"))

    request = GenerationRequest.from_parts(
        parts,
        model=GeminiModel.FLASH.value,
        config=GenerationConfig(
            system_instruction=system_instruction,
            response_mime_type="application/json",
            response_schema=schema_for(InterviewPrep),
        ),
    )
    try:
        return await service.generate_json(request, InterviewPrep, service_name="interview_questions")
    except Exception as e:
        raise feature_error("generate interview questions", e) from e


async def evaluate_writing_exercise(service: GenerationService, task: str, answer: str) -> WritingExerciseFeedback:
    """Score a STAR-method writing draft."""
    request = GenerationRequest.from_parts(
        [Part.from_text("Evaluate.")],
        model=GeminiModel.FLASH.value,
        config=GenerationConfig(
            system_instruction=(
                "Resume writing coach. Evaluate the draft against the STAR method.\n"
                f"Task: \"{task}\"\nDraft: \"{answer}\""
            ),
            response_mime_type="application/json",
            response_schema=schema_for(WritingExerciseFeedback),
        ),
    )
    try:
        return await service.generate_json(request, WritingExerciseFeedback, service_name="writing_feedback")
    except Exception as e:
        raise feature_error("evaluate writing exercise", e) from e
