"""Input and output models for the résumé optimizer (GlobalCV Pro)."""

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from generationproxy.models.requests import InlineData


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Language(str, Enum):
    ENGLISH = "English"
    CHINESE = "Chinese (Simplified)"
    JAPANESE = "Japanese"
    KOREAN = "Korean"
    GERMAN = "German"
    FRENCH = "French"
    SPANISH = "Spanish"
    ITALIAN = "Italian"


class ResumeStyle(str, Enum):
    PROFESSIONAL = "Professional / Corporate"
    CREATIVE = "Creative / Design"
    ACADEMIC = "Academic / CV"
    STARTUP = "Modern / Startup"
    EXECUTIVE = "Executive / Senior Management"


class InterviewMode(str, Enum):
    NEW_JOB = "New Job Application"
    PROMOTION = "Internal Promotion"


class InterviewDifficulty(str, Enum):
    BASIC = "A2-B1 (Beginner/Intermediate - Basic Discussions)"
    ADVANCED = "B2-C1 (Intermediate/Advanced - Deep Discussions)"


class OptimizationConfig(_CamelModel):
    """What the user submitted on the input step."""

    target_language: Language = Language.ENGLISH
    target_style: ResumeStyle = ResumeStyle.PROFESSIONAL
    target_company: Optional[str] = None
    job_description: Optional[str] = None
    original_resume: str = ""
    file_input: Optional[InlineData] = None
    jd_file: Optional[InlineData] = None
    refinement_instruction: Optional[str] = None
    interview_mode: Optional[InterviewMode] = None
    interview_difficulty: Optional[InterviewDifficulty] = None


class AnalysisIssue(_CamelModel):
    section: str
    original_text_snippet: str
    issue_type: Literal["Critical", "Improvement", "Formatting", "Language"]
    reason_cn: str
    reason_en: str = ""
    suggestion_cn: str
    suggestion_en: str = ""
    example_original: str = ""
    example_improved_en: str
    example_improved_cn: str = ""


class ATSIssue(_CamelModel):
    issue_cn: str
    issue_en: str
    suggestion_cn: str
    suggestion_en: str
    severity: Literal["High", "Medium", "Low"]


class ATSData(_CamelModel):
    score: float = Field(..., description="Total ATS compatibility score out of 100.")
    keyword_score: float = Field(..., description="Score out of 40 based on JD keyword matching.")
    formatting_score: float = Field(..., description="Score out of 30 based on parsing compatibility.")
    structure_score: float = Field(..., description="Score out of 30 based on section flow and detection.")
    keywords_matched: list[str]
    keywords_missing: list[str]
    formatting_issues: list[ATSIssue]
    detailed_feedback_cn: str = ""
    detailed_feedback_en: Optional[str] = None

    @classmethod
    def unavailable(cls) -> "ATSData":
        return cls(
            score=0,
            keyword_score=0,
            formatting_score=0,
            structure_score=0,
            keywords_matched=[],
            keywords_missing=[],
            formatting_issues=[],
            detailed_feedback_cn="Analysis unavailable",
        )


class ATSAnalysis(_CamelModel):
    original: ATSData
    optimized: ATSData
    section_detection: list[str]


class WritingGuide(_CamelModel):
    concept_explanation_cn: str = Field(..., description="Brief introduction to the STAR method (1-2 sentences).")
    concept_explanation_en: Optional[str] = None


class InterviewQuestion(_CamelModel):
    question_cn: str
    question_en: str
    type: Literal["Behavioral", "Technical", "General"] = "General"
    intent_cn: str
    key_points_cn: list[str]
    sample_answer_en: str


class InterviewPrep(_CamelModel):
    part1_intro: list[InterviewQuestion] = Field(..., alias="part1_intro", description="1-2 ice-breaking questions.")
    part2_cv: list[InterviewQuestion] = Field(..., alias="part2_cv", description="2-3 résumé walk-through questions.")
    part3_behavioral: list[InterviewQuestion] = Field(..., alias="part3_behavioral", description="3-4 STAR questions.")
    part4_technical: list[InterviewQuestion] = Field(..., alias="part4_technical", description="2-3 hard-skill questions.")
    part5_reverse: list[InterviewQuestion] = Field(..., alias="part5_reverse", description="2 questions to ask the interviewer.")


class AnalysisResult(_CamelModel):
    overall_score: float
    summary_cn: str
    summary_en: str = ""
    strengths_cn: list[str] = Field(default_factory=list)
    strengths_en: list[str] = Field(default_factory=list)
    issues: list[AnalysisIssue]
    # Optional in the output model so a missing block can be filled with a placeholder
    ats_analysis: Optional[ATSAnalysis] = None
    writing_guide: WritingGuide
    interview_prep: Optional[InterviewPrep] = None


class OptimizationResult(_CamelModel):
    analysis: AnalysisResult
    optimized_content_target: str = Field(..., description="Full résumé in the target language (Markdown).")
    optimized_content_native: str = Field(..., description="Full résumé in Chinese (Markdown).")
    transcribed_original: str = Field(..., description="Transcription of the original file.")


class WritingExerciseFeedback(_CamelModel):
    score: float
    critique: str
    improved_version: str
