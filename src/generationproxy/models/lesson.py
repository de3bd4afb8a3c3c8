"""Input and output models for the lesson-plan generator (AI Lesson Architect)."""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from generationproxy.models.requests import InlineData

GeneratorMode = Literal["full", "module", "audio", "homework_check"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StudentProfile(_CamelModel):
    age: Optional[str] = None
    industry: Optional[str] = None
    job: Optional[str] = None
    goal: list[str] = Field(default_factory=list)
    interests: list[str] = Field(default_factory=list)
    english_level: Optional[str] = None


class SyllabusInput(_CamelModel):
    text: str = ""
    file: Optional[InlineData] = None


class LessonForm(_CamelModel):
    """What the teacher submitted on the input form."""

    mode: GeneratorMode = "full"
    syllabus: SyllabusInput = Field(default_factory=SyllabusInput)
    class_mode: str = "Offline Class"
    class_type: str = "1-on-1"
    duration: int = Field(60, gt=0, description="Class length in minutes")
    student_profiles: list[StudentProfile] = Field(default_factory=list)
    module_types: list[str] = Field(default_factory=list)
    additional_prompt: Optional[str] = None
    generation_direction: Optional[str] = None


class ContentItem(_CamelModel):
    title: str
    content: str = Field(..., description="Markdown")
    tips_for_teacher: Optional[str] = None


class SectionContent(_CamelModel):
    goal: str = ""
    duration: str = ""
    student_materials: list[ContentItem] = Field(default_factory=list)
    teacher_guide: list[ContentItem] = Field(default_factory=list)


class ModuleResult(_CamelModel):
    type: str
    title: str
    content: list[ContentItem]


class LessonMeta(_CamelModel):
    title: str
    target_audience: str = ""
    learning_objectives: list[str] = Field(default_factory=list)
    mode: Optional[GeneratorMode] = None


class LessonPlan(_CamelModel):
    meta: LessonMeta
    pre_class: SectionContent = Field(default_factory=SectionContent)
    in_class: SectionContent = Field(default_factory=SectionContent)
    post_class: SectionContent = Field(default_factory=SectionContent)
    modules: list[ModuleResult] = Field(default_factory=list)


class CorrectionItem(_CamelModel):
    original: str
    correction: str
    explanation: str
    audio_feedback: Optional[str] = None


class HomeworkCheckResult(_CamelModel):
    score: str = Field(..., description='e.g. "85/100"')
    overall_feedback: str
    sentence_analysis: list[CorrectionItem]
    revised_article: str
    suggestions: str
