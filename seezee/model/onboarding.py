import pydantic as p

from .base import BaseModel, WithCtime
from .id import LearningResourceID, OnboardingPathID, ToolID
from .item import ResourceType, Tool


class OnboardingStepSpec(BaseModel):
    """A step as given when a path is created."""

    resource_id: LearningResourceID
    position: int = p.Field(ge=0)
    required: bool = True


class OnboardingStep(OnboardingStepSpec):
    title: str
    type: ResourceType


class OnboardingPath(WithCtime):
    onboarding_path_id: OnboardingPathID
    tool_id: ToolID
    title: str
    description: str | None = None
    # ordered by position
    steps: list[OnboardingStep] = []

    @property
    def required_steps(self) -> list[OnboardingStep]:
        return [step for step in self.steps if step.required]


class ToolOnboarding(BaseModel):
    tool: Tool
    path: OnboardingPath | None = None
