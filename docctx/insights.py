"""Marketing readiness scoring and content recommendations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .models import ProjectAnalysis, SelectedContext

HIGH_QUALITY_PRIORITY = 70
ACCEPTABLE_QUALITY_PRIORITY = 50
RECOMMENDATION_QUALITY_PRIORITY = 60
MIN_SELECTED_DOCUMENTS = 3


@dataclass
class ReadinessReport:
    """How ready a project's documentation is to ground marketing content."""

    score: int
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)


@dataclass
class Recommendations:
    content_opportunities: List[str] = field(default_factory=list)
    improvement_suggestions: List[str] = field(default_factory=list)
    next_steps: List[str] = field(default_factory=list)


def assess_readiness(analysis: ProjectAnalysis) -> ReadinessReport:
    """Score ``analysis`` out of 100 and explain the score."""
    report = ReadinessReport(score=0)
    metadata = analysis.structured.metadata

    if metadata.description:
        report.score += 20
        report.strengths.append("Project has a clear description")
    else:
        report.weaknesses.append("Project description is missing")
        report.recommendations.append("Add a detailed project description")

    if analysis.semi_structured.readme is not None:
        report.score += 25
        report.strengths.append("README is present")
    else:
        report.weaknesses.append("README is missing")
        report.recommendations.append("Write a detailed README")

    if analysis.semi_structured.changelog is not None:
        report.score += 10
        report.strengths.append("Changelog is maintained")
    else:
        report.recommendations.append("Maintain a changelog")

    if analysis.structured.tech_stack:
        report.score += 15
        report.strengths.append("Tech stack is identifiable")
    else:
        report.weaknesses.append("Tech stack is unclear")
        report.recommendations.append("Declare the tech stack in a project manifest")

    quality = analysis.full_text.average_priority
    if quality > HIGH_QUALITY_PRIORITY:
        report.score += 20
        report.strengths.append("Documentation quality is high")
    elif quality > ACCEPTABLE_QUALITY_PRIORITY:
        report.score += 10
        report.recommendations.append("Improve documentation quality")
    else:
        report.weaknesses.append("Documentation quality needs work")
        report.recommendations.append("Rewrite and restructure the existing documents")

    if metadata.keywords:
        report.score += 10
        report.strengths.append("Project declares keywords")
    else:
        report.recommendations.append("Add relevant keywords")

    return report


def build_recommendations(analysis: ProjectAnalysis, selected: SelectedContext) -> Recommendations:
    """Suggest documentation work based on an analysis and one selection from it."""
    result = Recommendations()

    if analysis.semi_structured.readme is None:
        result.content_opportunities.append("Write a detailed README")
        result.next_steps.append("Draft a project introduction and usage guide")

    if analysis.semi_structured.changelog is None:
        result.content_opportunities.append("Maintain a changelog")
        result.next_steps.append("Record releases and feature changes")

    if analysis.full_text.average_priority < RECOMMENDATION_QUALITY_PRIORITY:
        result.improvement_suggestions.append("Improve documentation quality and structure")
        result.next_steps.append("Reorganise and improve the existing documents")

    if not analysis.structured.metadata.keywords:
        result.improvement_suggestions.append("Add project keywords")
        result.next_steps.append("Research and add relevant technical keywords")

    if len(selected.documents) < MIN_SELECTED_DOCUMENTS:
        result.content_opportunities.append("Add more project documentation")
        result.next_steps.append("Write user guides and API documentation")

    return result


__all__ = ["ReadinessReport", "Recommendations", "assess_readiness", "build_recommendations"]
