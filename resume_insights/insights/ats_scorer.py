from __future__ import annotations

import re

from resume_insights.core.scoring import get_scoring_value
from resume_insights.schemas import (
    ATSIssue,
    ATSScoreBreakdown,
    ATSScoreResult,
    ResumeSnapshotInput,
)

from .numeric import clamp_score, round_int

ACTION_VERBS: tuple[str, ...] = (
    "led",
    "developed",
    "implemented",
    "managed",
    "created",
    "designed",
    "built",
    "launched",
    "improved",
    "increased",
    "reduced",
    "optimized",
    "delivered",
    "achieved",
    "executed",
    "coordinated",
    "established",
    "transformed",
    "streamlined",
    "spearheaded",
)

_QUANTIFIED_RE = re.compile(
    r"\d+%|\$\d+|\d+ (?:years?|months?|people|engineers?|team)",
    re.IGNORECASE,
)

_ISSUE_RECOMMENDATIONS: dict[str, str] = {
    "missing_contact": "Add your email and phone number",
    "short_summary": "Write a compelling 2-3 sentence professional summary",
    "missing_skills": "Add 5-10 relevant technical and soft skills",
    "no_experience": "Add your work experience with detailed descriptions",
    "weak_action_verbs": "Start bullet points with action verbs like Led, Developed, Implemented",
    "no_quantified_achievements": "Include metrics and numbers in your achievements",
}


def _descriptions(resume: ResumeSnapshotInput) -> str:
    return " ".join(exp.description or "" for exp in resume.experiences)


class ATSScorer:
    """Applicant-tracking-system compatibility score for a resume.

    Four sub-scores (keywords, format, completeness, experience) are computed
    independently, clamped to 0-100 and combined with the configured weights.
    Every detected issue yields exactly one recommendation.
    """

    def calculate_score(self, resume: ResumeSnapshotInput) -> ATSScoreResult:
        issues: list[ATSIssue] = []

        breakdown = ATSScoreBreakdown(
            keywords=self._keywords_score(resume),
            format=self._format_score(resume, issues),
            completeness=self._completeness_score(resume, issues),
            experience=self._experience_score(resume, issues),
        )

        weighted = (
            breakdown.keywords * float(get_scoring_value("ats.weights.keywords", 0.30))
            + breakdown.format * float(get_scoring_value("ats.weights.format", 0.20))
            + breakdown.completeness * float(get_scoring_value("ats.weights.completeness", 0.25))
            + breakdown.experience * float(get_scoring_value("ats.weights.experience", 0.25))
        )

        return ATSScoreResult(
            score=clamp_score(round_int(weighted)),
            breakdown=breakdown,
            issues=issues,
            recommendations=self._recommendations(issues),
        )

    def _keywords_score(self, resume: ResumeSnapshotInput) -> int:
        per_skill = int(get_scoring_value("ats.keywords.points_per_skill", 5))
        cap = int(get_scoring_value("ats.keywords.skill_points_cap", 50))
        baseline = int(get_scoring_value("ats.keywords.baseline", 30))
        return clamp_score(min(len(resume.skills) * per_skill, cap) + baseline)

    def _format_score(self, resume: ResumeSnapshotInput, issues: list[ATSIssue]) -> int:
        score = 100
        text = _descriptions(resume).lower()
        verbs_found = sum(1 for verb in ACTION_VERBS if verb in text)

        if verbs_found < int(get_scoring_value("ats.format.min_action_verbs", 3)):
            score -= int(get_scoring_value("ats.format.weak_action_verbs_penalty", 20))
            issues.append(
                ATSIssue(
                    type="weak_action_verbs",
                    severity="medium",
                    message="Use more action verbs to describe your achievements",
                )
            )
        return clamp_score(score)

    def _completeness_score(self, resume: ResumeSnapshotInput, issues: list[ATSIssue]) -> int:
        score = 100

        if not resume.email_contact and not resume.phone:
            score -= int(get_scoring_value("ats.completeness.missing_contact_penalty", 30))
            issues.append(
                ATSIssue(
                    type="missing_contact",
                    severity="high",
                    message="Add contact information (email or phone)",
                )
            )

        min_summary = int(get_scoring_value("ats.completeness.min_summary_chars", 50))
        if len(resume.summary or "") < min_summary:
            score -= int(get_scoring_value("ats.completeness.short_summary_penalty", 20))
            issues.append(
                ATSIssue(
                    type="short_summary",
                    severity="medium",
                    message=f"Expand your professional summary (minimum {min_summary} characters)",
                )
            )

        if not resume.skills:
            score -= int(get_scoring_value("ats.completeness.missing_skills_penalty", 25))
            issues.append(
                ATSIssue(
                    type="missing_skills",
                    severity="high",
                    message="Add relevant skills to your resume",
                )
            )

        return clamp_score(score)

    def _experience_score(self, resume: ResumeSnapshotInput, issues: list[ATSIssue]) -> int:
        if not resume.experiences:
            issues.append(
                ATSIssue(
                    type="no_experience",
                    severity="high",
                    message="Add work experience to your resume",
                )
            )
            return 0

        score = int(get_scoring_value("ats.experience.base", 70))
        if _QUANTIFIED_RE.search(_descriptions(resume)):
            score += int(get_scoring_value("ats.experience.quantified_bonus", 20))
        else:
            issues.append(
                ATSIssue(
                    type="no_quantified_achievements",
                    severity="medium",
                    message="Include quantified achievements (numbers, percentages, etc.)",
                )
            )
        return clamp_score(score)

    @staticmethod
    def _recommendations(issues: list[ATSIssue]) -> list[str]:
        return [_ISSUE_RECOMMENDATIONS.get(issue.type, issue.message) for issue in issues]
