from __future__ import annotations

import re

from resume_insights.core.scoring import get_scoring_value
from resume_insights.schemas import (
    JobMatchResult,
    KeywordHit,
    KeywordSuggestions,
    KeywordWarning,
    ResumeSnapshotInput,
)

from .numeric import round_half_up, round_int

INDUSTRY_KEYWORDS: dict[str, tuple[str, ...]] = {
    "software_engineering": (
        "JavaScript",
        "TypeScript",
        "React",
        "Node.js",
        "Python",
        "Java",
        "AWS",
        "Docker",
        "Kubernetes",
        "CI/CD",
        "Git",
        "REST",
        "GraphQL",
        "SQL",
        "NoSQL",
        "Agile",
        "Scrum",
        "microservices",
        "TDD",
        "API",
    ),
    "data_science": (
        "Python",
        "R",
        "SQL",
        "Machine Learning",
        "Deep Learning",
        "TensorFlow",
        "PyTorch",
        "Pandas",
        "NumPy",
        "Scikit-learn",
        "Statistics",
        "Data Visualization",
        "Tableau",
        "Power BI",
        "Big Data",
        "Spark",
        "Hadoop",
    ),
    "devops": (
        "AWS",
        "Azure",
        "GCP",
        "Docker",
        "Kubernetes",
        "Terraform",
        "Ansible",
        "Jenkins",
        "CI/CD",
        "Linux",
        "Bash",
        "Python",
        "Monitoring",
        "Prometheus",
        "Grafana",
        "Infrastructure",
    ),
    "product_management": (
        "Agile",
        "Scrum",
        "Product Strategy",
        "Roadmap",
        "User Research",
        "A/B Testing",
        "Analytics",
        "KPIs",
        "OKRs",
        "Stakeholder Management",
        "Prioritization",
        "User Stories",
        "JIRA",
        "Confluence",
    ),
    "design": (
        "Figma",
        "Sketch",
        "Adobe XD",
        "UI/UX",
        "User Research",
        "Wireframing",
        "Prototyping",
        "Design Systems",
        "Responsive Design",
        "Accessibility",
        "Visual Design",
        "Typography",
    ),
    "marketing": (
        "SEO",
        "SEM",
        "Content Marketing",
        "Social Media",
        "Analytics",
        "Google Analytics",
        "Email Marketing",
        "CRM",
        "HubSpot",
        "Salesforce",
        "PPC",
        "Brand Strategy",
    ),
    "finance": (
        "Financial Analysis",
        "Excel",
        "SQL",
        "Python",
        "Bloomberg",
        "Risk Management",
        "Valuation",
        "Financial Modeling",
        "Accounting",
        "Compliance",
        "Investment",
    ),
    "healthcare": (
        "Clinical",
        "Patient Care",
        "HIPAA",
        "EMR",
        "EHR",
        "Healthcare Administration",
        "Medical Terminology",
        "Research",
        "Compliance",
    ),
    "education": (
        "Curriculum Development",
        "Teaching",
        "Assessment",
        "Learning Management",
        "EdTech",
        "Student Engagement",
        "Classroom Management",
    ),
    "other": tuple(),
}

_KEYWORD_PATTERNS: dict[str, re.Pattern[str]] = {}


def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    # Alphanumeric boundaries so "R" or "Java" do not match inside other words.
    pattern = _KEYWORD_PATTERNS.get(keyword)
    if pattern is None:
        pattern = re.compile(rf"(?<![a-z0-9]){re.escape(keyword.lower())}(?![a-z0-9])", re.IGNORECASE)
        _KEYWORD_PATTERNS[keyword] = pattern
    return pattern


def _all_keywords() -> list[str]:
    seen: set[str] = set()
    ordered: list[str] = []
    for keywords in INDUSTRY_KEYWORDS.values():
        for keyword in keywords:
            key = keyword.lower()
            if key in seen:
                continue
            seen.add(key)
            ordered.append(keyword)
    return ordered


def resume_text(resume: ResumeSnapshotInput) -> str:
    parts: list[str] = []
    if resume.summary:
        parts.append(resume.summary)
    if resume.job_title:
        parts.append(resume.job_title)
    parts.extend(skill.name for skill in resume.skills if skill.name)
    for exp in resume.experiences:
        if exp.title:
            parts.append(exp.title)
        if exp.company:
            parts.append(exp.company)
        if exp.description:
            parts.append(exp.description)
    return " ".join(parts)


class KeywordAnalyzer:
    def get_industry_keywords(self, industry: str) -> list[str]:
        return list(INDUSTRY_KEYWORDS.get(industry, ()))

    def get_suggestions(self, resume: ResumeSnapshotInput, industry: str) -> KeywordSuggestions:
        text = resume_text(resume)
        industry_keywords = self.get_industry_keywords(industry)

        existing = self._find_existing_keywords(text, industry_keywords)
        existing_lower = {hit.keyword.lower() for hit in existing}

        missing: list[str] = []
        for keyword in industry_keywords:
            key = keyword.lower()
            if key in existing_lower or any(key == item.lower() for item in missing):
                continue
            missing.append(keyword)

        word_count = len(text.split())
        keyword_count = sum(hit.count for hit in existing)
        density = (keyword_count / word_count) * 100 if word_count > 0 else 0.0

        missing_limit = int(get_scoring_value("keywords.missing_limit", 10))
        return KeywordSuggestions(
            existing_keywords=existing,
            missing_keywords=missing[:missing_limit],
            keyword_density=round_half_up(density, 2),
            warnings=self._detect_warnings(existing, density),
            recommendations=self._recommendations(missing, industry),
        )

    def match_job_description(self, resume: ResumeSnapshotInput, job_description: str) -> JobMatchResult:
        text = resume_text(resume).lower()
        job_text = (job_description or "").lower()
        job_keywords = [keyword for keyword in _all_keywords() if keyword.lower() in job_text]

        matched: list[str] = []
        missing: list[str] = []
        for keyword in job_keywords:
            if keyword.lower() in text:
                matched.append(keyword)
            else:
                missing.append(keyword)

        match_score = round_int(len(matched) / len(job_keywords) * 100) if job_keywords else 0
        return JobMatchResult(
            match_score=match_score,
            matched_keywords=matched,
            missing_keywords=missing,
            recommendations=self._match_recommendations(missing),
        )

    @staticmethod
    def _find_existing_keywords(text: str, keywords: list[str]) -> list[KeywordHit]:
        per_match = int(get_scoring_value("keywords.relevance_per_match", 20))
        hits: list[KeywordHit] = []
        seen: set[str] = set()
        for keyword in keywords:
            if keyword.lower() in seen:
                continue
            seen.add(keyword.lower())
            count = len(_keyword_pattern(keyword).findall(text))
            if count > 0:
                hits.append(KeywordHit(keyword=keyword, count=count, relevance=min(count * per_match, 100)))
        # sorted() is stable, so equal counts keep table order.
        return sorted(hits, key=lambda hit: hit.count, reverse=True)

    @staticmethod
    def _detect_warnings(existing: list[KeywordHit], density: float) -> list[KeywordWarning]:
        warnings: list[KeywordWarning] = []
        max_count = int(get_scoring_value("keywords.stuffing.max_keyword_count", 5))
        max_density = float(get_scoring_value("keywords.stuffing.max_density", 10))
        low_density = float(get_scoring_value("keywords.low_density_threshold", 1))

        stuffed = [hit.keyword for hit in existing if hit.count > max_count]
        if stuffed or density > max_density:
            warnings.append(
                KeywordWarning(
                    type="keyword_stuffing",
                    message="Some keywords appear too frequently, which may hurt ATS score",
                    affected_keywords=stuffed,
                )
            )

        if density < low_density and existing:
            warnings.append(
                KeywordWarning(
                    type="low_density",
                    message="Keyword density is too low for optimal ATS scoring",
                    affected_keywords=[],
                )
            )
        return warnings

    @staticmethod
    def _recommendations(missing: list[str], industry: str) -> list[str]:
        if not missing:
            return []
        sample = int(get_scoring_value("keywords.recommendation_sample", 5))
        return [
            f"Consider adding these {industry} keywords: {', '.join(missing[:sample])}",
            "Place keywords naturally in your summary and experience descriptions",
            "Match keywords from job descriptions you are targeting",
        ]

    @staticmethod
    def _match_recommendations(missing: list[str]) -> list[str]:
        if not missing:
            return ["Great match! Your resume aligns well with this job description."]
        sample = int(get_scoring_value("keywords.recommendation_sample", 5))
        return [
            f"Add these missing skills/keywords: {', '.join(missing[:sample])}",
            "Tailor your summary to match the job requirements",
            "Include relevant project experience for missing technologies",
        ]
