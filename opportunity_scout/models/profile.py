"""Pydantic model for the candidate profile that postings are scored against."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Profile(BaseModel):
    """Fixed candidate description. Loaded once and never mutated."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    summary: str = ""

    # Skills matched against posting text, in priority order
    skills: list[str] = Field(
        default_factory=lambda: [
            "Python", "JavaScript", "TypeScript", "C++", "C", "HTML", "CSS", "SQL",
        ]
    )
    frameworks: list[str] = Field(
        default_factory=lambda: ["React", "Next.js", "Node.js", "Express.js", "FastAPI"]
    )

    # Roles
    target_roles: list[str] = Field(
        default_factory=lambda: [
            "Software Development Engineer", "SDE Intern", "Backend Engineer",
            "Full Stack Engineer", "ML Engineer",
        ]
    )
    role_keywords: list[str] = Field(
        default_factory=lambda: ["intern", "sde", "software", "developer", "engineer", "graduate"]
    )

    # Graduating cohort
    graduation_year: int = 2026
    cohort_keywords: list[str] = Field(
        default_factory=lambda: ["passout", "fresher", "graduate"]
    )

    # Compensation (monthly, INR)
    min_compensation: int = 50000

    preferred_locations: list[str] = Field(
        default_factory=lambda: ["Remote", "Bangalore", "Hyderabad", "Pune", "Delhi NCR"]
    )
    must_have_keywords: list[str] = Field(
        default_factory=lambda: ["2026 passout", "SDE", "full-time", "PPO", "placement"]
    )
    avoid_keywords: list[str] = Field(
        default_factory=lambda: ["contract", "part-time", "freelance"]
    )

    def prompt_context(self) -> str:
        """Render the candidate summary used inside reasoning-model prompts."""
        lines = ["# Candidate Profile", ""]
        if self.name:
            lines.append(f"**Name**: {self.name}")
        lines.append(f"**Graduation Year**: {self.graduation_year}")
        if self.summary:
            lines.append(f"**Summary**: {self.summary}")
        lines.append("")
        lines.append("## Key Skills")
        lines.append(f"- **Programming**: {', '.join(self.skills)}")
        if self.frameworks:
            lines.append(f"- **Frameworks**: {', '.join(self.frameworks[:8])}")
        lines.append("")
        lines.append("## Job Search Criteria")
        lines.append(f"- **Target Roles**: {', '.join(self.target_roles)}")
        lines.append(f"- **Minimum Stipend**: ₹{self.min_compensation:,}/month")
        lines.append(f"- **Location Preference**: {', '.join(self.preferred_locations)}")
        lines.append(f"- **Must-Have Keywords**: {', '.join(self.must_have_keywords)}")
        if self.avoid_keywords:
            lines.append(f"- **Avoid**: {', '.join(self.avoid_keywords)}")
        return "\n".join(lines)
