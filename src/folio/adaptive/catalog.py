"""Static content catalog shared by every company and persona.

Declaration order matters: it breaks ranking ties.

Data-quality assumption: every persona focus tag should appear on at least
one asset here. It is not enforced at runtime; ``uncovered_focus_tags``
reports gaps for tests and the CLI.
"""

from __future__ import annotations

from folio.adaptive.models import ContentAsset, PersonaProfile

PORTFOLIO_OWNER = "Nick Wiley"

CONTENT_ASSETS: tuple[ContentAsset, ...] = (
    ContentAsset(
        id="work-panel-wizard",
        title="Panel Wizard: Human-in-the-loop ML for proposal panel formation",
        url="/work/panel-wizard",
        kind="case-study",
        summary=(
            "Decision-support tool consolidating 8 screens into 1, using sentence transformer "
            "embeddings and K-Means clustering. Reduced panel formation from weeks to hours."
        ),
        tags=(
            "human-in-the-loop",
            "governance",
            "nlp",
            "clustering",
            "decision-support",
            "federal",
            "responsible-ai",
            "auditability",
            "embeddings",
            "ai-engineering",
        ),
    ),
    ContentAsset(
        id="work-usda-organic-analytics",
        title="USDA Organic Analytics Platform",
        url="/work/usda-organic-analytics",
        kind="case-study",
        summary=(
            "Global data warehouse on AWS integrating Salesforce, CBP customs records, and "
            "investigative data. NLP taxonomy classifier and dozens of Tableau reports."
        ),
        tags=(
            "data-platform",
            "tableau",
            "etl",
            "governance",
            "accessibility",
            "federal",
            "operations",
            "enterprise-delivery",
            "aws",
            "nlp",
        ),
    ),
    ContentAsset(
        id="work-researcher-lineage",
        title="Researcher Lineage Dashboard",
        url="/work/researcher-lineage-dashboard",
        kind="case-study",
        summary=(
            "Integrated public and internal data to map researcher funding trajectories, "
            "co-funders, and international funding sources."
        ),
        tags=(
            "dashboards",
            "analytics",
            "portfolio-review",
            "stakeholder-alignment",
            "bigquery",
            "federal",
            "data-integration",
        ),
    ),
    ContentAsset(
        id="work-study-halls",
        title="Building adoption: Study halls that made analytics usable",
        url="/work/enablement-study-halls",
        kind="case-study",
        summary=(
            "Enablement and data working groups that increased self-service and reduced "
            "analytics bottlenecks."
        ),
        tags=(
            "adoption",
            "change-management",
            "governance",
            "enablement",
            "operations",
            "federal",
        ),
    ),
    ContentAsset(
        id="work-visitime",
        title="VisiTime AR Tour System",
        url="/work/visitime-ar",
        kind="case-study",
        summary=(
            "Built an AR tour platform on Unity from scratch: fundraising, geocoded content "
            "delivery, iPad fleet management, and 2 U.S. utility patents."
        ),
        tags=(
            "startup",
            "product",
            "ar",
            "gis",
            "operations",
            "founder",
            "execution",
            "patents",
        ),
    ),
    ContentAsset(
        id="work-ratb-gis",
        title="Recovery oversight with GIS",
        url="/work/ratb-gis-oversight",
        kind="case-study",
        summary=(
            "Led GIS integration and Palantir network analysis that identified 90 contract "
            "misrepresentations in Recovery Act oversight."
        ),
        tags=(
            "gis",
            "public-sector",
            "risk-analysis",
            "accountability",
            "federal",
            "oversight",
            "security",
        ),
    ),
    ContentAsset(
        id="work-nsf-proposal-classification",
        title="AI-Powered Research Proposal Classification",
        url="/work/nsf-proposal-classification",
        kind="case-study",
        summary=(
            "BERTopic pipeline classifying 7,000+ proposals into 70+ themes with "
            "Optuna-optimized hyperparameters."
        ),
        tags=(
            "nlp",
            "topic-modeling",
            "unsupervised-learning",
            "ml-experimentation",
            "evaluation",
            "federal",
            "ai-ml",
        ),
    ),
    ContentAsset(
        id="work-nsf-robora",
        title="RoboRA: Automated document generation",
        url="/work/nsf-robora",
        kind="case-study",
        summary=(
            "Modernized Excel-based document generation with data-driven templates and "
            "Chrome automation for legacy systems."
        ),
        tags=(
            "automation",
            "document-generation",
            "legacy-modernization",
            "federal",
        ),
    ),
    ContentAsset(
        id="work-nsf-adcc",
        title="ADCC: Automated compliance checking",
        url="/work/nsf-adcc",
        kind="case-study",
        summary=(
            "28 automated compliance checks against live operational data, replacing manual "
            "auditing with systematic validation."
        ),
        tags=(
            "compliance",
            "data-quality",
            "automation",
            "governance",
            "trust",
            "federal",
        ),
    ),
    ContentAsset(
        id="work-nsf-telemetry",
        title="Telemetry dashboards for tool adoption",
        url="/work/nsf-telemetry",
        kind="case-study",
        summary=(
            "Anonymous usage telemetry across the full analytics suite, turning adoption "
            "data into actionable insights."
        ),
        tags=(
            "adoption",
            "telemetry",
            "analytics",
            "governance",
            "federal",
        ),
    ),
    ContentAsset(
        id="writing-hitl",
        title="Human-in-the-loop isn't a compromise. It's the point.",
        url="/writing/human-in-the-loop",
        kind="writing",
        summary=(
            "Why human control, override paths, and auditability are core design goals in "
            "high-stakes AI."
        ),
        tags=(
            "human-in-the-loop",
            "governance",
            "responsible-ai",
            "auditability",
            "ai-safety",
            "alignment",
        ),
    ),
    ContentAsset(
        id="writing-dashboards-decisions",
        title="From dashboards to decisions",
        url="/writing/from-dashboards-to-decisions",
        kind="writing",
        summary="Analytics should improve decision quality, not just generate charts.",
        tags=(
            "analytics",
            "decision-support",
            "product-thinking",
            "stakeholder-alignment",
            "outcomes",
        ),
    ),
    ContentAsset(
        id="writing-consulting-ai",
        title="What consulting taught me about building AI responsibly",
        url="/writing/consulting-and-responsible-ai",
        kind="writing",
        summary="How governance, constraints, and adoption shape production AI delivery.",
        tags=(
            "responsible-ai",
            "governance",
            "consulting",
            "delivery",
            "regulated-environments",
            "strategy",
        ),
    ),
    ContentAsset(
        id="project-rag-prototype",
        title="RAG Pipeline Prototype",
        url="/projects",
        kind="project",
        summary="Embedding-based retrieval prototype for curated Q&A over local corpora.",
        tags=(
            "rag",
            "embeddings",
            "retrieval",
            "ai-engineering",
            "prototyping",
        ),
    ),
    ContentAsset(
        id="project-clustering-template",
        title="Embedding + Clustering Notebook Template",
        url="/projects",
        kind="project",
        summary="Reusable NLP workflow for vectorization and clustering exploration.",
        tags=(
            "embeddings",
            "clustering",
            "ml-experimentation",
            "python",
            "notebooks",
        ),
    ),
    ContentAsset(
        id="project-governance-checklist",
        title="Tableau Governance Checklist",
        url="/projects",
        kind="project",
        summary="Starter governance kit for BI adoption in regulated settings.",
        tags=(
            "governance",
            "tableau",
            "adoption",
            "accessibility",
            "documentation",
        ),
    ),
    ContentAsset(
        id="resume-summary",
        title="Resume: Summary and Core Skills",
        url="/resume#summary",
        kind="page",
        summary=(
            "12+ years of federal and startup delivery across applied AI, analytics, and "
            "governance."
        ),
        tags=(
            "experience",
            "applied-ai",
            "federal",
            "governance",
            "leadership",
            "enterprise",
        ),
    ),
    ContentAsset(
        id="resume-experience",
        title="Resume: Experience Highlights",
        url="/resume#experience",
        kind="page",
        summary=(
            "IBM federal consulting, NSF/USDA delivery, proposal wins, and startup execution."
        ),
        tags=(
            "delivery",
            "federal",
            "leadership",
            "program-delivery",
            "enterprise",
            "outcomes",
        ),
    ),
    ContentAsset(
        id="about-approach",
        title="About: How I think about work",
        url="/about",
        kind="page",
        summary=(
            "Decision-first systems thinking with accountability, usability, and repeatability."
        ),
        tags=(
            "systems-thinking",
            "decision-support",
            "governance",
            "stakeholder-alignment",
        ),
    ),
)


def get_content_assets() -> tuple[ContentAsset, ...]:
    return CONTENT_ASSETS


def catalog_tags() -> frozenset[str]:
    """Every tag declared by at least one asset."""
    return frozenset(tag for asset in CONTENT_ASSETS for tag in asset.tags)


def uncovered_focus_tags(persona: PersonaProfile) -> list[str]:
    """Focus tags of *persona* that no catalog asset carries, in declared order."""
    known = catalog_tags()
    return [tag for tag in persona.focus_tags if tag not in known]


__all__ = [
    "CONTENT_ASSETS",
    "PORTFOLIO_OWNER",
    "catalog_tags",
    "get_content_assets",
    "uncovered_focus_tags",
]
