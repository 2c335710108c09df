# This project was developed with assistance from AI tools.
"""Onboarding template catalog.

Static, read-only definitions of checklist items: one default sequence,
overlays keyed by role, and overlays keyed by department. Overlays are
additive and optional -- looking up an unknown key yields an empty overlay.

The catalog is injected through ``get_template_catalog()`` so tests (or a
future database-backed catalog) can swap it without touching composition.
"""

from dataclasses import dataclass
from typing import Protocol

from db.enums import DocumentKind


@dataclass(frozen=True)
class TemplateItem:
    """A catalog-defined checklist item. Immutable."""

    key: str
    title: str
    description: str
    order: int
    due_offset_days: int
    requires_document: bool = False
    document_kind: DocumentKind | None = None
    requires_psychometric_test: bool = False
    psychometric_test_id: int | None = None


class TemplateCatalog(Protocol):
    """Read-only lookup interface consumed by the checklist composer."""

    version: str

    def get_default(self) -> tuple[TemplateItem, ...]: ...

    def get_role_overlay(self, role: str) -> tuple[TemplateItem, ...]: ...

    def get_department_overlay(self, department: str | None) -> tuple[TemplateItem, ...]: ...


# ---------------------------------------------------------------------------
# Default sequence (applies to every employee)
# ---------------------------------------------------------------------------

DEFAULT_TEMPLATE: tuple[TemplateItem, ...] = (
    # Day 1 -- welcome & introduction
    TemplateItem(
        key="welcome_introduction",
        title="Welcome & Company Introduction",
        description=(
            "Welcome session covering company history, mission, values, and "
            "organizational structure, with handbook materials."
        ),
        order=1,
        due_offset_days=1,
    ),
    TemplateItem(
        key="personal_profile",
        title="Complete Personal Profile",
        description=(
            "Fill out personal details, emergency contacts, preferences, and "
            "employment information in the employee portal."
        ),
        order=2,
        due_offset_days=1,
    ),
    TemplateItem(
        key="equipment_setup",
        title="Equipment Setup & Registration",
        description=(
            "Equipment checklist covering laptop, phone, access cards, and "
            "peripherals. Upload a photo of the registered equipment."
        ),
        order=3,
        due_offset_days=1,
        requires_document=True,
        document_kind=DocumentKind.IMAGE,
    ),
    TemplateItem(
        key="system_access",
        title="System Access & Account Setup",
        description=(
            "Set up email, system logins, and access to company tools with "
            "step-by-step verification."
        ),
        order=4,
        due_offset_days=2,
    ),
    # Banking & payroll
    TemplateItem(
        key="banking_information",
        title="Banking Information Setup",
        description=(
            "Enter banking details for payroll, direct deposit authorization, "
            "and tax withholding preferences."
        ),
        order=5,
        due_offset_days=3,
    ),
    # Documentation & compliance
    TemplateItem(
        key="employment_documents",
        title="Upload Employment Documents",
        description="Upload contracts, work authorization, and tax forms.",
        order=6,
        due_offset_days=3,
        requires_document=True,
        document_kind=DocumentKind.PDF,
    ),
    TemplateItem(
        key="identification_documents",
        title="Upload Identification Documents",
        description="Upload copies of ID, passport, and any required work permits.",
        order=7,
        due_offset_days=3,
        requires_document=True,
        document_kind=DocumentKind.IMAGE,
    ),
    # Training
    TemplateItem(
        key="safety_training",
        title="Safety & Compliance Training",
        description="Safety training modules with progress tracking and quizzes.",
        order=8,
        due_offset_days=7,
    ),
    TemplateItem(
        key="policies_training",
        title="Company Policies Training",
        description="HR policies, code of conduct, and regulatory compliance acknowledgments.",
        order=9,
        due_offset_days=7,
    ),
    # Psychometric assessment suite
    TemplateItem(
        key="personality_assessment",
        title="Take Personality Assessment",
        description="Personality evaluation to understand work style and team fit.",
        order=10,
        due_offset_days=7,
        requires_psychometric_test=True,
        psychometric_test_id=27,
    ),
    TemplateItem(
        key="cognitive_skills_test",
        title="Take Cognitive Skills Test",
        description="Problem-solving, logical reasoning, and analytical thinking assessment.",
        order=11,
        due_offset_days=7,
        requires_psychometric_test=True,
        psychometric_test_id=28,
    ),
    TemplateItem(
        key="communication_assessment",
        title="Communication Style Assessment",
        description="Written, verbal, and interpersonal communication evaluation.",
        order=12,
        due_offset_days=7,
        requires_psychometric_test=True,
        psychometric_test_id=29,
    ),
    TemplateItem(
        key="technical_skills_evaluation",
        title="Technical Skills Evaluation",
        description="Role-specific technical competency and general technology proficiency.",
        order=13,
        due_offset_days=7,
        requires_psychometric_test=True,
        psychometric_test_id=30,
    ),
    TemplateItem(
        key="cultural_fit_assessment",
        title="Cultural Fit Assessment",
        description="Values and cultural alignment with the company and team.",
        order=14,
        due_offset_days=7,
        requires_psychometric_test=True,
        psychometric_test_id=31,
    ),
    # Team integration
    TemplateItem(
        key="team_introductions",
        title="Team Introduction Meetings",
        description="Introduction meetings with team members, stakeholders, and partners.",
        order=15,
        due_offset_days=10,
    ),
    TemplateItem(
        key="role_expectations",
        title="Role Expectations & Goals Review",
        description="Session with manager on role expectations, performance metrics, and goals.",
        order=16,
        due_offset_days=10,
    ),
    TemplateItem(
        key="department_orientation",
        title="Department-Specific Orientation",
        description="Department processes, tools, workflows, and team dynamics.",
        order=17,
        due_offset_days=14,
    ),
    # Hands-on experience
    TemplateItem(
        key="mentorship_enrollment",
        title="Mentorship Program Enrollment",
        description="Assignment to a workplace mentor with regular check-ins.",
        order=18,
        due_offset_days=14,
    ),
    TemplateItem(
        key="job_shadowing",
        title="Job Shadowing Experience",
        description="Shadow experienced team members with observation checklists.",
        order=19,
        due_offset_days=21,
    ),
    TemplateItem(
        key="first_project",
        title="First Project Assignment",
        description="First supervised assignment with milestone tracking and feedback.",
        order=20,
        due_offset_days=21,
    ),
    # Reviews & feedback
    TemplateItem(
        key="two_week_review",
        title="2-Week Progress Review",
        description="Check-in with HR and supervisor on progress and open concerns.",
        order=21,
        due_offset_days=14,
    ),
    TemplateItem(
        key="thirty_day_review",
        title="30-Day Comprehensive Review",
        description="Formal performance review and career development planning.",
        order=22,
        due_offset_days=30,
    ),
    TemplateItem(
        key="onboarding_feedback",
        title="Onboarding Experience Feedback",
        description="Feedback on the onboarding experience and suggested improvements.",
        order=23,
        due_offset_days=30,
    ),
    # Long-term integration
    TemplateItem(
        key="sixty_day_review",
        title="60-Day Development Review",
        description="Review of skill development, career progression, and integration.",
        order=24,
        due_offset_days=60,
    ),
    TemplateItem(
        key="development_plan",
        title="Professional Development Planning",
        description="Development plan covering training, skill building, and career pathways.",
        order=25,
        due_offset_days=45,
    ),
)


# ---------------------------------------------------------------------------
# Role overlays
# ---------------------------------------------------------------------------

ROLE_TEMPLATES: dict[str, tuple[TemplateItem, ...]] = {
    # Basic employee items are covered by the default sequence
    "employee": (),
    "team_lead": (
        TemplateItem(
            key="team_lead.leadership_training",
            title="Leadership Training Module",
            description="Team leadership and management training for your role.",
            order=17,
            due_offset_days=21,
        ),
        TemplateItem(
            key="team_lead.performance_metrics",
            title="Review Team Performance Metrics",
            description="Team KPIs, performance tracking, and reporting requirements.",
            order=18,
            due_offset_days=14,
        ),
    ),
    "branch_manager": (
        TemplateItem(
            key="branch_manager.management_training",
            title="Management Training Program",
            description="Management training covering leadership, finance, and operations.",
            order=17,
            due_offset_days=30,
            requires_document=True,
            document_kind=DocumentKind.PDF,
        ),
        TemplateItem(
            key="branch_manager.budget_overview",
            title="Budget & Financial Overview",
            description="Branch budget, financial responsibilities, and reporting.",
            order=18,
            due_offset_days=21,
        ),
        TemplateItem(
            key="branch_manager.regional_leadership",
            title="Meet Regional Leadership",
            description="Introduction meetings with regional managers and the executive team.",
            order=19,
            due_offset_days=14,
        ),
    ),
    "hr_admin": (
        TemplateItem(
            key="hr_admin.hr_systems_training",
            title="HR Systems Training",
            description="Training on HR systems, databases, and compliance requirements.",
            order=17,
            due_offset_days=21,
        ),
        TemplateItem(
            key="hr_admin.legal_compliance",
            title="Legal Compliance Training",
            description="Employment law, data privacy, and regulatory compliance training.",
            order=18,
            due_offset_days=30,
            requires_document=True,
            document_kind=DocumentKind.PDF,
        ),
    ),
    "logistics_manager": (
        TemplateItem(
            key="logistics_manager.inventory_training",
            title="Inventory Management Training",
            description="Inventory systems, procurement processes, and vendor management.",
            order=17,
            due_offset_days=21,
        ),
        TemplateItem(
            key="logistics_manager.vendor_relations",
            title="Vendor Relations Overview",
            description="Meet key vendors and learn existing supplier relationships.",
            order=18,
            due_offset_days=14,
        ),
    ),
}


# ---------------------------------------------------------------------------
# Department overlays
# ---------------------------------------------------------------------------

DEPARTMENT_TEMPLATES: dict[str, tuple[TemplateItem, ...]] = {
    "information_technology": (
        TemplateItem(
            key="information_technology.security_training",
            title="IT Security Training",
            description="Cybersecurity training and required security clearances.",
            order=20,
            due_offset_days=7,
            requires_document=True,
            document_kind=DocumentKind.PDF,
        ),
        TemplateItem(
            key="information_technology.development_tools",
            title="Access Development Tools",
            description="Development environment, version control, and deployment tools.",
            order=21,
            due_offset_days=7,
        ),
    ),
    "finance_accounting": (
        TemplateItem(
            key="finance_accounting.financial_systems",
            title="Financial Systems Training",
            description="Accounting software, financial reporting tools, and compliance procedures.",
            order=20,
            due_offset_days=14,
        ),
    ),
    "sales_marketing": (
        TemplateItem(
            key="sales_marketing.crm_training",
            title="CRM System Training",
            description="Customer relationship management system and sales processes.",
            order=20,
            due_offset_days=10,
        ),
        TemplateItem(
            key="sales_marketing.product_knowledge",
            title="Product Knowledge Training",
            description="Training on all company products and services.",
            order=21,
            due_offset_days=14,
        ),
    ),
}


class StaticTemplateCatalog:
    """Catalog backed by module-level template tables."""

    def __init__(
        self,
        default: tuple[TemplateItem, ...] = DEFAULT_TEMPLATE,
        roles: dict[str, tuple[TemplateItem, ...]] | None = None,
        departments: dict[str, tuple[TemplateItem, ...]] | None = None,
        version: str = "2024.1",
    ):
        self.version = version
        self._default = tuple(default)
        self._roles = dict(ROLE_TEMPLATES if roles is None else roles)
        self._departments = dict(DEPARTMENT_TEMPLATES if departments is None else departments)

    def get_default(self) -> tuple[TemplateItem, ...]:
        return self._default

    def get_role_overlay(self, role: str) -> tuple[TemplateItem, ...]:
        return self._roles.get(role, ())

    def get_department_overlay(self, department: str | None) -> tuple[TemplateItem, ...]:
        if not department:
            return ()
        return self._departments.get(department, ())

    @property
    def roles(self) -> list[str]:
        return sorted(self._roles)

    @property
    def departments(self) -> list[str]:
        return sorted(self._departments)


# ---------------------------------------------------------------------------
# Module-level singleton
# ---------------------------------------------------------------------------

_catalog: TemplateCatalog = StaticTemplateCatalog()


def get_template_catalog() -> TemplateCatalog:
    """Return the active catalog (FastAPI dependency-friendly)."""
    return _catalog


def set_template_catalog(catalog: TemplateCatalog) -> None:
    """Replace the active catalog (startup configuration and tests)."""
    global _catalog  # noqa: PLW0603
    _catalog = catalog
