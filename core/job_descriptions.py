# ============================================
# JOB DESCRIPTION → PERMISSIONS
# ============================================
# Suggests permission sets for custom groups from a job title,
# description and department. Every suggestion is drawn from the
# catalog in core.permissions, so a generated group always passes
# CreateGroupData validation.

from typing import Dict, FrozenSet, Iterable, List, NamedTuple, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from core.permissions import Permission as P


class JobDescriptionTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    department: str
    description: str
    base_permissions: Tuple[P, ...]
    suggested_permissions: Tuple[P, ...]


# Granted when nothing else matches
BASIC_PERMISSIONS: Tuple[P, ...] = (
    P.content_create_draft,
    P.content_edit_own,
    P.media_upload,
    P.media_edit_own,
)

# Template lookups fall back to this smaller set
TEMPLATE_FALLBACK: Tuple[P, ...] = (
    P.content_create_draft,
    P.content_edit_own,
    P.media_upload,
)

ESCALATION_KEYWORDS = ("manage", "supervise")


JOB_DESCRIPTION_TEMPLATES: List[JobDescriptionTemplate] = [
    JobDescriptionTemplate(
        id="content-writer",
        title="Content Writer",
        department="Communications",
        description="Creates and manages written content for the organization",
        base_permissions=(
            P.content_create_draft,
            P.content_edit_own,
            P.content_submit_review,
            P.media_upload,
            P.media_edit_own,
        ),
        suggested_permissions=(P.content_view_drafts, P.categories_manage),
    ),
    JobDescriptionTemplate(
        id="hr-manager",
        title="HR Manager",
        department="Human Resources",
        description="Manages employee relations and organizational development",
        base_permissions=(
            P.users_view,
            P.users_edit_own,
            P.events_create,
            P.events_edit_own,
            P.volunteers_view_all,
        ),
        suggested_permissions=(
            P.users_view,
            P.users_create,
            P.volunteers_review_applications,
            P.membership_view_all,
        ),
    ),
    JobDescriptionTemplate(
        id="project-coordinator",
        title="Project Coordinator",
        department="Operations",
        description="Coordinates projects and manages team activities",
        base_permissions=(
            P.events_view_all,
            P.events_create,
            P.events_edit_own,
            P.volunteers_create_opportunities,
            P.volunteers_assign,
        ),
        suggested_permissions=(
            P.events_edit_all,
            P.volunteers_review_applications,
            P.email_send_individual,
        ),
    ),
    JobDescriptionTemplate(
        id="data-analyst",
        title="Data Analyst",
        department="Analytics",
        description="Analyzes organizational data and creates reports",
        base_permissions=(P.analytics_view, P.reports_generate, P.analytics_export),
        suggested_permissions=(P.analytics_view_advanced, P.reports_custom, P.users_export),
    ),
]


CATEGORY_PERMISSIONS: Dict[str, FrozenSet[P]] = {
    "content": frozenset({
        P.content_create_draft, P.content_edit_own, P.content_edit_all,
        P.content_publish, P.content_unpublish,
        P.content_delete_own, P.content_delete_all,
        P.content_schedule, P.categories_manage,
        P.content_submit_review, P.content_approve_review, P.content_view_drafts,
    }),
    "users": frozenset({
        P.users_view, P.users_create, P.users_edit, P.users_edit_own,
        P.users_delete, P.users_assign_roles, P.users_export,
    }),
    "media": frozenset({
        P.media_upload, P.media_view, P.media_edit_own, P.media_edit_all,
        P.media_delete, P.media_organize,
    }),
    "system": frozenset({
        P.settings_view, P.settings_edit, P.plugins_manage,
        P.system_view_logs, P.system_backup, P.system_manage_security,
    }),
    "analytics": frozenset({
        P.analytics_view, P.analytics_view_advanced, P.analytics_export,
        P.reports_generate, P.reports_custom,
    }),
    "cms": frozenset({
        P.content_edit_all, P.content_publish, P.content_delete_all,
        P.categories_manage, P.users_view, P.users_edit,
        P.media_edit_all, P.media_delete, P.settings_view,
    }),
    "editor": frozenset({
        P.content_create_draft, P.content_edit_own, P.content_submit_review,
        P.content_view_drafts, P.media_upload, P.media_edit_own,
    }),
    "reviewer": frozenset({
        P.content_view_drafts, P.content_edit_all, P.content_approve_review,
        P.content_publish, P.content_unpublish,
    }),
}


def _unique(permissions: Iterable[P]) -> List[P]:
    return list(dict.fromkeys(permissions))


def permissions_for_category(category: str) -> FrozenSet[P]:
    """Unknown categories get the basic content set."""
    return CATEGORY_PERMISSIONS.get(category.strip().lower(), frozenset(BASIC_PERMISSIONS))


def find_template(job_description: str, department: Optional[str] = None) -> Optional[JobDescriptionTemplate]:
    """
    First template whose description contains the given text, or whose
    department equals the given one (case-insensitive).
    """
    text = job_description.strip().lower()
    dept = (department or "").strip().lower()

    for template in JOB_DESCRIPTION_TEMPLATES:
        if text and text in template.description.lower():
            return template
        if dept and template.department.lower() == dept:
            return template
    return None


def permissions_for_job_description(job_description: str, department: Optional[str] = None) -> List[P]:
    template = find_template(job_description, department)
    if template is None:
        return list(TEMPLATE_FALLBACK)

    permissions = list(template.base_permissions)
    if any(word in job_description.lower() for word in ESCALATION_KEYWORDS):
        permissions.extend(template.suggested_permissions)
    return _unique(permissions)


# ---------------------------------------------------------
# Keyword rules
# ---------------------------------------------------------
class Keywords(NamedTuple):
    title: Tuple[str, ...] = ()
    description: Tuple[str, ...] = ()
    department: Tuple[str, ...] = ()

    def found_in(self, title: str, description: str, department: str) -> bool:
        return (
            any(k in title for k in self.title)
            or any(k in description for k in self.description)
            or any(k in department for k in self.department)
        )


class KeywordRule(NamedTuple):
    name: str
    when: Keywords
    grants: Tuple[P, ...]
    escalate_when: Keywords
    escalated: Tuple[P, ...]


KEYWORD_RULES: List[KeywordRule] = [
    KeywordRule(
        name="content",
        when=Keywords(title=("content", "writer", "editor"), description=("content",)),
        grants=(
            P.content_create_draft, P.content_edit_own, P.content_submit_review,
            P.content_view_drafts, P.media_upload, P.media_edit_own,
        ),
        escalate_when=Keywords(title=("manager", "lead")),
        escalated=(
            P.content_edit_all, P.content_approve_review, P.content_publish,
            P.categories_manage,
        ),
    ),
    KeywordRule(
        name="people",
        when=Keywords(title=("hr", "manager"), department=("hr", "human resources")),
        grants=(P.users_view, P.users_edit_own, P.events_create, P.events_edit_own),
        escalate_when=Keywords(description=ESCALATION_KEYWORDS),
        escalated=(
            P.users_create, P.users_assign_roles, P.volunteers_review_applications,
            P.membership_view_all, P.membership_approve,
        ),
    ),
    KeywordRule(
        name="coordination",
        when=Keywords(title=("coordinator", "project"), department=("operations",)),
        grants=(
            P.events_view_all, P.events_create, P.events_edit_own,
            P.volunteers_create_opportunities, P.volunteers_assign,
        ),
        escalate_when=Keywords(description=("manage", "lead")),
        escalated=(P.events_edit_all, P.volunteers_review_applications, P.email_send_individual),
    ),
    KeywordRule(
        name="analytics",
        when=Keywords(title=("analyst",), department=("analytics", "data")),
        grants=(P.analytics_view, P.reports_generate, P.analytics_export),
        escalate_when=Keywords(description=("advanced", "manage")),
        escalated=(P.analytics_view_advanced, P.reports_custom, P.users_export),
    ),
]


def generate_permissions_from_job_description(title: str, description: str, department: str) -> List[P]:
    """
    Apply every matching keyword rule in order and de-duplicate.
    Returns BASIC_PERMISSIONS when no rule matches.
    """
    title, description, department = title.lower(), description.lower(), department.lower()

    permissions: List[P] = []
    for rule in KEYWORD_RULES:
        if not rule.when.found_in(title, description, department):
            continue
        permissions.extend(rule.grants)
        if rule.escalate_when.found_in(title, description, department):
            permissions.extend(rule.escalated)

    return _unique(permissions) if permissions else list(BASIC_PERMISSIONS)
