"""
Catalogue of reference option kinds.

Every kind is stored in its own table and behaves identically; kinds differ
only in table name, identifier strategy and (for string-keyed kinds) the
prefix of generated identifiers.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..core.errors import UnknownOptionKindError

_SLUG_RE = re.compile(r"^[a-z][a-z0-9_]*$")
_PREFIX_RE = re.compile(r"^[A-Z][A-Z0-9_]*$")


@dataclass(frozen=True)
class OptionKind:
    slug: str
    label: str
    table: str
    id_prefix: str | None = None  # None -> database-assigned integer ids
    id_column: str = "id"

    def __post_init__(self) -> None:
        if not _SLUG_RE.match(self.slug):
            raise ValueError(f"invalid option kind slug: {self.slug!r}")
        if self.id_prefix is not None and not _PREFIX_RE.match(self.id_prefix):
            raise ValueError(f"invalid id prefix for {self.slug}: {self.id_prefix!r}")

    @property
    def is_integer_keyed(self) -> bool:
        return self.id_prefix is None

    @property
    def model_name(self) -> str:
        return "".join(part.capitalize() for part in self.slug.split("_"))


def _string_kind(slug: str, label: str, prefix: str, table: str | None = None) -> OptionKind:
    return OptionKind(slug=slug, label=label, table=table or slug, id_prefix=prefix)


def _integer_kind(slug: str, label: str, table: str | None = None) -> OptionKind:
    return OptionKind(slug=slug, label=label, table=table or slug, id_column=f"{slug}_id")


OPTION_KINDS: tuple[OptionKind, ...] = (
    _string_kind("account_type_option", "Account type", "ACCOUNT_TYPE_OPT"),
    _string_kind("archive_strategy_option", "Archive strategy", "ARCHIVE_STRATEGY_OPT"),
    _string_kind("authority_type_option", "Contracting authority type", "AUTHORITY_TYPE_OPT"),
    _string_kind("bid_security_type_option", "Bid security type", "BID_SECURITY_TYPE_OPT"),
    _string_kind("business_category_option", "Business category", "BUSINESS_CATEGORY_OPT"),
    _string_kind("business_type_option", "Business type", "BUSINESS_TYPE_OPT"),
    _string_kind("civil_society_type_option", "Civil society type", "CIVIL_SOCIETY_TYPE_OPT"),
    _string_kind(
        "clarification_request_status_option",
        "Clarification request status",
        "CLARIFICATION_REQUEST_STATUS_OPT",
    ),
    _string_kind("country_option", "Country", "COUNTRY_OPT"),
    _string_kind("country_code_option", "Country code", "COUNTRY_CODE_OPT"),
    _string_kind("currency_option", "Currency", "CURRENCY_OPT"),
    _string_kind("donor_type_option", "Donor type", "DONOR_TYPE_OPT"),
    _string_kind(
        "evaluation_criteria_phase_option",
        "Evaluation criteria phase",
        "EVALUATION_CRITERIA_PHASE_OPT",
    ),
    _integer_kind("execution_period_option", "Execution period"),
    _string_kind("gender_option", "Gender", "GENDER_OPT"),
    _string_kind("language_option", "Language", "LANGUAGE_OPT"),
    _string_kind("log_level_option", "Log level", "LOG_LEVEL_OPT"),
    _string_kind(
        "lot_bidding_eligibility_option", "Lot bidding eligibility", "LOT_BID_ELIGIBILITY_OPT"
    ),
    _string_kind("market_scope_option", "Market scope", "MARKET_SCOPE_OPT"),
    _string_kind("metadata_type_option", "Metadata type", "METADATA_TYPE_OPT"),
    _string_kind("organization_role_option", "Organization role", "ORGANIZATION_ROLE_OPT"),
    _string_kind("ownership_nature_option", "Ownership nature", "OWNERSHIP_NATURE_OPT"),
    _integer_kind("plan_status_option", "Plan status", table="plan_status_option_model"),
    _string_kind("position_option", "Position", "POSITION_OPT"),
    _string_kind("prebid_event_type_option", "Pre-bid event type", "PREBID_EVENT_TYPE"),
    _string_kind(
        "prerequisites_activity_type_option",
        "Prerequisites activity file type",
        "PREREQUISITE_ACT_OPT",
        table="prerequisites_activity_file_type_option",
    ),
    _string_kind(
        "procurement_method_option",
        "Procurement method",
        "PROCURE_METHOD",
        table="procurement_method_option_model",
    ),
    _string_kind(
        "procurement_method_threshold_option",
        "Procurement method threshold",
        "PROCURE_METHOD_THRESHOLD_OPT",
    ),
    _string_kind(
        "procurement_progress_status_option",
        "Procurement progress status",
        "PROCURE_PROGRESS_STATUS_OPT",
        table="procurement_progress_option",
    ),
    _string_kind(
        "procurement_requisition_status_option",
        "Procurement requisition status",
        "PROCURE_REQUISITION_STATUS_OPT",
    ),
    _integer_kind(
        "procurement_type_option", "Procurement type", table="procurement_type_option_model"
    ),
    _string_kind("reason_option", "Reason", "REASON_OPT"),
    _string_kind("scheme_option", "Scheme", "SCHEME_OPT", table="scheme_option_model"),
    _string_kind(
        "selection_method_option",
        "Selection method",
        "SELECTION_METHOD_OPT",
        table="selection_method_option_model",
    ),
    _string_kind("source_of_fund_option", "Source of fund", "SOURCE_OF_FUND_OPT"),
    _string_kind(
        "tender_required_document_type_option",
        "Tender required document type",
        "TENDER_REQUIRED_DOC_TYPE_OPT",
    ),
    _string_kind("tender_stage_option", "Tender stage", "TENDER_STAGE_OPT"),
    _string_kind("tender_status_option", "Tender status", "TENDER_STATUS_OPT"),
    _string_kind("theme_status_option", "Theme status", "THEME_STATUS_OPT"),
    _string_kind("unit_of_measure_option", "Unit of measure", "UNIT_OF_MEASURE_OPT"),
    _string_kind("user_status_option", "User status", "USER_STATUS_OPT"),
    _string_kind(
        "workflow_stage_status_option", "Workflow stage status", "WORKFLOW_STAGE_STATUS_OPT"
    ),
    _string_kind("workspace_type_option", "Workspace type", "WORKSPACE_TYPE_OPT"),
)

_KINDS_BY_SLUG: dict[str, OptionKind] = {kind.slug: kind for kind in OPTION_KINDS}


def get_option_kind(slug: str) -> OptionKind:
    try:
        return _KINDS_BY_SLUG[slug]
    except KeyError:
        raise UnknownOptionKindError(f"Unknown option kind: {slug}") from None
