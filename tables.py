from cell_coercion import coerce_code
from table_schema import (
    BOOLEAN,
    CODE,
    DATE_FILTER,
    DECIMAL,
    INTEGER,
    TEXT,
    TIMESTAMP,
    VALUE_FILTER,
    ColumnSpec,
    FormField,
    TableSchema,
)

ENGINEERING_STATUS_HINT = ("A", "B", "C", "D", "UR", "E")
QAQC_STATUS_CODES = ("OPN", "CLS", "REJ")


ENGINEERING = TableSchema(
    key="engineering",
    title="Engineering",
    base_table="dbp6_bd041engineering",
    id_column="dgt_dbp6bd041engineeringid",
    order_column="created_at",
    search_hint="Search by DTF ID, Ref, Subject...",
    columns=(
        ColumnSpec("dgt_dtfid", "DTF ID", filter=VALUE_FILTER, searchable=True),
        ColumnSpec("dgt_transmittalref", "Trans. Ref", filter=VALUE_FILTER, searchable=True),
        ColumnSpec("dgt_transmittalsubject", "Subject", searchable=True),
        ColumnSpec("dgt_discipline", "Disc.", INTEGER, filter=VALUE_FILTER, searchable=True),
        ColumnSpec("dgt_transmittaltype", "Type", INTEGER, filter=VALUE_FILTER),
        ColumnSpec(
            "dgt_actualsubmissiondate", "Submission", TIMESTAMP, mutable=True, filter=DATE_FILTER
        ),
        ColumnSpec("dgt_actualreturndate", "Return", TIMESTAMP, mutable=True, filter=DATE_FILTER),
        ColumnSpec("dgt_revision", "Rev", INTEGER, mutable=True, filter=VALUE_FILTER),
        ColumnSpec(
            "dgt_status",
            "Status",
            CODE,
            mutable=True,
            coerce=coerce_code,
            uppercase=True,
            filter=VALUE_FILTER,
            placeholder="/".join(ENGINEERING_STATUS_HINT),
        ),
    ),
    create_fields=(
        FormField("dgt_dtfid", "DTF ID"),
        FormField("dgt_transmittalref", "Transmittal Reference"),
        FormField("dgt_transmittalsubject", "Subject"),
        FormField("dgt_discipline", "Discipline", INTEGER),
        FormField("dgt_transmittaltype", "Transmittal Type", INTEGER),
        FormField("dgt_plannedsubmissiondate", "Planned Submission Date", TIMESTAMP),
        FormField("dgt_plannedapprovaldate", "Planned Approval Date", TIMESTAMP),
        FormField("is_long_lead", "Long Lead Item", BOOLEAN),
        FormField("dgt_actualsubmissiondate", "Actual Submission Date", TIMESTAMP),
        FormField("dgt_actualreturndate", "Actual Return Date", TIMESTAMP),
        FormField("dgt_revision", "Revision", INTEGER),
        FormField("dgt_status", "Status"),
    ),
)


QAQC_HSE = TableSchema(
    key="qaqc",
    title="QAQC / HSE",
    base_table="dbp6_bd0402_qaqc_hse",
    id_column="dgt_dbp6bd0402qaqchseid",
    order_column="created_at",
    search_hint="Search by Doc ID, Ref, Subject...",
    columns=(
        ColumnSpec("dgt_docid", "Doc ID", filter=VALUE_FILTER, searchable=True),
        ColumnSpec("dgt_docref", "Doc Ref", filter=VALUE_FILTER, searchable=True),
        ColumnSpec("dgt_documentsubject", "Subject", searchable=True),
        ColumnSpec("dgt_discipline", "Disc.", INTEGER, filter=VALUE_FILTER, searchable=True),
        ColumnSpec("dgt_documenttype", "Doc Type", filter=VALUE_FILTER, searchable=True),
        ColumnSpec("dgt_submissiondate", "Submission", TIMESTAMP, filter=DATE_FILTER),
        ColumnSpec("dgt_responsedate", "Response", TIMESTAMP, filter=DATE_FILTER),
        ColumnSpec(
            "dgt_status",
            "Status",
            CODE,
            mutable=True,
            allowed_values=QAQC_STATUS_CODES,
            filter=VALUE_FILTER,
        ),
    ),
    create_fields=(
        FormField("dgt_docid", "Doc ID"),
        FormField("dgt_docref", "Doc Reference"),
        FormField("dgt_documentsubject", "Document Subject"),
        FormField("dgt_discipline", "Discipline", INTEGER),
        FormField("dgt_documenttype", "Document Type"),
        FormField("dgt_submissiondate", "Submission Date", TIMESTAMP),
        FormField("dgt_responsedate", "Response Date", TIMESTAMP),
        FormField("dgt_revision", "Revision", INTEGER),
        FormField("dgt_status", "Status", CODE, allowed_values=QAQC_STATUS_CODES),
    ),
)


ACTUAL_RESOURCES = TableSchema(
    key="resources",
    title="Actual Resources",
    base_table="dbp6_ud0501actualresources",
    id_column="dgt_dbp6ud0501actualresourcesid",
    order_column="created_at",
    columns=(
        ColumnSpec("resource_name", "Resource Name", filter=VALUE_FILTER, searchable=True),
        ColumnSpec(
            "dgt_resourcediscipline", "Discipline", INTEGER, filter=VALUE_FILTER, searchable=True
        ),
        ColumnSpec("dgt_resourcetype", "Type", INTEGER, filter=VALUE_FILTER, searchable=True),
        ColumnSpec("dgt_resourcecount", "Count", INTEGER, mutable=True, filter=VALUE_FILTER),
        ColumnSpec("dgt_sequential", "Sequential", INTEGER, filter=VALUE_FILTER),
    ),
    create_fields=(
        FormField("resource_name", "Resource Name"),
        FormField("dgt_resourcediscipline", "Discipline", INTEGER),
        FormField("dgt_resourcetype", "Resource Type", INTEGER),
        FormField("dgt_resourcecount", "Resource Count", INTEGER),
        FormField("dgt_sequential", "Sequential", INTEGER),
    ),
)


DYNAMIC_ACTUAL_DATA = TableSchema(
    key="dynamic",
    title="Dynamic Actual Data",
    base_table="dgt_dbp6bd06dynamicactualdata",
    fetch_source="v_dynamic_actuals_with_filters",
    id_column="dgt_dbp6bd06dynamicactualdataid",
    order_column="dgt_dbp6bd06dynamicactualdataid",
    date_options_newest_first=False,
    search_hint="Search by Activity ID, Project ID...",
    columns=(
        ColumnSpec("dgt_activityid", "Activity ID", filter=VALUE_FILTER, searchable=True),
        ColumnSpec("dgt_activityname", "Activity Name", filter=VALUE_FILTER),
        ColumnSpec(
            "dgt_plannedearlystart", "Planned Start", TIMESTAMP, filter=DATE_FILTER, filter_blank=False
        ),
        ColumnSpec(
            "dgt_plannedearlyfinish", "Planned Finish", TIMESTAMP, filter=DATE_FILTER, filter_blank=False
        ),
        ColumnSpec("dgt_projectid", "Project ID", filter=VALUE_FILTER, searchable=True),
        ColumnSpec(
            "dgt_actualstart", "Actual Start", TIMESTAMP, mutable=True, filter=DATE_FILTER, filter_blank=False
        ),
        ColumnSpec(
            "dgt_actualfinish", "Actual Finish", TIMESTAMP, mutable=True, filter=DATE_FILTER, filter_blank=False
        ),
        ColumnSpec("dgt_pctcomplete", "% Complete", DECIMAL, mutable=True, display="percent"),
    ),
    lookup_columns=(
        ColumnSpec("zone_code", "Zone", TEXT, filter=VALUE_FILTER, filter_blank=False, sortable=False),
        ColumnSpec("level_code", "Level", TEXT, filter=VALUE_FILTER, filter_blank=False, sortable=False),
        ColumnSpec("trade_code", "Trade", TEXT, filter=VALUE_FILTER, filter_blank=False, sortable=False),
    ),
    create_fields=(
        FormField("dgt_activityid", "Activity ID"),
        FormField("dgt_projectid", "Project ID"),
        FormField("dgt_actualstart", "Actual Start", TIMESTAMP),
        FormField("dgt_actualfinish", "Actual Finish", TIMESTAMP),
        FormField("dgt_pctcomplete", "% Complete", DECIMAL),
    ),
)


TABLES = (ENGINEERING, QAQC_HSE, ACTUAL_RESOURCES, DYNAMIC_ACTUAL_DATA)
TABLES_BY_KEY = {t.key: t for t in TABLES}


def get_table(key: str) -> TableSchema:
    try:
        return TABLES_BY_KEY[key]
    except KeyError:
        raise KeyError(f"Unknown table '{key}' (choose from {', '.join(TABLES_BY_KEY)})") from None
