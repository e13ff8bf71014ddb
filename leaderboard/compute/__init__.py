from . import core, roles

parse_int = core.parse_int
parse_rank = core.parse_rank
normalize_rows = core.normalize_rows
order_records = core.order_records
looks_like_header = roles.looks_like_header
resolve_header = roles.resolve_header
label_roles = roles.label_roles
infer_roles = roles.infer_roles
detect_record_column = roles.detect_record_column
resolve_layout = roles.resolve_layout

__all__ = [
    "parse_int",
    "parse_rank",
    "normalize_rows",
    "order_records",
    "looks_like_header",
    "resolve_header",
    "label_roles",
    "infer_roles",
    "detect_record_column",
    "resolve_layout",
]
