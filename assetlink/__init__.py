from .models import NormalizedAsset, Source, SourceDetail, IdentityCandidates, LoadResult, SourceLoadError
from .normalizer import normalize_mac, normalize_hostname, normalize_ip, normalize_generic_id, format_mac
from .extractor import FieldExtractor, get_row_value, normalize_header
from .resolver import IdentityResolver, ResolutionResult, resolve_assets, merge_transitive
from .query import CardinalityMode, filter_assets, paginate, summarize
from .parser import InventoryParser
from .workspace import InventoryWorkspace
from .export import AssetExporter, build_export_records
from .config import AssetLinkConfig
from .schema import COLUMN_MAPPINGS, EXPORT_HEADERS

__all__ = [
    "NormalizedAsset", "Source", "SourceDetail", "IdentityCandidates", "LoadResult", "SourceLoadError",
    "normalize_mac", "normalize_hostname", "normalize_ip", "normalize_generic_id", "format_mac",
    "FieldExtractor", "get_row_value", "normalize_header",
    "IdentityResolver", "ResolutionResult", "resolve_assets", "merge_transitive",
    "CardinalityMode", "filter_assets", "paginate", "summarize",
    "InventoryParser", "InventoryWorkspace",
    "AssetExporter", "build_export_records",
    "AssetLinkConfig",
    "COLUMN_MAPPINGS", "EXPORT_HEADERS",
]
