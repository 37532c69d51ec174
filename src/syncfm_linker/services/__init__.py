"""Service layer modules for the SyncFM Linker."""

from .entity_resolver import build_share_link, infer_entity_kind, resolve_entity
from .link_builder import (
    CANONICAL_LABEL,
    CANONICAL_SERVICE,
    SERVICE_LINK_TARGETS,
    ServiceLinkTarget,
    build_service_links,
)
from .pipeline import (
    FailureReason,
    PipelineFailure,
    PipelineOutcome,
    PipelineStage,
    PipelineSuccess,
    convert_message,
)
from .service_classifier import (
    MusicService,
    classify,
    detect_music_service,
    get_supported_service_hosts,
)
from .url_extractor import ensure_http_scheme, extract_music_url, sanitize_potential_url

__all__ = [
	"CANONICAL_LABEL",
	"CANONICAL_SERVICE",
	"FailureReason",
	"MusicService",
	"PipelineFailure",
	"PipelineOutcome",
	"PipelineStage",
	"PipelineSuccess",
	"SERVICE_LINK_TARGETS",
	"ServiceLinkTarget",
	"build_service_links",
	"build_share_link",
	"classify",
	"convert_message",
	"detect_music_service",
	"ensure_http_scheme",
	"extract_music_url",
	"get_supported_service_hosts",
	"infer_entity_kind",
	"resolve_entity",
	"sanitize_potential_url",
]
