"""Upload result data models."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field


def _drop_none(data: dict) -> dict:
    return {key: value for key, value in data.items() if value is not None}


@dataclass(frozen=True)
class MetadataFileEntry:
    """Per-token mapping from a token ID to its metadata file names."""

    token_id: str
    metadata_file_with_suffix: str
    metadata_file_without_suffix: str


@dataclass(frozen=True)
class BatchUploadResult:
    """Result of a batch collection upload."""

    timestamp: str
    images_folder_cid: str
    image_count: int
    total_size_bytes: int
    upload_duration_ms: int
    metadata_with_suffix_cid: str | None = None
    metadata_without_suffix_cid: str | None = None
    metadata_files: list[MetadataFileEntry] = field(default_factory=list)

    def to_dict(self) -> dict:
        return _drop_none({
            "timestamp": self.timestamp,
            "images_folder_cid": self.images_folder_cid,
            "metadata_with_suffix_cid": self.metadata_with_suffix_cid,
            "metadata_without_suffix_cid": self.metadata_without_suffix_cid,
            "image_count": self.image_count,
            "metadata_files": [asdict(entry) for entry in self.metadata_files],
            "total_size_bytes": self.total_size_bytes,
            "upload_duration_ms": self.upload_duration_ms,
        })


@dataclass(frozen=True)
class SingleUploadResult:
    """Result of a single image upload."""

    timestamp: str
    image_cid: str
    metadata_cid: str
    image_url: str
    metadata_url: str
    gateway_image_url: str
    gateway_metadata_url: str
    metadata: dict
    upload_duration_ms: int

    def to_dict(self) -> dict:
        return asdict(self)
