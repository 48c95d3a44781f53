from dataclasses import dataclass, replace

from .constants import ROOT_DIRECTORY_INDEX
from .operation import VolumeTransfer
from .timestamps import Timestamps


@dataclass(frozen=True)
class FileMetadata:
    """Snapshot of a record's metadata, as read or as reconstructed."""
    directory: bool = False
    deleted: bool = False
    timestamps: Timestamps = Timestamps()
    name: str = ""
    path: str = ""
    parent_index: int = ROOT_DIRECTORY_INDEX
    on_other_volume: VolumeTransfer = VolumeTransfer.NEVER
    split_origin: bool = False

    def has_name(self) -> bool:
        return self.name != ""

    def has_path(self) -> bool:
        return self.path != ""

    def has_si_and_fn(self) -> bool:
        return self.timestamps.has_si_and_fn()

    def on_volume(self, volume_transfer: VolumeTransfer) -> 'FileMetadata':
        return replace(self, on_other_volume=volume_transfer)

    def split_from(self, volume_transfer: VolumeTransfer) -> 'FileMetadata':
        return replace(self, on_other_volume=volume_transfer, split_origin=True)

    def with_timestamps(self, timestamps: Timestamps) -> 'FileMetadata':
        return replace(self, timestamps=timestamps)

    def with_path(self, path: str) -> 'FileMetadata':
        return replace(self, path=path)

    def undeleted(self) -> 'FileMetadata':
        return replace(self, deleted=False)

    def label(self) -> str:
        if self.has_path():
            return self.path
        if self.has_name():
            return self.name
        return "no file name"
