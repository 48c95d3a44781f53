from typing import List, Optional

from .metadata import FileMetadata
from .sequence import Sequence


class Case:
    """One MFT record and every history reconstructed for it."""

    def __init__(self, index: int, signature_intact: bool, sequence_number: int = 0,
                 metadata: Optional[FileMetadata] = None):
        self.index = index
        self.signature_intact = signature_intact
        self.sequence_number = sequence_number
        self.sequences: List[Sequence] = []
        if metadata is not None:
            self.set_metadata(metadata)

    def set_metadata(self, metadata: FileMetadata) -> None:
        self.sequences = [Sequence(metadata)]

    @property
    def metadata(self) -> Optional[FileMetadata]:
        if not self.sequences:
            return None
        return self.sequences[0].metadata[0]

    def add(self, sequence: Sequence) -> None:
        self.sequences.append(sequence)

    def is_readable(self) -> bool:
        return self.signature_intact and self.metadata is not None

    def has_si_and_fn(self) -> bool:
        return self.is_readable() and self.metadata.has_si_and_fn()

    def has_irregular_timestamps(self) -> bool:
        return any(sequence.has_irregular_timestamps() for sequence in self.sequences)

    def __repr__(self):
        return f"Case({self.index}, sequences={len(self.sequences)})"
