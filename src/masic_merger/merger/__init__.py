"""Merging of MASIC statistics into peptide hit results."""

from masic_merger.merger.datasets import DatasetMerger, common_base_name
from masic_merger.merger.mage import MageResultsMerger
from masic_merger.merger.partitioner import CollisionModePartitioner
from masic_merger.merger.stream import ProcessedDatasetRecord, StreamMerger

__all__ = [
    "CollisionModePartitioner",
    "DatasetMerger",
    "MageResultsMerger",
    "ProcessedDatasetRecord",
    "StreamMerger",
    "common_base_name",
]
