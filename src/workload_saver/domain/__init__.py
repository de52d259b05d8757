"""
ドメイン層

ワークロード種別・正規化・クリーニング・シリアライズのロジックを提供します。
"""

from .models import InvalidWorkload, WorkloadKind, ExportRequest, ExportResult
from .cleaner import CleaningFailed, FieldCleaner
from .normalizer import NormalizationFailed, WorkloadNormalizer
from .serializer import SerializationFailed, DocumentSerializer

__all__ = [
    "InvalidWorkload",
    "WorkloadKind",
    "ExportRequest",
    "ExportResult",
    "CleaningFailed",
    "FieldCleaner",
    "NormalizationFailed",
    "WorkloadNormalizer",
    "SerializationFailed",
    "DocumentSerializer",
]
