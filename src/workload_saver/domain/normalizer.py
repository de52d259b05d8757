"""
ワークロード正規化ロジック

クラスタから取得したワークロードオブジェクト (RawObject) を汎用ドキュメントに変換し、
サーバー側で付与される実行時フィールドを除去します ("de-cluttering")。
"""

import copy
from typing import Any, Dict, Mapping, Optional

from kubernetes.client import ApiClient

from .cleaner import CleaningFailed, FieldCleaner
from .models import WorkloadKind


class NormalizationFailed(Exception):
    """
    正規化失敗例外

    オブジェクトの汎用ドキュメントへの変換、またはクリーニングに失敗した場合を表します。
    項目単位のエラーであり、バッチ全体は中断しません。
    """

    def __init__(
        self,
        message: str,
        name: Optional[str] = None,
        kind: Optional[str] = None,
    ):
        """
        Args:
            message: エラーメッセージ
            name: 対象オブジェクトの metadata.name
            kind: 対象オブジェクトの kind
        """
        super().__init__(message)
        self.name = name
        self.kind = kind


class WorkloadNormalizer:
    """
    ワークロード正規化クラス

    Responsibilities:
    - 型付きクライアントモデルから汎用ドキュメントへの直接変換
    - apiVersion / kind の強制設定 (汎用化で欠落するため)
    - status・managedFields などサーバー管理フィールドの除去
    - フィールドクリーナーへの委譲
    """

    # 常に除去する metadata フィールド
    _STRIPPED_METADATA_FIELDS = [
        "managedFields",
        "resourceVersion",
        "uid",
        "generation",
        "creationTimestamp",
    ]

    def __init__(
        self,
        cleaner: Optional[FieldCleaner] = None,
        api_client: Optional[ApiClient] = None,
    ):
        """
        WorkloadNormalizer を初期化

        Args:
            cleaner: フィールドクリーナー。None の場合は FieldCleaner を使用。
            api_client: モデル変換に使う ApiClient。None の場合は初回変換時に生成。
        """
        self.cleaner = cleaner or FieldCleaner()
        self._api_client = api_client

    def normalize(self, obj: Any, kind: WorkloadKind) -> Dict[str, Any]:
        """
        オブジェクトを正規化

        Args:
            obj: 一覧取得したオブジェクト (V1Deployment などのモデル、または mapping)
            kind: ワークロード種別

        Returns:
            Dict[str, Any]: 正規化済みドキュメント

        Raises:
            NormalizationFailed: 変換・クリーニングに失敗した場合
        """
        name = self._name_of(obj)
        document = self._to_document(obj, kind, name)

        # 識別フィールドの強制設定
        document["apiVersion"] = kind.api_version
        document["kind"] = kind.kind

        document.pop("status", None)
        metadata = document.get("metadata")
        if isinstance(metadata, dict):
            for field in self._STRIPPED_METADATA_FIELDS:
                metadata.pop(field, None)

        try:
            return self.cleaner.clean(document, kind.identity)
        except (CleaningFailed, RecursionError) as e:
            raise NormalizationFailed(
                f"Failed to clean {kind.kind} {name!r}: {e}",
                name=name,
                kind=kind.kind,
            ) from e

    def _to_document(self, obj: Any, kind: WorkloadKind, name: Optional[str]) -> Dict[str, Any]:
        """
        汎用ドキュメントへ変換

        mapping はディープコピー、クライアントモデルは ApiClient で
        camelCase キーの dict に変換します (datetime は ISO 8601 文字列)。
        """
        try:
            if isinstance(obj, Mapping):
                document = copy.deepcopy(dict(obj))
            else:
                document = self.api_client.sanitize_for_serialization(obj)
        except (AttributeError, TypeError, ValueError, RecursionError) as e:
            raise NormalizationFailed(
                f"Failed to decode {kind.kind} {name!r}: {e}",
                name=name,
                kind=kind.kind,
            ) from e

        if not isinstance(document, dict):
            raise NormalizationFailed(
                f"Failed to decode {kind.kind} {name!r}: "
                f"expected a mapping, got {type(document).__name__}",
                name=name,
                kind=kind.kind,
            )
        return document

    @property
    def api_client(self) -> ApiClient:
        """モデル変換用 ApiClient (遅延生成)"""
        if self._api_client is None:
            self._api_client = ApiClient()
        return self._api_client

    @staticmethod
    def _name_of(obj: Any) -> Optional[str]:
        """エラー報告用に metadata.name を取り出す"""
        if isinstance(obj, Mapping):
            metadata = obj.get("metadata")
            return metadata.get("name") if isinstance(metadata, Mapping) else None
        metadata = getattr(obj, "metadata", None)
        return getattr(metadata, "name", None)
