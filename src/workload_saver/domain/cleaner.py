"""
フィールドクリーナー

正規化済みの汎用ドキュメントから、クラスタ固有で持ち運びできないフィールドを
分類・除去します。kubectl-neat 相当の処理をクラスタ API に依存せず行います。
"""

from typing import Any, Dict, Mapping


class CleaningFailed(Exception):
    """
    クリーニング失敗例外

    ドキュメントの構造が想定と異なる場合や、識別情報が一致しない場合を表します。
    """


class FieldCleaner:
    """
    持ち運びできないフィールドの除去

    サーバー側で付与されるメタデータ、システムアノテーション、
    Pod テンプレート内のタイムスタンプ、null 値を取り除きます。
    入力は変更せず、コピーを返します。
    """

    METADATA_FIELDS = [
        "selfLink",
        "deletionTimestamp",
        "deletionGracePeriodSeconds",
        "ownerReferences",
    ]

    SYSTEM_ANNOTATIONS = [
        "kubectl.kubernetes.io/last-applied-configuration",
        "deployment.kubernetes.io/revision",
        "deprecated.daemonset.template.generation",
    ]

    def clean(self, document: Mapping[str, Any], identity: Mapping[str, str]) -> Dict[str, Any]:
        """
        ドキュメントをクリーニング

        Args:
            document: apiVersion / kind が書き込み済みの汎用ドキュメント
            identity: 期待する識別フィールド ({"apiVersion": ..., "kind": ...})

        Returns:
            Dict[str, Any]: クリーニング済みドキュメント

        Raises:
            CleaningFailed: 識別フィールドの不一致、metadata が mapping でない場合
        """
        for key in ("apiVersion", "kind"):
            if document.get(key) != identity.get(key):
                raise CleaningFailed(
                    f"{key} mismatch: expected {identity.get(key)!r}, got {document.get(key)!r}"
                )

        cleaned = self._drop_nulls(dict(document))

        metadata = cleaned.get("metadata")
        if metadata is not None and not isinstance(metadata, dict):
            raise CleaningFailed(f"metadata must be a mapping, got {type(metadata).__name__}")
        if metadata is not None:
            self._clean_metadata(metadata)

        spec = cleaned.get("spec")
        if isinstance(spec, dict):
            self._clean_spec(spec)

        return cleaned

    def _clean_metadata(self, metadata: Dict[str, Any]) -> None:
        """トップレベル metadata の除去処理"""
        for field in self.METADATA_FIELDS:
            metadata.pop(field, None)

        annotations = metadata.get("annotations")
        if isinstance(annotations, dict):
            for annotation in self.SYSTEM_ANNOTATIONS:
                annotations.pop(annotation, None)
            if not annotations:
                del metadata["annotations"]

    def _clean_spec(self, spec: Dict[str, Any]) -> None:
        """Pod テンプレートと volumeClaimTemplates の除去処理"""
        template = spec.get("template")
        if isinstance(template, dict):
            self._drop_creation_timestamp(template)

        claim_templates = spec.get("volumeClaimTemplates")
        if isinstance(claim_templates, list):
            for claim in claim_templates:
                if isinstance(claim, dict):
                    self._drop_creation_timestamp(claim)
                    claim.pop("status", None)

    @staticmethod
    def _drop_creation_timestamp(obj: Dict[str, Any]) -> None:
        metadata = obj.get("metadata")
        if isinstance(metadata, dict):
            metadata.pop("creationTimestamp", None)
            if not metadata:
                del obj["metadata"]

    @classmethod
    def _drop_nulls(cls, value: Any) -> Any:
        """mapping の null 値を再帰的に除去 (リストの要素は残す)"""
        if isinstance(value, dict):
            return {k: cls._drop_nulls(v) for k, v in value.items() if v is not None}
        if isinstance(value, list):
            return [cls._drop_nulls(v) for v in value]
        return value
