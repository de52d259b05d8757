"""
WorkloadNormalizer のユニットテスト

型付きクライアントモデル・mapping の両方について、識別フィールドの書き込みと
サーバー管理フィールドの除去を検証します。
"""
from datetime import datetime, timezone
from unittest.mock import Mock

import pytest
from kubernetes import client

from src.workload_saver.domain.cleaner import CleaningFailed
from src.workload_saver.domain.models import WorkloadKind
from src.workload_saver.domain.normalizer import NormalizationFailed, WorkloadNormalizer


@pytest.fixture
def normalizer():
    """WorkloadNormalizer インスタンス"""
    return WorkloadNormalizer()


@pytest.fixture
def typed_deployment():
    """apiVersion / kind を持たない型付き Deployment（一覧取得結果相当）"""
    return client.V1Deployment(
        metadata=client.V1ObjectMeta(
            name="web",
            namespace="shop",
            uid="0b7c1f7e-4a3e-4a57-9d5c-2f0a4a7c1f10",
            resource_version="48213",
            generation=7,
            creation_timestamp=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
            labels={"app": "web"},
            managed_fields=[client.V1ManagedFieldsEntry(manager="kubectl", operation="Apply")],
        ),
        spec=client.V1DeploymentSpec(
            replicas=2,
            selector=client.V1LabelSelector(match_labels={"app": "web"}),
            template=client.V1PodTemplateSpec(
                metadata=client.V1ObjectMeta(labels={"app": "web"}),
                spec=client.V1PodSpec(
                    containers=[client.V1Container(name="web", image="nginx:1.25")]
                ),
            ),
        ),
        status=client.V1DeploymentStatus(replicas=2, ready_replicas=2),
    )


@pytest.fixture
def raw_daemonset():
    """mapping 形式の DaemonSet"""
    return {
        "metadata": {
            "name": "node-exporter",
            "namespace": "monitoring",
            "uid": "d1",
            "resourceVersion": "1",
            "generation": 3,
            "creationTimestamp": "2024-05-01T12:00:00Z",
            "managedFields": [{"manager": "helm"}],
        },
        "spec": {"selector": {"matchLabels": {"app": "node-exporter"}}},
        "status": {"numberReady": 5},
    }


class TestNormalizeIdentity:
    """識別フィールド書き込みのテスト"""

    def test_sets_identity_on_typed_object(self, normalizer, typed_deployment):
        """apiVersion / kind が欠落した型付きオブジェクトに書き込まれることを確認"""
        document = normalizer.normalize(typed_deployment, WorkloadKind.DEPLOYMENT)

        assert document["apiVersion"] == "apps/v1"
        assert document["kind"] == "Deployment"

    @pytest.mark.parametrize("kind", list(WorkloadKind))
    def test_sets_identity_for_all_kinds(self, normalizer, kind):
        """すべての種別でマッピング表の値が書き込まれることを確認"""
        document = normalizer.normalize({"metadata": {"name": "x"}}, kind)

        assert document["apiVersion"] == kind.api_version
        assert document["kind"] == kind.kind

    def test_overrides_wrong_identity(self, normalizer, raw_daemonset):
        """誤った識別フィールドが上書きされることを確認"""
        raw_daemonset["apiVersion"] = "extensions/v1beta1"
        raw_daemonset["kind"] = "Deployment"

        document = normalizer.normalize(raw_daemonset, WorkloadKind.DAEMONSET)

        assert document["apiVersion"] == "apps/v1"
        assert document["kind"] == "DaemonSet"


class TestNormalizeStripping:
    """サーバー管理フィールド除去のテスト"""

    def test_strips_status_and_metadata(self, normalizer, typed_deployment):
        """status と実行時 metadata が除去されることを確認"""
        document = normalizer.normalize(typed_deployment, WorkloadKind.DEPLOYMENT)

        assert "status" not in document
        for field in ["managedFields", "resourceVersion", "uid", "generation", "creationTimestamp"]:
            assert field not in document["metadata"]

    def test_keeps_portable_fields(self, normalizer, typed_deployment):
        """持ち運べるフィールドが camelCase で残ることを確認"""
        document = normalizer.normalize(typed_deployment, WorkloadKind.DEPLOYMENT)

        assert document["metadata"] == {"name": "web", "namespace": "shop", "labels": {"app": "web"}}
        assert document["spec"]["replicas"] == 2
        assert document["spec"]["selector"] == {"matchLabels": {"app": "web"}}
        assert document["spec"]["template"]["spec"]["containers"] == [
            {"name": "web", "image": "nginx:1.25"}
        ]

    def test_strips_mapping_input(self, normalizer, raw_daemonset):
        """mapping 入力でも除去されることを確認"""
        document = normalizer.normalize(raw_daemonset, WorkloadKind.DAEMONSET)

        assert "status" not in document
        assert document["metadata"] == {"name": "node-exporter", "namespace": "monitoring"}

    def test_does_not_mutate_mapping_input(self, normalizer, raw_daemonset):
        """入力 mapping が変更されないことを確認"""
        normalizer.normalize(raw_daemonset, WorkloadKind.DAEMONSET)

        assert "status" in raw_daemonset
        assert "uid" in raw_daemonset["metadata"]
        assert "kind" not in raw_daemonset

    def test_idempotent(self, normalizer, typed_deployment):
        """正規化済みドキュメントの再正規化が変化しないことを確認"""
        once = normalizer.normalize(typed_deployment, WorkloadKind.DEPLOYMENT)
        twice = normalizer.normalize(once, WorkloadKind.DEPLOYMENT)

        assert once == twice


class TestNormalizeErrors:
    """エラー処理のテスト"""

    def test_undecodable_object_raises(self, normalizer):
        """汎用ドキュメントに変換できない場合 NormalizationFailed が送出されることを確認"""
        with pytest.raises(NormalizationFailed) as exc_info:
            normalizer.normalize(object(), WorkloadKind.DEPLOYMENT)

        assert exc_info.value.kind == "Deployment"

    def test_non_mapping_result_raises(self, normalizer):
        """変換結果が mapping でない場合 NormalizationFailed が送出されることを確認"""
        with pytest.raises(NormalizationFailed):
            normalizer.normalize("apiVersion: apps/v1", WorkloadKind.STATEFULSET)

    def test_cleaner_failure_carries_identity(self, raw_daemonset):
        """クリーナーの失敗がオブジェクト名付きで報告されることを確認"""
        cleaner = Mock()
        cleaner.clean.side_effect = CleaningFailed("bad document")
        normalizer = WorkloadNormalizer(cleaner=cleaner)

        with pytest.raises(NormalizationFailed) as exc_info:
            normalizer.normalize(raw_daemonset, WorkloadKind.DAEMONSET)

        assert exc_info.value.name == "node-exporter"
        assert exc_info.value.kind == "DaemonSet"
        assert isinstance(exc_info.value.__cause__, CleaningFailed)

    def test_cleaner_receives_identity(self, raw_daemonset):
        """クリーナーに識別フィールドが渡されることを確認"""
        cleaner = Mock()
        cleaner.clean.side_effect = lambda document, identity: document
        normalizer = WorkloadNormalizer(cleaner=cleaner)

        normalizer.normalize(raw_daemonset, WorkloadKind.DAEMONSET)

        document, identity = cleaner.clean.call_args[0]
        assert identity == {"apiVersion": "apps/v1", "kind": "DaemonSet"}
        assert document["kind"] == "DaemonSet"
