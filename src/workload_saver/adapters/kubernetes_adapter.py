"""
Kubernetes アダプター

公式 kubernetes クライアントの AppsV1Api でワークロードを一覧取得します。
"""

import logging
from typing import Any, List, Optional

import urllib3
import yaml
from kubernetes import client, config
from kubernetes.client.exceptions import ApiException
from kubernetes.config.config_exception import ConfigException

from .cluster_adapter import ClusterAdapter, ListingFailed
from ..domain.models import WorkloadKind


class KubernetesAdapter(ClusterAdapter):
    """
    Kubernetes クラスタ向け一覧取得実装

    AppsV1Api は最初の一覧取得時に kubeconfig から生成します。
    kubeconfig が見つからず、パス・コンテキストの指定もない場合は
    in-cluster 設定を試みます。
    """

    def __init__(
        self,
        kubeconfig: Optional[str] = None,
        context: Optional[str] = None,
        apps_api: Optional[client.AppsV1Api] = None,
    ):
        """
        Args:
            kubeconfig: kubeconfig ファイルパス（None は既定の探索順）
            context: 使用するコンテキスト名
            apps_api: 生成済みの AppsV1Api（テスト用）
        """
        self.kubeconfig = kubeconfig
        self.context = context
        self._apps_api = apps_api
        self.logger = logging.getLogger(__name__)

    def list_workloads(self, kind: WorkloadKind, namespace: str) -> List[Any]:
        """
        AppsV1Api の種別ごとの一覧メソッドを呼び出す

        Args:
            kind: ワークロード種別
            namespace: 対象 namespace

        Returns:
            List[Any]: V1Deployment などのモデルリスト（API の返却順）

        Raises:
            ListingFailed: 設定読み込み・API 呼び出しに失敗した場合
        """
        apps_api = self._get_apps_api(kind, namespace)
        lister = getattr(apps_api, kind.list_method)

        self.logger.debug(
            f"Listing {kind.cli_name}s in namespace {namespace}",
            extra={"kind": kind.kind, "namespace": namespace}
        )
        try:
            response = lister(namespace=namespace)
        except ApiException as e:
            raise ListingFailed(
                f"Error fetching {kind.cli_name}s in namespace {namespace}: "
                f"{e.status} {e.reason}",
                kind=kind,
                namespace=namespace,
                status_code=e.status,
            ) from e
        except (urllib3.exceptions.HTTPError, ValueError) as e:
            raise ListingFailed(
                f"Error fetching {kind.cli_name}s in namespace {namespace}: {e}",
                kind=kind,
                namespace=namespace,
            ) from e

        return list(response.items or [])

    def _get_apps_api(self, kind: WorkloadKind, namespace: str) -> client.AppsV1Api:
        """
        AppsV1Api を取得（未生成なら設定を読み込んで生成）

        Raises:
            ListingFailed: クラスタ設定を読み込めない場合
        """
        if self._apps_api is not None:
            return self._apps_api

        try:
            self._load_config()
        except (ConfigException, OSError, yaml.YAMLError) as e:
            raise ListingFailed(
                f"Failed to load cluster configuration: {e}",
                kind=kind,
                namespace=namespace,
            ) from e

        self._apps_api = client.AppsV1Api()
        return self._apps_api

    def _load_config(self) -> None:
        """kubeconfig、なければ in-cluster 設定を読み込む"""
        if self.kubeconfig or self.context:
            config.load_kube_config(config_file=self.kubeconfig, context=self.context)
            return

        try:
            config.load_kube_config()
        except ConfigException:
            self.logger.info("No kubeconfig found, falling back to in-cluster configuration")
            config.load_incluster_config()
