"""
クラスタアダプター抽象基底クラス

ワークロード一覧取得の抽象インターフェースを定義します。
接続・認証の詳細は具象アダプターが吸収します。
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional

from ..domain.models import WorkloadKind


class ListingFailed(Exception):
    """
    一覧取得失敗例外

    ネットワーク・認証エラー、namespace 不在、種別ごとの一覧取得エラーを
    すべてこの例外で表します。元の例外は __cause__ に保持されます。
    """

    def __init__(
        self,
        message: str,
        kind: Optional[WorkloadKind] = None,
        namespace: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        """
        Args:
            message: エラーメッセージ
            kind: 取得対象のワークロード種別
            namespace: 取得対象の namespace
            status_code: HTTP ステータスコード（該当する場合）
        """
        super().__init__(message)
        self.kind = kind
        self.namespace = namespace
        self.status_code = status_code


class ClusterAdapter(ABC):
    """
    ワークロード一覧取得アダプター抽象基底クラス
    """

    @abstractmethod
    def list_workloads(self, kind: WorkloadKind, namespace: str) -> List[Any]:
        """
        namespace 内の指定種別のオブジェクトをすべて取得

        Args:
            kind: ワークロード種別
            namespace: 対象 namespace

        Returns:
            List[Any]: API が返した順序のオブジェクトリスト

        Raises:
            ListingFailed: 一覧取得に失敗した場合
        """
        pass
