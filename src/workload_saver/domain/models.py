"""
データモデル定義

このモジュールは workload-saver のドメイン層のデータモデルを定義します:
- WorkloadKind: エクスポート対象のワークロード種別 (閉じた列挙)
- ExportRequest: 1 回のエクスポート要求 (不変)
- ExportResult: 1 回のエクスポート結果サマリー
"""

from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class InvalidWorkload(Exception):
    """
    未対応のワークロード種別例外

    CLI などから渡された種別名が WorkloadKind に解決できない場合に送出されます。
    一覧取得の前に検出されるため、部分的な出力は発生しません。
    """

    def __init__(self, name: str):
        """
        Args:
            name: 解決できなかった種別名
        """
        super().__init__(f"Invalid workload type: {name}")
        self.name = name


class WorkloadKind(Enum):
    """
    ワークロード種別

    各メンバーは (CLI 名, apiVersion, kind, AppsV1Api の一覧メソッド名) を保持し、
    種別ごとの分岐はこの列挙を一度参照するだけで済むようにしています。
    """

    DEPLOYMENT = ("deployment", "apps/v1", "Deployment", "list_namespaced_deployment")
    DAEMONSET = ("daemonset", "apps/v1", "DaemonSet", "list_namespaced_daemon_set")
    STATEFULSET = ("statefulset", "apps/v1", "StatefulSet", "list_namespaced_stateful_set")

    def __init__(self, cli_name: str, api_version: str, kind: str, list_method: str):
        self.cli_name = cli_name
        self.api_version = api_version
        self.kind = kind
        self.list_method = list_method

    @property
    def identity(self) -> dict:
        """正規化時に書き込む識別フィールド"""
        return {"apiVersion": self.api_version, "kind": self.kind}

    @classmethod
    def from_name(cls, name: str) -> "WorkloadKind":
        """
        種別名から WorkloadKind を解決

        大文字小文字を区別せず、CLI 名 ("deployment")、Kubernetes の kind
        ("Deployment")、複数形 ("deployments") を受け付けます。

        Args:
            name: 種別名

        Returns:
            WorkloadKind: 解決した種別

        Raises:
            InvalidWorkload: 未対応の種別名の場合
        """
        normalized = (name or "").strip().lower()
        for member in cls:
            if normalized in (member.cli_name, member.kind.lower(), member.cli_name + "s"):
                return member
        raise InvalidWorkload(name)

    @classmethod
    def names(cls) -> List[str]:
        """CLI で受け付ける種別名の一覧"""
        return [member.cli_name for member in cls]


class ExportRequest(BaseModel):
    """
    エクスポート要求

    1 回の呼び出しで処理する (種別, namespace, 出力先) をまとめた不変オブジェクトです。
    """

    model_config = ConfigDict(frozen=True)

    kind: WorkloadKind = Field(..., description="ワークロード種別")
    namespace: str = Field(default="default", description="対象 namespace")
    output: Optional[Path] = Field(default=None, description="出力ファイルパス (None は標準出力のみ)")
    stream: bool = Field(default=True, description="標準出力へ書き出すか")

    @field_validator("namespace")
    @classmethod
    def validate_namespace(cls, v: str) -> str:
        """
        namespace の空文字チェック

        Raises:
            ValueError: 空文字の場合
        """
        if not v or not v.strip():
            raise ValueError("namespace は空にできません")
        return v.strip()


class ExportResult(BaseModel):
    """
    エクスポート結果サマリー

    Attributes:
        success: すべての出力先への書き込みが成功したか
        kind: ワークロード種別 (CLI 名)
        namespace: 対象 namespace
        listed_count: 一覧取得した件数
        exported_count: 正規化・シリアライズに成功した件数
        skipped: スキップした項目のエラーメッセージ
        sink_failures: 出力先の書き込み失敗メッセージ
        output_path: 出力ファイルパス
        execution_time_seconds: 実行時間（秒）
    """
    success: bool
    kind: str
    namespace: str
    listed_count: int = 0
    exported_count: int = 0
    skipped: List[str] = []
    sink_failures: List[str] = []
    output_path: Optional[str] = None
    execution_time_seconds: float = 0.0

    @property
    def partial(self) -> bool:
        """一部の項目がスキップされたか"""
        return bool(self.skipped)
