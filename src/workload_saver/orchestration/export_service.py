"""エクスポートオーケストレーションサービス"""

from pathlib import Path
from typing import List, Optional, TextIO
import logging
import time
import uuid

from ..adapters.cluster_adapter import ClusterAdapter, ListingFailed
from ..domain.models import ExportRequest, ExportResult, WorkloadKind
from ..domain.normalizer import NormalizationFailed, WorkloadNormalizer
from ..domain.serializer import DocumentSerializer, SerializationFailed
from ..infrastructure.output_writer import DocumentSink, FileSink, SinkWriteFailed, StreamSink


class ExportService:
    """
    エクスポート処理全体のオーケストレーション

    Responsibilities:
    - 一覧取得 → 項目ごとの正規化・シリアライズ・出力の調整
    - 一覧取得エラーでの即時中断（出力先は開かない）
    - 項目単位エラーのスキップと継続
    - 出力先ごとに独立した障害分離
    - 構造化ログ出力
    """

    def __init__(
        self,
        adapter: ClusterAdapter,
        normalizer: Optional[WorkloadNormalizer] = None,
        serializer: Optional[DocumentSerializer] = None,
        stream: Optional[TextIO] = None,
    ):
        """
        ExportService を初期化

        Args:
            adapter: クラスタアダプター
            normalizer: 正規化サービス
            serializer: YAML シリアライザー
            stream: 対話的出力先（None は sys.stdout）
        """
        self.adapter = adapter
        self.normalizer = normalizer or WorkloadNormalizer()
        self.serializer = serializer or DocumentSerializer()
        self.stream = stream
        self.logger = logging.getLogger(__name__)

    @staticmethod
    def build_request(
        kind_name: str,
        namespace: str = "default",
        output: Optional[Path] = None,
        stream: bool = True,
    ) -> ExportRequest:
        """
        CLI 引数からエクスポート要求を組み立てる

        Raises:
            InvalidWorkload: 未対応の種別名の場合
        """
        return ExportRequest(
            kind=WorkloadKind.from_name(kind_name),
            namespace=namespace,
            output=output,
            stream=stream,
        )

    def run_export(self, request: ExportRequest) -> ExportResult:
        """
        エクスポート処理を実行

        Args:
            request: エクスポート要求

        Returns:
            ExportResult: エクスポート結果サマリー

        Raises:
            ListingFailed: 一覧取得に失敗した場合（何も出力しない）

        Invariants: 出力先は成功・失敗にかかわらず必ず閉じる
        """
        start_time = time.time()
        kind = request.kind
        execution_id = self._generate_execution_id()
        self.logger.info(
            f"Starting export of {kind.cli_name}s in namespace {request.namespace}",
            extra={"execution_id": execution_id, "kind": kind.kind, "namespace": request.namespace}
        )

        try:
            raw_objects = self.adapter.list_workloads(kind, request.namespace)
        except ListingFailed as e:
            self.logger.error(
                f"Listing failed: {e}",
                extra={"execution_id": execution_id, "status_code": e.status_code}
            )
            raise

        skipped: List[str] = []
        sink_failures: List[str] = []
        exported_count = 0

        sinks = self._build_sinks(request)
        active = self._open_sinks(sinks, sink_failures)
        try:
            for raw_object in raw_objects:
                try:
                    document = self.normalizer.normalize(raw_object, kind)
                    text = self.serializer.serialize(document)
                except (NormalizationFailed, SerializationFailed) as e:
                    # 項目単位のエラーはスキップして継続
                    self.logger.warning(
                        f"Skipping item: {e}",
                        extra={"execution_id": execution_id}
                    )
                    skipped.append(str(e))
                    continue

                exported_count += 1
                for sink in list(active):
                    try:
                        sink.write_document(text)
                    except SinkWriteFailed as e:
                        self.logger.error(
                            f"Aborting writes to {sink.name}: {e}",
                            extra={"execution_id": execution_id}
                        )
                        sink_failures.append(str(e))
                        active.remove(sink)
        finally:
            self._close_sinks(sinks, sink_failures)

        execution_time = time.time() - start_time
        self.logger.info(
            "Export completed",
            extra={
                "execution_id": execution_id,
                "listed_count": len(raw_objects),
                "exported_count": exported_count,
                "skipped_count": len(skipped),
                "sink_failures_count": len(sink_failures),
                "execution_time_seconds": execution_time
            }
        )

        return ExportResult(
            success=not sink_failures,
            kind=kind.cli_name,
            namespace=request.namespace,
            listed_count=len(raw_objects),
            exported_count=exported_count,
            skipped=skipped,
            sink_failures=sink_failures,
            output_path=str(request.output) if request.output else None,
            execution_time_seconds=execution_time
        )

    def _build_sinks(self, request: ExportRequest) -> List[DocumentSink]:
        """要求に応じた出力先リストを生成"""
        sinks: List[DocumentSink] = []
        if request.stream:
            sinks.append(StreamSink(self.stream))
        if request.output is not None:
            sinks.append(FileSink(request.output))
        return sinks

    def _open_sinks(self, sinks: List[DocumentSink], failures: List[str]) -> List[DocumentSink]:
        """
        出力先を開く

        Returns:
            List[DocumentSink]: 開けた出力先
        """
        opened = []
        for sink in sinks:
            try:
                sink.open()
            except SinkWriteFailed as e:
                self.logger.error(f"Failed to open {sink.name}: {e}")
                failures.append(str(e))
                continue
            opened.append(sink)
        return opened

    def _close_sinks(self, sinks: List[DocumentSink], failures: List[str]) -> None:
        """出力先をすべて閉じる"""
        for sink in sinks:
            try:
                sink.close()
            except SinkWriteFailed as e:
                self.logger.error(f"Failed to close {sink.name}: {e}")
                failures.append(str(e))

    def _generate_execution_id(self) -> str:
        """
        実行 ID 生成（UUID）

        Returns:
            str: UUID 形式の実行 ID
        """
        return str(uuid.uuid4())
