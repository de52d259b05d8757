"""YAML 出力コンポーネント"""

import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, TextIO


class SinkWriteFailed(Exception):
    """
    出力先書き込み失敗例外

    この出力先への残りの書き込みは中止されますが、書き込み済みの内容は
    ロールバックされません。
    """

    def __init__(self, message: str, sink: Optional[str] = None):
        """
        Args:
            message: エラーメッセージ
            sink: 失敗した出力先の名前
        """
        super().__init__(message)
        self.sink = sink


class DocumentSink(ABC):
    """
    出力先の抽象基底クラス

    バッチ開始時に open()、各ドキュメントごとに write_document()、
    バッチ終了時に close() を呼び出します。
    """

    name = "sink"

    def open(self) -> None:
        """バッチ開始"""

    @abstractmethod
    def write_document(self, document: str) -> None:
        """
        ドキュメントを 1 件書き込み

        Raises:
            SinkWriteFailed: 書き込みに失敗した場合
        """
        pass

    def close(self) -> None:
        """バッチ終了"""

    def __enter__(self) -> "DocumentSink":
        self.open()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()


class StreamSink(DocumentSink):
    """
    対話的出力（標準出力など）への書き込み

    各ドキュメントの前に `---` 行を出力します。ストリームは閉じません。
    """

    name = "stdout"

    def __init__(self, stream: Optional[TextIO] = None):
        """
        Args:
            stream: 出力先ストリーム。None の場合は sys.stdout を使用。
        """
        self.stream = stream

    def write_document(self, document: str) -> None:
        stream = self.stream or sys.stdout
        try:
            stream.write("---\n")
            stream.write(document)
            stream.flush()
        except (OSError, ValueError) as e:
            raise SinkWriteFailed(f"Failed to write to {self.name}: {e}", sink=self.name) from e


class FileSink(DocumentSink):
    """
    複数ドキュメント YAML ファイルへの書き込み

    Responsibilities:
    - バッチ開始時に出力ファイルを作成（既存ファイルは切り詰め）
    - 各ドキュメントの後に区切り `\\n---\\n` を出力
    - バッチ終了時にファイルを一度だけ閉じる

    途中で失敗した場合も書き込み済みの部分ファイルは残ります。
    """

    SEPARATOR = "\n---\n"

    def __init__(self, path: Path):
        """
        Args:
            path: 出力ファイルパス
        """
        self.path = Path(path)
        self.name = str(self.path)
        self._file: Optional[TextIO] = None

    def open(self) -> None:
        """
        出力ファイルを作成

        Raises:
            SinkWriteFailed: ファイルを作成できない場合
        """
        try:
            # ディレクトリ自動作成
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._file = open(self.path, "w", encoding="utf-8")
        except OSError as e:
            raise SinkWriteFailed(f"Failed to create {self.path}: {e}", sink=self.name) from e

    def write_document(self, document: str) -> None:
        if self._file is None:
            raise SinkWriteFailed(f"{self.path} is not open", sink=self.name)
        try:
            self._file.write(document)
            self._file.write(self.SEPARATOR)
        except (OSError, ValueError) as e:
            raise SinkWriteFailed(f"Failed to write to {self.path}: {e}", sink=self.name) from e

    def close(self) -> None:
        """
        出力ファイルを閉じる（複数回呼び出しても一度だけ閉じる）

        Raises:
            SinkWriteFailed: フラッシュ・クローズに失敗した場合
        """
        if self._file is None:
            return
        file, self._file = self._file, None
        try:
            file.close()
        except OSError as e:
            raise SinkWriteFailed(f"Failed to close {self.path}: {e}", sink=self.name) from e
