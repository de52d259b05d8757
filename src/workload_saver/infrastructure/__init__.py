"""
インフラストラクチャ層

標準出力・ファイルへの YAML 出力を提供します。
"""

from .output_writer import DocumentSink, StreamSink, FileSink, SinkWriteFailed

__all__ = ["DocumentSink", "StreamSink", "FileSink", "SinkWriteFailed"]
