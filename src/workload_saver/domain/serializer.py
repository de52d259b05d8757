"""
ドキュメントシリアライザー

正規化済みドキュメントを人間が読める YAML テキストに変換します。
同じ内容のドキュメントからは常に同じバイト列を生成します。
"""

from typing import Any, Dict

import yaml


class SerializationFailed(Exception):
    """
    シリアライズ失敗例外

    循環参照や YAML で表現できない値を含む場合を表します。項目単位のエラーです。
    """


class _CanonicalDumper(yaml.SafeDumper):
    """アンカー・エイリアスを出力しない SafeDumper"""

    def ignore_aliases(self, data: Any) -> bool:
        return True


def _represent_str(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    # 複数行の文字列はリテラルブロックで出力
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


_CanonicalDumper.add_representer(str, _represent_str)


class DocumentSerializer:
    """
    YAML シリアライザー

    ブロックスタイル・キーソート済みで出力し、タイムスタンプなどの
    余計な情報は付与しません。
    """

    def serialize(self, document: Dict[str, Any]) -> str:
        """
        ドキュメントを YAML テキストに変換

        Args:
            document: 正規化済みドキュメント

        Returns:
            str: 改行で終わる YAML テキスト

        Raises:
            SerializationFailed: 循環参照、表現できない値、比較できないキーを含む場合
        """
        self._check_acyclic(document)
        try:
            return yaml.dump(
                document,
                Dumper=_CanonicalDumper,
                default_flow_style=False,
                sort_keys=True,
                allow_unicode=True,
            )
        except (yaml.YAMLError, TypeError) as e:
            raise SerializationFailed(f"Failed to serialize document: {e}") from e

    @staticmethod
    def _check_acyclic(document: Any) -> None:
        """
        循環参照の検出

        Raises:
            SerializationFailed: 祖先のコンテナを再び参照している場合
        """
        # (値, 子の走査済みフラグ) のスタックで深さ優先探索
        ancestors = set()
        stack = [(document, False)]
        while stack:
            value, leaving = stack.pop()
            if not isinstance(value, (dict, list, tuple)):
                continue
            if leaving:
                ancestors.discard(id(value))
                continue
            if id(value) in ancestors:
                raise SerializationFailed("Failed to serialize document: circular reference detected")
            ancestors.add(id(value))
            stack.append((value, True))
            children = value.values() if isinstance(value, dict) else value
            for child in children:
                stack.append((child, False))
