"""
アダプター層

クラスタ API からのワークロード一覧取得ロジックを提供します。
"""

from .cluster_adapter import ClusterAdapter, ListingFailed
from .kubernetes_adapter import KubernetesAdapter

__all__ = ["ClusterAdapter", "ListingFailed", "KubernetesAdapter"]
