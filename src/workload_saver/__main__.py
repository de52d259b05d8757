"""CLI エントリーポイント"""

import sys
import logging
import os

import click

from .orchestration.export_service import ExportService
from .adapters.kubernetes_adapter import KubernetesAdapter
from .adapters.cluster_adapter import ListingFailed
from .domain.models import InvalidWorkload, WorkloadKind


logger = logging.getLogger(__name__)


def _resolve_log_level(name: str) -> int:
    """
    ログレベル名を数値に変換

    未知のレベル名は INFO として扱います。
    """
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


@click.group()
@click.version_option("0.1", prog_name="workload-saver")
def cli():
    """Export Kubernetes workloads as clean YAML documents."""
    # ロギング設定（標準出力は YAML 専用のため stderr に出力）
    logging.basicConfig(
        level=_resolve_log_level(os.environ.get("WORKLOAD_SAVER_LOG_LEVEL", "INFO")),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr
    )


@cli.command(
    epilog="Example: workload-saver save deployment --namespace controller -o controller-deployments.yaml"
)
@click.argument("kind")
@click.option("--namespace", "-n", default="default", show_default=True, help="Namespace to export from.")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=str), default=None,
              help="Also write the documents to this file.")
@click.option("--quiet", "-q", is_flag=True, help="Do not print documents to stdout (requires --output).")
@click.option("--kubeconfig", envvar="KUBECONFIG", default=None, help="Path to the kubeconfig file.")
@click.option("--context", envvar="WORKLOAD_SAVER_CONTEXT", default=None, help="Kubeconfig context to use.")
def save(kind, namespace, output, quiet, kubeconfig, context):
    """
    Save all workloads of KIND (deployment, daemonset, statefulset).

    Exits with 0 on success (skipped items are reported as warnings)
    and 1 on failure.
    """
    if quiet and not output:
        raise click.UsageError("--quiet requires --output")

    try:
        request = ExportService.build_request(
            kind,
            namespace=namespace,
            output=output,
            stream=not quiet
        )
    except InvalidWorkload as e:
        click.echo(f"{e}. Choose one of: {', '.join(WorkloadKind.names())}", err=True)
        sys.exit(1)
    except ValueError as e:
        click.echo(f"Invalid request: {e}", err=True)
        sys.exit(1)

    try:
        adapter = KubernetesAdapter(kubeconfig=kubeconfig, context=context)
        service = ExportService(adapter=adapter)
        result = service.run_export(request)
    except ListingFailed as e:
        logger.error(f"Export failed: {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Unexpected error: {str(e)}", exc_info=True)
        sys.exit(1)

    if result.partial:
        logger.warning(
            f"{len(result.skipped)} of {result.listed_count} {result.kind}s were skipped"
        )
    if not result.success:
        logger.error(f"Export failed: {', '.join(result.sink_failures)}")
        sys.exit(1)

    logger.info(
        f"Export completed: {result.exported_count} {result.kind}s exported"
        + (f" to {result.output_path}" if result.output_path else "")
    )


def main():
    """
    CLI エントリーポイント

    Usage:
        python -m workload_saver save deployment -n kube-system
    """
    cli()


if __name__ == "__main__":
    main()
