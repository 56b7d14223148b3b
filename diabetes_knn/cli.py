import logging
import math
import traceback
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .config import DEFAULT_RANDOM_STATE, DEFAULT_TRAIN_FRACTION, OUTCOME_NAMES, PipelineConfig
from .exceptions import DiabetesKNNError
from .pipeline.loader import load_dataset
from .pipeline.pipeline import Pipeline

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _fmt_rate(value: float) -> str:
    return "undefined" if math.isnan(value) else f"{value:.2%}"


@click.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "-s", "--seed",
    type=int,
    default=DEFAULT_RANDOM_STATE,
    help=f"Random seed for the split and permutations (default: {DEFAULT_RANDOM_STATE})",
)
@click.option(
    "--train-fraction",
    type=float,
    default=DEFAULT_TRAIN_FRACTION,
    help=f"Fraction of each class used for training (default: {DEFAULT_TRAIN_FRACTION})",
)
@click.option(
    "--repeats",
    type=int,
    default=1,
    help="Shuffles per feature for permutation importance (default: 1)",
)
@click.option("-j", "--jobs", type=int, default=None, help="Parallel jobs for the K sweep and permutations")
@click.option("--header", is_flag=True, default=False, help="Input file has a header row")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Debug logging")
@click.version_option(version="0.2.0", prog_name="diabetes-knn")
def cli(input_file: Path, seed: int, train_fraction: float, repeats: int, jobs: int | None, header: bool, verbose: bool):
    """
    Diabetes KNN - classify the Pima Indians diabetes data with K-Nearest-Neighbors.

    \b
    1. Replace sentinel zeros with column medians
    2. Stratified train/test split
    3. Standardize on train statistics
    4. Select K (odd values 1-25) by test accuracy
    5. Confusion matrix, ROC/AUC and permutation importance

    \b
    Examples:
      diabetes-knn data/pima-indians-diabetes.csv
      diabetes-knn data/pima-indians-diabetes.csv --seed 7 --repeats 10
    """
    _configure_logging(verbose)

    console.print(Panel.fit(
        f"[bold blue]Diabetes KNN[/bold blue]\n"
        f"Input: {input_file}\n"
        f"Seed: {seed}  Train fraction: {train_fraction:.0%}",
        title="Pipeline Configuration",
    ))

    try:
        df = load_dataset(input_file, header=header)
        config = PipelineConfig(
            train_fraction=train_fraction,
            random_state=seed,
            importance_repeats=repeats,
            n_jobs=jobs,
        )
        result = Pipeline(config).run(df)
    except DiabetesKNNError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(1)
    except Exception as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        console.print(traceback.format_exc())
        raise SystemExit(1)

    table = Table(title="Split Statistics")
    table.add_column("Set", style="cyan")
    table.add_column("Total", justify="right")
    table.add_column(OUTCOME_NAMES[1], justify="right", style="red")
    table.add_column(OUTCOME_NAMES[0], justify="right", style="green")
    table.add_column("Ratio", justify="right")
    for name, s in result.split_stats.items():
        table.add_row(
            name.capitalize(),
            str(s["total"]),
            str(s["positive"]),
            str(s["negative"]),
            f"{s['positive_ratio']:.2%}",
        )
    console.print(table)

    imp_table = Table(title="Imputation")
    imp_table.add_column("Column", style="cyan")
    imp_table.add_column("Zeros Replaced", justify="right")
    imp_table.add_column("Median", justify="right")
    for col, s in result.imputation_stats.items():
        imp_table.add_row(col, str(s["zeros_replaced"]), f"{s['original_median']:.1f}")
    console.print(imp_table)

    k_table = Table(title="K Sweep (test accuracy)")
    k_table.add_column("k", justify="right", style="cyan")
    k_table.add_column("Accuracy", justify="right")
    for k, accuracy in result.selection.scores.items():
        marker = " [bold green]<- selected[/bold green]" if k == result.best_k else ""
        k_table.add_row(str(k), f"{accuracy:.2%}{marker}")
    console.print(k_table)

    cm = result.confusion
    cm_table = Table(title="Confusion Matrix")
    cm_table.add_column("", style="bold")
    cm_table.add_column("Pred: No", justify="right")
    cm_table.add_column("Pred: Yes", justify="right")
    cm_table.add_row("Actual: No", str(cm.tn), str(cm.fp))
    cm_table.add_row("Actual: Yes", str(cm.fn), str(cm.tp))
    console.print(cm_table)

    eval_table = Table(title=f"Evaluation Results (k={result.best_k})")
    eval_table.add_column("Metric", style="cyan")
    eval_table.add_column("Value", justify="right")
    eval_table.add_row("Accuracy", f"[bold]{_fmt_rate(cm.accuracy)}[/bold]")
    eval_table.add_row("Sensitivity", _fmt_rate(cm.sensitivity))
    eval_table.add_row("Specificity", _fmt_rate(cm.specificity))
    eval_table.add_row("PPV", _fmt_rate(cm.ppv))
    eval_table.add_row("NPV", _fmt_rate(cm.npv))
    eval_table.add_row("ROC AUC", "undefined" if math.isnan(result.roc.auc) else f"{result.roc.auc:.3f}")
    console.print(eval_table)

    feat_table = Table(title=f"Permutation Importance (baseline {result.importance.baseline_accuracy:.2%})")
    feat_table.add_column("Rank", justify="right")
    feat_table.add_column("Feature", style="cyan")
    feat_table.add_column("Accuracy Drop", justify="right")
    if repeats > 1:
        feat_table.add_column("Std", justify="right")
    for rank, item in enumerate(result.importance.importances, start=1):
        row = [str(rank), item.feature, f"{item.importance:+.4f}"]
        if repeats > 1:
            row.append(f"{item.std:.4f}")
        feat_table.add_row(*row)
    console.print(feat_table)

    console.print("\n[bold green]Pipeline completed successfully![/bold green]")


if __name__ == "__main__":
    cli()
