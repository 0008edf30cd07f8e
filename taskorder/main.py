import argparse
import logging
import os
from typing import List, Optional

from taskorder.evaluation import evaluate
from taskorder.models import CyclicDependencyError, InvalidTaskError, Task
from taskorder.parser import SearchConfig, load_search_config
from taskorder.search import search_optimal_order
from taskorder.visualization import next_unique_path, save_convergence_plot, save_gantt_chart

DEMO_TASKS = [
    Task(duration=2, depends=[]),
    Task(duration=3, depends=[0]),
    Task(duration=4, depends=[0]),
    Task(duration=1, depends=[]),
    Task(duration=5, depends=[1, 2]),
    Task(duration=6, depends=[3]),
]
DEMO_WORKERS = 3


def run(config: SearchConfig) -> Optional[List[int]]:
    """Search, print the outcome and optionally render charts.

    Returns the best order, or None when no valid ordering exists.
    """
    logger = logging.getLogger("taskorder")
    tasks = config.tasks or DEMO_TASKS
    workers = config.workers if config.tasks else DEMO_WORKERS
    if not config.tasks:
        logger.info("No tasks configured, using the %d-task demo set", len(DEMO_TASKS))

    try:
        result = search_optimal_order(
            tasks,
            workers,
            model=config.model,
            eager=config.eager,
            detect_cycles=config.detect_cycles,
            time_limit_ms=config.time_limit_ms,
        )
    except CyclicDependencyError as e:
        print(f"No valid ordering exists: {e}")
        return None
    except InvalidTaskError as e:
        print(f"Invalid task list: {e}")
        return None

    if not result.found:
        if result.complete:
            print("No valid ordering exists")
        else:
            print(
                f"Time limit reached after {result.evaluated} permutations "
                "before any valid ordering was found"
            )
        return None

    print("Optimal order:", result.order)
    print("Finish time:", result.finish_time)
    if not result.complete:
        print("Warning: time limit reached, result may not be optimal")

    if config.charts_dir:
        _, schedule = evaluate(tasks, result.order, workers, config.model, return_schedule=True)
        save_gantt_chart(
            schedule,
            next_unique_path(os.path.join(config.charts_dir, f"gantt_{config.model}.png")),
        )
        save_convergence_plot(
            result.history,
            next_unique_path(os.path.join(config.charts_dir, "convergence.png")),
        )
    return result.order


def cli(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Find the dependency-respecting task order with the lowest finish time."
    )
    parser.add_argument("--config", default="config.yaml", help="YAML or JSON config file")
    args = parser.parse_args(argv)

    if os.path.isfile(args.config):
        config = load_search_config(args.config)
    elif args.config == parser.get_default("config"):
        config = SearchConfig()
    else:
        raise FileNotFoundError(f"Config file not found: {args.config}")

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return 0 if run(config) is not None else 1
