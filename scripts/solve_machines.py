import argparse
import csv
import multiprocessing as mp
import os
import sys
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from togglemachine.config import load_run_config  # noqa: E402
from togglemachine.evaluation.metrics import (  # noqa: E402
    agreement,
    count_unreachable,
    total_presses,
)
from togglemachine.joltage import UNREACHABLE  # noqa: E402
from togglemachine.parsing import parse_machines  # noqa: E402
from togglemachine.strategies import NoSolutionError, make_solver  # noqa: E402

mp.freeze_support()


def _timed(solver, machine):
    start_time = time.perf_counter()
    try:
        result = solver.solve(machine)
    except NoSolutionError:
        result = None
    return result, (time.perf_counter() - start_time) * 1000


def _fmt(cost):
    if cost is None:
        return ""
    if cost == UNREACHABLE:
        return "unreachable"
    return cost


def _run_batch(job):
    """Solve one slice of machines with the configured solvers."""
    cfg = job["cfg"]
    toggle_solver = make_solver(cfg["toggle_solver"], "lights")
    joltage_solver = make_solver(cfg["joltage_solver"], "joltage")
    checks = [make_solver(name) for name in cfg["cross_check"]]

    rows = []
    for offset, machine in enumerate(job["machines"]):
        lights, lights_ms = _timed(toggle_solver, machine)
        joltage, joltage_ms = _timed(joltage_solver, machine)
        row = {
            "machine_id": job["idx_lo"] + offset,
            "n_lights": machine.n,
            "n_buttons": machine.n_buttons,
            "light_presses": lights,
            "joltage_presses": joltage,
            "lights_ms": lights_ms,
            "joltage_ms": joltage_ms,
        }
        for check in checks:
            value, _ = _timed(check, machine)
            row[f"check_{check.name}"] = value
        rows.append(row)
    return rows


def make_batches(machines, cfg, batch_size):
    for lo in range(0, len(machines), batch_size):
        yield {
            "idx_lo": lo,
            "machines": machines[lo : lo + batch_size],
            "cfg": cfg,
        }


def fieldnames_for(cfg):
    return [
        "machine_id",
        "n_lights",
        "n_buttons",
        "light_presses",
        "joltage_presses",
        "lights_ms",
        "joltage_ms",
    ] + [f"check_{name}" for name in cfg["cross_check"]]


def format_row(row):
    return {
        k: (_fmt(v) if k.endswith("presses") or k.startswith("check_") else v)
        for k, v in row.items()
    }


def _summary(row):
    # only what the totals and cross-checks need is kept in memory
    return {
        k: v
        for k, v in row.items()
        if k.endswith("presses") or k.endswith("_ms") or k.startswith("check_")
    }


def run_pool(
    jobs, writer, workers, max_inflight=None, total_jobs=None, executor=None
):
    """Run batches in parallel, writing rows as each batch completes.

    At most ``max_inflight`` batches are submitted but not yet collected.
    Returns the cost columns of every row for the final summary.
    """
    if max_inflight is None:
        max_inflight = workers * 3
    if executor is None:
        ctx = mp.get_context("spawn")
        executor = ProcessPoolExecutor(max_workers=workers, mp_context=ctx)

    inflight = set()
    summaries = []
    submitted = 0
    done = 0
    start_time = time.time()

    with executor as ex:
        jobs_iter = iter(jobs)
        while len(inflight) < max_inflight:
            try:
                j = next(jobs_iter)
            except StopIteration:
                break
            inflight.add(ex.submit(_run_batch, j))
            submitted += 1

        while inflight:
            for fut in as_completed(inflight, timeout=None):
                inflight.remove(fut)
                try:
                    rows = fut.result()
                except Exception:
                    import traceback

                    print("\n[ERROR] Worker failed:")
                    traceback.print_exc()
                    raise
                writer.writerows([format_row(r) for r in rows])
                summaries.extend(_summary(r) for r in rows)
                done += 1

                elapsed = time.time() - start_time
                total = total_jobs or submitted
                eta_seconds = (elapsed / done) * max(total - done, 0)
                print(
                    f"\r[progress] {done}/{total} batches ({done / total:>6.1%}) | "
                    f"{len(summaries):>6,} machines | "
                    f"elapsed: {int(elapsed // 60)}m {int(elapsed % 60)}s | "
                    f"ETA: {int(eta_seconds // 60)}m {int(eta_seconds % 60)}s",
                    end="",
                    flush=True,
                )
                # Submit next job to keep inflight bounded
                try:
                    j = next(jobs_iter)
                    inflight.add(ex.submit(_run_batch, j))
                    submitted += 1
                except StopIteration:
                    pass
                break  # re-enter as_completed with updated set
    print()
    return summaries


def main():
    n_cpus = os.cpu_count() or 1

    ap = argparse.ArgumentParser(
        description="Solve every toggle machine in a puzzle file."
    )
    ap.add_argument("input", help="Puzzle file, one machine per line")
    ap.add_argument("--config", default=None, help="YAML run config")
    ap.add_argument("--out", default=None, help="Output CSV path")
    ap.add_argument("--workers", type=int, default=None, help="Number of workers")
    ap.add_argument("--batch-size", type=int, default=None, help="Machines per batch")
    ap.add_argument(
        "--verify",
        action="store_true",
        help="Cross-check with the GF(2) and echelon solvers",
    )
    args = ap.parse_args()

    cfg = load_run_config(args.config)
    if args.verify:
        for name in ("linear_algebra_minweight", "echelon"):
            if name not in cfg["cross_check"]:
                cfg["cross_check"].append(name)
    batch_size = args.batch_size or cfg["batch_size"]
    workers = args.workers or cfg["workers"] or max(n_cpus - 1, 1)
    out_csv = Path(args.out or cfg["output"])
    out_csv.parent.mkdir(parents=True, exist_ok=True)

    begin = time.perf_counter()
    with open(args.input, "r", encoding="utf-8") as f:
        machines = parse_machines(f.read())
    print(f"Parsed {len(machines):,} machines in {(time.perf_counter() - begin) * 1000:.2f} ms")
    if not machines:
        print("Nothing to solve.")
        return

    total_jobs = (len(machines) + batch_size - 1) // batch_size
    print(
        f"\nStarting {total_jobs:,} batches ({len(machines):,} machines) "
        f"with {workers} workers...\n"
    )
    begin = time.time()
    with open(out_csv, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames_for(cfg))
        writer.writeheader()
        rows = run_pool(
            make_batches(machines, cfg, batch_size),
            writer,
            workers=workers,
            max_inflight=workers * 3,
            total_jobs=total_jobs,
        )
    elapsed = time.time() - begin

    lights = [r["light_presses"] for r in rows]
    joltage = [r["joltage_presses"] for r in rows]
    lights_ms = sum(r["lights_ms"] for r in rows)
    joltage_ms = sum(r["joltage_ms"] for r in rows)
    print(f"Lights:  {total_presses(lights)} ({lights_ms:.1f} ms solver time)")
    print(
        f"Joltage: {total_presses(joltage)} ({joltage_ms:.1f} ms solver time, "
        f"{count_unreachable(joltage)} unreachable)"
    )

    for name in cfg["cross_check"]:
        key = f"check_{name}"
        primary = lights if make_solver(name).question == "lights" else joltage
        agree, disagree, unresolved = agreement(primary, [r[key] for r in rows])
        print(
            f"  {name}: {agree} agree, {disagree} disagree, {unresolved} unresolved"
        )

    print(f"\nDone in {int(elapsed / 60)}m {int(elapsed % 60)}s")
    print(f"Output: {out_csv}\n")


if __name__ == "__main__":
    main()
