import argparse
import json
import logging
import time
import tracemalloc
from datetime import date

from review_insights import generate_sample_reviews, run_analysis
from review_insights.settings import configure_logging

logger = logging.getLogger(__name__)


def profile_run(sizes, seed=0, time_unit="month"):
    """Time run_analysis over seeded sample review sets of the given sizes."""
    results = []
    for n in sizes:
        reviews = generate_sample_reviews(n, seed=seed, end_date=date(2024, 12, 31))
        tracemalloc.start()
        t0 = time.perf_counter()
        analysis = run_analysis(reviews, time_unit=time_unit)
        dt = time.perf_counter() - t0
        current, peak = tracemalloc.get_traced_memory()
        tracemalloc.stop()
        results.append({
            "n_reviews": n,
            "time_sec": round(dt, 4),
            "reviews_per_sec": round(n / dt if dt > 0 else float("inf"), 2),
            "peak_mem_mb": round(peak / (1024 * 1024), 2),
            "topics": len(analysis.stats.get("topics", [])),
            "trend_points": len(analysis.stats.get("trend", [])),
        })
        logger.info(f"Profiled {n} reviews in {dt:.3f}s")
    return results


def main():
    parser = argparse.ArgumentParser(description="Profile run_analysis performance")
    parser.add_argument(
        "--sizes",
        default="50,200,500",
        help="Comma-separated review counts to test (e.g., 50,200,500)",
    )
    parser.add_argument("--seed", type=int, default=0, help="Seed for the sample reviews")
    parser.add_argument("--time-unit", default="month", help="Trend bucket: day, week, month, quarter or year")
    parser.add_argument(
        "--out",
        default="profile_results.json",
        help="Path to write JSON results",
    )
    args = parser.parse_args()
    configure_logging()
    sizes = [int(s.strip()) for s in args.sizes.split(",") if s.strip()]

    results = profile_run(sizes, seed=args.seed, time_unit=args.time_unit)
    print("Profile results:")
    for r in results:
        print(
            f"n={r['n_reviews']:4d}  time={r['time_sec']:7.3f}s  rps={r['reviews_per_sec']:8.2f}  "
            f"peak_mem={r['peak_mem_mb']:6.2f}MB  topics={r['topics']}  trend={r['trend_points']}"
        )
    with open(args.out, "w", encoding="utf-8") as f:
        json.dump({"results": results}, f, ensure_ascii=False, indent=2)
    print(f"Saved JSON to {args.out}")


if __name__ == "__main__":
    main()
