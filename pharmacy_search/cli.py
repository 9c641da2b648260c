"""
Command-line pharmacy search.

    python -m pharmacy_search.cli "ibuprofen"
    python -m pharmacy_search.cli "ibuprofen" --json --stats
"""
import argparse
import json
import sys

from .search import get_cache_stats, search_pharmacies


def format_table(results):
    lines = [f"{'Pharmacy':<12} {'Price':>10}  Medicine"]
    for item in results:
        lines.append(f"{item.pharmacy_name:<12} {item.price:>10}  {item.drug_name}")
    return "\n".join(lines)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Compare medicine prices across online pharmacies")
    parser.add_argument("medicine", help="Medicine name to search for")
    parser.add_argument("--json", action="store_true", help="Print the raw response as JSON")
    parser.add_argument("--stats", action="store_true", help="Show cache statistics after the search")

    args = parser.parse_args(argv)
    response = search_pharmacies(args.medicine)

    if args.json:
        print(json.dumps(response.model_dump(exclude_none=True), indent=2, ensure_ascii=False))
    else:
        if response.data:
            print(format_table(response.data))
        if response.error:
            print(response.error, file=sys.stderr)

    if args.stats:
        print(json.dumps(get_cache_stats(), indent=2))

    # Validation and configuration errors come back without data
    return 1 if response.data is None else 0


if __name__ == "__main__":
    sys.exit(main())
