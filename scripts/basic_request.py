"""
Basic Request Example
Runs a stored query by id against the DataHunter API and prints the result.
"""

import os
import sys
import json
import argparse
from dotenv import load_dotenv
from datahunter.client import DataHunterClient
from datahunter.common.errors import DataHunterError
from datahunter.common.protocol import ClientOptions, QueryParameter

load_dotenv()


def parse_parameter(raw: str) -> QueryParameter:
    """Turn 'name=value' into a QueryParameter."""
    name, sep, value = raw.partition('=')
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected name=value, got {raw!r}")
    return QueryParameter(name=name, value=value)


def run_query(base_url: str, query_id: str, parameters: list, api_key: str, save: bool, log_level: str):
    """Execute the query and print status, timing and body."""
    client = DataHunterClient(
        base_url,
        api_key=api_key,
        options=ClientOptions(log_level=log_level, save_responses=save, debug=True),
    )

    result = client.query.execute_by_id(query_id, parameters)

    print(f"Status: {result.status}")
    print(f"Duration: {result.duration:.3f}s")
    if result.file_path:
        print(f"Saved to: {result.file_path}")

    if result.response_text is not None:
        print(result.response_text)
    else:
        print(json.dumps(result.response_data, indent=2, ensure_ascii=False))


def parse_arguments():
    """Handle command-line argument parsing."""
    arg_parser = argparse.ArgumentParser(
        description="Execute an encrypted DataHunter query by id"
    )
    arg_parser.add_argument(
        "query_id",
        help="Id of the stored query"
    )
    arg_parser.add_argument(
        "-p", "--param",
        action="append",
        type=parse_parameter,
        default=[],
        help="Query parameter as name=value (repeatable)"
    )
    arg_parser.add_argument(
        "--base-url",
        default=os.getenv('DH_BASE_URL', 'https://api-dh.ciphers.systems'),
        help="API base URL (default: $DH_BASE_URL)"
    )
    arg_parser.add_argument(
        "--api-key",
        default=None,
        help="API key (default: $DH_API_KEY)"
    )
    arg_parser.add_argument(
        "--save",
        action="store_true",
        help="Save the response under the results directory"
    )
    arg_parser.add_argument(
        "--log-level",
        default="info",
        choices=["trace", "debug", "info", "warn", "error", "fatal", "silent"],
        help="Log level (default: info)"
    )
    return arg_parser.parse_args()


if __name__ == "__main__":
    parsed_args = parse_arguments()
    try:
        run_query(
            parsed_args.base_url, parsed_args.query_id, parsed_args.param,
            parsed_args.api_key, parsed_args.save, parsed_args.log_level
        )
    except DataHunterError as e:
        print(f"Request failed: {e}")
        sys.exit(1)
